"""
Backend selection.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from dcache.backends.base import BaseBackend
from dcache.backends.entry import Clock
from dcache.backends.lru import LruBackend
from dcache.backends.ring import RingBackend
from dcache.exceptions import ConfigurationError

if TYPE_CHECKING:
    from dcache.config import CacheConfig


class BackendType(str, Enum):
    """Available cache backends."""
    RING = "ring"  # Fixed capacity, least recently added eviction
    LRU = "lru"    # Resizable, least recently used eviction


_BACKENDS = {
    BackendType.RING: RingBackend,
    BackendType.LRU: LruBackend,
}


def create_backend(
    backend: Union[BackendType, str] = BackendType.LRU,
    max_items: Optional[int] = None,
    default_ttl: Optional[float] = None,
    clock: Optional[Clock] = None,
    config: Optional["CacheConfig"] = None,
) -> BaseBackend:
    """
    Build a cache backend.

    Args:
        backend: Backend type or its name ("ring" or "lru")
        max_items: Capacity. Required for the ring backend; None means
            unbounded for the LRU backend.
        default_ttl: TTL in seconds applied when ``add`` gets none
        clock: Monotonic time source
        config: Build from a ``CacheConfig`` instead; overrides the
            backend, max_items and default_ttl arguments.

    Returns:
        A new backend instance

    Raises:
        ConfigurationError: If the backend name or capacity is invalid
    """
    if config is not None:
        backend, max_items, default_ttl = config.backend, config.max_items, config.default_ttl

    try:
        backend_type = BackendType(backend.lower() if isinstance(backend, str) else backend)
    except ValueError as e:
        choices = ", ".join(t.value for t in BackendType)
        raise ConfigurationError(f"Unknown backend {backend!r}, expected one of: {choices}", e) from e

    return _BACKENDS[backend_type](max_items=max_items, default_ttl=default_ttl, clock=clock)
