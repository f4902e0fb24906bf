"""
dcache - In-process key/value caching
=====================================

Two interchangeable backends with optional per-entry expiration and hit/miss
statistics: a fixed-capacity ring (least recently added eviction) and a
resizable LRU.
"""

__version__ = "0.1.0"

from .backends import (
    BaseBackend,
    RingBackend,
    LruBackend,
    BackendType,
    CacheEntry,
    CacheStats,
    LruCacheStats,
    create_backend,
)
from .config import CacheConfig
from .exceptions import (
    DCacheError,
    ConfigurationError,
    ValidationError,
    KeyNotFoundError,
    UnsupportedOperationError,
)

__all__ = [
    "BaseBackend",
    "RingBackend",
    "LruBackend",
    "BackendType",
    "CacheEntry",
    "CacheStats",
    "LruCacheStats",
    "create_backend",
    "CacheConfig",
    "DCacheError",
    "ConfigurationError",
    "ValidationError",
    "KeyNotFoundError",
    "UnsupportedOperationError",
]
