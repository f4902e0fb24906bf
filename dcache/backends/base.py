"""
Base class for cache backends.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Hashable, Iterator, Optional, Tuple

from dcache.backends.entry import CacheEntry, Clock, default_clock
from dcache.backends.stats import CacheStats
from dcache.exceptions import KeyNotFoundError, UnsupportedOperationError
from dcache.utils.validation import validate_callable, validate_ttl

# Marks an omitted ttl argument, so that ttl=None can still mean "never expires".
DEFAULT_TTL = object()

Predicate = Callable[[Hashable, Any], bool]


class BaseBackend(ABC):
    """
    Abstract base class for in-process cache backends.

    Subclasses own the entry store and eviction order. This class carries the
    lookup flavours (default, fallback, get-or-raise, get-or-add), the hit/miss
    bookkeeping, and the read-only export.

    Args:
        default_ttl: TTL in seconds applied when ``add`` is called without one.
            None means entries never expire.
        clock: Zero-argument callable returning the current instant in seconds.
            Must be monotonically non-decreasing.
    """

    def __init__(self, default_ttl: Optional[float] = None, clock: Optional[Clock] = None):
        validate_ttl(default_ttl)
        self.default_ttl = default_ttl
        self._clock = clock or default_clock
        self._stats = self._create_stats()

    def _create_stats(self) -> CacheStats:
        return CacheStats()

    def _resolve_ttl(self, ttl: Any) -> Optional[float]:
        if ttl is DEFAULT_TTL:
            return self.default_ttl
        validate_ttl(ttl)
        return ttl

    # -- Store primitives implemented by each backend -------------------------

    @abstractmethod
    def add(self, key: Hashable, value: Any, ttl: Any = DEFAULT_TTL) -> Any:
        """
        Add or overwrite an entry.

        Args:
            key: Unique identifier within the cache
            value: Value to store
            ttl: Seconds until the entry expires, None for no expiry. Omit to
                use ``default_ttl``.

        Returns:
            ``value``
        """
        pass

    @abstractmethod
    def _lookup(self, key: Hashable) -> Optional[CacheEntry]:
        """
        Find the live entry for ``key`` on behalf of a counted lookup.

        Purges the entry if it has expired. Backends that track recency
        promote the entry here. Does not touch hit/miss counters.
        """
        pass

    @abstractmethod
    def _peek(self, key: Hashable) -> Optional[CacheEntry]:
        """Find the live entry for ``key`` without mutating anything."""
        pass

    @abstractmethod
    def remove(self, key: Hashable) -> None:
        """Remove ``key`` from the cache if present."""
        pass

    @abstractmethod
    def remove_where(self, predicate: Predicate) -> None:
        """
        Remove every live entry for which ``predicate(key, value)`` is true.

        Each live entry is visited exactly once. Expired entries met during
        the traversal are purged without calling the predicate.
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries. Hit/miss counters are kept."""
        pass

    @abstractmethod
    def items(self) -> Iterator[Tuple[Hashable, Any]]:
        """
        Iterate over live (key, value) pairs.

        Read-only: expired entries are skipped, not purged, and no counter or
        ordering changes.
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    @abstractmethod
    def _get_max_items(self) -> Optional[int]:
        pass

    # -- Lookups --------------------------------------------------------------

    def get(self, key: Hashable, default: Any = None, fallback: Optional[Callable[[], Any]] = None) -> Any:
        """
        Get a value from the cache.

        Args:
            key: The key to look up
            default: Returned on a miss when no fallback is given
            fallback: Zero-argument callable invoked on a miss; its return
                value becomes the result. It is not stored unless it calls
                ``add`` itself.

        Returns:
            The cached value on a hit, otherwise the fallback's result or
            ``default``.
        """
        if fallback is not None:
            validate_callable(fallback, "fallback")

        entry = self._lookup(key)
        if entry is not None:
            self._stats.record_hit()
            return entry.value

        self._stats.record_miss()
        if fallback is not None:
            return fallback()
        return default

    def get_or_raise(self, key: Hashable) -> Any:
        """
        Get a value from the cache or fail.

        Raises:
            KeyNotFoundError: If ``key`` is absent or its entry has expired.
        """
        entry = self._lookup(key)
        if entry is None:
            self._stats.record_miss()
            raise KeyNotFoundError(key)

        self._stats.record_hit()
        return entry.value

    def get_or_add(
        self,
        key: Hashable,
        value: Any = None,
        ttl: Any = DEFAULT_TTL,
        factory: Optional[Callable[[], Any]] = None,
    ) -> Any:
        """
        Get a value, adding it first if it is not cached.

        Args:
            key: The key to look up
            value: Value stored on a miss
            ttl: TTL for the new entry (see ``add``)
            factory: Zero-argument callable producing the value on a miss;
                takes precedence over ``value``

        Returns:
            The cached value, or the value that was just added.
        """
        if factory is not None:
            validate_callable(factory, "factory")

        entry = self._lookup(key)
        if entry is not None:
            self._stats.record_hit()
            return entry.value

        self._stats.record_miss()
        if factory is not None:
            value = factory()
        return self.add(key, value, ttl)

    def delete(self, key: Hashable) -> None:
        """Alias for ``remove``."""
        self.remove(key)

    def __contains__(self, key: Hashable) -> bool:
        return self._peek(key) is not None

    def to_dict(self) -> Dict[Hashable, Any]:
        """Materialize all live entries as a dictionary, without side effects."""
        return dict(self.items())

    # -- Capacity and counters ------------------------------------------------

    @property
    def length(self) -> int:
        """Number of entries currently held."""
        return len(self)

    @property
    def max_items(self) -> Optional[int]:
        """Maximum number of entries, or None if unbounded."""
        return self._get_max_items()

    @max_items.setter
    def max_items(self, value: Optional[int]) -> None:
        self.set_max_items(value)

    def set_max_items(self, max_items: Optional[int]) -> Optional[int]:
        """Change the capacity. Not every backend supports this."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} has a fixed capacity of {self._get_max_items()}"
        )

    @property
    def hits(self) -> int:
        return self._stats.hits

    @property
    def misses(self) -> int:
        return self._stats.misses

    @property
    def stored(self) -> int:
        raise UnsupportedOperationError(f"{type(self).__name__} does not count stored items")

    @property
    def removed(self) -> int:
        raise UnsupportedOperationError(f"{type(self).__name__} does not count removed items")

    @property
    def stats(self) -> CacheStats:
        return self._stats

    def get_stats(self) -> dict:
        """Get cache statistics."""
        stats = {
            'backend': type(self).__name__,
            'size': len(self),
            'max_items': self._get_max_items(),
            'default_ttl': self.default_ttl,
        }
        stats.update(self._stats.to_dict())
        return stats
