"""
Resizable least-recently-used backend.

Backed by an OrderedDict whose order is recency: the least recently used
entry sits at the front, the most recently used at the end. Every hit and
every overwrite moves the entry to the end; eviction pops from the front.
"""

import logging
from collections import OrderedDict
from typing import Any, Hashable, Iterator, Optional, Tuple

from dcache.backends.base import DEFAULT_TTL, BaseBackend, Predicate
from dcache.backends.entry import CacheEntry, Clock, compute_expiry
from dcache.backends.stats import LruCacheStats
from dcache.utils.validation import validate_callable, validate_max_items

logger = logging.getLogger(__name__)

# Minimum seconds between expiry sweeps triggered by an overflowing add.
PURGE_INTERVAL = 1.0


class LruBackend(BaseBackend):
    """
    LRU cache backend whose capacity can change at runtime.

    Besides hits and misses it counts ``stored`` (new keys inserted) and
    ``removed`` (entries dropped for any reason: removal, eviction, expiry,
    clear).

    Args:
        max_items: Maximum number of entries, or None for no limit
        default_ttl: TTL in seconds used when ``add`` is called without one
        clock: Monotonic time source, defaults to ``time.monotonic``
    """

    def __init__(
        self,
        max_items: Optional[int] = None,
        default_ttl: Optional[float] = None,
        clock: Optional[Clock] = None,
    ):
        validate_max_items(max_items, allow_unbounded=True, minimum=0)
        super().__init__(default_ttl=default_ttl, clock=clock)
        self._max_items = max_items
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()
        self._last_purge: Optional[float] = None
        logger.info(
            f"Created LruBackend with max_items={'unbounded' if max_items is None else max_items}"
        )

    def _create_stats(self) -> LruCacheStats:
        return LruCacheStats()

    def _drop(self, key: Hashable) -> None:
        del self._entries[key]
        self._stats.record_removal()

    def _evict_excess(self) -> int:
        """Pop least recently used entries until the size fits the capacity."""
        if self._max_items is None:
            return 0

        evicted = 0
        while len(self._entries) > self._max_items:
            key, _ = self._entries.popitem(last=False)
            evicted += 1
            logger.debug(f"Evicted least recently used entry {key!r}")

        if evicted:
            self._stats.record_removal(evicted)
        return evicted

    def _purge_expired(self) -> int:
        now = self._clock()
        self._last_purge = now
        expired = [key for key, entry in self._entries.items() if not entry.is_live(now)]
        for key in expired:
            self._drop(key)
        if expired:
            logger.debug(f"Purged {len(expired)} expired entries")
        return len(expired)

    def add(self, key: Hashable, value: Any, ttl: Any = DEFAULT_TTL) -> Any:
        expires_at = compute_expiry(self._resolve_ttl(ttl), self._clock())

        entry = self._entries.get(key)
        if entry is not None:
            entry.update(value, expires_at)
            self._entries.move_to_end(key)
            return value

        self._entries[key] = CacheEntry(key, value, expires_at)
        self._stats.record_store()
        if self._max_items is not None and len(self._entries) > self._max_items:
            # Expired entries go before any live entry is evicted; the sweep
            # runs at most once per PURGE_INTERVAL.
            if self._last_purge is None or self._clock() - self._last_purge >= PURGE_INTERVAL:
                self._purge_expired()
            self._evict_excess()
        return value

    def _lookup(self, key: Hashable) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if not entry.is_live(self._clock()):
            self._drop(key)
            logger.debug(f"Purged expired entry {key!r}")
            return None

        self._entries.move_to_end(key)
        return entry

    def _peek(self, key: Hashable) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None or not entry.is_live(self._clock()):
            return None
        return entry

    def remove(self, key: Hashable) -> None:
        if key in self._entries:
            self._drop(key)

    def remove_where(self, predicate: Predicate) -> None:
        validate_callable(predicate, "predicate")
        now = self._clock()

        for key, entry in list(self._entries.items()):
            # Skip entries the predicate already replaced or removed.
            if self._entries.get(key) is not entry:
                continue
            if not entry.is_live(now):
                self._drop(key)
            elif predicate(key, entry.value) and self._entries.get(key) is entry:
                self._drop(key)

    def clear(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        if count:
            self._stats.record_removal(count)
        logger.debug(f"Cleared LruBackend, removed {count} entries")

    def items(self) -> Iterator[Tuple[Hashable, Any]]:
        now = self._clock()
        # Least recently used first; iterate a snapshot so callers may use the
        # cache while consuming the iterator.
        for entry in list(self._entries.values()):
            if entry.is_live(now):
                yield entry.key, entry.value

    def __len__(self) -> int:
        return len(self._entries)

    def _get_max_items(self) -> Optional[int]:
        return self._max_items

    def set_max_items(self, max_items: Optional[int]) -> Optional[int]:
        """
        Change the capacity.

        Shrinking below the current size drops expired entries first, then
        evicts least recently used entries until the size fits. Growing or
        passing None (unbounded) evicts nothing.

        Returns:
            The new capacity
        """
        validate_max_items(max_items, allow_unbounded=True, minimum=0)
        self._max_items = max_items

        if max_items is not None and len(self._entries) > max_items:
            self._purge_expired()
            evicted = self._evict_excess()
            logger.debug(f"Shrunk LruBackend to {max_items} items, evicted {evicted}")

        return self._max_items

    @property
    def stored(self) -> int:
        return self._stats.stored

    @property
    def removed(self) -> int:
        return self._stats.removed
