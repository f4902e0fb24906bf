"""
Fixed-capacity ring backend.

Entries live in a fixed list of slots written in turn by a cursor, which gives
"least recently added" eviction: the slot under the cursor always holds the
oldest insertion still cached, and a new key overwrites it. Lookups never
change the eviction order.
"""

import logging
from typing import Any, Dict, Hashable, Iterator, List, Optional, Tuple

from dcache.backends.base import DEFAULT_TTL, BaseBackend, Predicate
from dcache.backends.entry import CacheEntry, Clock, compute_expiry
from dcache.utils.validation import validate_callable, validate_max_items

logger = logging.getLogger(__name__)


class RingBackend(BaseBackend):
    """
    Cache backend with a fixed number of slots and insertion-order eviction.

    Args:
        max_items: Number of slots, at least 1. Cannot be changed later.
        default_ttl: TTL in seconds used when ``add`` is called without one
        clock: Monotonic time source, defaults to ``time.monotonic``
    """

    def __init__(self, max_items: int, default_ttl: Optional[float] = None, clock: Optional[Clock] = None):
        validate_max_items(max_items, allow_unbounded=False, minimum=1)
        super().__init__(default_ttl=default_ttl, clock=clock)
        self._max_items = max_items
        self._slots: List[Optional[CacheEntry]] = [None] * max_items
        self._index: Dict[Hashable, int] = {}
        self._cursor = 0
        logger.info(f"Created RingBackend with {max_items} slots")

    def _free(self, slot: int) -> CacheEntry:
        entry = self._slots[slot]
        self._slots[slot] = None
        del self._index[entry.key]
        return entry

    def add(self, key: Hashable, value: Any, ttl: Any = DEFAULT_TTL) -> Any:
        """
        Add or overwrite an entry.

        A new key always takes the cursor slot and evicts its occupant, even if
        a removal left a free slot elsewhere; that slot is reused once the
        cursor reaches it.
        """
        expires_at = compute_expiry(self._resolve_ttl(ttl), self._clock())

        slot = self._index.get(key)
        if slot is not None:
            # Overwrite keeps the slot, so the eviction order is unchanged.
            self._slots[slot].update(value, expires_at)
            return value

        if self._slots[self._cursor] is not None:
            victim = self._free(self._cursor)
            logger.debug(f"Evicted {victim.key!r} from slot {self._cursor}")

        self._slots[self._cursor] = CacheEntry(key, value, expires_at)
        self._index[key] = self._cursor
        self._cursor = (self._cursor + 1) % self._max_items
        return value

    def _lookup(self, key: Hashable) -> Optional[CacheEntry]:
        slot = self._index.get(key)
        if slot is None:
            return None

        entry = self._slots[slot]
        if not entry.is_live(self._clock()):
            self._free(slot)
            logger.debug(f"Purged expired entry {key!r}")
            return None
        return entry

    def _peek(self, key: Hashable) -> Optional[CacheEntry]:
        slot = self._index.get(key)
        if slot is None:
            return None

        entry = self._slots[slot]
        return entry if entry.is_live(self._clock()) else None

    def remove(self, key: Hashable) -> None:
        slot = self._index.get(key)
        if slot is not None:
            self._free(slot)

    def remove_where(self, predicate: Predicate) -> None:
        validate_callable(predicate, "predicate")
        now = self._clock()

        # The predicate may itself write to the cache; only drop an entry while
        # it still owns its slot.
        for slot, entry in enumerate(list(self._slots)):
            if entry is None or self._slots[slot] is not entry:
                continue
            if not entry.is_live(now):
                self._free(slot)
            elif predicate(entry.key, entry.value) and self._slots[slot] is entry:
                self._free(slot)

    def clear(self) -> None:
        self._slots = [None] * self._max_items
        self._index.clear()
        self._cursor = 0
        logger.debug("Cleared RingBackend")

    def items(self) -> Iterator[Tuple[Hashable, Any]]:
        now = self._clock()
        # Oldest insertion first.
        slots = self._slots[self._cursor:] + self._slots[:self._cursor]
        for entry in slots:
            if entry is not None and entry.is_live(now):
                yield entry.key, entry.value

    def __len__(self) -> int:
        # Live slots only; expired entries are not purged here.
        now = self._clock()
        return sum(1 for entry in self._slots if entry is not None and entry.is_live(now))

    def _get_max_items(self) -> Optional[int]:
        return self._max_items
