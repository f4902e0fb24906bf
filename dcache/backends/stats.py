"""
Hit/miss instrumentation for cache backends.
"""

from dataclasses import dataclass


@dataclass
class CacheStats:
    """
    Counters common to every backend.

    Attributes:
        hits: Lookups that returned a live value
        misses: Lookups that found nothing live, including expired entries
    """
    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def to_dict(self) -> dict:
        """Convert counters to a dictionary for easy serialization."""
        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': self.hit_rate,
        }

    def __str__(self) -> str:
        return f"CacheStats(hits={self.hits}, misses={self.misses}, hit_rate={self.hit_rate:.1%})"


@dataclass
class LruCacheStats(CacheStats):
    """
    Counters for the resizable LRU backend.

    Attributes:
        stored: Insertions of new keys
        removed: Entries dropped for any reason (explicit removal, predicate
            removal, eviction, expiry purge, clear)
    """
    stored: int = 0
    removed: int = 0

    def record_store(self) -> None:
        self.stored += 1

    def record_removal(self, count: int = 1) -> None:
        self.removed += count

    def to_dict(self) -> dict:
        stats = super().to_dict()
        stats.update({
            'stored': self.stored,
            'removed': self.removed,
        })
        return stats

    def __str__(self) -> str:
        return (
            f"LruCacheStats(hits={self.hits}, misses={self.misses}, "
            f"hit_rate={self.hit_rate:.1%}, stored={self.stored}, removed={self.removed})"
        )
