"""
Cache entries and the expiration rules shared by every backend.

Expiry is lazy: an entry is only checked when a lookup or a full traversal
touches it. Instants come from a monotonic clock so wall-clock adjustments
never shorten or extend a TTL.
"""

import time
from typing import Any, Callable, Hashable, Optional

import attrs

Clock = Callable[[], float]

default_clock: Clock = time.monotonic


def compute_expiry(ttl: Optional[float], now: float) -> Optional[float]:
    """
    Compute the absolute expiry instant for a TTL.

    Args:
        ttl: Time to live in seconds, or None for no expiry. Zero and negative
            values yield an entry that is already expired at the next check.
        now: Current instant from the backend's clock.

    Returns:
        ``now + ttl``, or None if the entry never expires.
    """
    if ttl is None:
        return None
    return now + ttl


def is_live(expires_at: Optional[float], now: float) -> bool:
    """An entry is live iff it has no expiry or its expiry is still ahead."""
    return expires_at is None or expires_at > now


@attrs.define(slots=True, eq=False)
class CacheEntry:
    """A stored value with an optional absolute expiry instant."""

    key: Hashable
    value: Any
    expires_at: Optional[float] = attrs.field(default=None)

    def is_live(self, now: float) -> bool:
        return is_live(self.expires_at, now)

    def update(self, value: Any, expires_at: Optional[float]) -> None:
        """Replace value and expiry in place."""
        self.value = value
        self.expires_at = expires_at
