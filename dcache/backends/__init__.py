"""
Cache backends for dcache.

This package contains the backend contract, the shared entry/expiration and
statistics helpers, and the two backend implementations.
"""

# Base classes
from .base import BaseBackend, DEFAULT_TTL
from .entry import CacheEntry, compute_expiry, is_live
from .stats import CacheStats, LruCacheStats

# Backends
from .ring import RingBackend
from .lru import LruBackend

# Selection
from .factory import BackendType, create_backend

__all__ = [
    # Base classes
    "BaseBackend",
    "DEFAULT_TTL",
    "CacheEntry",
    "compute_expiry",
    "is_live",
    "CacheStats",
    "LruCacheStats",
    # Backends
    "RingBackend",
    "LruBackend",
    # Selection
    "BackendType",
    "create_backend",
]
