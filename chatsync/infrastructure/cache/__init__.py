"""
Cache Layer - process-wide keyed store of backend results.
"""

from chatsync.infrastructure.cache.cache_store import (
    CacheEntry,
    CacheStore,
    FreshnessState,
    Listener,
    Snapshot,
)

__all__ = [
    "CacheEntry",
    "CacheStore",
    "FreshnessState",
    "Listener",
    "Snapshot",
]
