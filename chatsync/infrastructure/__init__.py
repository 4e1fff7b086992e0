"""
Infrastructure Layer - Technical implementations.

This layer contains:
- cache/: the in-process cache store shared by every sync component
- transport/: the httpx implementation of BackendPort
"""

from chatsync.infrastructure.cache import CacheStore, CacheEntry, FreshnessState, Snapshot
from chatsync.infrastructure.transport import HttpBackend

__all__ = [
    "CacheStore",
    "CacheEntry",
    "FreshnessState",
    "Snapshot",
    "HttpBackend",
]
