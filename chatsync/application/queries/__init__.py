"""
Queries - read operations, loaded into the cache by the query coordinator.
"""

from chatsync.application.queries.definitions import build_query_definitions

__all__ = ["build_query_definitions"]
