"""
Sync engine - keeps the cache store in step with the backend.

- QueryCoordinator: decides when to (re)fetch, coalesces concurrent fetches
- MutationPipeline: optimistic apply, remote call, commit or rollback
- InvalidationRouter: maps a committed mutation to the keys it made stale
"""

from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.application.sync.query_coordinator import QueryCoordinator, QueryDefinition
from chatsync.application.sync.mutation_pipeline import MutationPipeline, MutationSpec

__all__ = [
    "InvalidationRouter",
    "MutationKind",
    "QueryCoordinator",
    "QueryDefinition",
    "MutationPipeline",
    "MutationSpec",
]
