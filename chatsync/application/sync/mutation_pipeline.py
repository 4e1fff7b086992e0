"""
Mutation Pipeline - optimistic writes with commit or rollback.

Protocol (strictly ordered):
0. Refuse immediately when the backend is known to be unreachable
1. Snapshot every key the optimistic effects touch
2. Apply the effects synchronously; subscribers see the prediction at once
3. Await the remote call (the only suspension point)
4. Success: commit the snapshots, hand the invalidation keys to the router
5. Failure: restore every snapshot, return the error; nothing is invalidated

Steps 1-2 and 4-5 never suspend, so they are atomic with respect to other
mutations and fetches running on the same event loop.

A restore that a later mutation superseded is skipped (last-pending-wins);
that key is marked stale instead so the backend's view replaces whatever
mix of predictions it holds. The restore that later succeeds on that key
writes back a value that still carries the rejected prediction, so it
re-fires the stale hooks and the refetch starts as soon as nothing is pending.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, Mapping, TypeVar
from uuid import uuid4

from chatsync.application.common.result import MutationResult
from chatsync.application.sync.invalidation_router import InvalidationRouter, MutationKind
from chatsync.config.logging_config import correlation_id_var
from chatsync.domain.exceptions import ChatSyncError, TransportUnavailable
from chatsync.domain.ports.backend import BackendPort
from chatsync.domain.value_objects.cache_key import CacheKey
from chatsync.infrastructure.cache.cache_store import CacheStore, Snapshot
from chatsync.observability.metrics import MUTATIONS_TOTAL, ROLLBACKS_SUPPRESSED_TOTAL

logger = logging.getLogger(__name__)

T = TypeVar("T")

Effect = Callable[[Any], Any]


@dataclass(frozen=True)
class MutationSpec(Generic[T]):
    """
    Everything the pipeline needs to run one mutation.

    Attributes:
        kind: Mutation kind (metrics and logging)
        remote: Zero-argument coroutine factory performing the backend call
        effects: Per-key pure functions old_value -> predicted new value
        invalidates: Keys to mark stale once the backend accepted the call
        params: Descriptive parameters (logging)
    """

    kind: MutationKind
    remote: Callable[[], Awaitable[T]]
    effects: Mapping[CacheKey, Effect] = field(default_factory=dict)
    invalidates: frozenset[CacheKey] = frozenset()
    params: Mapping[str, Any] = field(default_factory=dict)


class MutationPipeline:
    def __init__(self, store: CacheStore, router: InvalidationRouter, backend: BackendPort):
        self._store = store
        self._router = router
        self._backend = backend

    async def execute(self, spec: MutationSpec[T]) -> MutationResult[T]:
        """
        Run `spec` through the optimistic protocol.

        Returns:
            MutationResult with the remote call's value, or the ChatSyncError
            that made the mutation roll back

        Raises:
            Any non-ChatSyncError raised by the remote call or an effect,
            after the cache has been rolled back
        """
        token = correlation_id_var.set(f"{spec.kind.value}-{uuid4().hex[:8]}")
        try:
            return await self._execute(spec)
        finally:
            correlation_id_var.reset(token)

    async def _execute(self, spec: MutationSpec[T]) -> MutationResult[T]:
        kind = spec.kind.value
        if not self._backend.is_available:
            MUTATIONS_TOTAL.labels(kind=kind, outcome="refused").inc()
            logger.warning(f"Refusing {kind}: backend unavailable")
            return MutationResult.failure(TransportUnavailable(f"Cannot {kind}: backend unavailable"))

        # 1-2. Snapshot and apply, without suspending
        snapshots: list[Snapshot] = []
        try:
            for key in spec.effects:
                snapshots.append(self._store.snapshot(key))
            for key, effect in spec.effects.items():
                self._store.update(key, effect)
        except Exception:
            self._rollback(snapshots)
            raise
        logger.debug(f"Applied {kind} optimistically to {len(snapshots)} key(s)")

        # 3. Remote call
        try:
            value = await spec.remote()
        except ChatSyncError as e:
            self._rollback(snapshots)
            MUTATIONS_TOTAL.labels(kind=kind, outcome="rolled_back").inc()
            logger.warning(f"{kind} failed, rolled back: {e}")
            return MutationResult.failure(e)
        except (Exception, asyncio.CancelledError):
            self._rollback(snapshots)
            MUTATIONS_TOTAL.labels(kind=kind, outcome="rolled_back").inc()
            raise

        # 4. Commit
        for snapshot in snapshots:
            self._store.commit(snapshot)
        MUTATIONS_TOTAL.labels(kind=kind, outcome="committed").inc()
        logger.info(f"{kind} committed {dict(spec.params)}")
        self._router.dispatch(spec.invalidates)
        return MutationResult.success(value)

    def _rollback(self, snapshots: list[Snapshot]) -> None:
        for snapshot in reversed(snapshots):
            if not self._store.restore(snapshot):
                ROLLBACKS_SUPPRESSED_TOTAL.inc()
                self._store.mark_stale(snapshot.key)
                continue
            entry = self._store.get(snapshot.key)
            if entry is not None and entry.is_stale:
                self._store.mark_stale(snapshot.key)
