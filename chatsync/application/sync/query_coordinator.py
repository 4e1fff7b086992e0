"""
Query Coordinator - decides when cached keys are (re)fetched.

A fetch for a key starts when:
1. The key gets its first subscriber and has no value or an expired one
2. The key is invalidated while somebody is subscribed to it
3. A polling tick finds the key's freshness deadline has passed
4. A caller explicitly asks for fresh data (fetch())

Coalescing:
- `_in_flight` maps each key to the one task currently fetching it
- Every caller asking for the same key awaits that task

Failure policy:
- The previous value stays in the cache, the entry goes back to stale
- The next polling tick retries; there is no backoff beyond the tick interval
- Errors reach explicit fetch() callers; background fetches only log them

Keys with a pending mutation are not fetched until the mutation settles, and
a result that arrives after a newer local write is dropped (version token).
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from functools import partial
from typing import Any, Awaitable, Callable, Iterable, Optional

from chatsync.config.settings import Config
from chatsync.domain.exceptions import ChatSyncError, DomainValidationError
from chatsync.domain.value_objects.cache_key import CacheKey
from chatsync.infrastructure.cache.cache_store import CacheStore
from chatsync.observability.metrics import FETCH_LATENCY, FETCHES_TOTAL

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryDefinition:
    """How one entity class is loaded and how long its values stay fresh."""

    entity: str
    load: Callable[[CacheKey], Awaitable[Any]]
    stale_after: Optional[float]  # seconds; None = fresh until invalidated


class QueryCoordinator:
    def __init__(self, store: CacheStore, definitions: Iterable[QueryDefinition] = ()):
        self._store = store
        self._definitions: dict[str, QueryDefinition] = {}
        self._in_flight: dict[CacheKey, asyncio.Task] = {}
        self._rerun: set[CacheKey] = set()
        self._poller: Optional[asyncio.Task] = None

        for definition in definitions:
            self.register(definition)

        store.on_activate(self._handle_activation)
        store.on_stale(self._handle_stale)

    def register(self, definition: QueryDefinition) -> None:
        self._definitions[definition.entity] = definition

    # ==================== FRESHNESS ====================

    def is_due(self, key: CacheKey) -> bool:
        """True if `key` has no value, is stale, or is past its freshness deadline."""
        entry = self._store.get(key)
        if entry is None or not entry.has_value:
            return True
        if entry.is_fetching:
            return False
        if entry.is_stale or entry.fetched_at is None:
            return True

        stale_after = self._definition(key).stale_after
        if stale_after is None:
            return False
        return self._store.now() - entry.fetched_at >= stale_after

    def is_fetching(self, key: CacheKey) -> bool:
        return key in self._in_flight

    # ==================== FETCHING ====================

    async def fetch(self, key: CacheKey) -> Any:
        """
        Fetch `key` now, joining the fetch already in flight if there is one.

        Returns:
            The fetched value (also written to the cache unless superseded)

        Raises:
            ChatSyncError: The load failed; the cached value is left untouched
        """
        task = self._start(key)
        # Shielded so one cancelled waiter does not cancel the shared fetch
        return await asyncio.shield(task)

    def tick(self) -> list[CacheKey]:
        """
        One polling step: start fetches for every subscribed key that is due.

        Returns:
            The keys a fetch was started for
        """
        started: list[CacheKey] = []
        for key in self._store.active_keys():
            if key.entity not in self._definitions or key in self._in_flight:
                continue
            entry = self._store.get(key)
            if entry is None or entry.pending_mutations:
                continue
            if self.is_due(key):
                self._start(key)
                started.append(key)
        return started

    async def wait_idle(self) -> None:
        """Wait until no fetch is in flight (follow-up fetches included)."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight.values()), return_exceptions=True)

    # ==================== POLLING LOOP ====================

    def start(self, interval: float = Config.POLL_INTERVAL_SECONDS) -> None:
        """Start the polling loop on the running event loop."""
        if self._poller and not self._poller.done():
            return
        self._poller = asyncio.get_running_loop().create_task(
            self._poll_loop(interval), name="chatsync-poller"
        )
        logger.info(f"Polling started (every {interval}s)")

    async def stop(self) -> None:
        """Stop polling and cancel every fetch in flight."""
        if self._poller:
            self._poller.cancel()
            await asyncio.gather(self._poller, return_exceptions=True)
            self._poller = None
        tasks = list(self._in_flight.values())
        self._rerun.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Polling stopped")

    async def _poll_loop(self, interval: float) -> None:
        while True:
            try:
                self.tick()
            except Exception:
                logger.exception("Polling tick failed")
            await asyncio.sleep(interval)

    # ==================== INTERNALS ====================

    def _definition(self, key: CacheKey) -> QueryDefinition:
        try:
            return self._definitions[key.entity]
        except KeyError:
            raise DomainValidationError(f"No query registered for {key.entity}") from None

    def _start(self, key: CacheKey) -> asyncio.Task:
        task = self._in_flight.get(key)
        if task is None:
            definition = self._definition(key)
            task = asyncio.get_running_loop().create_task(
                self._run(key, definition), name=f"fetch:{key}"
            )
            self._in_flight[key] = task
            task.add_done_callback(partial(self._on_done, key))
        return task

    async def _run(self, key: CacheKey, definition: QueryDefinition) -> Any:
        version = self._store.mark_fetching(key)
        started = time.perf_counter()
        try:
            value = await definition.load(key)
        except Exception as e:
            self._store.abandon_fetch(key)
            FETCHES_TOTAL.labels(entity=key.entity, outcome="failure").inc()
            logger.warning(f"Fetch of {key} failed, keeping cached value: {e}")
            raise
        finally:
            FETCH_LATENCY.labels(entity=key.entity).observe(time.perf_counter() - started)

        if self._store.set(key, value, expected_version=version):
            FETCHES_TOTAL.labels(entity=key.entity, outcome="success").inc()
        else:
            # A local write landed while the fetch was out; refetch later
            self._store.abandon_fetch(key)
            FETCHES_TOTAL.labels(entity=key.entity, outcome="superseded").inc()
        return value

    def _on_done(self, key: CacheKey, task: asyncio.Task) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

        if task.cancelled():
            self._store.abandon_fetch(key)
            return
        error = task.exception()
        if error is not None and not isinstance(error, ChatSyncError):
            logger.error(f"Unexpected error fetching {key}", exc_info=error)

        if key in self._rerun:
            self._rerun.discard(key)
            self._handle_stale(key)

    def _schedule(self, key: CacheKey) -> None:
        entry = self._store.get(key)
        if key in self._in_flight or (entry is not None and entry.pending_mutations):
            return
        if key.entity not in self._definitions:
            logger.debug(f"No query registered for {key}, not fetching")
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug(f"No running event loop, {key} waits for the next tick")
            return
        self._start(key)

    def _handle_activation(self, key: CacheKey) -> None:
        if key.entity in self._definitions and self.is_due(key):
            self._schedule(key)

    def _handle_stale(self, key: CacheKey) -> None:
        entry = self._store.get(key)
        if entry is None or not entry.subscriber_count:
            return
        if key in self._in_flight:
            # The running fetch may predate the invalidation
            self._rerun.add(key)
            return
        self._schedule(key)
