"""
Cache Store - the single mutable structure shared by the sync engine.

Guidelines:
- One instance per client session (created at startup, cleared at sign-out)
- Every read and write goes through this class; callers receive frozen
  CacheEntry views, never the internal slot
- Listener notification is synchronous with the write that caused it
- No method suspends, so each write is atomic with respect to other tasks

Entry lifecycle:
    (no slot) --subscribe/set/update--> STALE/FRESH
    FRESH --mark_stale--> STALE --mark_fetching--> FETCHING --set--> FRESH
    FETCHING --abandon_fetch--> STALE

Version tokens:
- Every value write bumps the key's version
- A fetch records the version when it starts and passes it back to set();
  a write in between (an optimistic effect) makes the fetch result stale
  and it is dropped

Snapshots (last-pending-wins):
- snapshot() records the key's most recent pending snapshot
- restore() only writes when its snapshot is still that most recent one,
  then hands the slot back to the snapshot that preceded it
- commit() leaves the marker in place, so a committed later mutation
  keeps suppressing rollbacks of earlier ones
"""

import itertools
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

from chatsync.domain.value_objects.cache_key import CacheKey
from chatsync.observability.metrics import ACTIVE_SUBSCRIPTIONS

logger = logging.getLogger(__name__)


class FreshnessState(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    FETCHING = "fetching"


@dataclass(frozen=True)
class CacheEntry:
    """Read-only view of a cache slot at one instant."""

    key: CacheKey
    value: Any
    has_value: bool
    state: FreshnessState
    fetched_at: Optional[float]
    version: int
    subscriber_count: int
    pending_mutations: int

    @property
    def is_stale(self) -> bool:
        return self.state is not FreshnessState.FRESH

    @property
    def is_fetching(self) -> bool:
        return self.state is FreshnessState.FETCHING


@dataclass(frozen=True)
class Snapshot:
    """Opaque rollback token returned by CacheStore.snapshot()."""

    key: CacheKey
    value: Any
    has_value: bool
    seq: int
    prior_seq: Optional[int]


Listener = Callable[[CacheKey, CacheEntry], None]
KeyHook = Callable[[CacheKey], None]


@dataclass
class _Slot:
    value: Any = None
    has_value: bool = False
    state: FreshnessState = FreshnessState.STALE
    fetched_at: Optional[float] = None
    version: int = 0
    listeners: dict[int, Listener] = field(default_factory=dict)
    snapshot_seq: Optional[int] = None
    pending: int = 0


class CacheStore:
    """Keyed store of cached backend results with subscriptions and rollback snapshots."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._slots: dict[CacheKey, _Slot] = {}
        self._seq = itertools.count(1)
        self._listener_ids = itertools.count(1)
        self._activation_hooks: list[KeyHook] = []
        self._stale_hooks: list[KeyHook] = []

    # ==================== HOOKS ====================

    def on_activate(self, hook: KeyHook) -> None:
        """Register a hook fired when a key gets its first subscriber."""
        self._activation_hooks.append(hook)

    def on_stale(self, hook: KeyHook) -> None:
        """Register a hook fired for every key marked stale by mark_stale()."""
        self._stale_hooks.append(hook)

    # ==================== READS ====================

    def now(self) -> float:
        return self._clock()

    def get(self, key: CacheKey) -> Optional[CacheEntry]:
        """Current entry for `key`, or None if nothing was ever cached or subscribed."""
        slot = self._slots.get(key)
        return self._view(key, slot) if slot else None

    def keys(self) -> list[CacheKey]:
        return list(self._slots)

    def active_keys(self) -> list[CacheKey]:
        """Keys with at least one subscriber."""
        return [key for key, slot in self._slots.items() if slot.listeners]

    # ==================== WRITES ====================

    def set(self, key: CacheKey, value: Any, expected_version: Optional[int] = None) -> bool:
        """
        Replace the value of `key` and mark it fresh.

        Args:
            key: Cache key
            value: New value (None is a valid "not found" value)
            expected_version: If given, the write only happens when the key's
                version still equals it

        Returns:
            True if the value was written, False if it was superseded
        """
        slot = self._slot(key)
        if expected_version is not None and slot.version != expected_version:
            logger.debug(
                f"Discarding superseded write for {key} "
                f"(version {expected_version} != {slot.version})"
            )
            return False

        slot.value = value
        slot.has_value = True
        slot.state = FreshnessState.FRESH
        slot.fetched_at = self._clock()
        slot.version += 1
        self._notify(key, slot)
        return True

    def update(self, key: CacheKey, fn: Callable[[Any], Any]) -> Any:
        """
        Apply a pure function to the current value of `key` (None if absent)
        and store its result. Freshness is left as it was.
        """
        slot = self._slot(key)
        new_value = fn(slot.value if slot.has_value else None)
        slot.value = new_value
        slot.has_value = True
        slot.version += 1
        self._notify(key, slot)
        return new_value

    def mark_stale(self, key_or_prefix: CacheKey) -> list[CacheKey]:
        """
        Mark every entry addressed by `key_or_prefix` stale, keeping its value.

        Entries already fetching keep that state; the stale hooks still fire
        for them so a follow-up fetch can be scheduled.

        Returns:
            The keys that were marked
        """
        marked = [key for key in self._slots if key_or_prefix.matches(key)]
        for key in marked:
            slot = self._slots[key]
            if slot.state is FreshnessState.FRESH:
                slot.state = FreshnessState.STALE
                self._notify(key, slot)
        if marked:
            logger.debug(f"Marked stale: {', '.join(str(k) for k in marked)}")
        for key in marked:
            for hook in self._stale_hooks:
                hook(key)
        return marked

    def mark_fetching(self, key: CacheKey) -> int:
        """Flag `key` as being fetched and return its current version token."""
        slot = self._slot(key)
        if slot.state is not FreshnessState.FETCHING:
            slot.state = FreshnessState.FETCHING
            self._notify(key, slot)
        return slot.version

    def abandon_fetch(self, key: CacheKey) -> None:
        """Return a fetching entry to stale (failed, superseded or cancelled fetch); no stale hooks fire."""
        slot = self._slots.get(key)
        if slot and slot.state is FreshnessState.FETCHING:
            slot.state = FreshnessState.STALE
            self._notify(key, slot)

    # ==================== SNAPSHOTS ====================

    def snapshot(self, key: CacheKey) -> Snapshot:
        """Capture the current value of `key` for a later restore()."""
        slot = self._slot(key)
        snap = Snapshot(
            key=key,
            value=slot.value,
            has_value=slot.has_value,
            seq=next(self._seq),
            prior_seq=slot.snapshot_seq,
        )
        slot.snapshot_seq = snap.seq
        slot.pending += 1
        return snap

    def restore(self, snapshot: Snapshot) -> bool:
        """
        Write the captured value back if `snapshot` is still the most recent
        pending snapshot for its key.

        Returns:
            True if the value was restored, False if the restore was superseded
        """
        slot = self._slots.get(snapshot.key)
        if slot is None:
            return False
        slot.pending = max(0, slot.pending - 1)
        if slot.snapshot_seq != snapshot.seq:
            logger.info(f"Rollback of {snapshot.key} superseded by a later mutation")
            return False

        slot.value = snapshot.value
        slot.has_value = snapshot.has_value
        slot.version += 1
        slot.snapshot_seq = snapshot.prior_seq
        self._notify(snapshot.key, slot)
        return True

    def commit(self, snapshot: Snapshot) -> None:
        """Discard `snapshot` after its mutation succeeded."""
        slot = self._slots.get(snapshot.key)
        if slot is not None:
            slot.pending = max(0, slot.pending - 1)

    # ==================== SUBSCRIPTIONS ====================

    def subscribe(self, key: CacheKey, listener: Listener) -> Callable[[], None]:
        """
        Register `listener` for changes of `key`.

        The first subscription of a key fires the activation hooks, which is
        how the query coordinator learns it has to check freshness.

        Returns:
            Idempotent unsubscribe callable
        """
        slot = self._slot(key)
        listener_id = next(self._listener_ids)
        slot.listeners[listener_id] = listener
        ACTIVE_SUBSCRIPTIONS.inc()

        if len(slot.listeners) == 1:
            for hook in self._activation_hooks:
                hook(key)

        def unsubscribe() -> None:
            if slot.listeners.pop(listener_id, None) is not None:
                ACTIVE_SUBSCRIPTIONS.dec()

        return unsubscribe

    # ==================== LIFECYCLE ====================

    def clear(self) -> None:
        """Drop every entry and listener (session end / sign-out)."""
        listeners = sum(len(slot.listeners) for slot in self._slots.values())
        for slot in self._slots.values():
            slot.listeners.clear()
        ACTIVE_SUBSCRIPTIONS.dec(listeners)
        self._slots.clear()
        logger.info("Cache cleared")

    # ==================== INTERNALS ====================

    def _slot(self, key: CacheKey) -> _Slot:
        slot = self._slots.get(key)
        if slot is None:
            slot = self._slots[key] = _Slot()
        return slot

    def _view(self, key: CacheKey, slot: _Slot) -> CacheEntry:
        return CacheEntry(
            key=key,
            value=slot.value,
            has_value=slot.has_value,
            state=slot.state,
            fetched_at=slot.fetched_at,
            version=slot.version,
            subscriber_count=len(slot.listeners),
            pending_mutations=slot.pending,
        )

    def _notify(self, key: CacheKey, slot: _Slot) -> None:
        if not slot.listeners:
            return
        entry = self._view(key, slot)
        for listener in list(slot.listeners.values()):
            try:
                listener(key, entry)
            except Exception:
                logger.exception(f"Cache listener for {key} failed")
