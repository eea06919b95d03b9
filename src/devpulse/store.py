"""In-memory snapshot store.

The store holds one immutable ``StoreState`` (snapshot plus the derived
entities built from it). A sync replaces the whole state under a lock, so a
reader always gets a consistent pair: either the previous one or the next
one. Nothing is persisted; state resets with the process.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Any

from devpulse._time import iso, now_utc
from devpulse.derive import build_derived
from devpulse.models import DerivedSnapshot, Snapshot

log = logging.getLogger("devpulse.store")


@dataclass(frozen=True)
class StoreState:
    snapshot: Snapshot
    derived: DerivedSnapshot
    loaded_at: datetime


@dataclass(frozen=True)
class SyncStatus:
    """Connection and sync bookkeeping for the GitHub collaborator."""

    owner: str = ""
    repo: str = ""
    token: str = field(default="", repr=False)
    syncing: bool = False
    synced_at: datetime | None = None
    last_error: str | None = None
    summary: dict[str, int] = field(default_factory=dict)

    @property
    def connected(self) -> bool:
        return bool(self.owner and self.repo)

    def to_dict(self) -> dict[str, Any]:
        return {
            "connected": self.connected,
            "owner": self.owner or None,
            "repo": self.repo or None,
            "hasToken": bool(self.token),
            "syncing": self.syncing,
            "syncedAt": iso(self.synced_at),
            "lastError": self.last_error,
            "summary": dict(self.summary),
        }


class SnapshotStore:
    """Thread-safe holder of the current snapshot and its derived entities."""

    def __init__(self, snapshot: Snapshot | None = None, now: datetime | None = None) -> None:
        self._lock = threading.Lock()
        self._seed = snapshot or Snapshot()
        self._state = self._build(self._seed, now)
        self._status = SyncStatus()

    @staticmethod
    def _build(snapshot: Snapshot, now: datetime | None) -> StoreState:
        now = now or now_utc()
        return StoreState(snapshot=snapshot, derived=build_derived(snapshot, now), loaded_at=now)

    # -- reads -------------------------------------------------------------

    @property
    def state(self) -> StoreState:
        with self._lock:
            return self._state

    @property
    def snapshot(self) -> Snapshot:
        return self.state.snapshot

    @property
    def derived(self) -> DerivedSnapshot:
        return self.state.derived

    @property
    def status(self) -> SyncStatus:
        with self._lock:
            return self._status

    # -- writes ------------------------------------------------------------

    def replace(self, snapshot: Snapshot, now: datetime | None = None) -> StoreState:
        """Derive and swap in a new snapshot atomically."""
        state = self._build(snapshot, now)
        with self._lock:
            self._state = state
        log.info(
            "Snapshot replaced: %d commits, %d PRs, %d branches, %d members",
            len(snapshot.commits), len(snapshot.pull_requests),
            len(snapshot.branches), len(snapshot.members),
        )
        return state

    def update_status(self, **changes: Any) -> SyncStatus:
        with self._lock:
            self._status = replace(self._status, **changes)
            return self._status

    def begin_sync(self) -> bool:
        """Mark a sync as running; False if one is already in progress."""
        with self._lock:
            if self._status.syncing:
                return False
            self._status = replace(self._status, syncing=True)
            return True

    def disconnect(self, now: datetime | None = None) -> SyncStatus:
        """Forget the repository and restore the seed snapshot."""
        state = self._build(self._seed, now)
        with self._lock:
            self._state = state
            self._status = SyncStatus()
            return self._status

    # -- seeding -----------------------------------------------------------

    def load_file(self, path: str | Path, now: datetime | None = None) -> StoreState:
        """Seed the store from a snapshot JSON file."""
        with open(path) as f:
            data = json.load(f)
        snapshot = Snapshot.from_dict(data)
        with self._lock:
            self._seed = snapshot
        log.info("Seed snapshot loaded from %s", path)
        return self.replace(snapshot, now)
