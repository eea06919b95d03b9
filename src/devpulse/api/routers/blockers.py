"""Blocker and ghosting-alert endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from devpulse.api.deps import get_store
from devpulse.models import Severity
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/blockers", tags=["blockers"])


@router.get("")
@router.get("/list")
def list_blockers(
    severity: Severity | None = None,
    store: SnapshotStore = Depends(get_store),
):
    blockers = store.derived.blockers
    if severity is not None:
        blockers = tuple(b for b in blockers if b.severity == severity)
    return [b.to_dict() for b in blockers]


@router.get("/ghosting")
def ghosting_alerts(store: SnapshotStore = Depends(get_store)):
    return [g.to_dict() for g in store.derived.ghosting_alerts]


@router.get("/dashboard")
def blocker_dashboard(store: SnapshotStore = Depends(get_store)):
    derived = store.derived
    return {
        "blockers": [b.to_dict() for b in derived.blockers],
        "ghostingAlerts": [g.to_dict() for g in derived.ghosting_alerts],
    }
