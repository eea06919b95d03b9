"""Live health endpoints: every call recomputes from the stored snapshot."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from devpulse.api.deps import get_store
from devpulse.metrics import (
    compute_contributions,
    compute_health_radar,
    compute_health_score,
    compute_health_trend,
    compute_velocity,
)
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_radar(store: SnapshotStore = Depends(get_store)):
    """Combined payload: health score with trend, velocity, contributions, badges."""
    state = store.state
    return compute_health_radar(state.snapshot, blockers=state.derived.blockers)


@router.get("/score")
def health_score(store: SnapshotStore = Depends(get_store)):
    return compute_health_score(store.snapshot).to_dict()


@router.get("/trend")
def health_trend(store: SnapshotStore = Depends(get_store)):
    return compute_health_trend(store.snapshot)


@router.get("/velocity")
def velocity(store: SnapshotStore = Depends(get_store)):
    return compute_velocity(store.snapshot)


@router.get("/contributions")
def contributions(store: SnapshotStore = Depends(get_store)):
    return [s.to_dict() for s in compute_contributions(store.snapshot)]
