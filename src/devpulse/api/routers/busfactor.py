"""Bus factor matrix and critical-ownership endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from devpulse.api.deps import get_store
from devpulse.defaults import BUS_FACTOR_CRITICAL_THRESHOLD
from devpulse.derive import critical_modules
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/busfactor", tags=["busfactor"])


@router.get("")
def bus_factor(store: SnapshotStore = Depends(get_store)):
    return store.derived.bus_factor.to_dict()


@router.get("/critical")
def critical(
    threshold: int = Query(default=BUS_FACTOR_CRITICAL_THRESHOLD, ge=0, le=100),
    store: SnapshotStore = Depends(get_store),
):
    """Cells where one contributor owns at least ``threshold`` percent of a module."""
    return critical_modules(store.derived.bus_factor, threshold)
