"""Per-module integration risk endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from devpulse.api.deps import get_store
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/integration", tags=["integration"])


@router.get("")
def integration_risks(store: SnapshotStore = Depends(get_store)):
    return [r.to_dict() for r in store.derived.integration_risks]


@router.get("/{module}")
def module_risk(module: str, store: SnapshotStore = Depends(get_store)):
    risk = store.derived.integration_risk(module)
    if risk is None:
        raise HTTPException(status_code=404, detail="Module not found")
    return risk.to_dict()
