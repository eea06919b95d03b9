"""Team and member endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from devpulse.api.deps import get_store
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/team", tags=["team"])


@router.get("")
def team(store: SnapshotStore = Depends(get_store)):
    return store.snapshot.team.to_dict()


@router.get("/{member_id}")
@router.get("/members/{member_id}")
def member(member_id: str, store: SnapshotStore = Depends(get_store)):
    m = store.snapshot.member(member_id)
    if m is None:
        raise HTTPException(status_code=404, detail="Member not found")
    return m.to_dict()
