"""Active work endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from devpulse.api.deps import get_store
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/work", tags=["work"])

_RECENT_COMMITS = 10


@router.get("")
@router.get("/active")
def active_work(store: SnapshotStore = Depends(get_store)):
    return [w.to_dict() for w in store.derived.active_work]


@router.get("/map")
def work_map(store: SnapshotStore = Depends(get_store)):
    """Active work plus the most recent commits, newest first."""
    state = store.state
    recent = sorted(state.snapshot.commits, key=lambda c: c.date, reverse=True)[:_RECENT_COMMITS]
    return {
        "activeWork": [w.to_dict() for w in state.derived.active_work],
        "recentCommits": [c.to_dict() for c in recent],
    }


@router.get("/{author_id}/commits")
@router.get("/commits/{author_id}")
def commits_by_author(author_id: str, store: SnapshotStore = Depends(get_store)):
    return [c.to_dict() for c in store.snapshot.commits_by(author_id)]
