"""Commit listing and honesty endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from devpulse._time import round_half_away
from devpulse.api.deps import get_store
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/commits", tags=["commits"])


@router.get("")
def list_commits(
    author: str | None = None,
    module: str | None = None,
    store: SnapshotStore = Depends(get_store),
):
    commits = store.snapshot.commits
    if author:
        commits = tuple(c for c in commits if c.author == author)
    if module:
        commits = tuple(c for c in commits if c.module == module)
    return [c.to_dict() for c in commits]


@router.get("/honesty")
def honesty(store: SnapshotStore = Depends(get_store)):
    return [h.to_dict() for h in store.derived.commit_honesty]


@router.get("/honesty-page")
def honesty_page(store: SnapshotStore = Depends(get_store)):
    """Summary counts, every commit and the flagged-commit report."""
    state = store.state
    flagged = state.derived.commit_honesty
    average = (
        round_half_away(sum(h.match_score for h in flagged) / len(flagged)) if flagged else 0
    )
    return {
        "summary": {
            "total": len(state.snapshot.commits),
            "flagged": len(flagged),
            "averageMatchScore": average,
        },
        "commits": [c.to_dict() for c in state.snapshot.commits],
        "honesty": [h.to_dict() for h in flagged],
    }


@router.get("/{commit_id}")
def get_commit(commit_id: str, store: SnapshotStore = Depends(get_store)):
    commit = store.snapshot.commit(commit_id)
    if commit is None:
        raise HTTPException(status_code=404, detail="Commit not found")
    return commit.to_dict()
