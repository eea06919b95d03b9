"""GitHub connection endpoints: connect, re-sync, disconnect."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from devpulse.api.deps import get_settings, get_store
from devpulse.api.schemas import ConnectBody
from devpulse.config import Settings
from devpulse.store import SnapshotStore
from devpulse.sync import GitHubError, sync_repository

log = logging.getLogger("devpulse.api.github")

router = APIRouter(prefix="/github", tags=["github"])


@router.get("/status")
def status(store: SnapshotStore = Depends(get_store)):
    return store.status.to_dict()


@router.post("/connect")
async def connect(
    body: ConnectBody,
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    """Point the store at ``owner/repo`` and run a first sync.

    A failed first sync forgets the repository but keeps the current snapshot.
    """
    try:
        result = await sync_repository(
            store, body.owner, body.repo, body.token or "", settings=settings,
        )
    except GitHubError as e:
        if e.status != 409:
            store.update_status(owner="", repo="", token="", summary={})
        raise
    return {"status": "connected", "synced": True, **result}


@router.post("/sync")
async def sync(
    store: SnapshotStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    current = store.status
    if not current.connected:
        raise HTTPException(status_code=400, detail="Not connected to GitHub")
    result = await sync_repository(
        store, current.owner, current.repo, current.token, settings=settings,
    )
    return {"status": "synced", **result}


@router.post("/disconnect")
def disconnect(store: SnapshotStore = Depends(get_store)):
    store.disconnect()
    log.info("GitHub disconnected, seed snapshot restored")
    return {"status": "disconnected"}
