"""Sync orchestration: fetch, transform, swap into the store."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Any

import httpx

from devpulse._time import iso, now_utc
from devpulse.config import Settings
from devpulse.models import Snapshot
from devpulse.observability import record_sync
from devpulse.store import SnapshotStore
from devpulse.sync.client import GitHubError, RepoRef, fetch_repository
from devpulse.sync.transform import build_snapshot
from devpulse.validation import ValidationError

log = logging.getLogger("devpulse.sync")


def _summary(snapshot: Snapshot) -> dict[str, int]:
    return {
        "commits": len(snapshot.commits),
        "pullRequests": len(snapshot.pull_requests),
        "branches": len(snapshot.branches),
        "members": len(snapshot.members),
    }


async def sync_repository(
    store: SnapshotStore,
    owner: str,
    repo: str,
    token: str = "",
    *,
    settings: Settings | None = None,
    client: httpx.AsyncClient | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Pull ``owner/repo`` from GitHub and replace the store's snapshot.

    On failure the previous snapshot stays in place, the error is recorded
    in the sync status and re-raised. Raises ``GitHubError(409)`` when a sync
    is already running.
    """
    settings = settings or Settings()
    if not store.begin_sync():
        raise GitHubError(409, "A sync is already in progress")
    store.update_status(owner=owner, repo=repo, token=token)
    ref = RepoRef(owner=owner, repo=repo, token=token, api_url=settings.github_api_url)
    log.info("Sync started for %s", ref.full_name, extra={"repo": ref.full_name})
    started = time.monotonic()

    try:
        raw = await fetch_repository(
            ref,
            commit_pages=settings.commit_pages,
            detail_limit=settings.detail_limit,
            client=client,
        )
        now = now or now_utc()
        snapshot = build_snapshot(
            raw, now,
            max_members=settings.max_members,
            deadline_hours=settings.deadline_hours,
        )
        store.replace(snapshot, now)
        summary = _summary(snapshot)
        store.update_status(synced_at=now, last_error=None, summary=summary)
    except (GitHubError, ValidationError) as e:
        log.error("Sync of %s failed: %s", ref.full_name, e, extra={"repo": ref.full_name})
        store.update_status(last_error=str(e))
        record_sync("failure", time.monotonic() - started)
        raise
    finally:
        store.update_status(syncing=False)

    record_sync("success", time.monotonic() - started)
    log.info(
        "Sync finished for %s: %d commits, %d PRs, %d branches, %d members",
        ref.full_name, summary["commits"], summary["pullRequests"],
        summary["branches"], summary["members"],
        extra={"repo": ref.full_name},
    )
    return {"repo": ref.full_name, "syncedAt": iso(now), **summary}
