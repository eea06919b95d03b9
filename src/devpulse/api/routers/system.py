"""Liveness and metrics endpoints (no version prefix)."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from devpulse._time import iso, now_utc
from devpulse.api.deps import get_store
from devpulse.observability import generate_metrics
from devpulse.store import SnapshotStore

router = APIRouter(tags=["system"])


@router.get("/ping")
def ping():
    return {"status": "ok", "timestamp": iso(now_utc())}


@router.get("/metrics")
def metrics(store: SnapshotStore = Depends(get_store)):
    """Prometheus-compatible metrics endpoint."""
    return Response(content=generate_metrics(store), media_type="text/plain; charset=utf-8")
