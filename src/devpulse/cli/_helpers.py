"""Shared CLI helpers."""

from __future__ import annotations

import argparse
import json
from datetime import datetime
from typing import Any

from devpulse._time import now_utc
from devpulse.config import load_settings
from devpulse.store import SnapshotStore
from devpulse.validation import parse_timestamp


def _out(data: Any) -> int:
    print(json.dumps(data, indent=2, default=str))
    if isinstance(data, dict) and "error" in data:
        return 1
    return 0


def _now(args: argparse.Namespace) -> datetime:
    raw = getattr(args, "now", None)
    return parse_timestamp(raw, "cli", "--now") if raw else now_utc()


def _load_store(args: argparse.Namespace) -> SnapshotStore:
    """Store seeded from ``--snapshot`` (or DEVPULSE_SNAPSHOT_PATH), empty otherwise."""
    now = _now(args)
    store = SnapshotStore(now=now)
    path = getattr(args, "snapshot", None) or load_settings().snapshot_path
    if path:
        store.load_file(path, now)
    return store
