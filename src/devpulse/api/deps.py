"""Request-scoped access to the application's store and settings."""

from __future__ import annotations

from fastapi import Request

from devpulse.config import Settings
from devpulse.store import SnapshotStore


def get_store(request: Request) -> SnapshotStore:
    return request.app.state.store


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
