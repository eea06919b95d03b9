"""GitHub synchronization.

Modules:
  - client: async REST client and raw payload bundle
  - transform: raw payloads -> Snapshot
  - service: fetch + transform + store swap
"""

from devpulse.sync.client import GitHubError, RawRepository, RepoRef, fetch_repository
from devpulse.sync.service import sync_repository
from devpulse.sync.transform import build_snapshot

__all__ = [
    "GitHubError",
    "RawRepository",
    "RepoRef",
    "fetch_repository",
    "sync_repository",
    "build_snapshot",
]
