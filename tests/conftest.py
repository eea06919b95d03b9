"""Shared fixtures for devpulse tests.

The ``team_data`` snapshot is evaluated at ``NOW`` throughout. It holds three
members (Alice active on the frontend, Bob on the backend, Carol gone quiet
on the database), one stagnant PR, one unreviewed PR, one merged PR and one
abandoned branch.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from devpulse.models import Snapshot
from devpulse.store import SnapshotStore

NOW = datetime(2026, 2, 20, 12, 0, tzinfo=timezone.utc)
NOW_ISO = "2026-02-20T12:00:00Z"


def ago(days: float = 0, hours: float = 0) -> str:
    """ISO timestamp ``days``/``hours`` before ``NOW``."""
    ts = NOW - timedelta(days=days, hours=hours)
    return ts.isoformat().replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Auto-use fixtures: cleanup global state between tests
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_globals():
    """Reset the LLM registry and metric counters after every test."""
    yield
    from devpulse.llm import reset_adapter
    from devpulse.observability import reset_metrics
    reset_adapter()
    reset_metrics()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "DEVPULSE_SNAPSHOT_PATH",
        "DEVPULSE_GITHUB_OWNER",
        "DEVPULSE_GITHUB_REPO",
        "DEVPULSE_GITHUB_TOKEN",
        "DEVPULSE_LLM_PROVIDER",
        "DEVPULSE_LLM_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Snapshot data
# ---------------------------------------------------------------------------

def make_team_data() -> dict:
    return {
        "COMMITS": [
            {
                "id": "c1", "author": "u1", "date": ago(hours=12),
                "message": "Add dashboard chart component",
                "files": ["client/components/Chart.jsx"],
                "additions": 120, "deletions": 4,
            },
            {
                "id": "c2", "author": "u1", "date": ago(days=1),
                "message": "Wire chart to stats API",
                "files": ["client/components/Chart.jsx", "server/routes/stats.js"],
                "additions": 30, "deletions": 10,
            },
            {
                "id": "c3", "author": "u2", "date": ago(days=2),
                "message": "fix",
                "files": ["server/routes/stats.js"],
                "additions": 2, "deletions": 2,
            },
            {
                "id": "c4", "author": "u2", "date": ago(days=3),
                "message": "Add stats endpoint with caching",
                "files": ["server/routes/stats.js", "server/cache.js"],
                "additions": 80, "deletions": 0,
            },
            {
                "id": "c5", "author": "u3", "date": ago(days=8),
                "message": "Create user schema",
                "files": ["server/models/user.js"],
                "additions": 40, "deletions": 0,
            },
        ],
        "PULL_REQUESTS": [
            {
                "id": "pr1", "title": "Add chart", "author": "u1",
                "branch": "feature/chart", "status": "open",
                "createdAt": ago(days=5), "reviewers": [], "comments": 0,
            },
            {
                "id": "pr2", "title": "Stats endpoint", "author": "u2",
                "branch": "feature/stats", "status": "open",
                "createdAt": ago(days=1), "reviewers": [], "comments": 2,
            },
            {
                "id": "pr3", "title": "Initial setup", "author": "u3",
                "branch": "setup", "status": "merged",
                "createdAt": ago(days=10), "mergedAt": ago(days=9),
                "reviewers": ["u1"], "comments": 1,
            },
        ],
        "BRANCHES": [
            {"name": "main", "lastCommit": ago(hours=12), "author": "u1", "status": "active"},
            {"name": "feature/chart", "lastCommit": ago(days=1), "author": "u1", "status": "active"},
            {
                "name": "old-experiment", "lastCommit": ago(days=20), "author": "u3",
                "status": "abandoned", "staleDays": 20,
            },
        ],
        "TEAM": {
            "name": "demo",
            "repo": "acme/demo",
            "description": "Team dashboard",
            "createdAt": ago(days=30),
            "deadline": ago(days=-2),
            "members": [
                {"id": "u1", "name": "Alice", "role": "Frontend Developer"},
                {"id": "u2", "name": "Bob", "role": "Backend Developer"},
                {"id": "u3", "name": "Carol", "role": "Database Engineer"},
            ],
        },
        "defaultBranch": "main",
    }


@pytest.fixture
def team_data():
    return make_team_data()


@pytest.fixture
def team_snapshot(team_data):
    return Snapshot.from_dict(team_data)


@pytest.fixture
def store(team_snapshot):
    return SnapshotStore(team_snapshot, now=NOW)


@pytest.fixture
def snapshot_file(tmp_path, team_data):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(team_data))
    return path
