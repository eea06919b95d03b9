"""Full health radar payload for the dashboard."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Sequence

from devpulse._time import now_utc
from devpulse.metrics.activity import (
    compute_contributions,
    compute_summary_badges,
    compute_velocity,
)
from devpulse.metrics.health import compute_health_score, compute_health_trend
from devpulse.models import Blocker, Snapshot


def compute_health_radar(
    snapshot: Snapshot,
    now: datetime | None = None,
    blockers: Sequence[Blocker] = (),
) -> dict[str, Any]:
    now = now or now_utc()
    trend = compute_health_trend(snapshot, now)
    return {
        "healthScore": {
            **compute_health_score(snapshot, now).to_dict(),
            "trend": trend["trend"],
            "trendMessage": trend.get("message"),
        },
        "velocity": compute_velocity(snapshot, now),
        "contributions": [s.to_dict() for s in compute_contributions(snapshot, now)],
        "badges": compute_summary_badges(snapshot, blockers, now),
    }
