"""Composite health score and its day-by-day trend."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from devpulse._time import clamp, day_range, end_of_day, now_utc
from devpulse.defaults import HEALTH_WEIGHTS
from devpulse.metrics.risk import delivery_risk, integration_risk, stability_risk
from devpulse.models import HealthScore, Snapshot

NO_COMMITS_MESSAGE = "No commits found. Insufficient historical data."
SINGLE_DAY_MESSAGE = "Only one day of data available."


def health_score_as_of(snapshot: Snapshot, as_of: datetime) -> HealthScore:
    delivery = delivery_risk(snapshot, as_of)
    integration = integration_risk(snapshot, as_of)
    stability = stability_risk(snapshot, as_of)
    weighted = (
        delivery.score * HEALTH_WEIGHTS["deliveryRisk"]
        + integration.score * HEALTH_WEIGHTS["integrationRisk"]
        + stability.score * HEALTH_WEIGHTS["stabilityRisk"]
    )
    return HealthScore(
        overall=clamp(0, 100, 100 - weighted),
        delivery=delivery,
        integration=integration,
        stability=stability,
    )


def compute_health_score(snapshot: Snapshot, now: datetime | None = None) -> HealthScore:
    return health_score_as_of(snapshot, now or now_utc())


def compute_health_trend(snapshot: Snapshot, now: datetime | None = None) -> dict[str, Any]:
    """One health point per UTC day from the first commit through today.

    Each day is scored as of ``min(end of day, now)``.
    """
    now = now or now_utc()
    dates = [c.date for c in snapshot.commits if c.date <= now]
    if not dates:
        return {"trend": [], "message": NO_COMMITS_MESSAGE}

    first_day = min(dates).date()
    trend = [
        {
            "date": day.isoformat(),
            "score": health_score_as_of(snapshot, min(end_of_day(day), now)).overall,
        }
        for day in day_range(first_day, now.date())
    ]
    if len(trend) == 1:
        return {"trend": trend, "message": SINGLE_DAY_MESSAGE}
    return {"trend": trend}
