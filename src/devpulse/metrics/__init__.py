"""Live metrics: recomputed from the raw snapshot on every read.

Modules:
  - risk: delivery, integration and stability risk as of a cutoff
  - health: composite health score and daily trend
  - activity: velocity, contributions, summary badges
  - radar: the combined dashboard payload
"""

from devpulse.metrics.risk import (
    compute_delivery_risk,
    compute_integration_risk,
    compute_stability_risk,
    delivery_risk,
    integration_risk,
    open_pull_requests,
    stability_risk,
    visible_commits,
)
from devpulse.metrics.health import (
    NO_COMMITS_MESSAGE,
    SINGLE_DAY_MESSAGE,
    compute_health_score,
    compute_health_trend,
    health_score_as_of,
)
from devpulse.metrics.activity import (
    compute_contributions,
    compute_summary_badges,
    compute_velocity,
    deadline_badge,
)
from devpulse.metrics.radar import compute_health_radar

__all__ = [
    # Risk
    "delivery_risk",
    "integration_risk",
    "stability_risk",
    "compute_delivery_risk",
    "compute_integration_risk",
    "compute_stability_risk",
    "open_pull_requests",
    "visible_commits",
    # Health
    "NO_COMMITS_MESSAGE",
    "SINGLE_DAY_MESSAGE",
    "compute_health_score",
    "compute_health_trend",
    "health_score_as_of",
    # Activity
    "compute_contributions",
    "compute_summary_badges",
    "compute_velocity",
    "deadline_badge",
    # Radar
    "compute_health_radar",
]
