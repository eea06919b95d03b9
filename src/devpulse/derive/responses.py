"""Canned advisor answers, keyed by the phrase that triggers them."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from devpulse.defaults import HEALTH_ON_TRACK
from devpulse.derive.modules import critical_module_names
from devpulse.models import (
    ActiveWork,
    AdvisorResponse,
    Blocker,
    BusFactor,
    HealthScore,
    PullRequest,
    Snapshot,
    WorkStatus,
)

BIGGEST_RISK = "biggest risk"
WHO_NEEDS_HELP = "who needs help"
DEMO_READINESS = "demo readiness"
DEFAULT = "default"


def _names(work: Sequence[ActiveWork], status: WorkStatus) -> list[str]:
    return [w.name for w in work if w.status == status]


def _biggest_risk(blockers: Sequence[Blocker]) -> AdvisorResponse:
    if not blockers:
        return AdvisorResponse("**No critical risks detected.** Keep up the momentum!", 80)
    top = blockers[0]
    return AdvisorResponse(
        f"**Critical Risk: {top.title}**\n\n"
        f"{top.description}\n\n"
        f"**Severity:** {top.severity.value}\n"
        f"**Affected:** {', '.join(top.affected_modules)}\n\n"
        "**Action:** Address this immediately.",
        92,
    )


def _who_needs_help(work: Sequence[ActiveWork], bf: BusFactor) -> AdvisorResponse:
    inactive = _names(work, WorkStatus.INACTIVE)
    if not inactive:
        return AdvisorResponse("**All members are active!** No intervention needed.", 88)
    critical = critical_module_names(bf)
    concerns = (
        f"{', '.join(critical)} have single-person dependency" if critical else "None critical."
    )
    lines = "\n".join(f"- **{n}**: inactive, reach out or redistribute work" for n in inactive)
    return AdvisorResponse(
        f"**Members needing attention:**\n\n{lines}\n\n**Bus factor concerns:** {concerns}",
        88,
    )


def _demo_readiness(
    health: HealthScore,
    work: Sequence[ActiveWork],
    pull_requests: Sequence[PullRequest],
) -> AdvisorResponse:
    open_count = sum(1 for pr in pull_requests if pr.is_open)
    stale_count = sum(1 for pr in pull_requests if pr.stagnant)
    verdict = (
        "Project is on track." if health.overall >= HEALTH_ON_TRACK else "Project needs attention."
    )
    return AdvisorResponse(
        f"**Health: {health.overall}/100**\n\n"
        f"**Active:** {', '.join(_names(work, WorkStatus.ACTIVE)) or 'None'}\n"
        f"**Idle:** {', '.join(_names(work, WorkStatus.IDLE)) or 'None'}\n"
        f"**Inactive:** {', '.join(_names(work, WorkStatus.INACTIVE)) or 'None'}\n\n"
        f"**Open PRs:** {open_count} | **Stale:** {stale_count}\n\n"
        f"{verdict}",
        90,
    )


def _summary(
    snapshot: Snapshot,
    health: HealthScore,
    work: Sequence[ActiveWork],
    pull_requests: Sequence[PullRequest],
    blockers: Sequence[Blocker],
    now: datetime,
) -> AdvisorResponse:
    open_count = sum(1 for pr in pull_requests if pr.is_open)
    active = len(_names(work, WorkStatus.ACTIVE))
    b = health.breakdown
    return AdvisorResponse(
        f"**DevPulse: {now:%b} {now.day}**\n\n"
        f"**Health: {health.overall}/100** | Team: {len(snapshot.members)} members, {active} active\n"
        f"**Commits:** {len(snapshot.commits)} | **Open PRs:** {open_count} | "
        f"**Blockers:** {len(blockers)}\n\n"
        f"**Risk:** Delivery {b['deliveryRisk']}% | Integration {b['integrationRisk']}% | "
        f"Stability {b['stabilityRisk']}%\n\n"
        "Ask about specific risks, members, or modules.",
        85,
    )


def advisor_responses(
    snapshot: Snapshot,
    health: HealthScore,
    work: Sequence[ActiveWork],
    pull_requests: Sequence[PullRequest],
    blockers: Sequence[Blocker],
    bf: BusFactor,
    now: datetime,
) -> dict[str, AdvisorResponse]:
    """Build every keyword response; ``pull_requests`` carry recomputed state."""
    return {
        BIGGEST_RISK: _biggest_risk(blockers),
        WHO_NEEDS_HELP: _who_needs_help(work, bf),
        DEMO_READINESS: _demo_readiness(health, work, pull_requests),
        DEFAULT: _summary(snapshot, health, work, pull_requests, blockers, now),
    }
