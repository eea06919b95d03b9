"""What-if scenarios generated from the current snapshot.

Up to two "stale PR stays open" scenarios, up to two "member stays
inactive" scenarios and one "merge the oldest open PR" opportunity. When
none of those apply a single "All PRs merged today" scenario is produced.
"""

from __future__ import annotations

from typing import Sequence

from devpulse._time import clamp, round_half_away
from devpulse.defaults import (
    MAX_INACTIVE_SCENARIOS,
    MAX_STALE_PR_SCENARIOS,
    SCENARIO_DELAY_HOURS,
    SCENARIO_RISKY_MODULE,
)
from devpulse.derive.modules import risky_modules
from devpulse.derive.state import capitalize, module_histograms
from devpulse.models import (
    ActiveWork,
    IntegrationRisk,
    PullRequest,
    ScenarioImpact,
    SimulationScenario,
    Snapshot,
    WorkStatus,
)

_RISKY_MODULE_LIMIT = 2


def _stale_pr_impact(pr: PullRequest, risks: Sequence[IntegrationRisk]) -> ScenarioImpact:
    penalty = clamp(5, 25, (pr.age_days or 3) * 2)
    return ScenarioImpact(
        health_drop=-penalty,
        new_blockers=1,
        affected_modules=tuple(risky_modules(risks, SCENARIO_RISKY_MODULE, _RISKY_MODULE_LIMIT)),
        delivery_risk_change=clamp(5, 30, penalty),
        integration_risk_change=clamp(3, 15, round_half_away(penalty / 2)),
    )


def _inactive_member_impact(modules: Sequence[str]) -> ScenarioImpact:
    penalty = clamp(5, 20, len(modules) * 5)
    return ScenarioImpact(
        health_drop=-penalty,
        new_blockers=1 if modules else 0,
        affected_modules=tuple(capitalize(m) for m in modules),
        delivery_risk_change=clamp(5, 25, penalty),
        integration_risk_change=clamp(3, 20, len(modules) * 4),
    )


def _merge_impact(pr: PullRequest) -> ScenarioImpact:
    boost = clamp(3, 15, (pr.age_days or 1) * 2)
    return ScenarioImpact(
        health_drop=boost,
        new_blockers=-1,
        delivery_risk_change=-clamp(5, 20, boost),
        integration_risk_change=-clamp(2, 10, round_half_away(boost / 2)),
    )


def _merge_all_impact(open_count: int) -> ScenarioImpact:
    return ScenarioImpact(
        health_drop=clamp(5, 25, open_count * 5),
        new_blockers=-open_count,
        delivery_risk_change=-clamp(5, 30, open_count * 8),
        integration_risk_change=-clamp(3, 20, open_count * 4),
    )


def simulation_scenarios(
    snapshot: Snapshot,
    pull_requests: Sequence[PullRequest],
    work: Sequence[ActiveWork],
    risks: Sequence[IntegrationRisk],
) -> list[SimulationScenario]:
    """Build scenarios; ``pull_requests`` must carry recomputed state."""
    drafts: list[tuple[str, str, int, ScenarioImpact, str | None, str | None]] = []

    stale = [pr for pr in pull_requests if pr.stagnant][:MAX_STALE_PR_SCENARIOS]
    for pr in stale:
        drafts.append((
            f'"{pr.title}" delayed 48h',
            "What if this stale PR stays open 2 more days?",
            SCENARIO_DELAY_HOURS,
            _stale_pr_impact(pr, risks),
            None,
            pr.id,
        ))

    histograms = module_histograms(snapshot.commits)
    inactive = [w for w in work if w.status == WorkStatus.INACTIVE][:MAX_INACTIVE_SCENARIOS]
    for w in inactive:
        modules = sorted(histograms.get(w.member_id, {}))
        drafts.append((
            f"{w.name} stays inactive",
            f"What if {w.name} contributes nothing for 2 more days?",
            SCENARIO_DELAY_HOURS,
            _inactive_member_impact(modules),
            w.member_id,
            None,
        ))

    open_prs = [pr for pr in pull_requests if pr.is_open]
    if open_prs:
        oldest = max(open_prs, key=lambda pr: pr.age_days or 0)
        drafts.append((
            f'Merge "{oldest.title}"',
            "What if this PR is merged today?",
            0,
            _merge_impact(oldest),
            None,
            oldest.id,
        ))

    if not drafts:
        drafts.append((
            "All PRs merged today",
            "What if every open PR is merged right now?",
            0,
            _merge_all_impact(len(open_prs)),
            None,
            None,
        ))

    return [
        SimulationScenario(
            id=f"sim{i}",
            name=name,
            description=description,
            delay_hours=delay,
            impact=impact,
            member_id=member_id,
            pr_id=pr_id,
        )
        for i, (name, description, delay, impact, member_id, pr_id) in enumerate(drafts, start=1)
    ]
