"""Scenario projection: what a stored scenario would do to live health."""

from __future__ import annotations

from typing import Mapping

from devpulse._time import clamp
from devpulse.defaults import HEALTH_ON_TRACK
from devpulse.models import HealthScore, ProjectionResult, SimulationScenario


def _subject(scenario: SimulationScenario) -> str:
    if scenario.member_id:
        return "member"
    if scenario.pr_id:
        return "pr"
    return "none"


def _analysis(
    scenario: SimulationScenario, member: str, current: int, projected: int,
) -> list[str]:
    impact = scenario.impact
    subject = _subject(scenario)
    lines = [f"Health moves from {current} to {projected} ({impact.health_drop:+d})."]

    if impact.health_drop < 0:
        if subject == "member":
            lines.append(
                f"Work owned by {member} stalls for {scenario.delay_hours}h; "
                f"{len(impact.affected_modules)} module(s) lose their active contributor."
            )
        elif subject == "pr":
            lines.append(
                f"PR {scenario.pr_id} stays open another {scenario.delay_hours}h and keeps "
                "diverging from the default branch."
            )
        else:
            lines.append("Team-wide delivery slows without a single identifiable cause.")
        if impact.new_blockers > 0:
            lines.append(f"Expect {impact.new_blockers} new blocker(s).")
    else:
        if subject == "pr":
            lines.append(f"Merging PR {scenario.pr_id} removes one source of integration drift.")
        elif subject == "member":
            lines.append(f"Re-engaging {member} restores coverage on their modules.")
        else:
            lines.append("Clearing the open PR queue removes pending review load.")
        if impact.new_blockers < 0:
            lines.append(f"Resolves {-impact.new_blockers} blocker(s).")

    if impact.affected_modules:
        lines.append(f"Affected modules: {', '.join(impact.affected_modules)}.")
    if current >= HEALTH_ON_TRACK > projected:
        lines.append("The project would drop below the on-track threshold.")
    elif projected >= HEALTH_ON_TRACK > current:
        lines.append("The project would climb back above the on-track threshold.")
    return lines


def _recommendations(scenario: SimulationScenario, member: str) -> list[str]:
    subject = _subject(scenario)
    if scenario.impact.health_drop < 0:
        if subject == "member":
            return [
                f"Check in with {member} today.",
                "Pair another contributor on their modules to spread ownership.",
                "Redistribute pending tasks if there is no response within a day.",
            ]
        if subject == "pr":
            return [
                f"Assign a reviewer to PR {scenario.pr_id} now.",
                "Split the change into smaller PRs if review is blocked on size.",
                "Rebase onto the default branch to limit divergence.",
            ]
        return [
            "Review the blocker list and assign an owner to each item.",
            "Hold a short sync to re-prioritise remaining work.",
        ]
    if subject == "pr":
        return [
            f"Prioritise review and merge of PR {scenario.pr_id}.",
            "Run the full test suite before merging to protect stability.",
        ]
    if subject == "member":
        return [f"Agree a concrete next task with {member}."]
    return [
        "Work through open PRs oldest first.",
        "Keep reviewers assigned on every new PR.",
    ]


def project(
    scenario: SimulationScenario,
    current_health: HealthScore,
    member_names: Mapping[str, str] | None = None,
) -> ProjectionResult:
    """Apply a scenario's impact to the live health reading.

    ``member_names`` maps member ids to display names for the narrative.
    """
    member = (member_names or {}).get(scenario.member_id or "", scenario.member_id or "")
    impact = scenario.impact
    current = current_health.overall
    projected = clamp(0, 100, current + impact.health_drop)
    breakdown = {
        "deliveryRisk": clamp(0, 100, current_health.delivery.score + impact.delivery_risk_change),
        "integrationRisk": clamp(
            0, 100, current_health.integration.score + impact.integration_risk_change,
        ),
        "stabilityRisk": current_health.stability.score,
    }
    return ProjectionResult(
        scenario=scenario,
        current_health=current,
        projected_health=projected,
        breakdown=breakdown,
        analysis=tuple(_analysis(scenario, member, current, projected)),
        recommendations=tuple(_recommendations(scenario, member)),
    )
