"""Tests for scenario projection onto live health."""

from devpulse.derive import build_derived
from devpulse.metrics import compute_health_score
from devpulse.models import HealthScore, RiskReading, ScenarioImpact, SimulationScenario
from devpulse.simulation import project

from conftest import NOW


def _health(overall: int, delivery: int = 20, integration: int = 20, stability: int = 10) -> HealthScore:
    return HealthScore(
        overall=overall,
        delivery=RiskReading(delivery),
        integration=RiskReading(integration),
        stability=RiskReading(stability),
    )


def _scenario(health_drop: int, **kwargs) -> SimulationScenario:
    impact = ScenarioImpact(
        health_drop=health_drop,
        new_blockers=kwargs.pop("new_blockers", 1),
        affected_modules=kwargs.pop("affected_modules", ()),
        delivery_risk_change=kwargs.pop("delivery", 0),
        integration_risk_change=kwargs.pop("integration", 0),
    )
    return SimulationScenario(
        id="sim1", name="s", description="d", delay_hours=48, impact=impact, **kwargs,
    )


class TestProjectFromSnapshot:
    def test_stale_pr_scenario(self, team_snapshot):
        derived = build_derived(team_snapshot, NOW)
        health = compute_health_score(team_snapshot, NOW)
        result = project(derived.scenario("sim1"), health, {"u1": "Alice"})
        assert result.current_health == 59
        assert result.projected_health == 49
        assert result.breakdown == {"deliveryRisk": 59, "integrationRisk": 60, "stabilityRisk": 10}
        assert result.analysis[0] == "Health moves from 59 to 49 (-10)."
        assert result.recommendations[0] == "Assign a reviewer to PR pr1 now."

    def test_inactive_member_scenario_names_member(self, team_snapshot):
        derived = build_derived(team_snapshot, NOW)
        health = compute_health_score(team_snapshot, NOW)
        names = {m.id: m.name for m in team_snapshot.members}
        result = project(derived.scenario("sim2"), health, names)
        assert any("Carol" in line for line in result.analysis)
        assert result.recommendations[0] == "Check in with Carol today."
        assert "Affected modules: Database." in result.analysis


class TestProjectBounds:
    def test_projected_health_clamped(self):
        assert project(_scenario(-200), _health(40)).projected_health == 0
        assert project(_scenario(200, new_blockers=-1), _health(90)).projected_health == 100

    def test_risk_breakdown_clamped(self):
        result = project(_scenario(-5, delivery=150, integration=-80), _health(60))
        assert result.breakdown["deliveryRisk"] == 100
        assert result.breakdown["integrationRisk"] == 0
        assert result.breakdown["stabilityRisk"] == 10

    def test_drop_below_on_track(self):
        result = project(_scenario(-10, pr_id="pr7"), _health(75))
        assert result.projected_health == 65
        assert "The project would drop below the on-track threshold." in result.analysis

    def test_climb_above_on_track(self):
        result = project(_scenario(10, new_blockers=-2, pr_id="pr7"), _health(65))
        assert "The project would climb back above the on-track threshold." in result.analysis
        assert "Resolves 2 blocker(s)." in result.analysis
        assert result.recommendations[0] == "Prioritise review and merge of PR pr7."

    def test_no_subject(self):
        result = project(_scenario(-5), _health(50))
        assert "Team-wide delivery slows without a single identifiable cause." in result.analysis
        assert "Expect 1 new blocker(s)." in result.analysis

    def test_unknown_member_falls_back_to_id(self):
        result = project(_scenario(-5, member_id="u42"), _health(50))
        assert result.recommendations[0] == "Check in with u42 today."

    def test_to_dict(self):
        d = project(_scenario(-5, member_id="u1"), _health(50), {"u1": "Ann"}).to_dict()
        assert set(d) == {
            "scenario", "currentHealth", "projectedHealth",
            "breakdown", "analysis", "recommendations",
        }
        assert d["scenario"]["memberId"] == "u1"
        assert d["scenario"]["impact"]["riskChange"] == {"deliveryRisk": 0, "integrationRisk": 0}
