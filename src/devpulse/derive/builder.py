"""One-pass construction of every derived entity for a snapshot."""

from __future__ import annotations

import logging
from datetime import datetime

from devpulse._time import now_utc
from devpulse.derive.blockers import build_blockers
from devpulse.derive.modules import bus_factor, integration_risks
from devpulse.derive.reports import commit_honesty_report
from devpulse.derive.responses import advisor_responses
from devpulse.derive.scenarios import simulation_scenarios
from devpulse.derive.work import active_work, ghosting_alerts
from devpulse.lifecycle import pull_request_state
from devpulse.metrics import compute_contributions, compute_health_score
from devpulse.models import DerivedSnapshot, Snapshot

log = logging.getLogger("devpulse.derive")


def build_derived(snapshot: Snapshot, now: datetime | None = None) -> DerivedSnapshot:
    now = now or now_utc()
    pull_requests = [pull_request_state(pr, now) for pr in snapshot.pull_requests]
    work = active_work(snapshot, now)
    blockers = build_blockers(snapshot, pull_requests, work, now)
    risks = integration_risks(snapshot)
    bf = bus_factor(snapshot)
    health = compute_health_score(snapshot, now)

    derived = DerivedSnapshot(
        active_work=tuple(work),
        blockers=tuple(blockers),
        ghosting_alerts=tuple(ghosting_alerts(snapshot, now)),
        integration_risks=tuple(risks),
        bus_factor=bf,
        contribution_stats=tuple(compute_contributions(snapshot, now)),
        commit_honesty=tuple(commit_honesty_report(snapshot)),
        simulation_scenarios=tuple(simulation_scenarios(snapshot, pull_requests, work, risks)),
        advisor_responses=advisor_responses(
            snapshot, health, work, pull_requests, blockers, bf, now,
        ),
        generated_at=now,
    )
    log.debug(
        "Derived %d blockers, %d scenarios, %d modules",
        len(derived.blockers), len(derived.simulation_scenarios), len(derived.integration_risks),
    )
    return derived
