"""Derived entities: views rebuilt from a snapshot on every sync.

Modules:
  - work: active work and ghosting alerts
  - blockers: prioritised blocker list
  - modules: integration risk, co-change graph, bus factor
  - reports: commit honesty report
  - scenarios: what-if simulation scenarios
  - responses: canned advisor answers
  - builder: everything above in one pass
"""

from devpulse.derive.builder import build_derived
from devpulse.derive.blockers import build_blockers, stale_pr_severity
from devpulse.derive.modules import (
    bus_factor,
    co_change_graph,
    critical_modules,
    integration_risks,
    integration_status,
    tracked_modules,
)
from devpulse.derive.reports import commit_honesty_report
from devpulse.derive.responses import advisor_responses
from devpulse.derive.scenarios import simulation_scenarios
from devpulse.derive.work import active_work, ghosting_alerts, work_status
from devpulse.lifecycle import branch_status, pull_request_state

__all__ = [
    "build_derived",
    "build_blockers",
    "stale_pr_severity",
    "bus_factor",
    "co_change_graph",
    "critical_modules",
    "integration_risks",
    "integration_status",
    "tracked_modules",
    "commit_honesty_report",
    "advisor_responses",
    "simulation_scenarios",
    "active_work",
    "ghosting_alerts",
    "work_status",
    "branch_status",
    "pull_request_state",
]
