"""Argparse parser definition for the DevPulse CLI."""

from __future__ import annotations

import argparse

from devpulse.defaults import BUS_FACTOR_CRITICAL_THRESHOLD
from devpulse.models import Severity


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="devpulse",
        description="Repository health analytics for small software teams",
    )
    parser.add_argument("--snapshot", help="Snapshot JSON file to evaluate")
    parser.add_argument("--now", help="Evaluate as of this ISO-8601 instant (default: current time)")
    parser.add_argument("--log-level", default=None, help="Override DEVPULSE_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command")

    _register_server_commands(sub)
    _register_analysis_commands(sub)
    _register_heuristic_commands(sub)
    return parser


def _register_server_commands(sub: argparse._SubParsersAction) -> None:
    # -- serve --
    p = sub.add_parser("serve", help="Start HTTP API server")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=4000)

    # -- sync --
    p = sub.add_parser("sync", help="Sync a GitHub repository and print the summary")
    p.add_argument("--owner", help="Repository owner (default: DEVPULSE_GITHUB_OWNER)")
    p.add_argument("--repo", help="Repository name (default: DEVPULSE_GITHUB_REPO)")
    p.add_argument("--token", help="Access token (default: DEVPULSE_GITHUB_TOKEN)")
    p.add_argument("--output", help="Write the synced snapshot to this JSON file")


def _register_analysis_commands(sub: argparse._SubParsersAction) -> None:
    # -- health --
    health_p = sub.add_parser("health", help="Live health readings")
    health_sub = health_p.add_subparsers(dest="health_cmd")
    health_sub.add_parser("now", help="Current health score with risk factors")
    health_sub.add_parser("trend", help="Daily health trend since the first commit")

    # -- blockers --
    p = sub.add_parser("blockers", help="Prioritised blocker list")
    p.add_argument("--severity", choices=[s.value for s in Severity])

    # -- busfactor --
    p = sub.add_parser("busfactor", help="Module ownership matrix and critical cells")
    p.add_argument("--threshold", type=int, default=BUS_FACTOR_CRITICAL_THRESHOLD)

    # -- simulate --
    sim_p = sub.add_parser("simulate", help="What-if scenarios")
    sim_sub = sim_p.add_subparsers(dest="simulate_cmd")
    sim_sub.add_parser("list", help="List derived scenarios")
    p = sim_sub.add_parser("run", help="Project a scenario onto live health")
    p.add_argument("--scenario-id", required=True)


def _register_heuristic_commands(sub: argparse._SubParsersAction) -> None:
    # -- honesty --
    p = sub.add_parser("honesty", help="Score a commit message against its files")
    p.add_argument("--message", required=True)
    p.add_argument("--file", dest="files", action="append", default=[],
                   help="Touched file path (repeatable)")

    # -- classify --
    p = sub.add_parser("classify", help="Classify file paths into modules")
    p.add_argument("paths", nargs="+")
