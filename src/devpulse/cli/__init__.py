"""CLI for DevPulse: grouped subcommands.

Commands:
  devpulse serve
  devpulse sync
  devpulse health {now, trend}
  devpulse blockers
  devpulse busfactor
  devpulse simulate {list, run}
  devpulse honesty
  devpulse classify
"""

from __future__ import annotations

import sys

from devpulse.cli._helpers import _out
from devpulse.cli._parser import build_parser
from devpulse.cli.analysis import (
    cmd_blockers,
    cmd_busfactor,
    cmd_classify,
    cmd_health_now,
    cmd_health_trend,
    cmd_honesty,
    cmd_simulate_list,
    cmd_simulate_run,
)
from devpulse.cli.server import cmd_serve, cmd_sync


# ===================================================================
# Dispatch
# ===================================================================

_DISPATCH = {
    ("serve", None): cmd_serve,
    ("sync", None): cmd_sync,
    ("health", "now"): cmd_health_now,
    ("health", "trend"): cmd_health_trend,
    ("blockers", None): cmd_blockers,
    ("busfactor", None): cmd_busfactor,
    ("simulate", "list"): cmd_simulate_list,
    ("simulate", "run"): cmd_simulate_run,
    ("honesty", None): cmd_honesty,
    ("classify", None): cmd_classify,
}

# Map subcmd attr names to the dispatch key
_SUBCMD_ATTR = {
    "health": "health_cmd",
    "simulate": "simulate_cmd",
}


def main(argv: list[str] | None = None) -> int:
    from devpulse.config import load_settings
    from devpulse.observability import setup_logging

    parser = build_parser()
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.log_level or load_settings().log_level)

    subcmd_attr = _SUBCMD_ATTR.get(args.command)
    subcmd = getattr(args, subcmd_attr, None) if subcmd_attr else None
    handler = _DISPATCH.get((args.command, subcmd))
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args)
    except (OSError, ValueError) as e:
        return _out({"error": str(e)})
