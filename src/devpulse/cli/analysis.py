"""CLI commands: offline evaluation of a snapshot file."""

from __future__ import annotations

import argparse

from devpulse.cli._helpers import _load_store, _now, _out


def cmd_health_now(args: argparse.Namespace) -> int:
    from devpulse.metrics import compute_health_score
    store = _load_store(args)
    return _out(compute_health_score(store.snapshot, _now(args)).to_dict())


def cmd_health_trend(args: argparse.Namespace) -> int:
    from devpulse.metrics import compute_health_trend
    store = _load_store(args)
    return _out(compute_health_trend(store.snapshot, _now(args)))


def cmd_blockers(args: argparse.Namespace) -> int:
    store = _load_store(args)
    blockers = [
        b.to_dict() for b in store.derived.blockers
        if not args.severity or b.severity.value == args.severity
    ]
    return _out(blockers)


def cmd_busfactor(args: argparse.Namespace) -> int:
    from devpulse.derive import critical_modules
    store = _load_store(args)
    bf = store.derived.bus_factor
    return _out({**bf.to_dict(), "critical": critical_modules(bf, args.threshold)})


def cmd_simulate_list(args: argparse.Namespace) -> int:
    store = _load_store(args)
    return _out([s.to_dict() for s in store.derived.simulation_scenarios])


def cmd_simulate_run(args: argparse.Namespace) -> int:
    from devpulse.metrics import compute_health_score
    from devpulse.simulation import project
    store = _load_store(args)
    state = store.state
    scenario = state.derived.scenario(args.scenario_id)
    if scenario is None:
        return _out({"error": f"Scenario {args.scenario_id} not found"})
    names = {m.id: m.name for m in state.snapshot.members}
    health = compute_health_score(state.snapshot, _now(args))
    return _out(project(scenario, health, names).to_dict())


def cmd_honesty(args: argparse.Namespace) -> int:
    from devpulse.heuristics import analyze_honesty
    return _out(analyze_honesty(args.message, args.files).to_dict())


def cmd_classify(args: argparse.Namespace) -> int:
    from devpulse.heuristics import classify
    return _out({path: classify(path) for path in args.paths})
