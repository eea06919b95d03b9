"""Module-level analytics: integration risk, co-change graph, bus factor."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import networkx as nx

from devpulse._time import clamp, round_half_away
from devpulse.defaults import (
    BUS_FACTOR_CRITICAL_THRESHOLD,
    INTEGRATION_RISK_MAX,
    INTEGRATION_RISK_MIN,
    INTEGRATION_SHARED_BONUS,
    INTEGRATION_STATUS_THRESHOLDS,
    MAX_DEPENDENCIES,
)
from devpulse.derive.state import capitalize, module_ownership
from devpulse.heuristics import classify, is_trivial
from devpulse.models import BusFactor, Commit, IntegrationRisk, Snapshot

_OWNERSHIP_WEIGHT = 50


def tracked_modules(commits: Iterable[Commit]) -> list[str]:
    """Distinct non-trivial commit modules, sorted by name."""
    return sorted({c.module for c in commits if not is_trivial(c.module)})


def co_change_graph(commits: Iterable[Commit]) -> nx.DiGraph:
    """Directed module graph weighted by co-change count.

    An edge ``a -> b`` is added for every file classified as ``b`` in a
    commit whose primary module is ``a``.
    """
    G = nx.DiGraph()
    for c in commits:
        if is_trivial(c.module):
            continue
        G.add_node(c.module)
        for path in c.files:
            other = classify(path)
            if other == c.module or is_trivial(other):
                continue
            if G.has_edge(c.module, other):
                G[c.module][other]["weight"] += 1
            else:
                G.add_edge(c.module, other, weight=1)
    return G


def dependencies(graph: nx.DiGraph, module: str, limit: int = MAX_DEPENDENCIES) -> list[str]:
    """Strongest co-change neighbours of ``module``, capitalized."""
    if module not in graph:
        return []
    ranked = sorted(
        graph.out_edges(module, data="weight"),
        key=lambda edge: (-edge[2], edge[1]),
    )
    return [capitalize(target) for _, target, _ in ranked[:limit]]


def integration_status(risk: int) -> str:
    for threshold, status in INTEGRATION_STATUS_THRESHOLDS:
        if risk > threshold:
            return status
    return "integrated"


def integration_risks(snapshot: Snapshot) -> list[IntegrationRisk]:
    ownership = module_ownership(snapshot.commits)
    graph = co_change_graph(snapshot.commits)
    member_count = max(len(snapshot.members), 1)

    risks: list[IntegrationRisk] = []
    for module in tracked_modules(snapshot.commits):
        owners = len(ownership.get(module, {}))
        shared = INTEGRATION_SHARED_BONUS if owners > 1 else 0
        risk = clamp(
            INTEGRATION_RISK_MIN,
            INTEGRATION_RISK_MAX,
            100 - owners / member_count * _OWNERSHIP_WEIGHT - shared,
        )
        risks.append(IntegrationRisk(
            module=capitalize(module),
            risk=risk,
            status=integration_status(risk),
            dependencies=tuple(dependencies(graph, module)),
        ))
    return risks


def bus_factor(snapshot: Snapshot) -> BusFactor:
    """Ownership percentage of every member on every tracked module."""
    ownership = module_ownership(snapshot.commits)
    modules = tracked_modules(snapshot.commits)
    rows: list[tuple[int, ...]] = []
    for module in modules:
        owners = ownership.get(module, {})
        total = sum(owners.values()) or 1
        rows.append(tuple(
            round_half_away(owners.get(m.id, 0) / total * 100) for m in snapshot.members
        ))
    return BusFactor(
        modules=tuple(capitalize(m) for m in modules),
        contributors=tuple(m.name for m in snapshot.members),
        data=tuple(rows),
    )


def critical_modules(
    bf: BusFactor,
    threshold: int = BUS_FACTOR_CRITICAL_THRESHOLD,
) -> list[dict[str, Any]]:
    """Cells where one contributor owns at least ``threshold`` percent."""
    cells: list[dict[str, Any]] = []
    for module, row in zip(bf.modules, bf.data):
        for contributor, ownership in zip(bf.contributors, row):
            if ownership >= threshold:
                cells.append({
                    "module": module,
                    "contributor": contributor,
                    "ownership": ownership,
                })
    return cells


def critical_module_names(bf: BusFactor, threshold: int = BUS_FACTOR_CRITICAL_THRESHOLD) -> list[str]:
    return [module for module, row in zip(bf.modules, bf.data) if row and max(row) >= threshold]


def risky_modules(risks: Sequence[IntegrationRisk], above: int, limit: int) -> list[str]:
    return [r.module for r in risks if r.risk > above][:limit]
