"""Histograms shared by the derived-entity builders."""

from __future__ import annotations

from collections import Counter, defaultdict
from typing import Iterable

from devpulse.models import Commit


def module_histograms(commits: Iterable[Commit]) -> dict[str, Counter[str]]:
    """member id -> Counter of commit modules."""
    histograms: dict[str, Counter[str]] = defaultdict(Counter)
    for c in commits:
        histograms[c.author][c.module] += 1
    return dict(histograms)


def module_ownership(commits: Iterable[Commit]) -> dict[str, Counter[str]]:
    """module -> Counter of commit authors."""
    ownership: dict[str, Counter[str]] = defaultdict(Counter)
    for c in commits:
        ownership[c.module][c.author] += 1
    return dict(ownership)


def capitalize(module: str) -> str:
    return module[:1].upper() + module[1:]
