"""Role inference from a member's per-module commit histogram."""

from __future__ import annotations

from typing import Mapping

from devpulse.defaults import DEFAULT_ROLE

FULL_STACK_ROLE = "Full Stack Developer"
_FULL_STACK_MAX_SHARE = 0.4
_FULL_STACK_MIN_MODULES = 3

ROLE_LABELS: dict[str, str] = {
    "frontend": "Frontend Developer",
    "backend": "Backend Developer",
    "database": "Database Engineer",
    "devops": "DevOps Engineer",
    "auth": "Security Engineer",
    "testing": "QA Engineer",
    "messaging": "Realtime Developer",
    "notifications": "Backend Developer",
}


def dominant_module(counts: Mapping[str, int]) -> str | None:
    """Module with the most commits; ties go to the alphabetically first name."""
    if not counts:
        return None
    return min(counts, key=lambda module: (-counts[module], module))


def infer_role(counts: Mapping[str, int]) -> str:
    dominant = dominant_module(counts)
    if dominant is None:
        return DEFAULT_ROLE
    total = sum(counts.values())
    share = counts[dominant] / total if total else 0.0
    if share < _FULL_STACK_MAX_SHARE and len(counts) >= _FULL_STACK_MIN_MODULES:
        return FULL_STACK_ROLE
    return ROLE_LABELS.get(dominant, DEFAULT_ROLE)
