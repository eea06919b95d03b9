"""Path, message and histogram heuristics shared by sync and derivation."""

from devpulse.heuristics.classifier import (
    MODULE_RULES,
    classify,
    is_trivial,
    modules_for,
    primary_module,
)
from devpulse.heuristics.honesty import HonestyVerdict, analyze_honesty, is_vague
from devpulse.heuristics.roles import dominant_module, infer_role

__all__ = [
    "MODULE_RULES",
    "classify",
    "is_trivial",
    "modules_for",
    "primary_module",
    "HonestyVerdict",
    "analyze_honesty",
    "is_vague",
    "dominant_module",
    "infer_role",
]
