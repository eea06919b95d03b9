"""File path -> module tag classification.

Rules are evaluated in order and the first match wins, so a path such as
``src/controllers/auth.controller.js`` is tagged ``auth`` even though it
also matches the frontend prefix rule further down.
"""

from __future__ import annotations

import re
from typing import Iterable, Pattern

from devpulse.defaults import DEFAULT_MODULE, TRIVIAL_MODULES

MODULE_RULES: tuple[tuple[Pattern[str], str], ...] = (
    (re.compile(r"auth|login|signup|jwt|token|session", re.IGNORECASE), "auth"),
    (re.compile(r"docker|\.github|ci|cd|deploy|railway|vercel|netlify", re.IGNORECASE), "devops"),
    (re.compile(r"models?/|schema|migrat|db\.|database|prisma|mongoose", re.IGNORECASE), "database"),
    (re.compile(r"socket|chat|messag|ws\b", re.IGNORECASE), "messaging"),
    (re.compile(r"search", re.IGNORECASE), "search"),
    (re.compile(r"notif", re.IGNORECASE), "notifications"),
    (re.compile(r"test|spec|__test", re.IGNORECASE), "testing"),
    (re.compile(r"^(?:src|client|app|pages|components)/", re.IGNORECASE), "frontend"),
    (re.compile(r"^(?:server|api|backend|routes|controllers)/", re.IGNORECASE), "backend"),
)


def normalize_path(path: str | None) -> str:
    return (path or "").lower().replace("\\", "/")


def classify(path: str | None) -> str:
    """Return the module tag for ``path``; unmatched paths are ``setup``."""
    normalized = normalize_path(path)
    for pattern, tag in MODULE_RULES:
        if pattern.search(normalized):
            return tag
    return DEFAULT_MODULE


def primary_module(files: Iterable[str]) -> str:
    """Module of the first touched file, ``setup`` when nothing was touched."""
    for path in files:
        return classify(path)
    return DEFAULT_MODULE


def modules_for(files: Iterable[str]) -> set[str]:
    """Distinct non-trivial module tags touched by ``files``."""
    return {tag for tag in (classify(f) for f in files) if tag not in TRIVIAL_MODULES}


def is_trivial(module: str | None) -> bool:
    return not module or module in TRIVIAL_MODULES
