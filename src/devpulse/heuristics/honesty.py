"""Commit message honesty: how well a message describes its change."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, Sequence

from devpulse._time import clamp

MISLEADING = "misleading"
HONEST = "honest"

_VAGUE_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"fix(ed)?",
        r"done",
        r"wip",
        r"update[ds]?",
        r"change[ds]?",
        r"stuff",
        r"misc",
        r"cleanup",
        r"\.",
        r"initial commit",
        r"first commit",
        r"save",
    )
)
_CONVENTIONAL_PREFIX = re.compile(r"^(feat|fix|chore|docs|style|refactor|test|ci)\b", re.IGNORECASE)
_MIN_DESCRIPTIVE_LENGTH = 8
_SUGGESTED_FILES = 2

# Vague scoring
_VAGUE_BASE = 5
_VAGUE_LENGTH_CAP = 15
_VAGUE_FILES_CAP = 10
_VAGUE_FILE_WEIGHT = 2
_VAGUE_RANGE = (5, 30)

# Descriptive scoring
_HONEST_BASE = 70
_WORDS_CAP = 10
_WORDS_FREE = 3
_FILE_MENTION_BONUS = 8
_PREFIX_BONUS = 5
_HONEST_RANGE = (65, 98)


@dataclass(frozen=True)
class HonestyVerdict:
    match_score: int
    verdict: str
    suggestion: str | None = None

    @property
    def misleading(self) -> bool:
        return self.verdict == MISLEADING

    def to_dict(self) -> dict[str, Any]:
        return {
            "matchScore": self.match_score,
            "verdict": self.verdict,
            "suggestion": self.suggestion,
        }


def is_vague(message: str) -> bool:
    trimmed = message.strip()
    if len(trimmed) < _MIN_DESCRIPTIVE_LENGTH:
        return True
    return any(p.fullmatch(trimmed) for p in _VAGUE_PATTERNS)


def _file_stem(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).name.split(".")[0].lower()


def _mentions_file(message: str, files: Sequence[str]) -> bool:
    lowered = message.lower()
    return any(stem and stem in lowered for stem in (_file_stem(f) for f in files))


def analyze_honesty(message: str, files: Sequence[str] = ()) -> HonestyVerdict:
    """Score a commit message against the files it touched.

    Vague messages land in [5, 30] and are ``misleading`` with a suggestion
    naming up to two touched files. Descriptive messages land in [65, 98].
    """
    trimmed = (message or "").strip()
    files = list(files)

    if is_vague(trimmed):
        length_factor = clamp(0, _VAGUE_LENGTH_CAP, len(trimmed))
        file_factor = clamp(0, _VAGUE_FILES_CAP, len(files) * _VAGUE_FILE_WEIGHT)
        score = clamp(*_VAGUE_RANGE, _VAGUE_BASE + length_factor + file_factor)
        target = ", ".join(files[:_SUGGESTED_FILES]) or "the modified files"
        return HonestyVerdict(
            match_score=score,
            verdict=MISLEADING,
            suggestion=f"Describe what changed in {target}",
        )

    words = len(trimmed.split())
    score = _HONEST_BASE + clamp(0, _WORDS_CAP, words - _WORDS_FREE)
    if _mentions_file(trimmed, files):
        score += _FILE_MENTION_BONUS
    if _CONVENTIONAL_PREFIX.match(trimmed):
        score += _PREFIX_BONUS
    return HonestyVerdict(match_score=clamp(*_HONEST_RANGE, score), verdict=HONEST)
