"""Commit honesty report for flagged commits."""

from __future__ import annotations

from devpulse.heuristics import analyze_honesty
from devpulse.models import Commit, CommitHonestyEntry, Snapshot

_LISTED_FILES = 3


def actual_changes(commit: Commit) -> str:
    if not commit.files:
        return "File details not available for older commits"
    listed = ", ".join(commit.files[:_LISTED_FILES])
    more = "..." if len(commit.files) > _LISTED_FILES else ""
    return f"Modified {len(commit.files)} file(s): {listed}{more}"


def commit_honesty_report(snapshot: Snapshot) -> list[CommitHonestyEntry]:
    entries: list[CommitHonestyEntry] = []
    for c in snapshot.commits:
        if not c.flagged:
            continue
        verdict = analyze_honesty(c.message, c.files)
        entries.append(CommitHonestyEntry(
            commit_id=c.id,
            message=c.message,
            actual_changes=actual_changes(c),
            match_score=verdict.match_score,
            suggestion=c.honesty_suggestion or verdict.suggestion,
            verdict=verdict.verdict,
        ))
    return entries
