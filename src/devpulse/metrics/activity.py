"""Velocity, contribution and summary badge readings."""

from __future__ import annotations

import math
from collections import Counter
from datetime import datetime
from typing import Any, Sequence

from devpulse._time import day_range, now_utc, round_half_away
from devpulse.lifecycle import pull_request_state
from devpulse.models import Blocker, ContributionStat, Snapshot

_SECONDS_PER_HOUR = 3600
_SECONDS_PER_DAY = 86_400


def compute_velocity(snapshot: Snapshot, now: datetime | None = None) -> list[dict[str, Any]]:
    """Commits per member per UTC day, first commit through today, zeros kept."""
    now = now or now_utc()
    if not snapshot.commits:
        return []

    per_day: Counter[tuple[str, str]] = Counter(
        (c.date.date().isoformat(), snapshot.member_name(c.author)) for c in snapshot.commits
    )
    first_day = min(c.date for c in snapshot.commits).date()
    rows: list[dict[str, Any]] = []
    for day in day_range(first_day, now.date()):
        key = day.isoformat()
        row: dict[str, Any] = {"date": key}
        for m in snapshot.members:
            row[m.name] = per_day.get((key, m.name), 0)
        rows.append(row)
    return rows


def compute_contributions(snapshot: Snapshot, now: datetime | None = None) -> list[ContributionStat]:
    total = max(len(snapshot.commits), 1)
    stats: list[ContributionStat] = []
    for m in snapshot.members:
        mine = snapshot.commits_by(m.id)
        stats.append(ContributionStat(
            name=m.name,
            commits=len(mine),
            additions=sum(c.additions for c in mine),
            deletions=sum(c.deletions for c in mine),
            percentage=round_half_away(len(mine) / total * 100),
        ))
    return stats


def deadline_badge(deadline: datetime | None, now: datetime) -> str | None:
    if deadline is None:
        return None
    remaining = (deadline - now).total_seconds()
    if remaining <= 0:
        return "Overdue"
    days_left = math.ceil(remaining / _SECONDS_PER_DAY)
    if days_left <= 1:
        return f"{math.ceil(remaining / _SECONDS_PER_HOUR)}h left"
    return f"{days_left}d left"


def compute_summary_badges(
    snapshot: Snapshot,
    blockers: Sequence[Blocker] = (),
    now: datetime | None = None,
) -> dict[str, Any]:
    now = now or now_utc()
    stale = sum(1 for pr in snapshot.pull_requests if pull_request_state(pr, now).stagnant)
    return {
        "blockerCount": len(blockers),
        "stalePRs": stale,
        "deadlineBadge": deadline_badge(snapshot.team.deadline, now),
    }
