"""Who is working on what, and who has gone quiet."""

from __future__ import annotations

from datetime import datetime

from devpulse._time import fmt_ago, whole_days_between
from devpulse.defaults import (
    MEMBER_IDLE_DAYS,
    MEMBER_INACTIVE_DAYS,
    NO_ACTIVITY_DAYS,
    UNKNOWN_MODULE,
)
from devpulse.models import (
    ActiveWork,
    BranchStatus,
    GhostingAlert,
    Member,
    Snapshot,
    WorkStatus,
)


def work_status(days_since: int) -> WorkStatus:
    if days_since > MEMBER_INACTIVE_DAYS:
        return WorkStatus.INACTIVE
    if days_since > MEMBER_IDLE_DAYS:
        return WorkStatus.IDLE
    return WorkStatus.ACTIVE


def _member_branch(snapshot: Snapshot, member: Member) -> str:
    for b in snapshot.branches:
        if b.author == member.id and b.status == BranchStatus.ACTIVE:
            return b.name
    return snapshot.default_branch


def member_work(snapshot: Snapshot, member: Member, now: datetime) -> ActiveWork:
    latest = snapshot.latest_commit_by(member.id)
    if latest is None:
        return ActiveWork(
            member_id=member.id,
            name=member.name,
            status=WorkStatus.INACTIVE,
            current_task="No recent activity",
            module=UNKNOWN_MODULE,
            last_commit="never",
            branch=_member_branch(snapshot, member),
            days_since=NO_ACTIVITY_DAYS,
            warning="No commits recorded",
        )

    days = whole_days_between(latest.date, now)
    status = work_status(days)
    return ActiveWork(
        member_id=member.id,
        name=member.name,
        status=status,
        current_task=latest.message or "No recent activity",
        module=latest.module,
        last_commit=fmt_ago(days),
        branch=_member_branch(snapshot, member),
        days_since=days,
        warning=f"No activity in {days} days" if status == WorkStatus.INACTIVE else None,
    )


def active_work(snapshot: Snapshot, now: datetime) -> list[ActiveWork]:
    return [member_work(snapshot, m, now) for m in snapshot.members]


def ghosting_alerts(snapshot: Snapshot, now: datetime) -> list[GhostingAlert]:
    """One alert per member whose latest commit is more than five days old."""
    alerts: list[GhostingAlert] = []
    for m in snapshot.members:
        latest = snapshot.latest_commit_by(m.id)
        if latest is None:
            continue
        days = whole_days_between(latest.date, now)
        if days <= MEMBER_INACTIVE_DAYS:
            continue
        alerts.append(GhostingAlert(
            member_id=m.id,
            name=m.name,
            last_commit=latest.date,
            last_message=latest.message,
            days_since_commit=days,
        ))
    return alerts
