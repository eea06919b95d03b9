"""Blocker detection.

Blockers are emitted in a fixed priority order: stagnant PRs, inactive
members, abandoned branches, then open PRs nobody has been asked to review.
Ids are assigned sequentially (``b1``, ``b2``, ...) in that order.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from devpulse.defaults import PR_CRITICAL_AGE_DAYS, UNKNOWN_MODULE
from devpulse.derive.state import capitalize, module_histograms
from devpulse.models import (
    ActiveWork,
    Blocker,
    BlockerType,
    BranchStatus,
    PullRequest,
    Severity,
    Snapshot,
    WorkStatus,
)


def stale_pr_severity(age_days: int) -> Severity:
    return Severity.CRITICAL if age_days > PR_CRITICAL_AGE_DAYS else Severity.HIGH


def build_blockers(
    snapshot: Snapshot,
    pull_requests: Sequence[PullRequest],
    work: Sequence[ActiveWork],
    now: datetime,
) -> list[Blocker]:
    """Build the blocker list.

    ``pull_requests`` must already carry recomputed state
    (see :func:`devpulse.lifecycle.pull_request_state`).
    """
    histograms = module_histograms(snapshot.commits)
    drafts: list[tuple[Severity, BlockerType, str, str, tuple[str, ...], str]] = []

    for pr in pull_requests:
        if not pr.stagnant:
            continue
        age = pr.age_days or 0
        latest = snapshot.latest_commit_by(pr.author)
        module = latest.module if latest else UNKNOWN_MODULE
        drafts.append((
            stale_pr_severity(age),
            BlockerType.STALE_PR,
            f'PR "{pr.title}" open for {age} days with no review',
            f"This PR has {pr.comments} comments and needs attention.",
            (capitalize(module),),
            pr.author,
        ))

    for w in work:
        if w.status != WorkStatus.INACTIVE or w.member_id not in histograms:
            continue
        drafts.append((
            Severity.CRITICAL,
            BlockerType.INACTIVE_MEMBER,
            f"{w.name} has no commits in {w.days_since} days",
            f"Team may need to redistribute {w.name}'s work.",
            tuple(capitalize(m) for m in sorted(histograms[w.member_id])),
            w.member_id,
        ))

    for b in snapshot.branches:
        if b.status != BranchStatus.ABANDONED:
            continue
        drafts.append((
            Severity.MEDIUM,
            BlockerType.ABANDONED_BRANCH,
            f'Branch "{b.name}" abandoned for {b.stale_days or 0} days',
            "Consider merging or deleting this branch.",
            (),
            b.author,
        ))

    for pr in pull_requests:
        if not pr.is_open or pr.reviewers or pr.stagnant:
            continue
        drafts.append((
            Severity.LOW,
            BlockerType.UNREVIEWED_PR,
            f'PR "{pr.title}" has no reviewer assigned',
            f"Open for {pr.age_days or 0} days, assign a reviewer.",
            (),
            pr.author,
        ))

    return [
        Blocker(
            id=f"b{i}",
            severity=severity,
            type=kind,
            title=title,
            description=description,
            affected_modules=modules,
            owner=owner,
            detected_at=now,
        )
        for i, (severity, kind, title, description, modules, owner) in enumerate(drafts, start=1)
    ]
