"""Pull request and branch state recomputed against a reference instant."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Collection

from devpulse._time import whole_days_between
from devpulse.defaults import (
    BRANCH_ABANDONED_DAYS,
    BRANCH_STALE_DAYS,
    PR_STAGNANT_DAYS,
)
from devpulse.models import BranchStatus, PullRequest


def pull_request_state(pr: PullRequest, now: datetime) -> PullRequest:
    """Return ``pr`` with ``age_days``/``stagnant`` recomputed for ``now``.

    Only open PRs carry an age; a PR is stagnant when it is open, older than
    three whole days and has no comments.
    """
    if not pr.is_open:
        return replace(pr, age_days=None, stagnant=False)
    age = whole_days_between(pr.created_at, now)
    stagnant = age > PR_STAGNANT_DAYS and pr.comments == 0
    return replace(pr, age_days=age, stagnant=stagnant)


def branch_status(
    name: str,
    last_commit: datetime,
    merged_heads: Collection[str],
    now: datetime,
) -> tuple[BranchStatus, int | None]:
    """Classify a branch and return ``(status, stale_days)``."""
    if name in merged_heads:
        return BranchStatus.MERGED, None
    age = whole_days_between(last_commit, now)
    if age > BRANCH_ABANDONED_DAYS:
        return BranchStatus.ABANDONED, age
    if age > BRANCH_STALE_DAYS:
        return BranchStatus.STALE, age
    return BranchStatus.ACTIVE, None
