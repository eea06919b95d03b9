"""Delivery, integration and stability risk.

Every risk is implemented once, parameterized by an ``as_of`` cutoff: only
records visible at that instant are considered. The live readings use
``as_of = now``; the historical trend uses the end of each past day, so a
trend point never sees data from after its own day. Branch state is
recomputed at the cutoff.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timedelta

from devpulse._time import clamp, days_between, now_utc
from devpulse.defaults import (
    BRANCH_DIVERGED_BEHIND,
    CROSS_MODULE_CAP,
    INACTIVITY_GRACE_DAYS,
    LARGE_COMMIT_FILES,
    MEMBER_INACTIVE_DAYS,
    NEAR_DEADLINE_HOURS,
    PR_STAGNANT_DAYS,
    SINGLE_OWNER_SHARE,
    W_CROSS_MODULE,
    W_DIVERGED_BRANCH,
    W_INACTIVE_MEMBER,
    W_LARGE_RATIO,
    W_NEAR_DEADLINE,
    W_REVERT,
    W_SINGLE_OWNER,
    W_STAGNANT_PR,
    W_UNREVIEWED_PR,
    W_VAGUE_RATIO,
)
from devpulse.heuristics import is_trivial, modules_for
from devpulse.lifecycle import branch_status
from devpulse.models import (
    BranchStatus,
    Commit,
    PRStatus,
    PullRequest,
    RiskReading,
    Snapshot,
)


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------

def visible_commits(snapshot: Snapshot, as_of: datetime) -> list[Commit]:
    return [c for c in snapshot.commits if c.date <= as_of]


def open_pull_requests(snapshot: Snapshot, as_of: datetime) -> list[PullRequest]:
    """PRs created by ``as_of`` and not merged or closed by then.

    A PR with a merge date counts as open until that date. Without one only
    the ``open`` status counts.
    """
    result: list[PullRequest] = []
    for pr in snapshot.pull_requests:
        if pr.created_at > as_of:
            continue
        if pr.merged_at is not None:
            if pr.merged_at <= as_of:
                continue
        elif pr.status != PRStatus.OPEN:
            continue
        result.append(pr)
    return result


def merged_heads(snapshot: Snapshot, as_of: datetime) -> set[str]:
    """Branches merged by ``as_of``.

    A branch stored as merged with no dated merge behind it counts as merged
    at every instant.
    """
    dated = {pr.branch for pr in snapshot.pull_requests if pr.merged_at is not None}
    heads = {
        pr.branch for pr in snapshot.pull_requests
        if pr.merged_at is not None and pr.merged_at <= as_of
    }
    heads.update(
        b.name for b in snapshot.branches
        if b.status == BranchStatus.MERGED and b.name not in dated
    )
    return heads


def _is_stagnant(pr: PullRequest, as_of: datetime) -> bool:
    return days_between(pr.created_at, as_of) > PR_STAGNANT_DAYS and pr.comments == 0


def _inactive_members(snapshot: Snapshot, commits: list[Commit], as_of: datetime) -> int:
    latest: dict[str, datetime] = {}
    for c in commits:
        if c.author not in latest or c.date > latest[c.author]:
            latest[c.author] = c.date

    if commits:
        first = min(c.date for c in commits)
        history_started = days_between(first, as_of) > INACTIVITY_GRACE_DAYS
    else:
        history_started = True

    count = 0
    for m in snapshot.members:
        last = latest.get(m.id)
        if last is None:
            if history_started:
                count += 1
        elif days_between(last, as_of) > MEMBER_INACTIVE_DAYS:
            count += 1
    return count


# ---------------------------------------------------------------------------
# Risks
# ---------------------------------------------------------------------------

def delivery_risk(snapshot: Snapshot, as_of: datetime) -> RiskReading:
    """Stagnant PRs, inactive contributors and unreviewed PRs."""
    commits = visible_commits(snapshot, as_of)
    open_prs = open_pull_requests(snapshot, as_of)
    stagnant = sum(1 for pr in open_prs if _is_stagnant(pr, as_of))
    inactive = _inactive_members(snapshot, commits, as_of)
    unreviewed = sum(1 for pr in open_prs if not pr.reviewers)

    score = clamp(
        0, 100,
        stagnant * W_STAGNANT_PR + inactive * W_INACTIVE_MEMBER + unreviewed * W_UNREVIEWED_PR,
    )
    return RiskReading(score=score, factors={
        "stagnantPRs": stagnant,
        "inactiveContributors": inactive,
        "unreviewedPRs": unreviewed,
    })


def integration_risk(snapshot: Snapshot, as_of: datetime) -> RiskReading:
    """Diverged branches, single-owner modules and cross-module commits."""
    commits = visible_commits(snapshot, as_of)

    merged = merged_heads(snapshot, as_of)
    diverged = 0
    for b in snapshot.branches:
        if b.name == snapshot.default_branch or b.last_commit > as_of:
            continue
        status, _ = branch_status(b.name, b.last_commit, merged, as_of)
        if status == BranchStatus.MERGED:
            continue
        if b.behind > BRANCH_DIVERGED_BEHIND or status in (
            BranchStatus.ABANDONED, BranchStatus.STALE,
        ):
            diverged += 1

    ownership: dict[str, Counter[str]] = defaultdict(Counter)
    for c in commits:
        if not is_trivial(c.module):
            ownership[c.module][c.author] += 1
    single_owner = sum(
        1 for owners in ownership.values()
        if max(owners.values()) / sum(owners.values()) > SINGLE_OWNER_SHARE
    )

    cross = sum(1 for c in commits if len(c.files) > 1 and len(modules_for(c.files)) > 1)

    total_modules = max(len(ownership), 1)
    score = clamp(
        0, 100,
        diverged * W_DIVERGED_BRANCH
        + single_owner / total_modules * W_SINGLE_OWNER
        + min(cross * W_CROSS_MODULE, CROSS_MODULE_CAP),
    )
    return RiskReading(score=score, factors={
        "divergedBranches": diverged,
        "singleOwnerModules": single_owner,
        "totalModules": len(ownership),
        "crossModuleCommits": cross,
    })


def stability_risk(snapshot: Snapshot, as_of: datetime) -> RiskReading:
    """Vague messages, large commits, reverts and last-minute commits."""
    commits = visible_commits(snapshot, as_of)
    total = max(len(commits), 1)
    deadline = snapshot.team.deadline

    large = sum(1 for c in commits if len(c.files) > LARGE_COMMIT_FILES)
    reverts = sum(1 for c in commits if c.message.lower().startswith("revert"))
    vague = sum(1 for c in commits if c.flagged)
    near_deadline = 0
    if deadline is not None:
        window = timedelta(hours=NEAR_DEADLINE_HOURS)
        near_deadline = sum(
            1 for c in commits if timedelta(0) < deadline - c.date < window
        )

    score = clamp(
        0, 100,
        vague / total * W_VAGUE_RATIO
        + large / total * W_LARGE_RATIO
        + reverts * W_REVERT
        + near_deadline * W_NEAR_DEADLINE,
    )
    return RiskReading(score=score, factors={
        "largeCommits": large,
        "revertCommits": reverts,
        "vagueCommits": vague,
        "nearDeadlineCommits": near_deadline,
        "totalCommits": len(commits),
    })


# ---------------------------------------------------------------------------
# Live entry points
# ---------------------------------------------------------------------------

def compute_delivery_risk(snapshot: Snapshot, now: datetime | None = None) -> RiskReading:
    return delivery_risk(snapshot, now or now_utc())


def compute_integration_risk(snapshot: Snapshot, now: datetime | None = None) -> RiskReading:
    return integration_risk(snapshot, now or now_utc())


def compute_stability_risk(snapshot: Snapshot, now: datetime | None = None) -> RiskReading:
    return stability_risk(snapshot, now or now_utc())
