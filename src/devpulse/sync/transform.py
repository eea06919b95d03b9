"""Turn raw GitHub payloads into a :class:`Snapshot`.

Contributors become members ``u1..uN`` in contributor order. Authors that
cannot be matched to a member (no login, or a login beyond the member cap)
are attributed to ``UNKNOWN_MEMBER_ID`` rather than to an arbitrary member.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Mapping

from devpulse._time import now_utc
from devpulse.defaults import (
    DEADLINE_HOURS,
    DEFAULT_BRANCH,
    GITHUB_MAX_MEMBERS,
    MEMBER_COLORS,
    UNKNOWN_MEMBER_ID,
)
from devpulse.derive.state import module_histograms
from devpulse.heuristics import analyze_honesty, infer_role, primary_module
from devpulse.lifecycle import branch_status, pull_request_state
from devpulse.models import (
    Branch,
    Commit,
    Member,
    PRStatus,
    PullRequest,
    Snapshot,
    Team,
)
from devpulse.sync.client import RawRepository
from devpulse.validation import parse_optional_timestamp, parse_timestamp

_NO_DESCRIPTION = "No description provided"


def _login(user: Mapping[str, Any] | None) -> str:
    return str((user or {}).get("login") or "").lower()


def build_members(
    contributors: list[dict[str, Any]], max_members: int = GITHUB_MAX_MEMBERS,
) -> tuple[list[Member], dict[str, str]]:
    """Members for the first ``max_members`` contributors, plus login -> id."""
    members: list[Member] = []
    login_to_id: dict[str, str] = {}
    for i, contributor in enumerate(contributors[:max_members]):
        login = str(contributor.get("login") or "")
        if not login:
            continue
        member_id = f"u{len(members) + 1}"
        login_to_id[login.lower()] = member_id
        members.append(Member(
            id=member_id,
            name=login,
            avatar=login[0].upper(),
            color=MEMBER_COLORS[i % len(MEMBER_COLORS)],
        ))
    return members, login_to_id


def _commit_author(raw: Mapping[str, Any], login_to_id: Mapping[str, str]) -> str:
    login = _login(raw.get("author")) or str(
        ((raw.get("commit") or {}).get("author") or {}).get("name") or ""
    ).lower()
    return login_to_id.get(login, UNKNOWN_MEMBER_ID)


def _commit_date(raw: Mapping[str, Any]) -> datetime:
    author = (raw.get("commit") or {}).get("author") or {}
    return parse_timestamp(author.get("date"), "commit", "date")


def transform_commit(
    raw: Mapping[str, Any],
    index: int,
    detail: Mapping[str, Any] | None,
    login_to_id: Mapping[str, str],
) -> Commit:
    files = tuple(
        str(f["filename"]) for f in (detail or {}).get("files") or [] if f.get("filename")
    )
    stats = (detail or {}).get("stats") or {}
    message = str((raw.get("commit") or {}).get("message") or "").split("\n")[0]
    verdict = analyze_honesty(message, files)
    return Commit(
        id=f"c{index}",
        author=_commit_author(raw, login_to_id),
        message=message,
        date=_commit_date(raw),
        files=files,
        additions=int(stats.get("additions") or 0),
        deletions=int(stats.get("deletions") or 0),
        module=primary_module(files),
        flagged=verdict.misleading,
        honesty_suggestion=verdict.suggestion if verdict.misleading else None,
    )


def transform_branches(
    raw_branches: list[dict[str, Any]],
    raw_commits: list[dict[str, Any]],
    merged_heads: set[str],
    login_to_id: Mapping[str, str],
    now: datetime,
) -> list[Branch]:
    """Branches dated by their head commit; heads outside the fetched window count as now."""
    dates = {raw["sha"]: _commit_date(raw) for raw in raw_commits if raw.get("sha")}
    authors = {raw["sha"]: _login(raw.get("author")) for raw in raw_commits if raw.get("sha")}
    branches = []
    for raw in raw_branches:
        name = str(raw.get("name") or "")
        sha = (raw.get("commit") or {}).get("sha", "")
        last_commit = dates.get(sha, now)
        status, stale_days = branch_status(name, last_commit, merged_heads, now)
        branches.append(Branch(
            name=name,
            last_commit=last_commit,
            author=login_to_id.get(authors.get(sha, ""), UNKNOWN_MEMBER_ID),
            status=status,
            stale_days=stale_days,
        ))
    return branches


def transform_pull_request(
    raw: Mapping[str, Any], index: int, login_to_id: Mapping[str, str], now: datetime,
) -> PullRequest:
    merged_at = parse_optional_timestamp(raw.get("merged_at"), "pull_request", "merged_at")
    if merged_at is not None:
        status = PRStatus.MERGED
    elif raw.get("state") == PRStatus.CLOSED.value:
        status = PRStatus.CLOSED
    else:
        status = PRStatus.OPEN
    reviewers = tuple(
        login_to_id[_login(r)]
        for r in raw.get("requested_reviewers") or []
        if _login(r) in login_to_id
    )
    pr = PullRequest(
        id=f"pr{index}",
        title=str(raw.get("title") or ""),
        author=login_to_id.get(_login(raw.get("user")), UNKNOWN_MEMBER_ID),
        branch=str((raw.get("head") or {}).get("ref") or ""),
        status=status,
        created_at=parse_timestamp(raw.get("created_at"), "pull_request", "created_at"),
        merged_at=merged_at,
        reviewers=reviewers,
        comments=int(raw.get("comments") or 0) + int(raw.get("review_comments") or 0),
    )
    return pull_request_state(pr, now)


def build_snapshot(
    raw: RawRepository,
    now: datetime | None = None,
    *,
    max_members: int = GITHUB_MAX_MEMBERS,
    deadline_hours: int = DEADLINE_HOURS,
) -> Snapshot:
    now = now or now_utc()
    members, login_to_id = build_members(raw.contributors, max_members)

    commits = [
        transform_commit(c, i, raw.details.get(c.get("sha", "")), login_to_id)
        for i, c in enumerate(raw.commits, start=1)
    ]
    histograms = module_histograms(commits)
    members = [
        Member(m.id, m.name, m.avatar, infer_role(histograms.get(m.id, {})), m.color)
        for m in members
    ]

    merged_heads = {
        str((p.get("head") or {}).get("ref") or "")
        for p in raw.pulls if p.get("merged_at")
    }
    branches = transform_branches(raw.branches, raw.commits, merged_heads, login_to_id, now)
    pull_requests = [
        transform_pull_request(p, i, login_to_id, now)
        for i, p in enumerate(raw.pulls, start=1)
    ]

    team = Team(
        name=str(raw.repo.get("name") or ""),
        repo=str(raw.repo.get("full_name") or ""),
        description=str(raw.repo.get("description") or _NO_DESCRIPTION),
        created_at=parse_optional_timestamp(raw.repo.get("created_at"), "team", "created_at"),
        deadline=now + timedelta(hours=deadline_hours),
        members=tuple(members),
    )
    return Snapshot(
        commits=tuple(commits),
        pull_requests=tuple(pull_requests),
        branches=tuple(branches),
        team=team,
        default_branch=str(raw.repo.get("default_branch") or DEFAULT_BRANCH),
    )
