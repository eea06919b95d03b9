"""GitHub REST v3 client: the raw payloads a sync needs, nothing more.

All calls go through ``_get``, which retries transport errors, 5xx and 429
with exponential backoff and surfaces every other 4xx immediately as
:class:`GitHubError`.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any

import httpx

from devpulse.defaults import (
    GITHUB_API_URL,
    GITHUB_COMMIT_PAGES,
    GITHUB_DETAIL_CONCURRENCY,
    GITHUB_DETAIL_LIMIT,
    GITHUB_PAGE_SIZE,
    GITHUB_TIMEOUT_SECONDS,
)
from devpulse.resilience import retry_async

log = logging.getLogger("devpulse.github")

_ACCEPT = "application/vnd.github+json"
_API_VERSION = "2022-11-28"
_USER_AGENT = "DevPulse/1.0"
_UNREACHABLE = 502


class GitHubError(Exception):
    """A GitHub call that failed with an HTTP status (502 when unreachable)."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message

    @property
    def retryable(self) -> bool:
        return self.status >= 500 or self.status == 429

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "status": self.status}


@dataclass(frozen=True)
class RepoRef:
    owner: str
    repo: str
    token: str = field(default="", repr=False)
    api_url: str = GITHUB_API_URL

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    @property
    def base_url(self) -> str:
        return f"{self.api_url.rstrip('/')}/repos/{self.owner}/{self.repo}"

    def headers(self) -> dict[str, str]:
        headers = {
            "Accept": _ACCEPT,
            "User-Agent": _USER_AGENT,
            "X-GitHub-Api-Version": _API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


@dataclass(frozen=True)
class RawRepository:
    """Unprocessed payloads fetched for one repository."""

    repo: dict[str, Any]
    commits: list[dict[str, Any]]
    details: dict[str, dict[str, Any]]
    branches: list[dict[str, Any]]
    pulls: list[dict[str, Any]]
    contributors: list[dict[str, Any]]


@asynccontextmanager
async def _ensure_client(client: httpx.AsyncClient | None):
    """Yield *client* as-is, or create a temporary ``AsyncClient``."""
    if client is not None:
        yield client
    else:
        async with httpx.AsyncClient(timeout=GITHUB_TIMEOUT_SECONDS) as c:
            yield c


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"GitHub API {resp.status_code}"


@retry_async(
    exceptions=(GitHubError,),
    should_retry=lambda e: isinstance(e, GitHubError) and e.retryable,
)
async def _get(
    client: httpx.AsyncClient,
    ref: RepoRef,
    path: str = "",
    params: dict[str, Any] | None = None,
) -> Any:
    url = f"{ref.base_url}{path}"
    try:
        resp = await client.get(url, params=params, headers=ref.headers())
    except httpx.TransportError as e:
        raise GitHubError(_UNREACHABLE, f"GitHub unreachable: {e}") from e
    if resp.status_code == 204:
        return []
    if resp.is_error:
        raise GitHubError(resp.status_code, _error_message(resp))
    return resp.json()


async def get_repository(client: httpx.AsyncClient, ref: RepoRef) -> dict[str, Any]:
    return await _get(client, ref)


async def list_commits(
    client: httpx.AsyncClient, ref: RepoRef, max_pages: int = GITHUB_COMMIT_PAGES,
) -> list[dict[str, Any]]:
    """Newest-first commits, ``GITHUB_PAGE_SIZE`` per page, at most ``max_pages`` pages."""
    commits: list[dict[str, Any]] = []
    for page in range(1, max_pages + 1):
        batch = await _get(
            client, ref, "/commits", {"page": page, "per_page": GITHUB_PAGE_SIZE},
        )
        if not batch:
            break
        commits.extend(batch)
        if len(batch) < GITHUB_PAGE_SIZE:
            break
    return commits


async def get_commit_details(
    client: httpx.AsyncClient,
    ref: RepoRef,
    shas: list[str],
    concurrency: int = GITHUB_DETAIL_CONCURRENCY,
) -> dict[str, dict[str, Any]]:
    """Per-commit detail payloads keyed by sha.

    A detail that cannot be fetched is logged and left out; the commit then
    syncs without file information.
    """
    sem = asyncio.Semaphore(concurrency)

    async def one(sha: str) -> dict[str, Any] | None:
        async with sem:
            try:
                return await _get(client, ref, f"/commits/{sha}")
            except GitHubError as e:
                log.warning("Skipping details for commit %s: %s", sha[:7], e.message)
                return None

    results = await asyncio.gather(*(one(sha) for sha in shas))
    return {d["sha"]: d for d in results if d and d.get("sha")}


async def list_branches(client: httpx.AsyncClient, ref: RepoRef) -> list[dict[str, Any]]:
    return await _get(client, ref, "/branches", {"per_page": GITHUB_PAGE_SIZE})


async def list_pulls(
    client: httpx.AsyncClient, ref: RepoRef, state: str = "all",
) -> list[dict[str, Any]]:
    return await _get(client, ref, "/pulls", {"state": state, "per_page": GITHUB_PAGE_SIZE})


async def list_contributors(client: httpx.AsyncClient, ref: RepoRef) -> list[dict[str, Any]]:
    return await _get(client, ref, "/contributors", {"per_page": GITHUB_PAGE_SIZE})


async def fetch_repository(
    ref: RepoRef,
    *,
    commit_pages: int = GITHUB_COMMIT_PAGES,
    detail_limit: int = GITHUB_DETAIL_LIMIT,
    client: httpx.AsyncClient | None = None,
) -> RawRepository:
    """Fetch everything a snapshot is built from.

    Repository, commits, branches, pulls and contributors are fetched
    concurrently; commit details follow for the ``detail_limit`` newest
    commits. Raises :class:`GitHubError` on the first failure.
    """
    async with _ensure_client(client) as c:
        repo, commits, branches, pulls, contributors = await asyncio.gather(
            get_repository(c, ref),
            list_commits(c, ref, commit_pages),
            list_branches(c, ref),
            list_pulls(c, ref),
            list_contributors(c, ref),
        )
        shas = [raw["sha"] for raw in commits[:detail_limit] if raw.get("sha")]
        log.info("Fetching details for %d recent commits of %s", len(shas), ref.full_name)
        details = await get_commit_details(c, ref, shas)
    return RawRepository(
        repo=repo or {},
        commits=list(commits or []),
        details=details,
        branches=list(branches or []),
        pulls=list(pulls or []),
        contributors=list(contributors or []),
    )
