"""Core data types for DevPulse.

Snapshot entities (members, commits, pull requests, branches, team) are
parsed from dashboard JSON with ``from_dict`` and validated on the way in.
Derived entities are produced fresh by every derivation pass. Attributes are
snake_case; ``to_dict`` emits the dashboard's camelCase wire keys.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from devpulse._time import iso
from devpulse.defaults import DEFAULT_BRANCH, DEFAULT_ROLE, MEMBER_COLORS
from devpulse.heuristics import analyze_honesty, primary_module
from devpulse.validation import (
    parse_optional_timestamp,
    parse_timestamp,
    require,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class PRStatus(str, Enum):
    OPEN = "open"
    MERGED = "merged"
    CLOSED = "closed"


class BranchStatus(str, Enum):
    ACTIVE = "active"
    MERGED = "merged"
    STALE = "stale"
    ABANDONED = "abandoned"


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class BlockerType(str, Enum):
    STALE_PR = "stale_pr"
    INACTIVE_MEMBER = "inactive_member"
    ABANDONED_BRANCH = "abandoned_branch"
    UNREVIEWED_PR = "unreviewed_pr"


class WorkStatus(str, Enum):
    ACTIVE = "active"
    IDLE = "idle"
    INACTIVE = "inactive"


def _list(value: Any) -> list[Any]:
    return list(value) if value else []


def _int(value: Any) -> int:
    return int(value) if value else 0


# ---------------------------------------------------------------------------
# Snapshot entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Member:
    id: str
    name: str
    avatar: str = ""
    role: str = DEFAULT_ROLE
    color: str = MEMBER_COLORS[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "avatar": self.avatar,
            "role": self.role,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Member:
        member_id = str(require(d, "member", "id"))
        name = str(d.get("name") or member_id)
        return cls(
            id=member_id,
            name=name,
            avatar=d.get("avatar") or name[:1].upper(),
            role=d.get("role") or DEFAULT_ROLE,
            color=d.get("color") or MEMBER_COLORS[0],
        )


@dataclass(frozen=True)
class Commit:
    id: str
    author: str
    message: str
    date: datetime
    files: tuple[str, ...] = ()
    additions: int = 0
    deletions: int = 0
    module: str = "setup"
    flagged: bool = False
    honesty_suggestion: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "author": self.author,
            "message": self.message,
            "date": iso(self.date),
            "files": list(self.files),
            "additions": self.additions,
            "deletions": self.deletions,
            "module": self.module,
            "flagged": self.flagged,
        }
        if self.honesty_suggestion is not None:
            d["honestySuggestion"] = self.honesty_suggestion
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Commit:
        """Parse a commit; ``module`` and ``flagged`` are derived when absent."""
        files = tuple(str(f) for f in _list(d.get("files")))
        message = str(d.get("message") or "").split("\n")[0]
        flagged = d.get("flagged")
        suggestion = d.get("honestySuggestion", d.get("honesty_suggestion"))
        if flagged is None:
            verdict = analyze_honesty(message, files)
            flagged = verdict.misleading
            suggestion = suggestion or verdict.suggestion
        return cls(
            id=str(require(d, "commit", "id")),
            author=str(require(d, "commit", "author")),
            message=message,
            date=parse_timestamp(d.get("date"), "commit", "date"),
            files=files,
            additions=_int(d.get("additions")),
            deletions=_int(d.get("deletions")),
            module=d.get("module") or primary_module(files),
            flagged=bool(flagged),
            honesty_suggestion=suggestion if flagged else None,
        )


@dataclass(frozen=True)
class PullRequest:
    id: str
    title: str
    author: str
    branch: str
    status: PRStatus
    created_at: datetime
    merged_at: datetime | None = None
    reviewers: tuple[str, ...] = ()
    comments: int = 0
    age_days: int | None = None
    stagnant: bool = False

    @property
    def is_open(self) -> bool:
        return self.status == PRStatus.OPEN and self.merged_at is None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "branch": self.branch,
            "status": self.status.value,
            "createdAt": iso(self.created_at),
            "mergedAt": iso(self.merged_at),
            "reviewers": list(self.reviewers),
            "comments": self.comments,
        }
        if self.age_days is not None:
            d["ageDays"] = self.age_days
        if self.stagnant:
            d["stagnant"] = True
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> PullRequest:
        merged_at = parse_optional_timestamp(
            d.get("mergedAt", d.get("merged_at")), "pull_request", "mergedAt",
        )
        status = d.get("status") or (PRStatus.MERGED.value if merged_at else PRStatus.OPEN.value)
        age = d.get("ageDays", d.get("age_days"))
        return cls(
            id=str(require(d, "pull_request", "id")),
            title=str(d.get("title") or ""),
            author=str(require(d, "pull_request", "author")),
            branch=str(d.get("branch") or ""),
            status=PRStatus(status),
            created_at=parse_timestamp(
                d.get("createdAt", d.get("created_at")), "pull_request", "createdAt",
            ),
            merged_at=merged_at,
            reviewers=tuple(str(r) for r in _list(d.get("reviewers"))),
            comments=_int(d.get("comments")),
            age_days=int(age) if age is not None else None,
            stagnant=bool(d.get("stagnant", False)),
        )


@dataclass(frozen=True)
class Branch:
    name: str
    last_commit: datetime
    author: str
    status: BranchStatus = BranchStatus.ACTIVE
    ahead: int = 0
    behind: int = 0
    stale_days: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "name": self.name,
            "lastCommit": iso(self.last_commit),
            "author": self.author,
            "status": self.status.value,
            "ahead": self.ahead,
            "behind": self.behind,
        }
        if self.stale_days is not None:
            d["staleDays"] = self.stale_days
        return d

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Branch:
        stale = d.get("staleDays", d.get("stale_days"))
        return cls(
            name=str(require(d, "branch", "name")),
            last_commit=parse_timestamp(
                d.get("lastCommit", d.get("last_commit")), "branch", "lastCommit",
            ),
            author=str(d.get("author") or ""),
            status=BranchStatus(d.get("status") or BranchStatus.ACTIVE.value),
            ahead=_int(d.get("ahead")),
            behind=_int(d.get("behind")),
            stale_days=int(stale) if stale is not None else None,
        )


@dataclass(frozen=True)
class Team:
    name: str = ""
    repo: str = ""
    description: str = ""
    created_at: datetime | None = None
    deadline: datetime | None = None
    members: tuple[Member, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "repo": self.repo,
            "description": self.description,
            "createdAt": iso(self.created_at),
            "deadline": iso(self.deadline),
            "members": [m.to_dict() for m in self.members],
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Team:
        return cls(
            name=str(d.get("name") or ""),
            repo=str(d.get("repo") or ""),
            description=str(d.get("description") or ""),
            created_at=parse_optional_timestamp(
                d.get("createdAt", d.get("created_at")), "team", "createdAt",
            ),
            deadline=parse_optional_timestamp(d.get("deadline"), "team", "deadline"),
            members=tuple(Member.from_dict(m) for m in _list(d.get("members"))),
        )


def _section(d: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in d and d[key] is not None:
            return d[key]
    return None


@dataclass(frozen=True)
class Snapshot:
    """Commits, pull requests, branches and team members at a point in time."""

    commits: tuple[Commit, ...] = ()
    pull_requests: tuple[PullRequest, ...] = ()
    branches: tuple[Branch, ...] = ()
    team: Team = field(default_factory=Team)
    default_branch: str = DEFAULT_BRANCH

    @property
    def members(self) -> tuple[Member, ...]:
        return self.team.members

    def member(self, member_id: str) -> Member | None:
        for m in self.team.members:
            if m.id == member_id:
                return m
        return None

    def member_name(self, member_id: str) -> str:
        m = self.member(member_id)
        return m.name if m else member_id

    def commits_by(self, member_id: str) -> list[Commit]:
        return [c for c in self.commits if c.author == member_id]

    def latest_commit_by(self, member_id: str) -> Commit | None:
        return max(self.commits_by(member_id), key=lambda c: c.date, default=None)

    def commit(self, commit_id: str) -> Commit | None:
        for c in self.commits:
            if c.id == commit_id:
                return c
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "COMMITS": [c.to_dict() for c in self.commits],
            "PULL_REQUESTS": [p.to_dict() for p in self.pull_requests],
            "BRANCHES": [b.to_dict() for b in self.branches],
            "TEAM": self.team.to_dict(),
            "defaultBranch": self.default_branch,
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Snapshot:
        """Accepts upper-case store keys as well as lower/camelCase ones."""
        team = _section(d, "TEAM", "team") or {}
        return cls(
            commits=tuple(
                Commit.from_dict(c) for c in _list(_section(d, "COMMITS", "commits"))
            ),
            pull_requests=tuple(
                PullRequest.from_dict(p)
                for p in _list(_section(d, "PULL_REQUESTS", "pullRequests", "pull_requests"))
            ),
            branches=tuple(
                Branch.from_dict(b) for b in _list(_section(d, "BRANCHES", "branches"))
            ),
            team=Team.from_dict(team),
            default_branch=str(
                _section(d, "defaultBranch", "default_branch") or DEFAULT_BRANCH
            ),
        )


# ---------------------------------------------------------------------------
# Derived entities
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Blocker:
    id: str
    severity: Severity
    type: BlockerType
    title: str
    description: str
    affected_modules: tuple[str, ...]
    owner: str
    detected_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "affectedModules": list(self.affected_modules),
            "owner": self.owner,
            "detectedAt": iso(self.detected_at),
        }


@dataclass(frozen=True)
class ActiveWork:
    member_id: str
    name: str
    status: WorkStatus
    current_task: str
    module: str
    last_commit: str
    branch: str
    days_since: int
    warning: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "memberId": self.member_id,
            "name": self.name,
            "status": self.status.value,
            "currentTask": self.current_task,
            "module": self.module,
            "lastCommit": self.last_commit,
            "branch": self.branch,
        }
        if self.warning:
            d["warning"] = self.warning
        return d


@dataclass(frozen=True)
class GhostingAlert:
    member_id: str
    name: str
    last_commit: datetime
    last_message: str | None
    days_since_commit: int
    type: str = "inactive"

    @property
    def alert(self) -> str:
        return f"{self.name} has been inactive for {self.days_since_commit} days."

    def to_dict(self) -> dict[str, Any]:
        return {
            "memberId": self.member_id,
            "name": self.name,
            "lastCommit": iso(self.last_commit),
            "lastMessage": self.last_message,
            "type": self.type,
            "alert": self.alert,
            "daysSinceCommit": self.days_since_commit,
        }


@dataclass(frozen=True)
class IntegrationRisk:
    module: str
    risk: int
    status: str
    dependencies: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "module": self.module,
            "risk": self.risk,
            "status": self.status,
            "dependencies": list(self.dependencies),
        }


@dataclass(frozen=True)
class BusFactor:
    """Module x contributor ownership-percentage matrix."""

    modules: tuple[str, ...] = ()
    contributors: tuple[str, ...] = ()
    data: tuple[tuple[int, ...], ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "modules": list(self.modules),
            "contributors": list(self.contributors),
            "data": [list(row) for row in self.data],
        }


@dataclass(frozen=True)
class ContributionStat:
    name: str
    commits: int
    additions: int
    deletions: int
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "commits": self.commits,
            "additions": self.additions,
            "deletions": self.deletions,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class CommitHonestyEntry:
    commit_id: str
    message: str
    actual_changes: str
    match_score: int
    suggestion: str | None
    verdict: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "commitId": self.commit_id,
            "message": self.message,
            "actualChanges": self.actual_changes,
            "matchScore": self.match_score,
            "suggestion": self.suggestion,
            "verdict": self.verdict,
        }


@dataclass(frozen=True)
class RiskReading:
    score: int
    factors: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "factors": dict(self.factors)}


@dataclass(frozen=True)
class HealthScore:
    overall: int
    delivery: RiskReading
    integration: RiskReading
    stability: RiskReading

    @property
    def breakdown(self) -> dict[str, int]:
        return {
            "deliveryRisk": self.delivery.score,
            "integrationRisk": self.integration.score,
            "stabilityRisk": self.stability.score,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "breakdown": self.breakdown,
            "factors": {
                "delivery": dict(self.delivery.factors),
                "integration": dict(self.integration.factors),
                "stability": dict(self.stability.factors),
            },
        }


@dataclass(frozen=True)
class ScenarioImpact:
    health_drop: int
    new_blockers: int
    affected_modules: tuple[str, ...] = ()
    delivery_risk_change: int = 0
    integration_risk_change: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "healthDrop": self.health_drop,
            "newBlockers": self.new_blockers,
            "affectedModules": list(self.affected_modules),
            "riskChange": {
                "deliveryRisk": self.delivery_risk_change,
                "integrationRisk": self.integration_risk_change,
            },
        }


@dataclass(frozen=True)
class SimulationScenario:
    id: str
    name: str
    description: str
    delay_hours: int
    impact: ScenarioImpact
    member_id: str | None = None
    pr_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "delayHours": self.delay_hours,
            "impact": self.impact.to_dict(),
        }
        if self.member_id is not None:
            d["memberId"] = self.member_id
        if self.pr_id is not None:
            d["prId"] = self.pr_id
        return d


@dataclass(frozen=True)
class ProjectionResult:
    scenario: SimulationScenario
    current_health: int
    projected_health: int
    breakdown: dict[str, int]
    analysis: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario.to_dict(),
            "currentHealth": self.current_health,
            "projectedHealth": self.projected_health,
            "breakdown": dict(self.breakdown),
            "analysis": list(self.analysis),
            "recommendations": list(self.recommendations),
        }


@dataclass(frozen=True)
class AdvisorResponse:
    response: str
    confidence: int

    def to_dict(self) -> dict[str, Any]:
        return {"response": self.response, "confidence": self.confidence}


@dataclass(frozen=True)
class DerivedSnapshot:
    """Everything the builder produces in one pass over a snapshot."""

    active_work: tuple[ActiveWork, ...] = ()
    blockers: tuple[Blocker, ...] = ()
    ghosting_alerts: tuple[GhostingAlert, ...] = ()
    integration_risks: tuple[IntegrationRisk, ...] = ()
    bus_factor: BusFactor = field(default_factory=BusFactor)
    contribution_stats: tuple[ContributionStat, ...] = ()
    commit_honesty: tuple[CommitHonestyEntry, ...] = ()
    simulation_scenarios: tuple[SimulationScenario, ...] = ()
    advisor_responses: dict[str, AdvisorResponse] = field(default_factory=dict)
    generated_at: datetime | None = None

    def scenario(self, scenario_id: str) -> SimulationScenario | None:
        for s in self.simulation_scenarios:
            if s.id == scenario_id:
                return s
        return None

    def integration_risk(self, module: str) -> IntegrationRisk | None:
        wanted = module.lower()
        for r in self.integration_risks:
            if r.module.lower() == wanted:
                return r
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "activeWork": [w.to_dict() for w in self.active_work],
            "blockers": [b.to_dict() for b in self.blockers],
            "ghostingAlerts": [g.to_dict() for g in self.ghosting_alerts],
            "integrationRisks": [r.to_dict() for r in self.integration_risks],
            "busFactor": self.bus_factor.to_dict(),
            "contributionStats": [s.to_dict() for s in self.contribution_stats],
            "commitHonesty": [h.to_dict() for h in self.commit_honesty],
            "simulationScenarios": [s.to_dict() for s in self.simulation_scenarios],
            "advisorResponses": {k: v.to_dict() for k, v in self.advisor_responses.items()},
            "generatedAt": iso(self.generated_at),
        }
