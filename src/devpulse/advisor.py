"""Project advisor: LLM answer over live project data, keyword fallback otherwise.

The keyword path picks the first canned response whose trigger phrase is
contained in the lower-cased question, else the ``default`` summary. The LLM
path is used only when an adapter is available and under its rate limit; any
failure or empty answer falls back to the keyword response.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping

from devpulse._time import iso, now_utc
from devpulse.defaults import LLM_CONFIDENCE
from devpulse.derive.responses import DEFAULT
from devpulse.lifecycle import pull_request_state
from devpulse.llm import LLMPort, check_rate_limit, get_adapter, record_call
from devpulse.metrics import compute_contributions, compute_health_score, compute_velocity
from devpulse.models import AdvisorResponse, DerivedSnapshot, Snapshot
from devpulse.store import SnapshotStore

log = logging.getLogger("devpulse.advisor")

NO_DATA = AdvisorResponse("No data available yet.", 50)

SUGGESTIONS = (
    "What's the biggest risk right now?",
    "Who needs help on the team?",
    "How is our demo readiness?",
    "Summarize project status",
    "What should I prioritize today?",
    "What are the integration risks?",
)

_VELOCITY_DAYS = 7


def keyword_response(question: str, responses: Mapping[str, AdvisorResponse]) -> AdvisorResponse:
    q = question.lower().strip()
    for key, value in responses.items():
        if key != DEFAULT and key in q:
            return value
    return responses.get(DEFAULT, NO_DATA)


def _section(title: str, lines: list[str], empty: str = "None") -> str:
    body = "\n".join(f"  {line}" for line in lines) or f"  {empty}"
    return f"{title} ({len(lines)}):\n{body}"


def build_project_context(
    snapshot: Snapshot, derived: DerivedSnapshot, now: datetime | None = None,
) -> str:
    """Plain-text digest of live metrics and derived entities for the LLM prompt."""
    now = now or now_utc()
    health = compute_health_score(snapshot, now)
    stats = {s.name: s for s in compute_contributions(snapshot, now)}
    work = {w.member_id: w for w in derived.active_work}
    team = snapshot.team
    b = health.breakdown

    members = []
    for m in snapshot.members:
        s = stats.get(m.name)
        w = work.get(m.id)
        members.append(
            f"- {m.name} ({m.role}): {s.commits if s else 0} commits, "
            f"+{s.additions if s else 0}/-{s.deletions if s else 0} lines, "
            f"status {w.status.value if w else '?'}, last {w.last_commit if w else '?'}, "
            f"branch {w.branch if w else '?'}"
        )

    open_prs = []
    for pr in snapshot.pull_requests:
        pr = pull_request_state(pr, now)
        if not pr.is_open:
            continue
        open_prs.append(
            f'PR "{pr.title}" by {snapshot.member_name(pr.author)}: age {pr.age_days}d, '
            f"{'STAGNANT' if pr.stagnant else 'active'}, reviewers {len(pr.reviewers)}"
        )

    bf = derived.bus_factor
    velocity = compute_velocity(snapshot, now)[-_VELOCITY_DAYS:]
    parts = [
        "=== DEVPULSE PROJECT DATA (live) ===",
        f"PROJECT: {team.name or '?'}: {team.description}",
        f"REPO: {team.repo or '?'}",
        f"DEADLINE: {iso(team.deadline) or '?'}",
        f"HEALTH SCORE: {health.overall}/100\n"
        f"  Delivery Risk: {b['deliveryRisk']}%\n"
        f"  Integration Risk: {b['integrationRisk']}%\n"
        f"  Stability Risk: {b['stabilityRisk']}%",
        _section("TEAM", members),
        _section(
            "BLOCKERS",
            [f"[{x.severity.value}] {x.title}: {x.description}" for x in derived.blockers],
        ),
        _section(
            "GHOSTING ALERTS",
            [f"{g.name}: {g.days_since_commit}d inactive" for g in derived.ghosting_alerts],
        ),
        "BUS FACTOR:\n"
        f"  Modules: {', '.join(bf.modules) or '?'}\n"
        f"  Contributors: {', '.join(bf.contributors) or '?'}",
        _section("OPEN PULL REQUESTS", open_prs, empty="None open"),
        _section(
            "INTEGRATION RISKS",
            [
                f"{r.module}: risk {r.risk}%, status {r.status}, "
                f"deps: {', '.join(r.dependencies) or 'none'}"
                for r in derived.integration_risks
            ],
        ),
        _section(
            "COMMIT HONESTY",
            [f'"{h.message}" => {h.verdict} ({h.match_score}% match)' for h in derived.commit_honesty],
            empty="All honest",
        ),
        _section(
            "VELOCITY",
            [
                f"{row['date']}: " + ", ".join(f"{m.name}={row[m.name]}" for m in snapshot.members)
                for row in velocity
            ],
        ),
    ]
    return "\n\n".join(parts)


def _ask_llm(adapter: LLMPort, question: str, context: str) -> str:
    if not check_rate_limit():
        log.warning("LLM hourly limit reached, answering from keywords")
        return ""
    record_call()
    try:
        return adapter.answer_question(question, context)
    except Exception:
        log.exception("LLM advisor call failed (%s), answering from keywords", adapter.provider_name)
        return ""


def answer(
    question: str,
    store: SnapshotStore,
    adapter: LLMPort | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    now = now or now_utc()
    adapter = adapter or get_adapter()
    state = store.state

    text = ""
    if adapter.is_available():
        text = _ask_llm(adapter, question, build_project_context(state.snapshot, state.derived, now))
    if text:
        response = AdvisorResponse(text, LLM_CONFIDENCE)
        source = adapter.provider_name
    else:
        response = keyword_response(question, state.derived.advisor_responses)
        source = "keyword"

    return {
        "question": question,
        "response": response.response,
        "confidence": response.confidence,
        "source": source,
        "timestamp": iso(now),
    }
