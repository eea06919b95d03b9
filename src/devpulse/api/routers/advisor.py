"""Project advisor endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from starlette.concurrency import run_in_threadpool

from devpulse import advisor
from devpulse.api.deps import get_store
from devpulse.api.schemas import AdvisorBody
from devpulse.store import SnapshotStore

router = APIRouter(prefix="/advisor", tags=["advisor"])


@router.post("")
@router.post("/ask")
async def ask(body: AdvisorBody, store: SnapshotStore = Depends(get_store)):
    """Answer via the configured LLM when available, canned keyword response otherwise."""
    return await run_in_threadpool(advisor.answer, body.question, store)


@router.get("/suggestions")
def suggestions():
    return list(advisor.SUGGESTIONS)
