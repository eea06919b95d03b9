"""Pydantic request models for strict input validation."""

from __future__ import annotations

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------

class ConnectBody(BaseModel):
    owner: str = Field(..., min_length=1, description="Repository owner (user or org)")
    repo: str = Field(..., min_length=1, description="Repository name")
    token: str | None = Field(default=None, repr=False)


# ---------------------------------------------------------------------------
# Advisor
# ---------------------------------------------------------------------------

class AdvisorBody(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)
