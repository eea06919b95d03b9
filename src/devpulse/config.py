"""Environment-driven settings.

Every knob is read from a ``DEVPULSE_*`` environment variable; unset
variables fall back to the values in :mod:`devpulse.defaults`.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Mapping

from devpulse.defaults import (
    DEADLINE_HOURS,
    GITHUB_API_URL,
    GITHUB_COMMIT_PAGES,
    GITHUB_DETAIL_LIMIT,
    GITHUB_MAX_MEMBERS,
)

log = logging.getLogger("devpulse.config")

_PREFIX = "DEVPULSE_"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(_PREFIX + name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("Ignoring non-integer %s%s=%r, using %d", _PREFIX, name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    github_token: str = field(default="", repr=False)
    github_owner: str = ""
    github_repo: str = ""
    github_api_url: str = GITHUB_API_URL
    commit_pages: int = GITHUB_COMMIT_PAGES
    detail_limit: int = GITHUB_DETAIL_LIMIT
    max_members: int = GITHUB_MAX_MEMBERS
    deadline_hours: int = DEADLINE_HOURS
    snapshot_path: str = ""
    cors_origin: str = "*"
    log_level: str = "INFO"
    llm_provider: str = "null"
    llm_api_key: str = field(default="", repr=False)
    llm_model: str = ""

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origin.split(",") if o.strip()] or ["*"]

    @property
    def github_configured(self) -> bool:
        return bool(self.github_owner and self.github_repo)


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    env = os.environ if env is None else env
    return Settings(
        github_token=env.get("DEVPULSE_GITHUB_TOKEN", ""),
        github_owner=env.get("DEVPULSE_GITHUB_OWNER", ""),
        github_repo=env.get("DEVPULSE_GITHUB_REPO", ""),
        github_api_url=env.get("DEVPULSE_GITHUB_API_URL", GITHUB_API_URL).rstrip("/"),
        commit_pages=_int_env(env, "COMMIT_PAGES", GITHUB_COMMIT_PAGES),
        detail_limit=_int_env(env, "DETAIL_LIMIT", GITHUB_DETAIL_LIMIT),
        max_members=_int_env(env, "MAX_MEMBERS", GITHUB_MAX_MEMBERS),
        deadline_hours=_int_env(env, "DEADLINE_HOURS", DEADLINE_HOURS),
        snapshot_path=env.get("DEVPULSE_SNAPSHOT_PATH", ""),
        cors_origin=env.get("DEVPULSE_CORS_ORIGIN", "*"),
        log_level=env.get("DEVPULSE_LOG_LEVEL", "INFO"),
        llm_provider=env.get("DEVPULSE_LLM_PROVIDER", "null").lower(),
        llm_api_key=env.get("DEVPULSE_LLM_API_KEY", ""),
        llm_model=env.get("DEVPULSE_LLM_MODEL", ""),
    )
