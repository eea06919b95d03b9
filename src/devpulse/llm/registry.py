"""LLM adapter registry with rate limiting."""

from __future__ import annotations

import logging
import time

from devpulse.config import Settings, load_settings
from devpulse.defaults import LLM_MAX_CALLS_PER_HOUR
from devpulse.llm.null_adapter import NullLLMAdapter
from devpulse.llm.port import LLMPort

log = logging.getLogger("devpulse.llm.registry")

_adapter: LLMPort | None = None
_call_timestamps: list[float] = []


def get_adapter(settings: Settings | None = None) -> LLMPort:
    """Get or create the configured LLM adapter."""
    global _adapter
    if _adapter is not None:
        return _adapter

    settings = settings or load_settings()
    if settings.llm_provider == "anthropic" and settings.llm_api_key:
        try:
            from devpulse.llm.anthropic_adapter import DEFAULT_MODEL, AnthropicLLMAdapter

            _adapter = AnthropicLLMAdapter(
                settings.llm_api_key, settings.llm_model or DEFAULT_MODEL,
            )
        except ImportError:
            log.warning("anthropic package not installed, falling back to null adapter")
            _adapter = NullLLMAdapter()
    else:
        if settings.llm_provider not in ("null", "anthropic"):
            log.warning("Unknown LLM provider %r, using null adapter", settings.llm_provider)
        _adapter = NullLLMAdapter()

    log.info("LLM adapter: %s", _adapter.provider_name)
    return _adapter


def set_adapter(adapter: LLMPort) -> None:
    """Install a specific adapter (used by tests and embedding callers)."""
    global _adapter
    _adapter = adapter


def check_rate_limit() -> bool:
    """Return True if under the hourly call limit."""
    now = time.time()
    _call_timestamps[:] = [t for t in _call_timestamps if now - t < 3600]
    return len(_call_timestamps) < LLM_MAX_CALLS_PER_HOUR


def record_call() -> None:
    _call_timestamps.append(time.time())


def reset_adapter() -> None:
    """Reset the adapter and rate-limit state (for tests)."""
    global _adapter
    _adapter = None
    _call_timestamps.clear()
