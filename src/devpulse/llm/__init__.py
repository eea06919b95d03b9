"""LLM adapters for the project advisor.

Modules:
  - port: adapter protocol
  - null_adapter: default no-op adapter
  - anthropic_adapter: Claude via the ``anthropic`` SDK (optional extra)
  - registry: env-driven adapter selection and hourly rate limit
"""

from devpulse.llm.null_adapter import NullLLMAdapter
from devpulse.llm.port import LLMPort
from devpulse.llm.registry import (
    check_rate_limit,
    get_adapter,
    record_call,
    reset_adapter,
    set_adapter,
)

__all__ = [
    "LLMPort",
    "NullLLMAdapter",
    "check_rate_limit",
    "get_adapter",
    "record_call",
    "reset_adapter",
    "set_adapter",
]
