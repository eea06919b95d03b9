"""Null LLM adapter: no-op default when no LLM is configured."""

from __future__ import annotations


class NullLLMAdapter:
    """No-op adapter. Default when no LLM is configured."""

    @property
    def provider_name(self) -> str:
        return "null"

    def answer_question(self, question: str, context: str) -> str:
        return ""

    def is_available(self) -> bool:
        return False
