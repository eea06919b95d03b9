"""LLM port: protocol definition for advisor adapters."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LLMPort(Protocol):
    """Protocol for LLM adapters answering advisor questions."""

    @property
    def provider_name(self) -> str: ...

    def answer_question(self, question: str, context: str) -> str:
        """Answer ``question`` from ``context``; empty string when there is no answer."""
        ...

    def is_available(self) -> bool: ...
