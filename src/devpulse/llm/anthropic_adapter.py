"""Anthropic Claude adapter for the project advisor."""

from __future__ import annotations

import logging

log = logging.getLogger("devpulse.llm.anthropic")

DEFAULT_MODEL = "claude-sonnet-4-20250514"

SYSTEM_PROMPT = (
    "You are DevPulse, a project delivery risk advisor for small software teams. "
    "Answer only from the project data below and never invent members, PRs or numbers. "
    "Be concise (about 300 words at most), use markdown bold and bullet points, "
    "quantify risks with the figures in the data, name members with their recent "
    "activity, and end with one concrete next step.\n\n"
    "PROJECT DATA:\n{context}"
)


class AnthropicLLMAdapter:
    """Anthropic Claude adapter for advisor questions."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        import anthropic

        self._client = anthropic.Anthropic(api_key=api_key)
        self._model = model

    @property
    def provider_name(self) -> str:
        return "anthropic"

    def answer_question(self, question: str, context: str) -> str:
        response = self._client.messages.create(
            model=self._model,
            max_tokens=1024,
            system=SYSTEM_PROMPT.format(context=context),
            messages=[{"role": "user", "content": question}],
        )
        parts = [getattr(block, "text", "") for block in response.content]
        return "".join(parts).strip()

    def is_available(self) -> bool:
        return self._client is not None
