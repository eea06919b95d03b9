"""Tests for the project advisor and LLM adapter registry."""

import sys

import pytest

from devpulse import advisor
from devpulse.config import Settings
from devpulse.defaults import LLM_MAX_CALLS_PER_HOUR
from devpulse.derive.responses import BIGGEST_RISK, DEFAULT
from devpulse.llm import (
    LLMPort,
    NullLLMAdapter,
    check_rate_limit,
    get_adapter,
    record_call,
    set_adapter,
)
from devpulse.models import AdvisorResponse

from conftest import NOW


class FakeAdapter:
    def __init__(self, reply: str = "Focus on the stale chart PR.", fail: bool = False):
        self.reply = reply
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    def answer_question(self, question: str, context: str) -> str:
        self.calls.append((question, context))
        if self.fail:
            raise RuntimeError("provider down")
        return self.reply

    def is_available(self) -> bool:
        return True


# ---------------------------------------------------------------------------
# Keyword matching
# ---------------------------------------------------------------------------

class TestKeywordResponse:
    RESPONSES = {
        BIGGEST_RISK: AdvisorResponse("risk", 92),
        DEFAULT: AdvisorResponse("summary", 85),
    }

    def test_contained_phrase(self):
        assert keyword("What's the BIGGEST RISK right now?").response == "risk"

    def test_default(self):
        assert keyword("How are we doing?").response == "summary"

    def test_default_key_not_matched_as_phrase(self):
        assert keyword("what is the default?").response == "summary"

    def test_no_responses(self):
        assert advisor.keyword_response("anything", {}) == advisor.NO_DATA


def keyword(question: str) -> AdvisorResponse:
    return advisor.keyword_response(question, TestKeywordResponse.RESPONSES)


# ---------------------------------------------------------------------------
# Answering
# ---------------------------------------------------------------------------

class TestAnswer:
    def test_keyword_when_no_llm(self, store):
        result = advisor.answer("Who needs help?", store, NullLLMAdapter(), NOW)
        assert result["source"] == "keyword"
        assert result["confidence"] == 88
        assert "Carol" in result["response"]
        assert result["timestamp"] == "2026-02-20T12:00:00Z"
        assert result["question"] == "Who needs help?"

    def test_llm_answer(self, store):
        fake = FakeAdapter()
        result = advisor.answer("What should I prioritize today?", store, fake, NOW)
        assert result["source"] == "fake"
        assert result["response"] == "Focus on the stale chart PR."
        assert result["confidence"] == 95
        question, context = fake.calls[0]
        assert question == "What should I prioritize today?"
        assert "HEALTH SCORE: 59/100" in context

    def test_llm_failure_falls_back(self, store):
        fake = FakeAdapter(fail=True)
        result = advisor.answer("biggest risk?", store, fake, NOW)
        assert result["source"] == "keyword"
        assert result["response"].startswith("**Critical Risk:")
        assert len(fake.calls) == 1

    def test_empty_llm_answer_falls_back(self, store):
        result = advisor.answer("hello", store, FakeAdapter(reply=""), NOW)
        assert result["source"] == "keyword"
        assert result["confidence"] == 85

    def test_rate_limited(self, store):
        for _ in range(LLM_MAX_CALLS_PER_HOUR):
            record_call()
        fake = FakeAdapter()
        result = advisor.answer("hello", store, fake, NOW)
        assert result["source"] == "keyword"
        assert fake.calls == []

    def test_uses_registered_adapter(self, store):
        fake = FakeAdapter()
        set_adapter(fake)
        assert advisor.answer("hello", store, now=NOW)["source"] == "fake"


class TestProjectContext:
    def test_sections(self, store):
        state = store.state
        context = advisor.build_project_context(state.snapshot, state.derived, NOW)
        assert "PROJECT: demo: Team dashboard" in context
        assert "REPO: acme/demo" in context
        assert "Delivery Risk: 49%" in context
        assert "TEAM (3):" in context
        assert "- Carol (Database Engineer): 1 commits, +40/-0 lines, status inactive" in context
        assert 'PR "Add chart" by Alice: age 5d, STAGNANT, reviewers 0' in context
        assert '"fix" => misleading (10% match)' in context
        assert "GHOSTING ALERTS (1):" in context

    def test_empty_project(self):
        from devpulse.store import SnapshotStore
        state = SnapshotStore(now=NOW).state
        context = advisor.build_project_context(state.snapshot, state.derived, NOW)
        assert "OPEN PULL REQUESTS (0):\n  None open" in context
        assert "COMMIT HONESTY (0):\n  All honest" in context


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class TestRegistry:
    def test_null_by_default(self):
        adapter = get_adapter(Settings())
        assert isinstance(adapter, NullLLMAdapter)
        assert isinstance(adapter, LLMPort)
        assert not adapter.is_available()
        assert adapter.answer_question("q", "ctx") == ""

    def test_cached(self):
        assert get_adapter(Settings()) is get_adapter(Settings(llm_provider="anthropic"))

    def test_unknown_provider(self):
        assert get_adapter(Settings(llm_provider="mystery")).provider_name == "null"

    def test_anthropic_without_key(self):
        assert get_adapter(Settings(llm_provider="anthropic")).provider_name == "null"

    def test_anthropic_missing_package(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "anthropic", None)
        adapter = get_adapter(Settings(llm_provider="anthropic", llm_api_key="sk-test"))
        assert adapter.provider_name == "null"

    def test_fake_satisfies_port(self):
        assert isinstance(FakeAdapter(), LLMPort)

    def test_rate_limit(self):
        assert check_rate_limit()
        for _ in range(LLM_MAX_CALLS_PER_HOUR - 1):
            record_call()
        assert check_rate_limit()
        record_call()
        assert not check_rate_limit()


class TestAnthropicAdapter:
    def test_answer(self, monkeypatch):
        pytest.importorskip("anthropic")
        from devpulse.llm.anthropic_adapter import AnthropicLLMAdapter

        class _Block:
            text = "  Ship it.  "

        class _Messages:
            def __init__(self):
                self.kwargs = {}

            def create(self, **kwargs):
                self.kwargs = kwargs
                return type("Resp", (), {"content": [_Block()]})()

        adapter = AnthropicLLMAdapter(api_key="sk-test", model="claude-test")
        messages = _Messages()
        monkeypatch.setattr(adapter._client, "messages", messages)
        assert adapter.answer_question("Ready?", "HEALTH SCORE: 80/100") == "Ship it."
        assert messages.kwargs["model"] == "claude-test"
        assert "HEALTH SCORE: 80/100" in messages.kwargs["system"]
        assert messages.kwargs["messages"] == [{"role": "user", "content": "Ready?"}]
        assert adapter.provider_name == "anthropic"
        assert adapter.is_available()
