"""Tests for structured logging, metrics and configuration."""

import dataclasses
import json
import logging
import sys

import pytest

from devpulse.config import Settings, load_settings
from devpulse.observability import (
    JsonFormatter,
    generate_metrics,
    record_request,
    record_sync,
    setup_logging,
)


class TestJsonFormatter:
    def test_basic_fields(self):
        record = logging.LogRecord("devpulse.sync", logging.INFO, __file__, 1, "Synced %s", ("acme/demo",), None)
        data = json.loads(JsonFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["logger"] == "devpulse.sync"
        assert data["message"] == "Synced acme/demo"

    def test_extra_fields(self):
        record = logging.LogRecord("devpulse.access", logging.INFO, __file__, 1, "GET", (), None)
        record.status_code = 200
        record.repo = "acme/demo"
        data = json.loads(JsonFormatter().format(record))
        assert data["status_code"] == 200
        assert data["repo"] == "acme/demo"
        assert "trace_id" not in data

    def test_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord(
                "devpulse", logging.ERROR, __file__, 1, "failed", (), sys.exc_info(),
            )
        data = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in data["exception"]

    def test_setup_logging(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        try:
            setup_logging("debug")
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
        finally:
            root.handlers[:] = handlers
            root.setLevel(level)


class TestMetrics:
    def test_requests(self):
        record_request("GET", "/api/health", 200, 0.25)
        record_request("GET", "/api/health", 200, 0.75)
        record_request("POST", "/api/github/sync", 502, 0.1)
        text = generate_metrics()
        assert 'devpulse_http_requests_total{method="GET",path="/api/health",status="200"} 2' in text
        assert 'devpulse_http_request_duration_seconds_sum{method="GET",path="/api/health"} 1.000000' in text
        assert 'devpulse_http_errors_total{method="POST",path="/api/github/sync"} 1' in text

    def test_syncs(self):
        record_sync("success", 1.5)
        record_sync("failure", 0.5)
        text = generate_metrics()
        assert 'devpulse_syncs_total{outcome="success"} 1' in text
        assert "devpulse_sync_duration_seconds_sum 2.000000" in text

    def test_store_gauges(self, store):
        text = generate_metrics(store)
        assert "devpulse_snapshot_commits 5" in text
        assert 'devpulse_risk_score{dimension="deliveryRisk"}' in text
        assert 'devpulse_blockers{severity="low"} 1' in text

    def test_reset_between_tests(self):
        assert "devpulse_syncs_total{" not in generate_metrics()


class TestSettings:
    def test_defaults(self):
        s = load_settings({})
        assert s.github_api_url == "https://api.github.com"
        assert s.commit_pages == 3
        assert s.detail_limit == 30
        assert s.max_members == 10
        assert s.deadline_hours == 48
        assert s.llm_provider == "null"
        assert s.cors_origins == ["*"]
        assert not s.github_configured

    def test_from_env(self):
        s = load_settings({
            "DEVPULSE_GITHUB_OWNER": "acme",
            "DEVPULSE_GITHUB_REPO": "demo",
            "DEVPULSE_GITHUB_TOKEN": "secret",
            "DEVPULSE_GITHUB_API_URL": "https://ghe.example.com/api/v3/",
            "DEVPULSE_COMMIT_PAGES": "5",
            "DEVPULSE_CORS_ORIGIN": "http://localhost:5173, https://pulse.example.com",
            "DEVPULSE_LLM_PROVIDER": "Anthropic",
        })
        assert s.github_configured
        assert s.github_api_url == "https://ghe.example.com/api/v3"
        assert s.commit_pages == 5
        assert s.cors_origins == ["http://localhost:5173", "https://pulse.example.com"]
        assert s.llm_provider == "anthropic"
        assert "secret" not in repr(s)

    def test_bad_integer_falls_back(self):
        assert load_settings({"DEVPULSE_DETAIL_LIMIT": "lots"}).detail_limit == 30

    def test_settings_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            Settings().commit_pages = 9
