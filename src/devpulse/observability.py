"""Observability: structured logging, request and sync metrics, Prometheus text."""

from __future__ import annotations

import json
import logging
import time
from collections import defaultdict
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, Response

if TYPE_CHECKING:
    from devpulse.store import SnapshotStore

_HTTP_ERROR_THRESHOLD = 500
_MS_PER_SECOND = 1000

_EXTRA_FIELDS = ("trace_id", "method", "path", "status_code", "duration_ms", "repo")


# ---------------------------------------------------------------------------
# Structured JSON logging
# ---------------------------------------------------------------------------

class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_dict: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_dict["exception"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_dict[key] = val
        return json.dumps(log_dict, default=str)


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger with JSON output."""
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Prometheus-compatible metrics
# ---------------------------------------------------------------------------

_request_count: dict[tuple[str, str, str], int] = defaultdict(int)
_request_latency_sum: dict[tuple[str, str], float] = defaultdict(float)
_request_latency_count: dict[tuple[str, str], int] = defaultdict(int)
_error_count: dict[tuple[str, str], int] = defaultdict(int)
_sync_count: dict[str, int] = defaultdict(int)
_sync_duration_sum = 0.0


def record_request(method: str, path: str, status: int, duration: float) -> None:
    _request_count[(method, path, str(status))] += 1
    _request_latency_sum[(method, path)] += duration
    _request_latency_count[(method, path)] += 1
    if status >= _HTTP_ERROR_THRESHOLD:
        _error_count[(method, path)] += 1


def record_sync(outcome: str, duration: float) -> None:
    """Count a GitHub sync by outcome (``success`` or ``failure``)."""
    global _sync_duration_sum
    _sync_count[outcome] += 1
    _sync_duration_sum += duration


def reset_metrics() -> None:
    """Clear all counters (for tests)."""
    global _sync_duration_sum
    for counter in (_request_count, _request_latency_sum, _request_latency_count,
                    _error_count, _sync_count):
        counter.clear()
    _sync_duration_sum = 0.0


def _snapshot_gauges(store: SnapshotStore) -> list[str]:
    from devpulse.metrics import compute_health_score

    state = store.state
    health = compute_health_score(state.snapshot)
    lines = [
        "# HELP devpulse_health_score Live composite health score (0-100).",
        "# TYPE devpulse_health_score gauge",
        f"devpulse_health_score {health.overall}",
        "# HELP devpulse_risk_score Live risk score by dimension (0-100).",
        "# TYPE devpulse_risk_score gauge",
    ]
    for name, score in sorted(health.breakdown.items()):
        lines.append(f'devpulse_risk_score{{dimension="{name}"}} {score}')
    lines.append("# HELP devpulse_blockers Blockers in the current derived snapshot by severity.")
    lines.append("# TYPE devpulse_blockers gauge")
    by_severity: dict[str, int] = defaultdict(int)
    for b in state.derived.blockers:
        by_severity[b.severity.value] += 1
    for severity, count in sorted(by_severity.items()):
        lines.append(f'devpulse_blockers{{severity="{severity}"}} {count}')
    lines.append("# HELP devpulse_snapshot_commits Commits in the current snapshot.")
    lines.append("# TYPE devpulse_snapshot_commits gauge")
    lines.append(f"devpulse_snapshot_commits {len(state.snapshot.commits)}")
    return lines


def generate_metrics(store: SnapshotStore | None = None) -> str:
    """Render metrics in Prometheus text exposition format."""
    lines: list[str] = []

    lines.append("# HELP devpulse_http_requests_total Total HTTP requests by method, path, status.")
    lines.append("# TYPE devpulse_http_requests_total counter")
    for (method, path, status), count in sorted(_request_count.items()):
        lines.append(f'devpulse_http_requests_total{{method="{method}",path="{path}",status="{status}"}} {count}')

    lines.append("# HELP devpulse_http_request_duration_seconds Total request duration by method and path.")
    lines.append("# TYPE devpulse_http_request_duration_seconds summary")
    for (method, path), total in sorted(_request_latency_sum.items()):
        cnt = _request_latency_count[(method, path)]
        lines.append(f'devpulse_http_request_duration_seconds_sum{{method="{method}",path="{path}"}} {total:.6f}')
        lines.append(f'devpulse_http_request_duration_seconds_count{{method="{method}",path="{path}"}} {cnt}')

    lines.append("# HELP devpulse_http_errors_total Total 5xx errors.")
    lines.append("# TYPE devpulse_http_errors_total counter")
    for (method, path), count in sorted(_error_count.items()):
        lines.append(f'devpulse_http_errors_total{{method="{method}",path="{path}"}} {count}')

    lines.append("# HELP devpulse_syncs_total GitHub syncs by outcome.")
    lines.append("# TYPE devpulse_syncs_total counter")
    for outcome, count in sorted(_sync_count.items()):
        lines.append(f'devpulse_syncs_total{{outcome="{outcome}"}} {count}')
    lines.append(f"devpulse_sync_duration_seconds_sum {_sync_duration_sum:.6f}")

    if store is not None:
        lines.extend(_snapshot_gauges(store))

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# FastAPI middleware
# ---------------------------------------------------------------------------

def add_observability_middleware(app: FastAPI) -> None:
    """Add request logging and metrics collection middleware."""

    @app.middleware("http")
    async def observe_request(request: Request, call_next) -> Response:
        start = time.time()
        response: Response = await call_next(request)
        duration = time.time() - start

        path = request.url.path
        method = request.method
        status = response.status_code

        record_request(method, path, status, duration)

        logger = logging.getLogger("devpulse.access")
        logger.info(
            "%s %s %d %.0fms",
            method, path, status, duration * _MS_PER_SECOND,
            extra={
                "method": method,
                "path": path,
                "status_code": status,
                "duration_ms": round(duration * _MS_PER_SECOND, 1),
                "trace_id": request.headers.get("x-trace-id", ""),
            },
        )
        return response
