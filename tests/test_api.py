"""Tests for the FastAPI application: routes, error envelope, GitHub flow."""

import pytest
from fastapi.testclient import TestClient

from devpulse.api import create_app
from devpulse.config import Settings
from devpulse.llm import NullLLMAdapter, set_adapter
from devpulse.store import SnapshotStore
from devpulse.sync import GitHubError
from devpulse.validation import ValidationError, ValidationErrorKind


@pytest.fixture
def app(store):
    return create_app(store=store, settings=Settings())


@pytest.fixture
def client(app):
    return TestClient(app)


class TestAppFactory:
    def test_creates_app(self, app):
        assert app.title == "DevPulse"

    def test_seeds_from_snapshot_path(self, snapshot_file):
        app = create_app(settings=Settings(snapshot_path=str(snapshot_file)))
        assert len(app.state.store.snapshot.commits) == 5

    def test_preconfigured_repository(self):
        settings = Settings(github_owner="acme", github_repo="demo", github_token="t")
        app = create_app(store=SnapshotStore(), settings=settings)
        status = TestClient(app).get("/api/github/status").json()
        assert status["connected"] is True
        assert status["hasToken"] is True


class TestSystem:
    def test_ping(self, client):
        body = client.get("/ping").json()
        assert body["status"] == "ok"
        assert body["timestamp"].endswith("Z")

    def test_metrics(self, client):
        client.get("/api/blockers")
        resp = client.get("/metrics")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert 'devpulse_http_requests_total{method="GET",path="/api/blockers",status="200"} 1' in resp.text
        assert "devpulse_health_score " in resp.text
        assert 'devpulse_blockers{severity="critical"} 1' in resp.text


class TestHealthRoutes:
    def test_radar(self, client):
        body = client.get("/api/health").json()
        assert set(body) == {"healthScore", "velocity", "contributions", "badges"}
        assert body["badges"]["blockerCount"] == 4

    def test_score(self, client):
        body = client.get("/api/health/score").json()
        assert 0 <= body["overall"] <= 100
        assert set(body["breakdown"]) == {"deliveryRisk", "integrationRisk", "stabilityRisk"}

    def test_trend(self, client):
        trend = client.get("/api/health/trend").json()["trend"]
        assert trend[0]["date"] == "2026-02-12"

    def test_velocity_and_contributions(self, client):
        assert client.get("/api/health/velocity").json()[0]["Carol"] == 1
        names = [s["name"] for s in client.get("/api/health/contributions").json()]
        assert names == ["Alice", "Bob", "Carol"]

    def test_versioned_prefix(self, client):
        assert client.get("/v1/health/score").status_code == 200


class TestBlockerRoutes:
    def test_list(self, client):
        body = client.get("/api/blockers").json()
        assert [b["id"] for b in body] == ["b1", "b2", "b3", "b4"]
        assert body[0]["affectedModules"] == ["Frontend"]
        assert client.get("/api/blockers/list").json() == body

    def test_severity_filter(self, client):
        body = client.get("/api/blockers", params={"severity": "critical"}).json()
        assert [b["type"] for b in body] == ["inactive_member"]

    def test_bad_severity(self, client):
        resp = client.get("/api/blockers", params={"severity": "urgent"})
        assert resp.status_code == 400
        assert resp.json()["error"].startswith("query.severity")

    def test_ghosting_and_dashboard(self, client):
        ghosts = client.get("/api/blockers/ghosting").json()
        assert [g["name"] for g in ghosts] == ["Carol"]
        dashboard = client.get("/api/blockers/dashboard").json()
        assert len(dashboard["blockers"]) == 4
        assert dashboard["ghostingAlerts"] == ghosts


class TestModuleRoutes:
    def test_integration(self, client):
        body = client.get("/api/integration").json()
        assert [r["module"] for r in body] == ["Backend", "Database", "Frontend"]

    def test_integration_module_case_insensitive(self, client):
        body = client.get("/api/integration/frontend").json()
        assert body == {"module": "Frontend", "risk": 83, "status": "isolated", "dependencies": ["Backend"]}

    def test_integration_unknown_module(self, client):
        resp = client.get("/api/integration/payments")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Module not found"}

    def test_bus_factor(self, client):
        body = client.get("/api/busfactor").json()
        assert body["contributors"] == ["Alice", "Bob", "Carol"]
        assert body["data"][0] == [0, 100, 0]

    def test_critical(self, client):
        assert len(client.get("/api/busfactor/critical").json()) == 3
        assert client.get("/api/busfactor/critical", params={"threshold": 100}).status_code == 200
        assert client.get("/api/busfactor/critical", params={"threshold": 101}).status_code == 400


class TestSimulationRoutes:
    def test_dashboard(self, client):
        body = client.get("/api/simulation").json()
        assert [s["id"] for s in body["scenarios"]] == ["sim1", "sim2", "sim3"]
        assert 0 <= body["currentHealth"] <= 100
        assert client.get("/api/simulation/scenarios").json() == body["scenarios"]

    def test_run(self, client):
        body = client.get("/api/simulation/run/sim1").json()
        assert body["scenario"]["prId"] == "pr1"
        assert body["projectedHealth"] == max(0, body["currentHealth"] - 10)

    def test_run_unknown(self, client):
        resp = client.get("/api/simulation/run/sim42")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Scenario not found"}


class TestCommitRoutes:
    def test_list_and_filters(self, client):
        assert len(client.get("/api/commits").json()) == 5
        assert [c["id"] for c in client.get("/api/commits", params={"author": "u1"}).json()] == ["c1", "c2"]
        assert [c["id"] for c in client.get("/api/commits", params={"module": "backend"}).json()] == ["c3", "c4"]

    def test_get(self, client):
        body = client.get("/api/commits/c3").json()
        assert body["flagged"] is True
        assert client.get("/api/commits/c99").status_code == 404

    def test_honesty(self, client):
        body = client.get("/api/commits/honesty").json()
        assert [h["commitId"] for h in body] == ["c3"]
        page = client.get("/api/commits/honesty-page").json()
        assert len(page["commits"]) == 5
        assert page["honesty"] == body
        assert page["summary"] == {
            "total": 5,
            "flagged": 1,
            "averageMatchScore": body[0]["matchScore"],
        }


class TestTeamAndWorkRoutes:
    def test_team(self, client):
        body = client.get("/api/team").json()
        assert body["repo"] == "acme/demo"
        assert len(body["members"]) == 3

    def test_member(self, client):
        assert client.get("/api/team/u2").json()["name"] == "Bob"
        assert client.get("/api/team/members/u2").json()["name"] == "Bob"
        resp = client.get("/api/team/u9")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Member not found"}

    def test_active_work(self, client):
        body = client.get("/api/work").json()
        assert [w["status"] for w in body] == ["active", "active", "inactive"]
        assert client.get("/api/work/active").json() == body

    def test_work_map(self, client):
        body = client.get("/api/work/map").json()
        assert [c["id"] for c in body["recentCommits"]] == ["c1", "c2", "c3", "c4", "c5"]

    def test_commits_by_author(self, client):
        assert len(client.get("/api/work/u2/commits").json()) == 2
        assert len(client.get("/api/work/commits/u2").json()) == 2
        assert client.get("/api/work/u9/commits").json() == []


class TestAdvisorRoutes:
    def test_ask(self, client):
        set_adapter(NullLLMAdapter())
        body = client.post("/api/advisor", json={"question": "Who needs help?"}).json()
        assert body["source"] == "keyword"
        assert "Carol" in body["response"]
        assert client.post("/api/advisor/ask", json={"question": "hi"}).json()["confidence"] == 85

    def test_empty_question(self, client):
        resp = client.post("/api/advisor", json={"question": ""})
        assert resp.status_code == 400
        assert "question" in resp.json()["error"]

    def test_missing_body(self, client):
        assert client.post("/api/advisor").status_code == 400

    def test_suggestions(self, client):
        assert "Summarize project status" in client.get("/api/advisor/suggestions").json()


class TestGitHubRoutes:
    def test_status(self, client):
        body = client.get("/api/github/status").json()
        assert body["connected"] is False
        assert body["syncing"] is False

    def test_sync_requires_connection(self, client):
        resp = client.post("/api/github/sync")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Not connected to GitHub"}

    def test_connect_validation(self, client):
        resp = client.post("/api/github/connect", json={"owner": "acme"})
        assert resp.status_code == 400
        assert "repo" in resp.json()["error"]

    def test_connect(self, client, store, monkeypatch):
        async def fake_sync(store, owner, repo, token="", **kwargs):
            store.update_status(owner=owner, repo=repo, token=token)
            return {"repo": f"{owner}/{repo}", "commits": 3}

        monkeypatch.setattr("devpulse.api.routers.github.sync_repository", fake_sync)
        body = client.post(
            "/api/github/connect", json={"owner": "acme", "repo": "demo", "token": "t"},
        ).json()
        assert body == {"status": "connected", "synced": True, "repo": "acme/demo", "commits": 3}
        assert client.get("/api/github/status").json()["connected"] is True

        body = client.post("/api/github/sync").json()
        assert body["status"] == "synced"

    def test_connect_failure_forgets_repository(self, client, store, monkeypatch):
        async def fake_sync(store, owner, repo, token="", **kwargs):
            store.update_status(owner=owner, repo=repo, token=token)
            raise GitHubError(404, "Not Found")

        monkeypatch.setattr("devpulse.api.routers.github.sync_repository", fake_sync)
        resp = client.post("/api/github/connect", json={"owner": "acme", "repo": "nope"})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Not Found"}
        assert store.status.connected is False
        assert len(store.snapshot.commits) == 5

    def test_sync_validation_error(self, client, store, monkeypatch):
        async def fake_sync(*args, **kwargs):
            raise ValidationError(ValidationErrorKind.UNPARSEABLE_DATE, "commit", "date", "??")

        monkeypatch.setattr("devpulse.api.routers.github.sync_repository", fake_sync)
        store.update_status(owner="acme", repo="demo")
        resp = client.post("/api/github/sync")
        assert resp.status_code == 422
        assert resp.json()["kind"] == "unparseable_date"

    def test_unexpected_error(self, app, store, monkeypatch):
        async def fake_sync(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("devpulse.api.routers.github.sync_repository", fake_sync)
        store.update_status(owner="acme", repo="demo")
        resp = TestClient(app, raise_server_exceptions=False).post("/api/github/sync")
        assert resp.status_code == 500
        assert resp.json() == {"error": "boom"}

    def test_disconnect(self, client, store):
        from devpulse.models import Snapshot
        store.update_status(owner="acme", repo="demo")
        store.replace(Snapshot())
        body = client.post("/api/github/disconnect").json()
        assert body == {"status": "disconnected"}
        assert store.status.connected is False
        assert len(store.snapshot.commits) == 5
