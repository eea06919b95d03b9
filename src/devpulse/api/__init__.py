"""FastAPI application factory for DevPulse."""

from __future__ import annotations

import logging

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from devpulse.api.routers import (
    advisor,
    blockers,
    busfactor,
    commits,
    github,
    health,
    integration,
    simulation,
    system,
    team,
    work,
)
from devpulse.config import Settings, load_settings
from devpulse.observability import add_observability_middleware
from devpulse.store import SnapshotStore
from devpulse.sync import GitHubError
from devpulse.validation import ValidationError

log = logging.getLogger("devpulse.api")


def create_app(
    store: SnapshotStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build and return a configured FastAPI application.

    Without an explicit ``store`` one is created and, when
    ``DEVPULSE_SNAPSHOT_PATH`` is set, seeded from that file. GitHub
    coordinates from the environment pre-configure the sync status so
    ``POST /github/sync`` works without a prior connect.
    """
    settings = settings or load_settings()
    app = FastAPI(
        title="DevPulse",
        description="Repository health analytics for small software teams",
        version="0.1.0",
    )

    if store is None:
        store = SnapshotStore()
        if settings.snapshot_path:
            store.load_file(settings.snapshot_path)
    if settings.github_configured and not store.status.connected:
        store.update_status(
            owner=settings.github_owner,
            repo=settings.github_repo,
            token=settings.github_token,
        )
    app.state.store = store
    app.state.settings = settings

    # ---------------------------------------------------------------
    # Exception handlers: every error body is {"error": "..."}
    # ---------------------------------------------------------------

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            loc = ".".join(str(part) for part in first.get("loc", []))
            msg = first.get("msg", "Invalid input")
            detail = f"{loc}: {msg}" if loc else msg
        else:
            detail = "Invalid JSON body"
        return JSONResponse(
            status_code=400,
            content={"error": detail},
        )

    @app.exception_handler(ValidationError)
    async def snapshot_validation_handler(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content=exc.to_dict())

    @app.exception_handler(GitHubError)
    async def github_error_handler(request: Request, exc: GitHubError):
        return JSONResponse(status_code=exc.status, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        log.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc)},
        )

    # ---------------------------------------------------------------
    # Middleware (last added = outermost)
    # ---------------------------------------------------------------

    add_observability_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------------------------------------------------------------
    # Routers: mounted at /api (dashboard) and /v1 (versioned)
    # ---------------------------------------------------------------

    api = APIRouter()
    api.include_router(health.router)
    api.include_router(blockers.router)
    api.include_router(integration.router)
    api.include_router(busfactor.router)
    api.include_router(simulation.router)
    api.include_router(commits.router)
    api.include_router(team.router)
    api.include_router(work.router)
    api.include_router(github.router)
    api.include_router(advisor.router)

    app.include_router(api, prefix="/api")
    app.include_router(api, prefix="/v1")

    # Liveness + metrics (no version prefix)
    app.include_router(system.router)

    return app
