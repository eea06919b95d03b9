"""CLI commands: API server and GitHub sync."""

from __future__ import annotations

import argparse
import asyncio
import json

from devpulse.cli._helpers import _load_store, _out


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from devpulse.api import create_app
    from devpulse.config import load_settings

    settings = load_settings()
    store = _load_store(args) if args.snapshot else None
    app = create_app(store=store, settings=settings)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    return 0


def cmd_sync(args: argparse.Namespace) -> int:
    from devpulse.config import load_settings
    from devpulse.sync import GitHubError, sync_repository

    settings = load_settings()
    owner = args.owner or settings.github_owner
    repo = args.repo or settings.github_repo
    if not owner or not repo:
        return _out({"error": "owner and repo are required (flags or DEVPULSE_GITHUB_OWNER/REPO)"})

    store = _load_store(args)
    try:
        result = asyncio.run(sync_repository(
            store, owner, repo, args.token or settings.github_token, settings=settings,
        ))
    except GitHubError as e:
        return _out(e.to_dict())

    if args.output:
        with open(args.output, "w") as f:
            json.dump(store.snapshot.to_dict(), f, indent=2)
        result["output"] = args.output
    return _out(result)
