"""FastAPI dependency injection functions."""

from typing import Annotated

from fastapi import Depends, FastAPI, Request

from bridge.repo_selection import RepoSelection
from bridge.streaming import StreamingBridge


async def get_app(request: Request) -> FastAPI:
    """Get FastAPI app instance from request."""
    return request.app


async def get_bridge(app: Annotated[FastAPI, Depends(get_app)]) -> StreamingBridge:
    return app.state.bridge


async def get_repo_selection(app: Annotated[FastAPI, Depends(get_app)]) -> RepoSelection:
    return app.state.repo_selection
