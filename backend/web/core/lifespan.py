"""Application lifespan management."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend.web.core.config import WORKSPACE_ROOT
from backend.web.services.bridge_service import build_components
from config.loader import load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for startup and shutdown."""
    settings = load_settings(workspace_root=WORKSPACE_ROOT)
    components = build_components(settings)

    app.state.settings = settings
    app.state.bridge = components.bridge
    app.state.run_client = components.run_client
    app.state.registry = components.registry
    app.state.repo_selection = components.repo_selection
    app.state.token_issuer = components.token_issuer

    try:
        yield
    finally:
        for closeable in (components.registry, components.token_issuer, components.run_client):
            if closeable is None:
                continue
            try:
                await closeable.aclose()
            except Exception as e:
                logger.warning("Error closing %s: %s", type(closeable).__name__, e)
