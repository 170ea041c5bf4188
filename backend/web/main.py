"""Conversation bridge web backend - FastAPI application."""

import os

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.web.core.config import DEFAULT_PORT
from backend.web.core.lifespan import lifespan
from backend.web.routers import auth, repo, threads

app = FastAPI(title="SWE Agent Bridge", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(threads.router)
app.include_router(repo.router)
app.include_router(auth.router)


def _resolve_port() -> int:
    """Resolve backend port: env var > default."""
    port = os.environ.get("SWE_AGENT_BACKEND_PORT") or os.environ.get("PORT")
    return int(port) if port else DEFAULT_PORT


if __name__ == "__main__":
    uvicorn.run("backend.web.main:app", host="0.0.0.0", port=_resolve_port(), reload=True)
