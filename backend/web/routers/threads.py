"""Thread listing, snapshot and run streaming endpoints."""

import logging
from typing import Annotated, Any

import httpx
from fastapi import APIRouter, Depends, HTTPException
from sse_starlette.sse import EventSourceResponse

from backend.web.core.config import SSE_HEADERS
from backend.web.core.dependencies import get_app, get_bridge, get_repo_selection
from backend.web.models.requests import CreateThreadRequest, ResumeRequest, StreamRequest, UpdateStateRequest
from backend.web.services.bridge_service import serialize_snapshot, sse_run_events
from bridge.errors import ThreadNotFound
from bridge.messages import role_of
from bridge.repo_selection import RepoSelection
from bridge.streaming import StreamingBridge
from bridge.types import Interrupt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/threads", tags=["threads"])


def _bad_gateway(action: str, e: httpx.HTTPError) -> HTTPException:
    logger.warning("%s failed: %s", action, e, exc_info=True)
    return HTTPException(status_code=502, detail=f"{action} failed: {e}")


@router.post("")
async def create_thread(
    payload: CreateThreadRequest | None = None,
    bridge: Annotated[StreamingBridge, Depends(get_bridge)] = None,
) -> dict[str, Any]:
    """Register a new conversation backed by a fresh run-service thread."""
    try:
        record = await bridge.registry.create(title=payload.title if payload else None)
    except httpx.HTTPError as e:
        raise _bad_gateway("Thread creation", e) from e
    return {"thread_id": record.context_id, "external_id": record.external_id, "title": record.title}


@router.get("")
async def list_threads(bridge: Annotated[StreamingBridge, Depends(get_bridge)] = None) -> dict[str, Any]:
    try:
        records = await bridge.registry.list_threads()
    except httpx.HTTPError as e:
        raise _bad_gateway("Thread listing", e) from e
    return {
        "threads": [
            {"thread_id": r.context_id, "external_id": r.external_id, "title": r.title}
            for r in records
        ]
    }


@router.get("/{context_id}/state")
async def get_thread_state(
    context_id: str,
    bridge: Annotated[StreamingBridge, Depends(get_bridge)] = None,
) -> dict[str, Any]:
    """Messages and pending interrupt, for switching to an existing thread."""
    try:
        snapshot = await bridge.switch_to_thread(context_id)
    except ThreadNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except httpx.HTTPError as e:
        raise _bad_gateway("Loading thread state", e) from e
    return {"thread_id": context_id, **serialize_snapshot(snapshot)}


@router.post("/{context_id}/state")
async def update_thread_state(
    context_id: str,
    payload: UpdateStateRequest,
    app: Annotated[Any, Depends(get_app)] = None,
) -> dict[str, Any]:
    try:
        thread_id = await app.state.registry.resolve_thread(context_id)
        return await app.state.run_client.update_state(thread_id, payload.values, as_node=payload.as_node)
    except ThreadNotFound as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except httpx.HTTPError as e:
        raise _bad_gateway("Updating thread state", e) from e


@router.post("/{context_id}/runs/stream")
async def stream_run(
    context_id: str,
    payload: StreamRequest,
    bridge: Annotated[StreamingBridge, Depends(get_bridge)] = None,
    selection: Annotated[RepoSelection, Depends(get_repo_selection)] = None,
) -> EventSourceResponse:
    """Start a run on the thread and stream its message events as SSE."""
    if not payload.messages:
        raise HTTPException(status_code=400, detail="messages cannot be empty")
    try:
        roles = [role_of(m) for m in payload.messages]
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    if roles[-1] != "user":
        raise HTTPException(status_code=400, detail="last message must be a user message")

    # @@@repo-snapshot - bind the repo at request time; later picker changes must not leak into this run
    repo = selection.snapshot()
    interrupts: list[Interrupt] = []
    events = bridge.stream(context_id, payload.messages, repo, on_interrupt=interrupts.append)
    return EventSourceResponse(sse_run_events(events, interrupts), headers=SSE_HEADERS)


@router.post("/{context_id}/runs/resume")
async def resume_run(
    context_id: str,
    payload: ResumeRequest,
    bridge: Annotated[StreamingBridge, Depends(get_bridge)] = None,
) -> EventSourceResponse:
    """Answer the pending interrupt and stream the continued run."""
    interrupts: list[Interrupt] = []
    events = bridge.resume(context_id, payload.value, on_interrupt=interrupts.append)
    return EventSourceResponse(sse_run_events(events, interrupts), headers=SSE_HEADERS)
