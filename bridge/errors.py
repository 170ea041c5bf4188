"""Bridge error taxonomy.

Transport failures from the registry or the run service are not wrapped:
they propagate as the underlying ``httpx`` / ``langgraph_sdk`` exceptions.
"""

from __future__ import annotations

from typing import Any


class BridgeError(Exception):
    """Base class for errors raised by the bridge itself."""


class ThreadNotFound(BridgeError):
    """The registry record for a conversation has no external thread id yet."""

    def __init__(self, context_id: str | None):
        self.context_id = context_id
        super().__init__(f"Thread not found for context {context_id!r}")


class RunStreamError(BridgeError):
    """The run service reported an ``error`` event mid-stream."""

    def __init__(self, payload: Any):
        self.payload = payload
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error") or str(payload)
        else:
            message = str(payload)
        super().__init__(f"Run failed: {message}")
