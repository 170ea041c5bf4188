"""
Run service clients.

The run service owns message content: it executes the agent graph against a
thread, streams its output and reports pending interrupts in thread state.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import TYPE_CHECKING, Any

from langgraph_sdk import get_client

from bridge.types import RunEvent

if TYPE_CHECKING:
    from langgraph_sdk.client import LangGraphClient

    from config.schema import BridgeSettings

logger = logging.getLogger(__name__)


class RunClient(ABC):
    """Starts/resumes runs and reads thread state."""

    @abstractmethod
    def run(
        self,
        thread_id: str,
        input: dict[str, Any] | None,
        config: dict[str, Any],
        *,
        command: dict[str, Any] | None = None,
    ) -> AsyncIterator[RunEvent]:
        """Start (or resume) a run and yield its events in emission order.

        Single pass: iterating again requires a new call, which starts a new run.
        """

    @abstractmethod
    async def get_state(self, thread_id: str) -> dict[str, Any]:
        """Point-in-time thread state: ``{"values": ..., "tasks": [...]}``."""


class LangGraphRunClient(RunClient):
    """RunClient backed by a LangGraph server via ``langgraph_sdk``."""

    def __init__(
        self,
        client: LangGraphClient,
        assistant_id: str,
        stream_mode: Sequence[str] = ("messages", "updates"),
    ):
        self._client = client
        self.assistant_id = assistant_id
        self.stream_mode = list(stream_mode)

    @classmethod
    def from_settings(cls, settings: BridgeSettings) -> LangGraphRunClient:
        lg = settings.langgraph
        client = get_client(url=lg.api_url, api_key=lg.api_key)
        return cls(client, lg.assistant_id, lg.stream_mode)

    async def run(
        self,
        thread_id: str,
        input: dict[str, Any] | None,
        config: dict[str, Any],
        *,
        command: dict[str, Any] | None = None,
    ) -> AsyncIterator[RunEvent]:
        logger.debug("Streaming run on thread %s (assistant %s)", thread_id, self.assistant_id)
        stream = self._client.runs.stream(
            thread_id,
            self.assistant_id,
            input=input,
            command=command,
            config=config,
            stream_mode=self.stream_mode,
        )
        async for part in stream:
            yield RunEvent(event=part.event, data=part.data)

    async def get_state(self, thread_id: str) -> dict[str, Any]:
        return await self._client.threads.get_state(thread_id)

    async def create_thread(self) -> str:
        thread = await self._client.threads.create()
        return thread["thread_id"]

    async def create_assistant(self, graph_id: str) -> dict[str, Any]:
        return await self._client.assistants.create(graph_id=graph_id)

    async def update_state(
        self,
        thread_id: str,
        values: dict[str, Any] | None,
        as_node: str | None = None,
    ) -> dict[str, Any]:
        return await self._client.threads.update_state(thread_id, values, as_node=as_node)

    async def aclose(self) -> None:
        await self._client.aclose()
