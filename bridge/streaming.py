"""Streaming bridge between the thread registry and the run service.

The registry decides *which* thread a UI conversation maps to; the run
service produces the content. ``StreamingBridge`` joins the two into a
single ordered stream of message events for a chat UI.

Callers must not start a second ``stream``/``resume`` for a thread while a
previous one for that thread is still being consumed. The bridge does not
lock around this.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Sequence
from typing import Any

from langchain_core.messages import BaseMessage

from bridge.errors import RunStreamError
from bridge.messages import coerce_messages, message_to_wire
from bridge.registry import ThreadRegistryClient
from bridge.runs import RunClient
from bridge.types import Interrupt, RepoTarget, RunEvent, ThreadSnapshot
from config.schema import RunConfig

logger = logging.getLogger(__name__)

InterruptCallback = Callable[[Interrupt], Any]


class StreamingBridge:
    """Orchestrates thread resolution, run invocation and event forwarding."""

    def __init__(self, registry: ThreadRegistryClient, runs: RunClient, run_config: RunConfig):
        self.registry = registry
        self.runs = runs
        self.run_config = run_config

    async def stream(
        self,
        context_id: str,
        messages: Sequence[BaseMessage | dict[str, Any]],
        repo: RepoTarget,
        *,
        on_interrupt: InterruptCallback | None = None,
    ) -> AsyncIterator[RunEvent]:
        """Run the agent on ``messages`` and yield its message events.

        ``messages`` is the full visible history plus the new user message.
        ``repo`` is bound for the whole run; pass a snapshot, not a live
        selection.
        """
        thread_id = await self.registry.ensure_thread(context_id)
        run_input = {
            "messages": [message_to_wire(m) for m in messages],
            "repo": repo.as_input(),
        }
        logger.info("Starting run on thread %s (repo=%s@%s)", thread_id, repo.url or "-", repo.branch or "-")
        events = self.runs.run(thread_id, run_input, self.run_config.as_run_config())
        async for event in self._forward(thread_id, events, on_interrupt):
            yield event

    async def resume(
        self,
        context_id: str,
        value: Any,
        *,
        on_interrupt: InterruptCallback | None = None,
    ) -> AsyncIterator[RunEvent]:
        """Resume a run paused on an interrupt with ``value`` as the answer.

        The paused run keeps the repo it was started with. The thread must
        already exist.
        """
        thread_id = await self.registry.resolve_thread(context_id)
        logger.info("Resuming run on thread %s", thread_id)
        events = self.runs.run(thread_id, None, self.run_config.as_run_config(), command={"resume": value})
        async for event in self._forward(thread_id, events, on_interrupt):
            yield event

    async def _forward(
        self,
        thread_id: str,
        events: AsyncIterator[RunEvent],
        on_interrupt: InterruptCallback | None,
    ) -> AsyncIterator[RunEvent]:
        async for event in events:
            if event.is_message:
                yield event
            elif event.is_error:
                raise RunStreamError(event.data)
            else:
                pending = event.interrupts()
                if pending:
                    interrupt = Interrupt(task_index=0, payload=pending[0])
                    logger.info("Run on thread %s interrupted: %s", thread_id, interrupt.value)
                    if on_interrupt is not None:
                        on_interrupt(interrupt)

    async def resolve_snapshot(self, thread_id: str) -> ThreadSnapshot:
        """Current messages and pending interrupt of an existing thread."""
        state = await self.runs.get_state(thread_id) or {}

        values = state.get("values") or {}
        raw_messages = values.get("messages") if isinstance(values, dict) else None
        messages = coerce_messages(raw_messages or [])

        interrupts: list[Interrupt] = []
        tasks = state.get("tasks") or []
        if tasks:
            pending = tasks[0].get("interrupts") or []
            # One human-input gate at a time: later tasks and extra interrupts are ignored
            if pending:
                interrupts.append(Interrupt(task_index=0, payload=pending[0]))

        return ThreadSnapshot(messages=messages, interrupts=interrupts)

    async def switch_to_thread(self, context_id: str) -> ThreadSnapshot:
        """Snapshot of an existing conversation. Unknown contexts raise ``ThreadNotFound``."""
        return await self.resolve_snapshot(await self.registry.resolve_thread(context_id))
