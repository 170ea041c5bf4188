"""Data model shared by the registry, run client and streaming bridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from langchain_core.messages import BaseMessage

# Stream part kinds forwarded to the UI as message content
MESSAGE_EVENTS = frozenset({"messages", "messages/partial", "messages/complete"})

# Stream parts that may carry an ``__interrupt__`` key
UPDATE_EVENTS = frozenset({"updates", "values"})

ERROR_EVENT = "error"

INTERRUPT_KEY = "__interrupt__"


@dataclass(frozen=True)
class RepoTarget:
    """External repository coordinates a run operates against."""

    url: str = ""
    src_folder: str = ""
    branch: str = ""

    @property
    def is_empty(self) -> bool:
        return not (self.url or self.src_folder or self.branch)

    def as_input(self) -> dict[str, str]:
        return {"url": self.url, "src_folder": self.src_folder, "branch": self.branch}


EMPTY_REPO = RepoTarget()


@dataclass(frozen=True)
class RunEvent:
    """One part of a streamed run, exactly as received from the run service."""

    event: str
    data: Any = None

    @property
    def is_message(self) -> bool:
        # Subgraph parts arrive as "<kind>|<namespace>"
        return self.event.split("|", 1)[0] in MESSAGE_EVENTS

    @property
    def is_error(self) -> bool:
        return self.event == ERROR_EVENT

    def interrupts(self) -> list[Any]:
        """Raw interrupt payloads carried by an ``updates``/``values`` part."""
        if self.event not in UPDATE_EVENTS or not isinstance(self.data, dict):
            return []
        raw = self.data.get(INTERRUPT_KEY)
        if not raw:
            return []
        return list(raw) if isinstance(raw, (list, tuple)) else [raw]


@dataclass(frozen=True)
class Interrupt:
    """A run paused at ``task_index`` waiting for external input."""

    task_index: int
    payload: Any

    @property
    def value(self) -> Any:
        if isinstance(self.payload, dict) and "value" in self.payload:
            return self.payload["value"]
        return self.payload


@dataclass
class ThreadRecord:
    """Registry entry: the UI conversation id and its run-service thread id."""

    context_id: str
    external_id: str | None = None
    title: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class ThreadSnapshot:
    """Point-in-time view of a thread used when switching conversations."""

    messages: list[BaseMessage] = field(default_factory=list)
    interrupts: list[Interrupt] = field(default_factory=list)
