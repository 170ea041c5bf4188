"""Conversation streaming bridge: thread registry + LangGraph runs -> one message stream."""

from bridge.errors import BridgeError, RunStreamError, ThreadNotFound
from bridge.registry import CloudThreadRegistry, InMemoryThreadRegistry, ThreadRegistryClient
from bridge.repo_selection import RepoSelection
from bridge.runs import LangGraphRunClient, RunClient
from bridge.streaming import StreamingBridge
from bridge.types import Interrupt, RepoTarget, RunEvent, ThreadRecord, ThreadSnapshot

__all__ = [
    "BridgeError",
    "CloudThreadRegistry",
    "InMemoryThreadRegistry",
    "Interrupt",
    "LangGraphRunClient",
    "RepoSelection",
    "RepoTarget",
    "RunClient",
    "RunEvent",
    "RunStreamError",
    "StreamingBridge",
    "ThreadNotFound",
    "ThreadRecord",
    "ThreadRegistryClient",
    "ThreadSnapshot",
]
