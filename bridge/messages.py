"""Conversion between run-service wire dicts and langchain message objects."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage

_ROLE_BY_TYPE = {
    "human": "user",
    "user": "user",
    "ai": "assistant",
    "assistant": "assistant",
    "AIMessageChunk": "assistant",
    "tool": "tool",
    "system": "system",
}


def role_of(message: BaseMessage | dict[str, Any]) -> str:
    """Return ``user``, ``assistant``, ``tool`` or ``system``."""
    if isinstance(message, BaseMessage):
        kind = message.type
    else:
        kind = message.get("role") or message.get("type") or ""
    try:
        return _ROLE_BY_TYPE[kind]
    except KeyError:
        raise ValueError(f"Unknown message type: {kind!r}") from None


def message_from_wire(data: BaseMessage | dict[str, Any]) -> BaseMessage:
    """Build a message object from a ``{"type"|"role", "content", ...}`` dict.

    Keys other than ``type``/``role`` are kept on the message.
    """
    if isinstance(data, BaseMessage):
        return data

    role = role_of(data)
    fields = {k: v for k, v in data.items() if k not in ("type", "role")}
    fields["content"] = fields.get("content") or ""

    if role == "user":
        return HumanMessage(**fields)
    if role == "assistant":
        fields["tool_calls"] = fields.get("tool_calls") or []
        return AIMessage(**fields)
    if role == "tool":
        fields.setdefault("tool_call_id", "")
        return ToolMessage(**fields)
    return SystemMessage(**fields)


def message_to_wire(message: BaseMessage | dict[str, Any]) -> dict[str, Any]:
    """Serialize a message into the dict shape the run service accepts.

    Wire dicts pass through untouched; message objects are dumped with every
    field.
    """
    if isinstance(message, dict):
        return message
    return message.model_dump()


def coerce_messages(messages: Iterable[BaseMessage | dict[str, Any]] | None) -> list[BaseMessage]:
    return [message_from_wire(m) for m in messages or []]
