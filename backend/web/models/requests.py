"""Pydantic request models for the bridge web API."""

from typing import Any

from pydantic import BaseModel, Field


class RepoRequest(BaseModel):
    url: str = ""
    src_folder: str = ""
    branch: str = ""


class CreateThreadRequest(BaseModel):
    title: str | None = None


class StreamRequest(BaseModel):
    # Full visible history plus the new user message, as wire dicts
    messages: list[dict[str, Any]] = Field(default_factory=list)


class ResumeRequest(BaseModel):
    value: Any = None


class UpdateStateRequest(BaseModel):
    values: dict[str, Any] | None = None
    as_node: str | None = None
