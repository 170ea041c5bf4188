"""Configuration schema for the conversation bridge using Pydantic.

Groups:
- LangGraph run service (URL, assistant/graph id, stream mode)
- Assistant cloud thread registry (base URL, API key, user/workspace)
- Per-run configuration forwarded to the agent graph (models, prompts, GitHub token)

Unset values fall back to environment variables in ``BridgeSettings``.
"""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from config.prompts import (
    CODE_SUGGESTIONS_SYSTEM_PROMPT,
    FILE_LOCALIZATION_SYSTEM_PROMPT,
    PACKAGE_LOCALIZATION_SYSTEM_PROMPT,
)

DEFAULT_LANGGRAPH_URL = "http://localhost:2024"
DEFAULT_ASSISTANT_ID = "agent"

# ============================================================================
# Run service
# ============================================================================


class LangGraphConfig(BaseModel):
    """LangGraph server connection."""

    api_url: str | None = Field(None, description="LangGraph API URL (falls back to env vars)")
    api_key: str | None = Field(None, description="LangGraph / LangSmith API key")
    assistant_id: str | None = Field(None, description="Assistant or graph id runs are started against")
    stream_mode: list[str] = Field(default_factory=lambda: ["messages", "updates"], description="Stream modes requested per run")

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v else v

    @field_validator("stream_mode")
    @classmethod
    def require_messages_mode(cls, v: list[str]) -> list[str]:
        """Message events are the only content the bridge forwards."""
        if not any(mode.startswith("messages") for mode in v):
            raise ValueError("stream_mode must include a messages mode")
        return v


# ============================================================================
# Thread registry
# ============================================================================


class CloudConfig(BaseModel):
    """Assistant cloud thread registry. Disabled when base_url is unset."""

    base_url: str | None = Field(None, description="Registry base URL (falls back to env vars)")
    api_key: str | None = Field(None, description="Workspace API key used to issue tokens")
    user_id: str = Field("anonymous", description="User the issued tokens belong to")
    workspace_id: str | None = Field(None, description="Workspace id (defaults to user_id)")

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)


# ============================================================================
# Per-run configuration
# ============================================================================


class RunConfig(BaseModel):
    """Configurable values attached to every run.

    Forwarded verbatim as ``config.configurable``; the bridge never reads it.
    """

    code_suggestions_model: str | None = None
    localization_model: str | None = None
    code_suggestions_system_prompt: str = CODE_SUGGESTIONS_SYSTEM_PROMPT
    file_localization_system_prompt: str = FILE_LOCALIZATION_SYSTEM_PROMPT
    package_localization_system_prompt: str = PACKAGE_LOCALIZATION_SYSTEM_PROMPT
    gh_token: str | None = Field(None, repr=False)
    extra: dict[str, Any] = Field(default_factory=dict, description="Additional configurable keys")

    def as_run_config(self) -> dict[str, Any]:
        configurable = self.model_dump(exclude={"extra"})
        configurable.update(self.extra)
        return {"configurable": configurable}


# ============================================================================
# Main Settings
# ============================================================================


class BridgeSettings(BaseModel):
    """Main bridge configuration.

    Configuration priority (highest to lowest):
    1. Overrides passed to the loader
    2. Project config (.swe-agent/bridge.json)
    3. User config (~/.swe-agent/bridge.json)
    4. System defaults (config/defaults/bridge.json)
    5. Environment variables (for URLs, ids and secrets)
    """

    langgraph: LangGraphConfig = Field(default_factory=LangGraphConfig)
    cloud: CloudConfig = Field(default_factory=CloudConfig)
    run: RunConfig = Field(default_factory=RunConfig)

    @model_validator(mode="after")
    def fill_from_env(self) -> BridgeSettings:
        lg = self.langgraph
        if lg.api_url is None:
            lg.api_url = (os.getenv("LANGGRAPH_API_URL") or DEFAULT_LANGGRAPH_URL).rstrip("/")
        if lg.api_key is None:
            lg.api_key = os.getenv("LANGGRAPH_API_KEY") or os.getenv("LANGSMITH_API_KEY")
        if lg.assistant_id is None:
            lg.assistant_id = os.getenv("LANGGRAPH_ASSISTANT_ID") or DEFAULT_ASSISTANT_ID

        if self.cloud.base_url is None:
            self.cloud.base_url = os.getenv("ASSISTANT_BASE_URL")
        if self.cloud.api_key is None:
            self.cloud.api_key = os.getenv("ASSISTANT_API_KEY")
        if self.cloud.enabled and not self.cloud.api_key:
            raise ValueError("Thread registry enabled but no API key found. Set ASSISTANT_API_KEY.")

        if self.run.code_suggestions_model is None:
            self.run.code_suggestions_model = os.getenv("CODE_SUGGESTIONS_MODEL")
        if self.run.localization_model is None:
            self.run.localization_model = os.getenv("LOCALIZATION_MODEL")
        if self.run.gh_token is None:
            self.run.gh_token = os.getenv("GITHUB_TOKEN")

        return self
