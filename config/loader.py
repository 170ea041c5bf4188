"""Three-tier bridge configuration loader.

Configuration priority (highest to lowest):
1. Overrides (CLI / tests)
2. Project config (.swe-agent/bridge.json in workspace)
3. User config (~/.swe-agent/bridge.json)
4. System defaults (config/defaults/bridge.json)

Environment variables fill whatever is still unset (see BridgeSettings).
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from config.schema import BridgeSettings

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".swe-agent"
CONFIG_FILENAME = "bridge.json"


class BridgeLoader:
    """Loads BridgeSettings from defaults, user and project JSON files."""

    def __init__(self, workspace_root: str | Path | None = None):
        self.workspace_root = Path(workspace_root).resolve() if workspace_root else None
        self._system_defaults_dir = Path(__file__).parent / "defaults"

    def load(self, overrides: dict[str, Any] | None = None) -> BridgeSettings:
        merged = self._deep_merge(
            self._load_json(self._system_defaults_dir / CONFIG_FILENAME),
            self._load_json(Path.home() / CONFIG_DIRNAME / CONFIG_FILENAME),
            self._load_project_config(),
        )
        if overrides:
            merged = self._deep_merge(merged, overrides)

        merged = self._expand_env_vars(merged)
        merged = self._remove_none_values(merged)
        return BridgeSettings(**merged)

    def _load_project_config(self) -> dict[str, Any]:
        if not self.workspace_root:
            return {}
        return self._load_json(self.workspace_root / CONFIG_DIRNAME / CONFIG_FILENAME)

    @staticmethod
    def _load_json(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Ignoring unreadable config %s: %s", path, e)
            return {}

    def _deep_merge(self, *dicts: dict[str, Any]) -> dict[str, Any]:
        """Deep merge multiple dictionaries. Later dicts override earlier ones."""
        result: dict[str, Any] = {}
        for d in dicts:
            for key, value in d.items():
                if key not in result:
                    result[key] = value
                elif value is None:
                    continue
                elif isinstance(value, dict) and isinstance(result[key], dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = value
        return result

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand ${VAR} and ~ in string values."""
        if isinstance(obj, dict):
            return {k: self._expand_env_vars(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [self._expand_env_vars(v) for v in obj]
        if isinstance(obj, str):
            return os.path.expandvars(os.path.expanduser(obj))
        return obj

    def _remove_none_values(self, obj: Any) -> Any:
        """Recursively remove None values to allow Pydantic defaults."""
        if isinstance(obj, dict):
            return {k: self._remove_none_values(v) for k, v in obj.items() if v is not None}
        if isinstance(obj, list):
            return [self._remove_none_values(v) for v in obj if v is not None]
        return obj


def load_settings(
    workspace_root: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> BridgeSettings:
    """Convenience function to load bridge configuration."""
    return BridgeLoader(workspace_root=workspace_root).load(overrides=overrides)
