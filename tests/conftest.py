"""Pytest configuration for bridge tests.

Ensures the project root and tests/ (for ``fakes``) are in sys.path.
"""

import sys
from pathlib import Path

import pytest

tests_root = Path(__file__).parent
project_root = tests_root.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
if str(tests_root) not in sys.path:
    sys.path.append(str(tests_root))

_ENV_VARS = (
    "LANGGRAPH_API_URL",
    "LANGGRAPH_API_KEY",
    "LANGSMITH_API_KEY",
    "LANGGRAPH_ASSISTANT_ID",
    "ASSISTANT_BASE_URL",
    "ASSISTANT_API_KEY",
    "CODE_SUGGESTIONS_MODEL",
    "LOCALIZATION_MODEL",
    "GITHUB_TOKEN",
)


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep developer env vars and ~/.swe-agent out of config resolution."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
