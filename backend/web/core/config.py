"""Configuration constants for the bridge web backend."""

import os
from pathlib import Path

# Project whose .swe-agent/bridge.json overrides user config
WORKSPACE_ROOT = Path(os.environ.get("SWE_AGENT_WORKSPACE", str(Path.cwd()))).expanduser().resolve()

DEFAULT_PORT = 8001

# SSE response headers: disable proxy buffering for real-time streaming
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}
