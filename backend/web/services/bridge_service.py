"""Bridge wiring and SSE serialization for the web backend."""

import json
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from dataclasses import dataclass
from typing import Any

from bridge.credentials import CloudTokenIssuer, TokenSupplier
from bridge.errors import ThreadNotFound
from bridge.messages import message_to_wire
from bridge.registry import CloudThreadRegistry, InMemoryThreadRegistry, ThreadRegistryClient
from bridge.repo_selection import RepoSelection
from bridge.runs import LangGraphRunClient
from bridge.streaming import StreamingBridge
from bridge.types import Interrupt, RunEvent, ThreadSnapshot
from config.schema import BridgeSettings

logger = logging.getLogger(__name__)


@dataclass
class BridgeComponents:
    bridge: StreamingBridge
    run_client: LangGraphRunClient
    registry: ThreadRegistryClient
    repo_selection: RepoSelection
    token_issuer: TokenSupplier | None = None


def build_components(settings: BridgeSettings) -> BridgeComponents:
    """Wire registry, run client and bridge from settings.

    Without a configured cloud registry, threads are tracked in memory.
    """
    run_client = LangGraphRunClient.from_settings(settings)
    token_issuer: CloudTokenIssuer | None = None
    cloud = settings.cloud
    if cloud.enabled:
        token_issuer = CloudTokenIssuer(cloud.base_url, cloud.api_key, cloud.user_id, cloud.workspace_id)
        registry: ThreadRegistryClient = CloudThreadRegistry(cloud.base_url, token_issuer, run_client.create_thread)
    else:
        logger.info("No thread registry configured; tracking threads in memory")
        registry = InMemoryThreadRegistry(run_client.create_thread)

    return BridgeComponents(
        bridge=StreamingBridge(registry, run_client, settings.run),
        run_client=run_client,
        registry=registry,
        repo_selection=RepoSelection(),
        token_issuer=token_issuer,
    )


def serialize_interrupt(interrupt: Interrupt) -> dict[str, Any]:
    return {"task_index": interrupt.task_index, "value": interrupt.value, "payload": interrupt.payload}


def serialize_snapshot(snapshot: ThreadSnapshot) -> dict[str, Any]:
    return {
        "messages": [message_to_wire(m) for m in snapshot.messages],
        "interrupts": [serialize_interrupt(i) for i in snapshot.interrupts],
    }


async def sse_run_events(
    events: AsyncIterator[RunEvent],
    interrupts: list[Interrupt] | None = None,
) -> AsyncGenerator[dict[str, str], None]:
    """Translate a bridge event stream into SSE event dicts.

    Failures end the stream with an ``error`` event; success ends with
    ``done``, carrying any interrupt collected while streaming.
    """
    try:
        async for event in events:
            yield {"event": event.event, "data": json.dumps(event.data, ensure_ascii=False, default=str)}
    except ThreadNotFound as e:
        logger.warning("Stream rejected: %s", e)
        yield {"event": "error", "data": json.dumps({"error": "thread_not_found", "message": str(e)})}
        return
    except Exception as e:
        logger.warning("Run stream failed: %s", e, exc_info=True)
        yield {"event": "error", "data": json.dumps({"error": type(e).__name__, "message": str(e)})}
        return

    done: dict[str, Any] = {}
    if interrupts:
        done["interrupt"] = serialize_interrupt(interrupts[-1])
    yield {"event": "done", "data": json.dumps(done, ensure_ascii=False, default=str)}
