"""
Thread registry clients.

The registry owns conversation identity and listing. Message content lives
in the run service; the registry only maps a UI conversation (``context_id``)
to the run-service thread id (``external_id``).
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from bridge.credentials import TokenSupplier
from bridge.errors import ThreadNotFound
from bridge.types import ThreadRecord

logger = logging.getLogger(__name__)

# Creates a thread in the run service and returns its id
ExternalThreadFactory = Callable[[], Awaitable[str | None]]


class ThreadRegistryClient(ABC):
    """Create-or-get authority for conversation threads."""

    @abstractmethod
    async def create(self, title: str | None = None) -> ThreadRecord:
        """Register a new conversation backed by a fresh external thread."""

    @abstractmethod
    async def get_or_initialize(self, context_id: str) -> ThreadRecord:
        """Return the record for ``context_id``, creating its external thread once.

        ``external_id`` may still be None if the external factory produced none.
        """

    @abstractmethod
    async def find(self, context_id: str) -> ThreadRecord | None:
        """Look up an existing record. Never creates anything."""

    @abstractmethod
    async def list_threads(self) -> list[ThreadRecord]:
        """List registered conversations."""

    async def ensure_thread(self, context_id: str) -> str:
        record = await self.get_or_initialize(context_id)
        if not record.external_id:
            raise ThreadNotFound(context_id)
        return record.external_id

    async def resolve_thread(self, context_id: str) -> str:
        """External id of an already-created thread."""
        record = await self.find(context_id)
        if record is None or not record.external_id:
            raise ThreadNotFound(context_id)
        return record.external_id

    async def aclose(self) -> None:
        return None


class InMemoryThreadRegistry(ThreadRegistryClient):
    """Process-local registry, keyed by context id."""

    def __init__(self, create_external: ExternalThreadFactory):
        self._create_external = create_external
        self._records: dict[str, ThreadRecord] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, context_id: str) -> asyncio.Lock:
        lock = self._locks.get(context_id)
        if lock is None:
            lock = self._locks[context_id] = asyncio.Lock()
        return lock

    async def create(self, title: str | None = None) -> ThreadRecord:
        context_id = str(uuid.uuid4())
        record = ThreadRecord(context_id=context_id, external_id=await self._create_external(), title=title)
        self._records[context_id] = record
        return record

    async def get_or_initialize(self, context_id: str) -> ThreadRecord:
        record = self._records.get(context_id)
        if record is not None and record.external_id:
            return record

        # @@@single-create - concurrent callers for one context must share one external thread
        async with self._lock_for(context_id):
            record = self._records.get(context_id)
            if record is None:
                record = self._records[context_id] = ThreadRecord(context_id=context_id)
            if not record.external_id:
                record.external_id = await self._create_external()
                logger.info("Initialized thread %s -> %s", context_id, record.external_id)
            if record.external_id:
                self._locks.pop(context_id, None)
            return record

    async def find(self, context_id: str) -> ThreadRecord | None:
        return self._records.get(context_id)

    async def list_threads(self) -> list[ThreadRecord]:
        return list(self._records.values())


class CloudThreadRegistry(ThreadRegistryClient):
    """HTTP client for the assistant cloud thread list."""

    def __init__(
        self,
        base_url: str,
        token_supplier: TokenSupplier,
        create_external: ExternalThreadFactory,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        self._token_supplier = token_supplier
        self._create_external = create_external
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=10)
        self._external_ids: dict[str, str] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, context_id: str) -> asyncio.Lock:
        lock = self._locks.get(context_id)
        if lock is None:
            lock = self._locks[context_id] = asyncio.Lock()
        return lock

    async def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {await self._token_supplier()}"}

    @staticmethod
    def _to_record(d: dict[str, Any]) -> ThreadRecord:
        return ThreadRecord(
            context_id=d["id"],
            external_id=d.get("external_id"),
            title=d.get("title"),
            metadata=d.get("metadata") or {},
        )

    async def _fetch(self, context_id: str) -> ThreadRecord | None:
        r = await self._client.get(f"/v1/threads/{context_id}", headers=await self._headers())
        if r.status_code == 404:
            return None
        r.raise_for_status()
        record = self._to_record(r.json())
        if record.external_id:
            self._external_ids[context_id] = record.external_id
        return record

    async def create(self, title: str | None = None) -> ThreadRecord:
        external_id = await self._create_external()
        r = await self._client.post(
            "/v1/threads",
            headers=await self._headers(),
            json={"title": title, "external_id": external_id},
        )
        r.raise_for_status()
        context_id = r.json()["thread_id"]
        if external_id:
            self._external_ids[context_id] = external_id
        return ThreadRecord(context_id=context_id, external_id=external_id, title=title)

    async def get_or_initialize(self, context_id: str) -> ThreadRecord:
        cached = self._external_ids.get(context_id)
        if cached:
            return ThreadRecord(context_id=context_id, external_id=cached)

        async with self._lock_for(context_id):
            cached = self._external_ids.get(context_id)
            if cached:
                return ThreadRecord(context_id=context_id, external_id=cached)

            r = await self._client.get(f"/v1/threads/{context_id}", headers=await self._headers())
            r.raise_for_status()
            record = self._to_record(r.json())
            if not record.external_id:
                record.external_id = await self._create_external()
                if record.external_id:
                    r = await self._client.put(
                        f"/v1/threads/{context_id}",
                        headers=await self._headers(),
                        json={"external_id": record.external_id},
                    )
                    r.raise_for_status()
                    logger.info("Initialized thread %s -> %s", context_id, record.external_id)
            if record.external_id:
                self._external_ids[context_id] = record.external_id
                self._locks.pop(context_id, None)
            return record

    async def find(self, context_id: str) -> ThreadRecord | None:
        cached = self._external_ids.get(context_id)
        if cached:
            return ThreadRecord(context_id=context_id, external_id=cached)
        return await self._fetch(context_id)

    async def list_threads(self) -> list[ThreadRecord]:
        r = await self._client.get("/v1/threads", headers=await self._headers())
        r.raise_for_status()
        return [self._to_record(d) for d in r.json().get("threads", [])]

    async def aclose(self) -> None:
        await self._client.aclose()
