"""Opaque bearer-token suppliers for the thread registry."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import httpx

TokenSupplier = Callable[[], Awaitable[str]]


class StaticToken:
    """Supplies a fixed token (tests, local development)."""

    def __init__(self, token: str):
        self._token = token

    async def __call__(self) -> str:
        return self._token


class CloudTokenIssuer:
    """Issues short-lived registry tokens from a workspace API key."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        user_id: str = "anonymous",
        workspace_id: str | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ):
        self._api_key = api_key
        self._user_id = user_id
        self._workspace_id = workspace_id or user_id
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=10)

    async def __call__(self) -> str:
        r = await self._client.post(
            "/v1/auth/tokens",
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Aui-User-Id": self._user_id,
                "Aui-Workspace-Id": self._workspace_id,
            },
        )
        r.raise_for_status()
        return r.json()["token"]

    async def aclose(self) -> None:
        await self._client.aclose()
