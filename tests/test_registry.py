import asyncio
import json

import httpx
import pytest

from bridge.credentials import CloudTokenIssuer, StaticToken
from bridge.errors import ThreadNotFound
from bridge.registry import CloudThreadRegistry, InMemoryThreadRegistry


def _counting_factory(prefix: str = "lg"):
    created: list[str] = []

    async def _create() -> str:
        await asyncio.sleep(0)
        created.append(f"{prefix}-{len(created) + 1}")
        return created[-1]

    return _create, created


# ---------------------------------------------------------------------------
# InMemoryThreadRegistry
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_ensure_thread_is_idempotent_per_context():
    factory, created = _counting_factory()
    registry = InMemoryThreadRegistry(factory)

    first = await registry.ensure_thread("ctx-1")
    second = await registry.ensure_thread("ctx-1")

    assert first == second == "lg-1"
    assert created == ["lg-1"]


@pytest.mark.asyncio
async def test_concurrent_initialization_creates_one_external_thread():
    factory, created = _counting_factory()
    registry = InMemoryThreadRegistry(factory)

    ids = await asyncio.gather(*(registry.ensure_thread("ctx-1") for _ in range(5)))

    assert set(ids) == {"lg-1"}
    assert created == ["lg-1"]


@pytest.mark.asyncio
async def test_distinct_contexts_get_distinct_threads():
    factory, _ = _counting_factory()
    registry = InMemoryThreadRegistry(factory)

    a = await registry.ensure_thread("ctx-a")
    b = await registry.ensure_thread("ctx-b")

    assert a != b
    assert {r.context_id for r in await registry.list_threads()} == {"ctx-a", "ctx-b"}


@pytest.mark.asyncio
async def test_ensure_thread_raises_when_factory_yields_no_id():
    async def _no_id():
        return None

    registry = InMemoryThreadRegistry(_no_id)
    record = await registry.get_or_initialize("ctx-1")
    assert record.external_id is None

    with pytest.raises(ThreadNotFound) as exc_info:
        await registry.ensure_thread("ctx-1")
    assert exc_info.value.context_id == "ctx-1"


@pytest.mark.asyncio
async def test_create_registers_new_context():
    factory, _ = _counting_factory()
    registry = InMemoryThreadRegistry(factory)

    record = await registry.create(title="Bug X")

    assert record.external_id == "lg-1"
    assert record.title == "Bug X"
    assert await registry.ensure_thread(record.context_id) == "lg-1"


@pytest.mark.asyncio
async def test_resolve_thread_never_creates():
    factory, created = _counting_factory()
    registry = InMemoryThreadRegistry(factory)

    assert await registry.find("ctx-1") is None
    with pytest.raises(ThreadNotFound):
        await registry.resolve_thread("ctx-1")

    assert created == []
    assert await registry.list_threads() == []


@pytest.mark.asyncio
async def test_resolve_thread_returns_initialized_external_id():
    factory, _ = _counting_factory()
    registry = InMemoryThreadRegistry(factory)
    await registry.ensure_thread("ctx-1")

    assert await registry.resolve_thread("ctx-1") == "lg-1"


@pytest.mark.asyncio
async def test_initialization_locks_are_released():
    factory, _ = _counting_factory()
    registry = InMemoryThreadRegistry(factory)

    await asyncio.gather(*(registry.ensure_thread(f"ctx-{i % 3}") for i in range(9)))

    assert registry._locks == {}


# ---------------------------------------------------------------------------
# CloudThreadRegistry
# ---------------------------------------------------------------------------


class _FakeCloud:
    """Minimal thread-list API served through httpx.MockTransport."""

    def __init__(self):
        self.threads: dict[str, dict] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.headers.get("Authorization") != "Bearer tok":
            return httpx.Response(401, json={"error": "unauthorized"})
        path = request.url.path
        if path == "/v1/threads" and request.method == "GET":
            return httpx.Response(200, json={"threads": list(self.threads.values())})
        if path == "/v1/threads" and request.method == "POST":
            body = json.loads(request.content)
            thread_id = f"remote-{len(self.threads) + 1}"
            self.threads[thread_id] = {"id": thread_id, **body}
            return httpx.Response(200, json={"thread_id": thread_id})
        thread_id = path.rsplit("/", 1)[-1]
        if thread_id not in self.threads:
            return httpx.Response(404, json={"error": "not found"})
        if request.method == "GET":
            return httpx.Response(200, json=self.threads[thread_id])
        if request.method == "PUT":
            self.threads[thread_id].update(json.loads(request.content))
            return httpx.Response(200, json={})
        return httpx.Response(405)


def _cloud_registry(cloud: _FakeCloud, factory, token: str = "tok") -> CloudThreadRegistry:
    client = httpx.AsyncClient(base_url="https://cloud.test", transport=httpx.MockTransport(cloud.handler))
    return CloudThreadRegistry("https://cloud.test", StaticToken(token), factory, client=client)


@pytest.mark.asyncio
async def test_cloud_create_posts_external_id():
    cloud = _FakeCloud()
    factory, _ = _counting_factory()
    registry = _cloud_registry(cloud, factory)

    record = await registry.create(title="Bug X")

    assert record.context_id == "remote-1"
    assert record.external_id == "lg-1"
    assert cloud.threads["remote-1"]["external_id"] == "lg-1"
    await registry.aclose()


@pytest.mark.asyncio
async def test_cloud_initializes_missing_external_id_once():
    cloud = _FakeCloud()
    cloud.threads["remote-7"] = {"id": "remote-7", "title": "draft", "external_id": None}
    factory, created = _counting_factory()
    registry = _cloud_registry(cloud, factory)

    first = await registry.ensure_thread("remote-7")
    second = await registry.ensure_thread("remote-7")

    assert first == second == "lg-1"
    assert created == ["lg-1"]
    assert cloud.threads["remote-7"]["external_id"] == "lg-1"
    # second call is served from cache
    assert [r.method for r in cloud.requests] == ["GET", "PUT"]
    await registry.aclose()


@pytest.mark.asyncio
async def test_cloud_concurrent_initialization_fetches_once():
    cloud = _FakeCloud()
    cloud.threads["remote-3"] = {"id": "remote-3", "title": "t", "external_id": "lg-9"}
    factory, created = _counting_factory()
    registry = _cloud_registry(cloud, factory)

    ids = await asyncio.gather(*(registry.ensure_thread("remote-3") for _ in range(5)))

    assert set(ids) == {"lg-9"}
    assert created == []
    assert [r.method for r in cloud.requests] == ["GET"]
    assert registry._locks == {}
    await registry.aclose()


@pytest.mark.asyncio
async def test_cloud_resolve_unknown_thread_raises_without_writes():
    cloud = _FakeCloud()
    factory, created = _counting_factory()
    registry = _cloud_registry(cloud, factory)

    with pytest.raises(ThreadNotFound):
        await registry.resolve_thread("remote-404")

    assert created == []
    assert [r.method for r in cloud.requests] == ["GET"]
    await registry.aclose()


@pytest.mark.asyncio
async def test_cloud_resolve_thread_without_external_id_does_not_initialize():
    cloud = _FakeCloud()
    cloud.threads["remote-7"] = {"id": "remote-7", "title": "draft", "external_id": None}
    factory, created = _counting_factory()
    registry = _cloud_registry(cloud, factory)

    with pytest.raises(ThreadNotFound):
        await registry.resolve_thread("remote-7")

    assert created == []
    assert cloud.threads["remote-7"]["external_id"] is None
    assert [r.method for r in cloud.requests] == ["GET"]
    await registry.aclose()


@pytest.mark.asyncio
async def test_cloud_list_threads_maps_records():
    cloud = _FakeCloud()
    cloud.threads["remote-1"] = {"id": "remote-1", "title": "a", "external_id": "lg-9"}
    registry = _cloud_registry(cloud, _counting_factory()[0])

    records = await registry.list_threads()

    assert [(r.context_id, r.external_id, r.title) for r in records] == [("remote-1", "lg-9", "a")]
    await registry.aclose()


@pytest.mark.asyncio
async def test_cloud_transport_errors_propagate_unchanged():
    cloud = _FakeCloud()
    registry = _cloud_registry(cloud, _counting_factory()[0], token="wrong")

    with pytest.raises(httpx.HTTPStatusError) as exc_info:
        await registry.list_threads()

    assert exc_info.value.response.status_code == 401
    await registry.aclose()


@pytest.mark.asyncio
async def test_cloud_token_issuer_posts_api_key():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"token": "short-lived"})

    client = httpx.AsyncClient(base_url="https://cloud.test", transport=httpx.MockTransport(handler))
    issuer = CloudTokenIssuer("https://cloud.test", "sk-workspace", client=client)

    assert await issuer() == "short-lived"
    assert seen[0].url.path == "/v1/auth/tokens"
    assert seen[0].headers["Authorization"] == "Bearer sk-workspace"
    assert seen[0].headers["Aui-User-Id"] == "anonymous"
    await issuer.aclose()
