"""Request Failures - storage and render errors become 5xx responses, never crashes.

Tests:
    - Storage failure -> 503 JSON envelope tagged with route and item_id
    - A failed write never reaches the re-render step
    - Render failure -> 500 and no partial fragment
    - Slow storage -> 504
    - Malformed form bodies -> 400 envelope; anything unexpected -> bare 500
    - The app keeps serving after any of the above
"""

import asyncio

from httpx import ASGITransport, AsyncClient
from jinja2 import DictLoader, Environment, StrictUndefined

from listapp.core.errors import StorageError
from listapp.db.base import Base
from listapp.infrastructure.item_repository import ItemRepository
from listapp.infrastructure.renderer import Renderer


async def _drop_items(db_manager):
    async with db_manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _create_items(db_manager):
    async with db_manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def test_storage_failure_returns_503_and_server_survives(client, db_manager):
    await _drop_items(db_manager)

    res = await client.post("/add", data={"entry": "lost"})
    assert res.status_code == 503
    body = res.json()
    assert body["error"]["code"] == "DATABASE_ERROR"
    assert body["error"]["context"]["route"] == "add"
    assert "<ul" not in res.text

    await _create_items(db_manager)
    res = await client.get("/load")
    assert res.status_code == 200


async def test_storage_error_carries_item_id(client, db_manager):
    await _drop_items(db_manager)

    res = await client.post("/delete/7")
    assert res.status_code == 503
    assert res.json()["error"]["context"] == {"route": "delete", "item_id": "7"}


async def test_failed_write_skips_render(client, monkeypatch):
    calls = []

    async def failing_add(self, entry):
        raise StorageError("Database driver error", "insert")

    async def tracking_list(self):
        calls.append("list")
        return []

    monkeypatch.setattr(ItemRepository, "add_item", failing_add)
    monkeypatch.setattr(ItemRepository, "list_items", tracking_list)

    res = await client.post("/add", data={"entry": "x"})
    assert res.status_code == 503
    assert calls == []


async def test_render_failure_returns_500_without_fragment(app, client):
    env = Environment(
        loader=DictLoader({"index.html": "shell", "list.html": "<ul>{{ broken }}</ul>"}),
        undefined=StrictUndefined,
    )
    app.state.context.renderer = Renderer(env)

    res = await client.get("/load")
    assert res.status_code == 500
    body = res.json()
    assert body["error"]["code"] == "RENDER_ERROR"
    assert body["error"]["context"]["route"] == "load"
    assert "<ul>" not in res.text

    res = await client.get("/")
    assert res.status_code == 200
    assert res.text == "shell"


async def test_mutation_is_committed_even_if_render_fails(app, client, db_manager):
    env = Environment(
        loader=DictLoader({"index.html": "shell", "list.html": "{{ broken }}"}),
        undefined=StrictUndefined,
    )
    app.state.context.renderer = Renderer(env)

    res = await client.post("/add", data={"entry": "saved"})
    assert res.status_code == 500

    async with db_manager.session() as db:
        entries = [i.entry for i in await ItemRepository(db).list_items()]
    assert entries == ["saved"]


async def test_slow_storage_returns_504(app, client, monkeypatch):
    async def slow_list(self):
        await asyncio.sleep(1)
        return []

    monkeypatch.setattr(ItemRepository, "_list", slow_list)
    context = app.state.context
    context.settings = context.settings.model_copy(update={"query_timeout_seconds": 0.05})

    res = await client.get("/load")
    assert res.status_code == 504
    assert res.json()["error"]["code"] == "DATABASE_TIMEOUT"


async def test_unknown_route_is_404(client):
    res = await client.get("/nope")
    assert res.status_code == 404


async def test_file_upload_as_entry_is_rejected_with_400(client, db_manager):
    res = await client.post(
        "/add", files={"entry": ("entry.txt", b"not a form value", "text/plain")},
    )
    assert res.status_code == 400
    body = res.json()
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["category"] == "validation"
    assert [d["field"] for d in body["error"]["details"]] == ["body.entry"]

    async with db_manager.session() as db:
        assert await ItemRepository(db).list_items() == []


async def test_unexpected_error_envelope(app, monkeypatch):
    async def explode(self):
        raise ValueError("internal detail")

    monkeypatch.setattr(ItemRepository, "list_items", explode)
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as client:
        res = await client.get("/load")
    assert res.status_code == 500
    assert res.json() == {
        "error": {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "category": "internal",
            "severity": "critical",
        },
    }
