"""Board and column routes — HTTP contract and error envelopes."""

from httpx import ASGITransport, AsyncClient

from tablero.infrastructure.store_provider import get_store
from tablero.main import app


async def test_create_board_returns_record(client, board):
    assert board["title"] == "Sprint"
    assert [(c["name"], c["order"], c["color"]) for c in board["columns"]] == [
        ("Col A", 0, "blue"), ("Col B", 1, "green"),
    ]


async def test_create_board_blank_title_is_400(client):
    res = await client.post("/api/v1/boards", json={"title": "   ", "columns": [{"name": "A"}]})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_create_board_without_named_columns_is_400(client):
    res = await client.post("/api/v1/boards", json={"title": "T", "columns": [{"name": " "}]})
    body = res.json()
    assert res.status_code == 400
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert body["error"]["category"] == "validation"


async def test_unknown_color_is_400(client):
    res = await client.post("/api/v1/boards", json={
        "title": "T", "columns": [{"name": "A", "color": "ultraviolet"}],
    })
    assert res.status_code == 400
    assert res.json()["error"]["details"]


async def test_list_and_get_boards(client, board):
    listing = await client.get("/api/v1/boards")
    single = await client.get(f"/api/v1/boards/{board['id']}")
    assert [b["id"] for b in listing.json()["boards"]] == [board["id"]]
    assert single.json()["title"] == "Sprint"


async def test_missing_board_is_404_envelope(client):
    res = await client.get("/api/v1/boards/ghost")
    error = res.json()["error"]
    assert res.status_code == 404
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["context"]["board_id"] == "ghost"


async def test_rename_board(client, board):
    res = await client.patch(f"/api/v1/boards/{board['id']}", json={"title": "Renamed"})
    assert res.status_code == 200
    assert res.json()["title"] == "Renamed"


async def test_delete_board(client, board):
    res = await client.delete(f"/api/v1/boards/{board['id']}")
    assert res.status_code == 204
    assert (await client.get(f"/api/v1/boards/{board['id']}")).status_code == 404


async def test_add_update_delete_column(client, board):
    base = f"/api/v1/boards/{board['id']}/columns"
    added = (await client.post(base, json={"name": "Col C", "color": "red"})).json()
    assert added["order"] == 2

    patched = await client.patch(f"{base}/{added['id']}", json={"width": 320})
    assert patched.json()["width"] == 320

    first = board["columns"][0]["id"]
    res = await client.delete(f"{base}/{first}")
    assert res.status_code == 200
    assert [(c["name"], c["order"]) for c in res.json()["columns"]] == [("Col B", 0), ("Col C", 1)]


async def test_delete_last_column_is_409(client):
    created = (await client.post("/api/v1/boards", json={
        "title": "Solo", "columns": [{"name": "Only"}],
    })).json()
    res = await client.delete(
        f"/api/v1/boards/{created['id']}/columns/{created['columns'][0]['id']}",
    )
    error = res.json()["error"]
    assert res.status_code == 409
    assert error["code"] == "CONSTRAINT_VIOLATION"
    assert error["message"] == "A board must keep at least one column."


async def test_liveness_and_readiness(client):
    assert (await client.get("/api/v1/health/")).status_code == 200
    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["store"] == "healthy"


async def test_readiness_without_store_is_503(client, monkeypatch):
    import tablero.infrastructure.store_provider as store_module
    monkeypatch.setattr(store_module, "store", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503


async def test_unexpected_error_is_generic_500(store, monkeypatch):
    async def broken_get(path):
        raise RuntimeError("cards/secret-path unreadable")

    monkeypatch.setattr(store, "get", broken_get)
    app.dependency_overrides[get_store] = lambda: store
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            res = await c.get("/api/v1/boards")
    finally:
        app.dependency_overrides.clear()

    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "secret-path" not in res.text
