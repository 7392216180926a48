"""Card routes — CRUD, reorder, move, drag-end, CSV and stream helpers."""

import asyncio

from tablero.api.routes.board_stream import board_events
from tablero.core.csv_codec import BOM
from tablero.core.errors import StoreError
from tablero.services.card_repository import CardRepository
from tablero.services.sync_projector import SyncProjector


def _cols(board):
    return board["columns"][0]["id"], board["columns"][1]["id"]


async def _create(client, board, column_id, title, content=""):
    res = await client.post(
        f"/api/v1/boards/{board['id']}/columns/{column_id}/cards",
        json={"title": title, "content": content},
    )
    assert res.status_code == 201
    return res.json()


async def _column_titles(client, board, column_id):
    res = await client.get(f"/api/v1/boards/{board['id']}/cards")
    return [(c["title"], c["order"]) for c in res.json()["columns"].get(column_id, [])]


async def test_create_update_delete_card(client, board):
    col_a, _ = _cols(board)
    card = await _create(client, board, col_a, "todo")
    base = f"/api/v1/boards/{board['id']}/columns/{col_a}/cards/{card['id']}"

    patched = await client.patch(base, json={"content": "details"})
    assert patched.json()["content"] == "details"
    assert patched.json()["title"] == "todo"

    assert (await client.delete(base)).status_code == 204
    assert (await client.delete(base)).status_code == 404


async def test_create_card_in_unknown_column_is_404(client, board):
    res = await client.post(
        f"/api/v1/boards/{board['id']}/columns/col_missing/cards", json={"title": "x"},
    )
    assert res.status_code == 404
    assert res.json()["error"]["context"]["column_id"] == "col_missing"


async def test_reorder_column(client, board):
    col_a, _ = _cols(board)
    a = await _create(client, board, col_a, "a")
    b = await _create(client, board, col_a, "b")

    res = await client.put(
        f"/api/v1/boards/{board['id']}/columns/{col_a}/order",
        json={"card_ids": [b["id"], a["id"]]},
    )

    assert res.json() == {"updated": 2}
    assert await _column_titles(client, board, col_a) == [("b", 0), ("a", 1)]


async def test_reorder_with_duplicates_is_400(client, board):
    col_a, _ = _cols(board)
    a = await _create(client, board, col_a, "a")
    res = await client.put(
        f"/api/v1/boards/{board['id']}/columns/{col_a}/order",
        json={"card_ids": [a["id"], a["id"]]},
    )
    assert res.status_code == 400


async def test_move_card_between_columns(client, board):
    col_a, col_b = _cols(board)
    moving = await _create(client, board, col_a, "m")
    await _create(client, board, col_b, "x")

    res = await client.post(
        f"/api/v1/boards/{board['id']}/cards/{moving['id']}/move",
        json={"source_column_id": col_a, "target_column_id": col_b, "index": 0},
    )

    assert res.status_code == 204
    assert await _column_titles(client, board, col_b) == [("m", 0), ("x", 1)]
    assert await _column_titles(client, board, col_a) == []


async def test_move_negative_index_is_400(client, board):
    col_a, col_b = _cols(board)
    card = await _create(client, board, col_a, "m")
    res = await client.post(
        f"/api/v1/boards/{board['id']}/cards/{card['id']}/move",
        json={"source_column_id": col_a, "target_column_id": col_b, "index": -1},
    )
    assert res.status_code == 400


async def test_drag_end_to_column_zone(client, board):
    col_a, col_b = _cols(board)
    card = await _create(client, board, col_a, "drag me")

    res = await client.post(
        f"/api/v1/boards/{board['id']}/drag-end",
        json={"active_id": card["id"], "over_id": f"column-{col_b}"},
    )

    assert res.json()["action"] == "move"
    assert res.json()["insertion_index"] == 0
    assert await _column_titles(client, board, col_b) == [("drag me", 0)]


async def test_drag_end_without_target(client, board):
    col_a, _ = _cols(board)
    card = await _create(client, board, col_a, "stay")
    res = await client.post(
        f"/api/v1/boards/{board['id']}/drag-end", json={"active_id": card["id"]},
    )
    assert res.json() == {"action": None}


# ─── CSV ────────────────────────────────────────────────────────

async def test_export_download(client, board):
    col_a, _ = _cols(board)
    await _create(client, board, col_a, "T,1", 'say "hi"')

    res = await client.get(f"/api/v1/boards/{board['id']}/export.csv")

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert 'filename="Sprint_' in res.headers["content-disposition"]
    text = res.content.decode("utf-8")
    assert text.startswith(BOM + "Título,Contenido,Columna\n")
    assert '"T,1","say ""hi""","Col A"' in text


async def test_template_download(client, board):
    res = await client.get(f"/api/v1/boards/{board['id']}/template.csv")
    lines = res.content.decode("utf-8").split("\n")
    assert len([line for line in lines[1:] if line]) == 2


async def test_import_reports_counts(client, board):
    body = "Título,Contenido,Columna\nA,1,Col A\nB,2,Nowhere\n".encode("utf-8")
    res = await client.post(
        f"/api/v1/boards/{board['id']}/import",
        content=body, headers={"content-type": "text/csv"},
    )
    assert res.json() == {"imported": 1, "failed": 1}


async def test_import_bad_header_is_400(client, board):
    res = await client.post(
        f"/api/v1/boards/{board['id']}/import", content=b"Title,Body\nx,y\n",
    )
    error = res.json()["error"]
    assert res.status_code == 400
    assert error["code"] == "CSV_PARSE_ERROR"
    assert error["missing_headers"] == ["Título", "Contenido", "Columna"]


# ─── Streams ────────────────────────────────────────────────────

async def test_stream_of_missing_board_is_404(client):
    assert (await client.get("/api/v1/boards/ghost/stream")).status_code == 404


async def test_board_events_emit_views_and_release(client, board, store):
    col_a, _ = _cols(board)
    projector = SyncProjector(store, board["id"])
    events = board_events(projector)

    first = await asyncio.wait_for(events.__anext__(), timeout=1)
    await CardRepository(store).create_card(board["id"], col_a, "live")
    second = await asyncio.wait_for(events.__anext__(), timeout=1)
    await events.aclose()

    assert first.startswith("data: ")
    assert '"card_count": 0' in first
    assert '"title": "live"' in second
    assert store.hub.subscription_count == 0


async def test_board_events_report_store_failure(client, board, store, monkeypatch):
    async def broken_subscribe(path, callback):
        raise StoreError("connection lost", "subscribe")

    monkeypatch.setattr(store, "subscribe", broken_subscribe)
    events = [line async for line in board_events(SyncProjector(store, board["id"]))]

    assert len(events) == 1
    assert '"type": "error"' in events[0]
    assert '"code": "STORE_ERROR"' in events[0]
