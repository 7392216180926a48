"""Board and Card repositories — preconditions, persisted layout, cascades."""

import pytest

from tablero.core.domain_types import DEFAULT_CARD_TITLE, ColumnColor, PropertyType
from tablero.core.errors import ConstraintError, NotFoundError, ValidationError
from tablero.services.board_repository import ColumnDraft, PropertyDraft


# ─── Boards ─────────────────────────────────────────────────────

async def test_create_board_persists_document(boards, store):
    board_id = await boards.create_board(
        "  Roadmap  ",
        [ColumnDraft(name=" Todo "), ColumnDraft(name="   "), ColumnDraft(name="Done", color="green")],
        [PropertyDraft(name="Due", type="date"), PropertyDraft(name="")],
    )

    raw = await store.get(f"boards/{board_id}")
    assert raw["id"] == board_id
    assert raw["title"] == "Roadmap"
    assert [(c["name"], c["order"], c["color"]) for c in raw["columns"]] == [
        ("Todo", 0, "blue"), ("Done", 1, "green"),
    ]
    assert all(c["id"].startswith("col_") for c in raw["columns"])
    assert [(p["name"], p["type"]) for p in raw["properties"]] == [("Due", "date")]
    assert raw["properties"][0]["id"].startswith("prop_")
    assert raw["createdAt"] == raw["updatedAt"] > 0


async def test_create_board_defaults_property_type(boards):
    board_id = await boards.create_board("B", [ColumnDraft(name="C")], [PropertyDraft(name="Note")])
    board = await boards.require_board(board_id)
    assert board.properties[0].type == PropertyType.STRING


async def test_create_board_rejects_blank_title(boards, store):
    with pytest.raises(ValidationError):
        await boards.create_board("   ", [ColumnDraft(name="C")])
    assert store.dump() is None


async def test_create_board_rejects_no_named_columns(boards, store):
    with pytest.raises(ValidationError):
        await boards.create_board("Board", [ColumnDraft(name=""), ColumnDraft(name="  ")])
    with pytest.raises(ValidationError):
        await boards.create_board("Board", [])
    assert store.dump() is None


async def test_board_ids_are_unique_and_chronological(boards):
    first = await boards.create_board("One", [ColumnDraft(name="C")])
    second = await boards.create_board("Two", [ColumnDraft(name="C")])
    assert first < second
    assert [b.title for b in await boards.list_boards()] == ["One", "Two"]


async def test_update_board_title_stamps_updated_at(boards, board):
    await boards.update_board(board.id, "Renamed")
    updated = await boards.require_board(board.id)
    assert updated.title == "Renamed"
    assert updated.updated_at >= board.updated_at


async def test_delete_board_cascades_cards(boards, cards, board, store):
    await cards.create_card(board.id, board.columns[0].id, "x")

    await boards.delete_board(board.id)

    assert await boards.get_board(board.id) is None
    assert await store.get(f"cards/{board.id}") is None


async def test_missing_board_raises_not_found(boards):
    with pytest.raises(NotFoundError):
        await boards.require_board("ghost")
    with pytest.raises(NotFoundError):
        await boards.add_column("ghost", ColumnDraft(name="C"))


# ─── Columns ────────────────────────────────────────────────────

async def test_add_column_appends_at_current_length(boards, board):
    column = await boards.add_column(board.id, ColumnDraft(name="Col C", color="red"))

    stored = await boards.require_board(board.id)
    assert column.order == 2
    assert column.color == ColumnColor.RED
    assert [c.name for c in stored.ordered_columns] == ["Col A", "Col B", "Col C"]


async def test_update_column_fields(boards, board):
    col = board.columns[0]
    await boards.update_column(board.id, col.id, name="Backlog", color="purple", width=300)

    stored = (await boards.require_board(board.id)).find_column(col.id)
    assert (stored.name, stored.color, stored.width, stored.order) == (
        "Backlog", ColumnColor.PURPLE, 300, col.order,
    )


async def test_delete_column_on_last_column(boards):
    board_id = await boards.create_board("Solo", [ColumnDraft(name="Only")])
    only = (await boards.require_board(board_id)).columns[0].id
    with pytest.raises(ConstraintError):
        await boards.delete_column(board_id, only)


# ─── Cards ──────────────────────────────────────────────────────

async def test_create_card_appends_at_column_length(cards, board):
    col = board.columns[0].id
    first = await cards.create_card(board.id, col, "first")
    second = await cards.create_card(board.id, col, "second")
    assert (first.order, second.order) == (0, 1)


async def test_create_card_default_title(cards, board):
    card = await cards.create_card(board.id, board.columns[0].id, "   ")
    assert card.title == DEFAULT_CARD_TITLE


async def test_card_titles_are_stored_as_given(cards, board):
    col = board.columns[0].id
    card = await cards.create_card(board.id, col, "  padded  ")
    assert (await cards.require_card(board.id, col, card.id)).title == "  padded  "

    await cards.update_card(board.id, col, card.id, title=" renamed ")
    assert (await cards.require_card(board.id, col, card.id)).title == " renamed "

    await cards.update_card(board.id, col, card.id, title="  ")
    assert (await cards.require_card(board.id, col, card.id)).title == DEFAULT_CARD_TITLE


async def test_create_card_unknown_column(cards, board, store):
    before = store.dump()
    with pytest.raises(NotFoundError):
        await cards.create_card(board.id, "col_missing", "x")
    assert store.dump() == before


async def test_update_card_always_stamps_updated_at(cards, board):
    col = board.columns[0].id
    card = await cards.create_card(board.id, col, "old")

    updated = await cards.update_card(board.id, col, card.id, title="new")

    stored = await cards.get_card(board.id, col, card.id)
    assert stored.title == "new"
    assert stored.content == ""
    assert stored.updated_at == updated.updated_at >= card.updated_at


async def test_update_missing_card(cards, board):
    with pytest.raises(NotFoundError):
        await cards.update_card(board.id, board.columns[0].id, "ghost", title="x")


async def test_delete_card(cards, board):
    col = board.columns[0].id
    card = await cards.create_card(board.id, col, "bye")
    await cards.delete_card(board.id, col, card.id)
    assert await cards.get_card(board.id, col, card.id) is None
    with pytest.raises(NotFoundError):
        await cards.delete_card(board.id, col, card.id)


async def test_get_cards_by_board_groups_by_column(cards, board):
    col_a, col_b = board.columns[0].id, board.columns[1].id
    await cards.create_card(board.id, col_a, "a1")
    await cards.create_card(board.id, col_b, "b1")
    await cards.create_card(board.id, col_a, "a2")

    grouped = await cards.get_cards_by_board(board.id)

    assert [c.title for c in grouped[col_a]] == ["a1", "a2"]
    assert [c.title for c in grouped[col_b]] == ["b1"]


async def test_move_card_to_unknown_column(cards, board):
    col = board.columns[0].id
    card = await cards.create_card(board.id, col, "x")
    with pytest.raises(NotFoundError):
        await cards.move_card(board.id, card.id, col, "col_missing", 0)
