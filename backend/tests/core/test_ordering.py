"""Tests for ordering planners — pure order-index plans, no IO."""

import pytest

from tablero.core.domain_types import ColumnColor
from tablero.core.entities import Card, Column
from tablero.core.errors import ConstraintError, NotFoundError, ValidationError
from tablero.core.ordering import (
    array_move, plan_column_compaction, plan_insert_shift, plan_reorder,
    plan_same_column_move, sort_cards,
)


def _cards(*pairs):
    return [Card(id=card_id, title=card_id, order=order) for card_id, order in pairs]


def _apply(cards, plan):
    orders = {card.id: card.order for card in cards}
    orders.update(plan)
    return orders


# ─── sort_cards / array_move ────────────────────────────────────

def test_sort_cards_by_order_then_key():
    cards = _cards(("b", 1), ("c", 0), ("a", 1))
    assert [c.id for c in sort_cards(cards)] == ["c", "a", "b"]


def test_array_move_forward_and_back():
    assert array_move(["a", "b", "c", "d"], 0, 2) == ["b", "c", "a", "d"]
    assert array_move(["a", "b", "c", "d"], 3, 1) == ["a", "d", "b", "c"]


# ─── plan_reorder ───────────────────────────────────────────────

def test_reorder_assigns_dense_orders_matching_sequence():
    cards = _cards(("a", 0), ("b", 1), ("c", 2))
    plan = plan_reorder(cards, ["c", "a", "b"])
    assert _apply(cards, plan) == {"c": 0, "a": 1, "b": 2}


def test_reorder_already_applied_is_empty_plan():
    cards = _cards(("a", 0), ("b", 1), ("c", 2))
    assert plan_reorder(cards, ["a", "b", "c"]) == {}


def test_reorder_repairs_gaps_and_duplicates():
    cards = _cards(("a", 0), ("b", 0), ("c", 7))
    plan = plan_reorder(cards, ["a", "b", "c"])
    assert _apply(cards, plan) == {"a": 0, "b": 1, "c": 2}


def test_reorder_appends_omitted_cards_in_current_order():
    cards = _cards(("a", 0), ("b", 1), ("c", 2), ("d", 3))
    plan = plan_reorder(cards, ["d", "b"])
    assert _apply(cards, plan) == {"d": 0, "b": 1, "a": 2, "c": 3}


def test_reorder_rejects_duplicate_ids():
    cards = _cards(("a", 0), ("b", 1))
    with pytest.raises(ValidationError):
        plan_reorder(cards, ["a", "a", "b"])


def test_reorder_rejects_unknown_id():
    cards = _cards(("a", 0))
    with pytest.raises(NotFoundError):
        plan_reorder(cards, ["a", "zzz"])


# ─── plan_insert_shift ──────────────────────────────────────────

def test_insert_shift_moves_siblings_at_or_after_k():
    target = _cards(("x", 0), ("y", 1), ("z", 2))
    k, shifts = plan_insert_shift(target, "moved", 1)
    assert k == 1
    assert shifts == {"y": 2, "z": 3}


def test_insert_at_end_shifts_nothing():
    target = _cards(("x", 0), ("y", 1))
    k, shifts = plan_insert_shift(target, "moved", 2)
    assert (k, shifts) == (2, {})


def test_insert_index_clamped_to_target_length():
    target = _cards(("x", 0))
    k, shifts = plan_insert_shift(target, "moved", 10)
    assert (k, shifts) == (1, {})


def test_insert_into_empty_column():
    assert plan_insert_shift([], "moved", 0) == (0, {})


def test_insert_negative_index_rejected():
    with pytest.raises(ValidationError):
        plan_insert_shift(_cards(("x", 0)), "moved", -1)


def test_insert_ignores_moved_card_already_in_target():
    target = _cards(("x", 0), ("moved", 1), ("y", 2))
    k, shifts = plan_insert_shift(target, "moved", 0)
    assert k == 0
    assert shifts == {"x": 1}


# ─── plan_column_compaction ─────────────────────────────────────

def _columns(*specs):
    return [
        Column(id=column_id, name=column_id.upper(), color=ColumnColor.BLUE, order=order)
        for column_id, order in specs
    ]


def test_delete_first_column_repacks_survivor_to_zero():
    survivors = plan_column_compaction(_columns(("a", 0), ("b", 1)), "a")
    assert [(c.id, c.order) for c in survivors] == [("b", 0)]


def test_compaction_preserves_relative_order():
    columns = _columns(("c", 2), ("a", 0), ("d", 3), ("b", 1))
    survivors = plan_column_compaction(columns, "b")
    assert [(c.id, c.order) for c in survivors] == [("a", 0), ("c", 1), ("d", 2)]


def test_compaction_keeps_width_and_color():
    columns = _columns(("a", 0), ("b", 1))
    columns[1].width = 320
    columns[1].color = ColumnColor.RED
    survivor = plan_column_compaction(columns, "a")[0]
    assert survivor.width == 320
    assert survivor.color == ColumnColor.RED


def test_compaction_does_not_mutate_input():
    columns = _columns(("a", 0), ("b", 1))
    plan_column_compaction(columns, "a")
    assert columns[1].order == 1


def test_last_column_cannot_be_deleted():
    with pytest.raises(ConstraintError) as exc_info:
        plan_column_compaction(_columns(("only", 0)), "only")
    assert exc_info.value.http_status == 409


def test_compaction_unknown_column():
    with pytest.raises(NotFoundError):
        plan_column_compaction(_columns(("a", 0), ("b", 1)), "nope")


# ─── plan_same_column_move ──────────────────────────────────────

def test_same_column_move_builds_full_sequence():
    cards = _cards(("a", 0), ("b", 1), ("c", 2))
    assert plan_same_column_move(cards, "a", 2) == ["b", "c", "a"]


def test_same_column_move_clamps_index():
    cards = _cards(("a", 0), ("b", 1))
    assert plan_same_column_move(cards, "a", 99) == ["b", "a"]


def test_same_column_move_unknown_card():
    with pytest.raises(NotFoundError):
        plan_same_column_move(_cards(("a", 0)), "zzz", 0)
