"""Ordering — pure planning of order-index changes for cards and columns.

Invariants:
    - sort_cards is THE sibling order: ascending `order`, ties by store key
    - plan_reorder yields a dense 0..n-1 assignment over the whole column;
      ids named by the caller come first, in the caller's sequence
    - plan_insert_shift keeps relative order of the target column and shifts
      every sibling at position >= k by +1
    - plan_column_compaction re-packs surviving columns to 0..n-1, preserving
      relative order; a board can never be left without columns
    - Planners return only the entries whose value changes (no-op = empty)

Design Decisions:
    - Pure functions returning plans; services/ordering_engine.py applies them
      as store writes (functional core, imperative shell)
    - Full target set computed up front so one batch write can never produce
      duplicate order values, unlike incremental +1/-1 adjustments
"""

from tablero.core.entities import Card, Column
from tablero.core.errors import (
    ConstraintError, ErrorContext, NotFoundError, ValidationError,
)


def sort_cards(cards: list[Card]) -> list[Card]:
    return sorted(cards, key=lambda card: (card.order, card.id))


def array_move(ids: list[str], old_index: int, new_index: int) -> list[str]:
    """Remove the item at old_index and re-insert it at new_index."""
    moved = list(ids)
    item = moved.pop(old_index)
    moved.insert(new_index, item)
    return moved


def plan_reorder(current: list[Card], ordered_ids: list[str]) -> dict[str, int]:
    """Target order per card id, restricted to cards whose order changes.

    Cards present in the column but absent from ordered_ids keep their relative
    order and are packed after the named ones.
    """
    if len(set(ordered_ids)) != len(ordered_ids):
        raise ValidationError(
            "Card sequence contains duplicate ids", field="card_ids",
        )
    by_id = {card.id: card for card in current}
    for card_id in ordered_ids:
        if card_id not in by_id:
            raise NotFoundError("Card", card_id, ErrorContext(card_id=card_id))

    named = set(ordered_ids)
    sequence = list(ordered_ids) + [
        card.id for card in sort_cards(current) if card.id not in named
    ]
    return {
        card_id: index
        for index, card_id in enumerate(sequence)
        if by_id[card_id].order != index
    }


def plan_insert_shift(
    target: list[Card], moved_id: str, insertion_index: int,
) -> tuple[int, dict[str, int]]:
    """Clamp the insertion index and plan the shift of the target siblings.

    Returns (clamped index, {card_id: new order}) for siblings that change.
    """
    if insertion_index < 0:
        raise ValidationError(
            f"Insertion index must be >= 0, got {insertion_index}", field="index",
        )
    siblings = [card for card in sort_cards(target) if card.id != moved_id]
    k = min(insertion_index, len(siblings))
    shifts: dict[str, int] = {}
    for position, card in enumerate(siblings):
        new_order = position if position < k else position + 1
        if card.order != new_order:
            shifts[card.id] = new_order
    return k, shifts


def plan_column_compaction(columns: list[Column], column_id: str) -> list[Column]:
    """Surviving columns in display order, re-numbered 0..n-1."""
    if not any(column.id == column_id for column in columns):
        raise NotFoundError("Column", column_id, ErrorContext(column_id=column_id))
    if len(columns) <= 1:
        raise ConstraintError(
            "Cannot delete the last column of a board",
            ErrorContext(
                column_id=column_id,
                user_message="A board must keep at least one column.",
            ),
        )
    ranked = sorted(enumerate(columns), key=lambda pair: (pair[1].order, pair[0]))
    survivors = [column for _, column in ranked if column.id != column_id]
    return [
        Column(
            id=column.id, name=column.name, color=column.color,
            order=index, width=column.width,
        )
        for index, column in enumerate(survivors)
    ]


def plan_same_column_move(
    current: list[Card], card_id: str, insertion_index: int,
) -> list[str]:
    """Full id sequence for moving a card to a new index inside its column."""
    ids = [card.id for card in sort_cards(current)]
    if card_id not in ids:
        raise NotFoundError("Card", card_id, ErrorContext(card_id=card_id))
    if insertion_index < 0:
        raise ValidationError(
            f"Insertion index must be >= 0, got {insertion_index}", field="index",
        )
    return array_move(ids, ids.index(card_id), min(insertion_index, len(ids) - 1))
