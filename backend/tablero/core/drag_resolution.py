"""Drag Resolution — turns a drag-end event into a reorder or a cross-column move.

Invariants:
    - Pure: decides from the current projection only, issues no writes
    - over_id is either a card id or a drop-zone id "column-<columnId>"
    - Unresolvable events (unknown card, no target, dropped on itself) → None
    - Cross-column drops append to the end of the target column

Design Decisions:
    - Returns action descriptors; services/handle_drag.py applies them through
      the card repository so drag and explicit API calls share one write path
"""

from dataclasses import dataclass

from tablero.core.domain_types import DROP_ZONE_PREFIX
from tablero.core.entities import Card
from tablero.core.ordering import array_move


@dataclass
class ReorderAction:
    column_id: str
    card_ids: list[str]


@dataclass
class MoveAction:
    card_id: str
    source_column_id: str
    target_column_id: str
    insertion_index: int


DragAction = ReorderAction | MoveAction


def _column_of(card_id: str, cards_by_column: dict[str, list[Card]]) -> str | None:
    for column_id, cards in cards_by_column.items():
        if any(card.id == card_id for card in cards):
            return column_id
    return None


def resolve_drag_end(
    active_id: str,
    over_id: str | None,
    cards_by_column: dict[str, list[Card]],
) -> DragAction | None:
    if not over_id:
        return None
    source = _column_of(active_id, cards_by_column)
    if source is None:
        return None

    if over_id.startswith(DROP_ZONE_PREFIX):
        target = over_id[len(DROP_ZONE_PREFIX):]
    else:
        target = _column_of(over_id, cards_by_column)
    if not target:
        return None

    if source != target:
        return MoveAction(
            card_id=active_id,
            source_column_id=source,
            target_column_id=target,
            insertion_index=len(cards_by_column.get(target, [])),
        )

    ids = [card.id for card in cards_by_column[source]]
    if over_id == active_id or over_id not in ids:
        return None
    old_index, new_index = ids.index(active_id), ids.index(over_id)
    return ReorderAction(column_id=source, card_ids=array_move(ids, old_index, new_index))
