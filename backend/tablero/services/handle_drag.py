"""Drag-end handler — resolves a drop against the live cards and applies it.

Invariants:
    - Resolution uses the cards projection read at drop time (core/drag_resolution.py)
    - Unresolvable drops are no-ops and return None
    - Writes go through CardRepository, the same path as explicit move/reorder
"""

import logging

from tablero.core.drag_resolution import DragAction, MoveAction, ReorderAction, resolve_drag_end
from tablero.services.card_repository import CardRepository

logger = logging.getLogger(__name__)


async def handle_drag_end(
    cards: CardRepository, board_id: str, active_id: str, over_id: str | None,
) -> DragAction | None:
    cards_by_column = await cards.get_cards_by_board(board_id)
    action = resolve_drag_end(active_id, over_id, cards_by_column)
    if action is None:
        logger.debug("Drag ignored", extra={"board_id": board_id, "card_id": active_id})
        return None

    if isinstance(action, ReorderAction):
        await cards.reorder_cards(board_id, action.column_id, action.card_ids)
    elif isinstance(action, MoveAction):
        await cards.move_card(
            board_id,
            action.card_id,
            action.source_column_id,
            action.target_column_id,
            action.insertion_index,
        )
    return action
