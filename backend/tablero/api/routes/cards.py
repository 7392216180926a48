"""Card Routes — card CRUD, reorder, move and drag-end.

Invariants:
    - Reorder and move go through OrderingEngine via CardRepository
    - drag-end resolves against the cards read at drop time; an unresolvable
      drop answers {"action": null} with 200
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, status

from tablero.core.drag_resolution import MoveAction
from tablero.schemas.board import CardCreate, CardMove, CardReorder, CardUpdate, DragEnd
from tablero.services.card_repository import CardRepository
from tablero.services.handle_drag import handle_drag_end
from tablero.api.dependencies import get_card_repository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/boards", tags=["cards"])


@router.get("/{board_id}/cards")
async def list_cards(board_id: str, cards: CardRepository = Depends(get_card_repository)):
    """Cards grouped by column id, each list in display order."""
    await cards.boards.require_board(board_id)
    grouped = await cards.get_cards_by_board(board_id)
    return {
        "columns": {
            column_id: [card.to_record() for card in column_cards]
            for column_id, column_cards in grouped.items()
        },
    }


@router.post("/{board_id}/columns/{column_id}/cards", status_code=status.HTTP_201_CREATED)
async def create_card(
    board_id: str,
    column_id: str,
    body: CardCreate,
    cards: CardRepository = Depends(get_card_repository),
):
    card = await cards.create_card(board_id, column_id, body.title, body.content)
    return card.to_record()


@router.patch("/{board_id}/columns/{column_id}/cards/{card_id}")
async def update_card(
    board_id: str,
    column_id: str,
    card_id: str,
    body: CardUpdate,
    cards: CardRepository = Depends(get_card_repository),
):
    card = await cards.update_card(
        board_id, column_id, card_id, title=body.title, content=body.content,
    )
    return card.to_record()


@router.delete(
    "/{board_id}/columns/{column_id}/cards/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_card(
    board_id: str,
    column_id: str,
    card_id: str,
    cards: CardRepository = Depends(get_card_repository),
):
    await cards.delete_card(board_id, column_id, card_id)


@router.put("/{board_id}/columns/{column_id}/order")
async def reorder_cards(
    board_id: str,
    column_id: str,
    body: CardReorder,
    cards: CardRepository = Depends(get_card_repository),
):
    """Assign order = position along the submitted id sequence."""
    await cards.boards.require_column(board_id, column_id)
    updated = await cards.reorder_cards(board_id, column_id, body.card_ids)
    return {"updated": updated}


@router.post("/{board_id}/cards/{card_id}/move", status_code=status.HTTP_204_NO_CONTENT)
async def move_card(
    board_id: str,
    card_id: str,
    body: CardMove,
    cards: CardRepository = Depends(get_card_repository),
):
    await cards.move_card(
        board_id, card_id, body.source_column_id, body.target_column_id, body.index,
    )


@router.post("/{board_id}/drag-end")
async def drag_end(
    board_id: str,
    body: DragEnd,
    cards: CardRepository = Depends(get_card_repository),
):
    await cards.boards.require_board(board_id)
    action = await handle_drag_end(cards, board_id, body.active_id, body.over_id)
    if action is None:
        return {"action": None}
    kind = "move" if isinstance(action, MoveAction) else "reorder"
    return {"action": kind, **asdict(action)}
