"""Board Routes — board CRUD and column management.

Invariants:
    - Every handler delegates to BoardRepository; domain errors bubble to the
      global handlers (api/error_handlers.py)
    - Responses use the persisted record layout (camelCase keys)
"""

import logging

from fastapi import APIRouter, Depends, status

from tablero.schemas.board import BoardCreate, BoardUpdate, ColumnCreate, ColumnUpdate
from tablero.services.board_repository import BoardRepository, ColumnDraft, PropertyDraft
from tablero.api.dependencies import get_board_repository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/boards", tags=["boards"])


def _value(enum_member) -> str | None:
    return enum_member.value if enum_member is not None else None


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_board(
    body: BoardCreate, boards: BoardRepository = Depends(get_board_repository),
):
    """Create a board from the wizard's title, columns and properties."""
    board_id = await boards.create_board(
        body.title,
        [ColumnDraft(name=c.name, color=_value(c.color)) for c in body.columns],
        [PropertyDraft(name=p.name, type=_value(p.type)) for p in body.properties],
    )
    board = await boards.require_board(board_id)
    return board.to_record()


@router.get("")
async def list_boards(boards: BoardRepository = Depends(get_board_repository)):
    return {"boards": [board.to_record() for board in await boards.list_boards()]}


@router.get("/{board_id}")
async def get_board(board_id: str, boards: BoardRepository = Depends(get_board_repository)):
    board = await boards.require_board(board_id)
    return board.to_record()


@router.patch("/{board_id}")
async def update_board(
    board_id: str,
    body: BoardUpdate,
    boards: BoardRepository = Depends(get_board_repository),
):
    await boards.update_board(board_id, body.title)
    return (await boards.require_board(board_id)).to_record()


@router.delete("/{board_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_board(board_id: str, boards: BoardRepository = Depends(get_board_repository)):
    """Delete the board and every card nested under it."""
    await boards.delete_board(board_id)


# ─── Columns ────────────────────────────────────────────────────

@router.post("/{board_id}/columns", status_code=status.HTTP_201_CREATED)
async def add_column(
    board_id: str,
    body: ColumnCreate,
    boards: BoardRepository = Depends(get_board_repository),
):
    column = await boards.add_column(board_id, ColumnDraft(name=body.name, color=_value(body.color)))
    return column.to_record()


@router.patch("/{board_id}/columns/{column_id}")
async def update_column(
    board_id: str,
    column_id: str,
    body: ColumnUpdate,
    boards: BoardRepository = Depends(get_board_repository),
):
    column = await boards.update_column(
        board_id, column_id,
        name=body.name, color=_value(body.color), width=body.width,
    )
    return column.to_record()


@router.delete("/{board_id}/columns/{column_id}")
async def delete_column(
    board_id: str,
    column_id: str,
    boards: BoardRepository = Depends(get_board_repository),
):
    """Delete a column and its cards; remaining columns are re-packed."""
    survivors = await boards.delete_column(board_id, column_id)
    return {"columns": [column.to_record() for column in survivors]}
