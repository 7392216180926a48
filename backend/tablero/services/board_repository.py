"""Board Repository — CRUD for boards and their columns over the entity store.

Invariants:
    - create_board trims title and names; drops blank columns and properties;
      rejects a blank title or a board left with zero columns (ValidationError)
    - Board creation writes the whole document once: columns ordered 0..n-1
    - add_column appends with order = current column count
    - delete_column delegates to OrderingEngine (compaction + card cascade)
    - delete_board removes boards/<id> and then cards/<id>
    - Every board mutation stamps updatedAt

Design Decisions:
    - Store errors propagate unchanged (no retries, no translation here)
    - One id scheme for everything: push keys from infrastructure/keys.py
"""

import logging
from dataclasses import dataclass

from tablero.core.domain_types import BoardId, ColumnColor, ColumnId, PropertyId, PropertyType
from tablero.core.entities import Board, Column, PropertyDef
from tablero.core.errors import ErrorContext, NotFoundError, ValidationError
from tablero.core.projection import project_board, project_board_list
from tablero.core.repository_protocols import EntityStore
from tablero.core.store_layout import BOARDS_ROOT, board_cards_path, board_path
from tablero.infrastructure.keys import new_column_id, new_key, new_property_id, now_ms
from tablero.services.ordering_engine import OrderingEngine

logger = logging.getLogger(__name__)


@dataclass
class ColumnDraft:
    """Column requested by the board wizard or the add-column form."""
    name: str
    color: str | None = None


@dataclass
class PropertyDraft:
    name: str
    type: str | None = None


def _parse_color(value: str | None) -> ColumnColor:
    if not value:
        return ColumnColor.BLUE
    try:
        return ColumnColor(value)
    except ValueError:
        raise ValidationError(f"Unknown column color '{value}'", field="color")


def _parse_property_type(value: str | None) -> PropertyType:
    if not value:
        return PropertyType.STRING
    try:
        return PropertyType(value)
    except ValueError:
        raise ValidationError(f"Unknown property type '{value}'", field="type")


class BoardRepository:
    """Boards and columns."""

    def __init__(self, store: EntityStore, engine: OrderingEngine | None = None):
        self.store = store
        self.engine = engine or OrderingEngine(store)

    # ─── Boards ─────────────────────────────────────────────────

    async def create_board(
        self,
        title: str,
        columns: list[ColumnDraft],
        properties: list[PropertyDraft] | None = None,
    ) -> BoardId:
        title = (title or "").strip()
        if not title:
            raise ValidationError("Board title is required", field="title")
        valid_columns = [c for c in columns if c.name and c.name.strip()]
        if not valid_columns:
            raise ValidationError("A board needs at least one named column", field="columns")

        stamp = now_ms()
        board = Board(
            id=BoardId(new_key()),
            title=title,
            columns=[
                Column(
                    id=ColumnId(new_column_id()),
                    name=draft.name.strip(),
                    color=_parse_color(draft.color),
                    order=index,
                )
                for index, draft in enumerate(valid_columns)
            ],
            properties=[
                PropertyDef(
                    id=PropertyId(new_property_id()),
                    name=draft.name.strip(),
                    type=_parse_property_type(draft.type),
                )
                for draft in (properties or [])
                if draft.name and draft.name.strip()
            ],
            created_at=stamp,
            updated_at=stamp,
        )
        await self.store.put(board_path(board.id), board.to_record())
        logger.info("Board created", extra={"board_id": board.id})
        return board.id

    async def get_board(self, board_id: str) -> Board | None:
        return project_board(board_id, await self.store.get(board_path(board_id)))

    async def require_board(self, board_id: str) -> Board:
        board = await self.get_board(board_id)
        if board is None:
            raise NotFoundError("Board", board_id, ErrorContext(board_id=board_id))
        return board

    async def require_column(self, board_id: str, column_id: str) -> tuple[Board, Column]:
        board = await self.require_board(board_id)
        column = board.find_column(column_id)
        if column is None:
            raise NotFoundError("Column", column_id, ErrorContext(
                board_id=board_id, column_id=column_id,
            ))
        return board, column

    async def list_boards(self) -> list[Board]:
        return project_board_list(await self.store.get(BOARDS_ROOT))

    async def update_board(self, board_id: str, title: str) -> None:
        await self.require_board(board_id)
        title = (title or "").strip()
        if not title:
            raise ValidationError("Board title is required", field="title")
        await self.store.patch(board_path(board_id), {"title": title, "updatedAt": now_ms()})

    async def delete_board(self, board_id: str) -> None:
        await self.require_board(board_id)
        await self.store.delete(board_path(board_id))
        await self.store.delete(board_cards_path(board_id))
        logger.info("Board deleted", extra={"board_id": board_id})

    # ─── Columns ────────────────────────────────────────────────

    async def add_column(self, board_id: str, draft: ColumnDraft) -> Column:
        board = await self.require_board(board_id)
        name = (draft.name or "").strip()
        if not name:
            raise ValidationError("Column name is required", field="name")
        column = Column(
            id=ColumnId(new_column_id()),
            name=name,
            color=_parse_color(draft.color),
            order=len(board.columns),
        )
        await self.store.patch(board_path(board_id), {
            "columns": [c.to_record() for c in [*board.columns, column]],
            "updatedAt": now_ms(),
        })
        logger.info("Column added", extra={"board_id": board_id, "column_id": column.id})
        return column

    async def update_column(
        self,
        board_id: str,
        column_id: str,
        name: str | None = None,
        color: str | None = None,
        width: int | None = None,
    ) -> Column:
        board, column = await self.require_column(board_id, column_id)
        if name is not None:
            if not name.strip():
                raise ValidationError("Column name is required", field="name")
            column.name = name.strip()
        if color is not None:
            column.color = _parse_color(color)
        if width is not None:
            if width <= 0:
                raise ValidationError("Column width must be positive", field="width")
            column.width = width
        await self.store.patch(board_path(board_id), {
            "columns": [c.to_record() for c in board.columns],
            "updatedAt": now_ms(),
        })
        return column

    async def delete_column(self, board_id: str, column_id: str) -> list[Column]:
        await self.require_board(board_id)
        return await self.engine.delete_column_compaction(board_id, column_id)
