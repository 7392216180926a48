"""Card Repository — keyed card writes under cards/<boardId>/<columnId>/<cardId>.

Invariants:
    - create_card requires the column to exist on the board (NotFoundError)
    - A new card is appended: order = current column length at insertion time
    - A blank title falls back to DEFAULT_CARD_TITLE; any other title is
      stored exactly as given (no trimming)
    - update_card and delete_card require the card to exist; update always
      stamps updatedAt
    - move_card / reorder_cards delegate to OrderingEngine unchanged

Design Decisions:
    - The column length is read right before the write, so interleaved remote
      writes can still produce a shared order value (last-write-wins store)
"""

import logging

from tablero.core.domain_types import DEFAULT_CARD_TITLE, CardId
from tablero.core.entities import Card
from tablero.core.errors import ErrorContext, NotFoundError
from tablero.core.projection import project_cards
from tablero.core.repository_protocols import EntityStore
from tablero.core.store_layout import board_cards_path, card_path
from tablero.infrastructure.keys import new_key, now_ms
from tablero.services.board_repository import BoardRepository
from tablero.services.ordering_engine import OrderingEngine

logger = logging.getLogger(__name__)


def _card_title(title: str | None) -> str:
    """Stored as given; only a blank title falls back to the default."""
    if not title or not title.strip():
        return DEFAULT_CARD_TITLE
    return title


class CardRepository:
    """Cards of one store, validated against their board's columns."""

    def __init__(
        self,
        store: EntityStore,
        boards: BoardRepository | None = None,
        engine: OrderingEngine | None = None,
    ):
        self.store = store
        self.engine = engine or OrderingEngine(store)
        self.boards = boards or BoardRepository(store, self.engine)

    async def create_card(
        self, board_id: str, column_id: str, title: str = "", content: str = "",
    ) -> Card:
        await self.boards.require_column(board_id, column_id)
        existing = await self.engine.column_cards(board_id, column_id)
        stamp = now_ms()
        card = Card(
            id=CardId(new_key()),
            title=_card_title(title),
            content=content or "",
            order=len(existing),
            created_at=stamp,
            updated_at=stamp,
        )
        await self.store.put(card_path(board_id, column_id, card.id), card.to_record())
        logger.debug(
            "Card created",
            extra={"board_id": board_id, "column_id": column_id, "card_id": card.id},
        )
        return card

    async def get_card(self, board_id: str, column_id: str, card_id: str) -> Card | None:
        raw = await self.store.get(card_path(board_id, column_id, card_id))
        if not isinstance(raw, dict):
            return None
        return Card.from_record(card_id, raw)

    async def require_card(self, board_id: str, column_id: str, card_id: str) -> Card:
        card = await self.get_card(board_id, column_id, card_id)
        if card is None:
            raise NotFoundError("Card", card_id, ErrorContext(
                board_id=board_id, column_id=column_id, card_id=card_id,
            ))
        return card

    async def get_cards_by_board(self, board_id: str) -> dict[str, list[Card]]:
        """Column id → cards in display order."""
        return project_cards(await self.store.get(board_cards_path(board_id)))

    async def update_card(
        self,
        board_id: str,
        column_id: str,
        card_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Card:
        card = await self.require_card(board_id, column_id, card_id)
        updates: dict[str, object] = {"updatedAt": now_ms()}
        if title is not None:
            card.title = _card_title(title)
            updates["title"] = card.title
        if content is not None:
            card.content = content
            updates["content"] = content
        await self.store.patch(card_path(board_id, column_id, card_id), updates)
        card.updated_at = updates["updatedAt"]
        return card

    async def delete_card(self, board_id: str, column_id: str, card_id: str) -> None:
        await self.require_card(board_id, column_id, card_id)
        await self.store.delete(card_path(board_id, column_id, card_id))

    async def move_card(
        self,
        board_id: str,
        card_id: str,
        source_column_id: str,
        target_column_id: str,
        insertion_index: int,
    ) -> None:
        await self.boards.require_column(board_id, target_column_id)
        await self.engine.move_across_columns(
            board_id, card_id, source_column_id, target_column_id, insertion_index,
        )

    async def reorder_cards(self, board_id: str, column_id: str, card_ids: list[str]) -> int:
        return await self.engine.reorder_within_column(board_id, column_id, card_ids)
