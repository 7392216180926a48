"""Ordering Engine — commits order-index changes for reorder, move and column deletion.

Invariants:
    - reorder_within_column writes the whole target assignment in ONE patch;
      an already-applied sequence issues no write at all
    - move_across_columns: put under target (order = k) → delete from source →
      shift target siblings at position >= k by +1. The source column is NOT
      re-packed, so gaps may remain there until its next reorder
    - same source and target degrades to reorder semantics
    - delete_column_compaction re-packs surviving columns, then cascades cards
    - Any store failure aborts the remaining steps; nothing is rolled back

Design Decisions:
    - Plans computed by core/ordering.py (pure); this class only reads
      snapshots and issues writes (impureim sandwich)
    - Store errors propagate unchanged; the API layer is the only translator
"""

import logging

from tablero.core.entities import Card, Column
from tablero.core.errors import ErrorContext, NotFoundError
from tablero.core.ordering import (
    plan_column_compaction, plan_insert_shift, plan_reorder, plan_same_column_move,
)
from tablero.core.projection import project_board, project_column
from tablero.core.repository_protocols import EntityStore
from tablero.core.store_layout import board_path, card_path, column_cards_path
from tablero.infrastructure.keys import now_ms

logger = logging.getLogger(__name__)


class OrderingEngine:
    """Computes and commits order changes for cards and columns."""

    def __init__(self, store: EntityStore):
        self.store = store

    async def column_cards(self, board_id: str, column_id: str) -> list[Card]:
        raw = await self.store.get(column_cards_path(board_id, column_id))
        return project_column(raw)

    async def reorder_within_column(
        self, board_id: str, column_id: str, ordered_card_ids: list[str],
    ) -> int:
        """Assign order = index along ordered_card_ids. Returns cards rewritten."""
        current = await self.column_cards(board_id, column_id)
        plan = plan_reorder(current, ordered_card_ids)
        if not plan:
            return 0

        stamp = now_ms()
        updates: dict[str, object] = {}
        for card_id, order in plan.items():
            updates[f"{card_id}/order"] = order
            updates[f"{card_id}/updatedAt"] = stamp
        await self.store.patch(column_cards_path(board_id, column_id), updates)
        logger.info(
            f"Reordered {len(plan)} card(s)",
            extra={"board_id": board_id, "column_id": column_id},
        )
        return len(plan)

    async def move_across_columns(
        self,
        board_id: str,
        card_id: str,
        source_column_id: str,
        target_column_id: str,
        insertion_index: int,
    ) -> None:
        if source_column_id == target_column_id:
            current = await self.column_cards(board_id, source_column_id)
            sequence = plan_same_column_move(current, card_id, insertion_index)
            await self.reorder_within_column(board_id, source_column_id, sequence)
            return

        source_path = card_path(board_id, source_column_id, card_id)
        raw = await self.store.get(source_path)
        if not isinstance(raw, dict):
            raise NotFoundError("Card", card_id, ErrorContext(
                board_id=board_id, column_id=source_column_id, card_id=card_id,
            ))
        target_cards = await self.column_cards(board_id, target_column_id)
        k, shifts = plan_insert_shift(target_cards, card_id, insertion_index)

        await self.store.put(
            card_path(board_id, target_column_id, card_id),
            {**raw, "id": card_id, "order": k, "updatedAt": now_ms()},
        )
        await self.store.delete(source_path)
        if shifts:
            await self.store.patch(
                column_cards_path(board_id, target_column_id),
                {f"{sibling}/order": order for sibling, order in shifts.items()},
            )
        logger.info(
            f"Moved card {source_column_id} -> {target_column_id} at {k}",
            extra={"board_id": board_id, "card_id": card_id},
        )

    async def delete_column_compaction(self, board_id: str, column_id: str) -> list[Column]:
        """Remove a column, re-pack the rest to 0..n-1, cascade its cards."""
        board = project_board(board_id, await self.store.get(board_path(board_id)))
        if board is None:
            raise NotFoundError("Board", board_id, ErrorContext(board_id=board_id))
        survivors = plan_column_compaction(board.columns, column_id)

        await self.store.patch(board_path(board_id), {
            "columns": [column.to_record() for column in survivors],
            "updatedAt": now_ms(),
        })
        await self.store.delete(column_cards_path(board_id, column_id))
        logger.info(
            "Column deleted", extra={"board_id": board_id, "column_id": column_id},
        )
        return survivors
