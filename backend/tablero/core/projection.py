"""Projection — pure rebuild of render-ready views from raw store snapshots.

Invariants:
    - Every call rebuilds from scratch; no input snapshot is mutated
    - cards_by_column lists are sorted ascending by `order`, ties by store key
    - A missing board snapshot projects to None (board deleted or never existed)
    - Non-mapping nodes under a column are ignored, never raised on

Design Decisions:
    - Full functional rebuild per snapshot instead of incremental patches: the
      projection can never drift from the store, at O(size) cost per event
    - BoardView is the single payload handed to stream consumers
"""

from dataclasses import dataclass, field
from typing import Any

from tablero.core.entities import Board, Card, Column
from tablero.core.ordering import sort_cards


@dataclass
class BoardView:
    """Render-ready pairing of the board projection and its ordered cards."""
    board: Board | None = None
    cards_by_column: dict[str, list[Card]] = field(default_factory=dict)

    @property
    def ordered_columns(self) -> list[Column]:
        return self.board.ordered_columns if self.board else []

    @property
    def card_count(self) -> int:
        """Observed from the cards projection — never stored on the board."""
        return sum(len(cards) for cards in self.cards_by_column.values())

    def cards_for(self, column_id: str) -> list[Card]:
        return self.cards_by_column.get(column_id, [])

    def to_dict(self) -> dict:
        if self.board is None:
            return {"board": None, "columns": [], "card_count": 0}
        return {
            "board": {
                "id": self.board.id,
                "title": self.board.title,
                "properties": [p.to_record() for p in self.board.properties],
                "createdAt": self.board.created_at,
                "updatedAt": self.board.updated_at,
            },
            "columns": [
                {
                    **column.to_record(),
                    "cards": [card.to_record() for card in self.cards_for(column.id)],
                }
                for column in self.ordered_columns
            ],
            "card_count": self.card_count,
        }


def project_board(board_id: str, raw: Any) -> Board | None:
    if not isinstance(raw, dict):
        return None
    return Board.from_record(board_id, raw)


def project_cards(raw: Any) -> dict[str, list[Card]]:
    """cards/<boardId> snapshot → column id → cards in display order."""
    if not isinstance(raw, dict):
        return {}
    projected: dict[str, list[Card]] = {}
    for column_id, cards in raw.items():
        if not isinstance(cards, dict):
            continue
        projected[column_id] = sort_cards([
            Card.from_record(card_id, data)
            for card_id, data in cards.items()
            if isinstance(data, dict)
        ])
    return projected


def project_column(raw: Any) -> list[Card]:
    """cards/<boardId>/<columnId> snapshot → cards in display order."""
    return project_cards({"_": raw}).get("_", [])


def project_board_list(raw: Any) -> list[Board]:
    """boards/ snapshot → boards in store key order (chronological keys)."""
    if not isinstance(raw, dict):
        return []
    return [
        Board.from_record(board_id, raw[board_id])
        for board_id in sorted(raw)
        if isinstance(raw[board_id], dict)
    ]
