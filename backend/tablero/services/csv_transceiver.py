"""CSV Transceiver — board export, template export and card import.

Invariants:
    - Export reads the board and its cards once and renders via core/csv_codec.py
    - ParseError (bad header, empty document) is raised before any card write
    - Rows are imported sequentially, each creation awaited before the next,
      so a mid-file store failure leaves exactly a prefix of rows committed
    - A row whose column name matches no column is counted as failed and skipped
    - Only aggregate counts leave this module; per-row messages are logged

Design Decisions:
    - Column names resolve against the board read at import start (exact match)
    - Store errors propagate unchanged; the caller decides whether to retry
"""

import logging
from dataclasses import dataclass, field
from datetime import date

from tablero.core.csv_codec import (
    TEMPLATE_CONTENT, TEMPLATE_TITLE,
    export_filename, export_rows, parse_csv, render_csv, template_rows,
)
from tablero.services.board_repository import BoardRepository
from tablero.services.card_repository import CardRepository

logger = logging.getLogger(__name__)


@dataclass
class CsvExport:
    filename: str
    content: str


@dataclass
class ImportSummary:
    imported: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list, repr=False)

    def to_dict(self) -> dict:
        return {"imported": self.imported, "failed": self.failed}


class CsvTransceiver:
    """Serializes a board's cards to CSV and imports cards from CSV text."""

    def __init__(
        self,
        boards: BoardRepository,
        cards: CardRepository,
        template_title: str = TEMPLATE_TITLE,
        template_content: str = TEMPLATE_CONTENT,
    ):
        self.boards = boards
        self.cards = cards
        self.template_title = template_title
        self.template_content = template_content

    async def export_cards(self, board_id: str, today: date | None = None) -> CsvExport:
        board = await self.boards.require_board(board_id)
        cards_by_column = await self.cards.get_cards_by_board(board_id)
        return CsvExport(
            filename=export_filename(board.title, today or date.today()),
            content=render_csv(export_rows(board, cards_by_column)),
        )

    async def export_template(self, board_id: str, today: date | None = None) -> CsvExport:
        board = await self.boards.require_board(board_id)
        rows = template_rows(board, self.template_title, self.template_content)
        return CsvExport(
            filename=export_filename(f"{board.title}_plantilla", today or date.today()),
            content=render_csv(rows),
        )

    async def import_cards(self, board_id: str, text: str) -> ImportSummary:
        board = await self.boards.require_board(board_id)
        rows = parse_csv(text)

        summary = ImportSummary()
        for row in rows:
            column = board.find_column_by_name(row.column_name)
            if column is None:
                summary.failed += 1
                summary.errors.append(
                    f"Line {row.line_number}: unknown column '{row.column_name}'",
                )
                continue
            await self.cards.create_card(board_id, column.id, row.title, row.content)
            summary.imported += 1

        for message in summary.errors:
            logger.warning(message, extra={"board_id": board_id})
        logger.info(
            "CSV import finished",
            extra={"board_id": board_id, "imported": summary.imported, "failed": summary.failed},
        )
        return summary
