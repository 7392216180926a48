"""CSV Codec — pure serialization and parsing of the card interchange format.

Invariants:
    - Exported text starts with a UTF-8 byte-order mark and the literal header
      `Título,Contenido,Columna`
    - Every exported field is double-quoted with inner quotes doubled
    - Rows follow display order: columns by `order`, cards by `order`
    - parse_records is a character state machine: commas, doubled quotes and
      line breaks inside quotes belong to the field
    - Header names are checked by presence, not position; a missing name raises
      ParseError before any data record is examined
    - Records with fewer than 3 fields are dropped; extra fields are ignored

Design Decisions:
    - Hand-written state machine over the csv module: lenient quote handling
      (a quote may open mid-field) and the exact drop rules above
    - Column names are resolved by the shell (services/csv_transceiver.py);
      this module knows nothing about the store
"""

import re
from dataclasses import dataclass
from datetime import date

from tablero.core.entities import Board, Card
from tablero.core.errors import ParseError

BOM = "\ufeff"
HEADER_TITLE = "Título"
HEADER_CONTENT = "Contenido"
HEADER_COLUMN = "Columna"
REQUIRED_HEADERS: tuple[str, ...] = (HEADER_TITLE, HEADER_CONTENT, HEADER_COLUMN)
HEADER_LINE = ",".join(REQUIRED_HEADERS)

TEMPLATE_TITLE = "Tarea de ejemplo"
TEMPLATE_CONTENT = "Descripción de la tarea"

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


@dataclass
class CsvRow:
    """One data record resolved against the header."""
    title: str
    content: str
    column_name: str
    line_number: int


# ─── Export ──────────────────────────────────────────────────────

def quote_field(value: str) -> str:
    return '"' + str(value).replace('"', '""') + '"'


def export_rows(board: Board, cards_by_column: dict[str, list[Card]]) -> list[tuple[str, str, str]]:
    rows = []
    for column in board.ordered_columns:
        for card in sorted(cards_by_column.get(column.id, []), key=lambda c: (c.order, c.id)):
            rows.append((card.title, card.content, column.name))
    return rows


def template_rows(
    board: Board, title: str = TEMPLATE_TITLE, content: str = TEMPLATE_CONTENT,
) -> list[tuple[str, str, str]]:
    return [(title, content, column.name) for column in board.ordered_columns]


def render_csv(rows: list[tuple[str, str, str]]) -> str:
    lines = [HEADER_LINE]
    lines.extend(",".join(quote_field(value) for value in row) for row in rows)
    return BOM + "\n".join(lines) + "\n"


def export_filename(title: str, today: date) -> str:
    return f"{_NON_ALNUM.sub('_', title)}_{today.isoformat()}.csv"


# ─── Import ──────────────────────────────────────────────────────

def parse_records(text: str) -> list[tuple[int, list[str]]]:
    """Split CSV text into (line number, fields) records."""
    records: list[tuple[int, list[str]]] = []
    fields: list[str] = []
    buffer: list[str] = []
    in_quotes = False
    line = 1
    record_line = 1
    i = 0
    while i < len(text):
        ch = text[i]
        if in_quotes:
            if ch == '"':
                if i + 1 < len(text) and text[i + 1] == '"':
                    buffer.append('"')
                    i += 1
                else:
                    in_quotes = False
            else:
                if ch == "\n":
                    line += 1
                buffer.append(ch)
        elif ch == '"':
            in_quotes = True
        elif ch == ",":
            fields.append("".join(buffer))
            buffer = []
        elif ch in "\r\n":
            if ch == "\r" and i + 1 < len(text) and text[i + 1] == "\n":
                i += 1
            fields.append("".join(buffer))
            records.append((record_line, fields))
            fields, buffer = [], []
            line += 1
            record_line = line
        else:
            buffer.append(ch)
        i += 1
    if buffer or fields:
        fields.append("".join(buffer))
        records.append((record_line, fields))
    return [(n, f) for n, f in records if not _is_blank(f)]


def parse_csv(text: str) -> list[CsvRow]:
    """Parse an import document into rows. Raises ParseError on a bad header."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    records = parse_records(text)
    if not records:
        raise ParseError("CSV document is empty")

    _, header = records[0]
    names = [name.strip() for name in header]
    missing = [name for name in REQUIRED_HEADERS if name not in names]
    if missing:
        raise ParseError(
            f"CSV header is missing required columns: {', '.join(missing)}",
            missing_headers=missing,
        )
    if len(records) == 1:
        raise ParseError("CSV document contains no card rows")

    index = {name: names.index(name) for name in REQUIRED_HEADERS}
    rows: list[CsvRow] = []
    for line_number, fields in records[1:]:
        if len(fields) < len(REQUIRED_HEADERS) or max(index.values()) >= len(fields):
            continue
        rows.append(CsvRow(
            title=fields[index[HEADER_TITLE]],
            content=fields[index[HEADER_CONTENT]],
            column_name=fields[index[HEADER_COLUMN]],
            line_number=line_number,
        ))
    return rows


def _is_blank(fields: list[str]) -> bool:
    return all(not value.strip() for value in fields) and len(fields) <= 1
