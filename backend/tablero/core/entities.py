"""Entities — typed views over schema-less store snapshots.

Invariants:
    - from_record never raises on missing fields: explicit defaults for every
      optional value (width → None, properties → [], order → 0, timestamps → 0)
    - to_record produces exactly the persisted layout (camelCase keys, width
      omitted when unset) so a record survives from_record → to_record
    - Board.ordered_columns sorts by `order`, ties broken by stored position

Design Decisions:
    - Plain dataclasses over pydantic: core stays dependency-free and these are
      rebuilt wholesale on every snapshot push
    - Columns may come back as an index-keyed mapping (sparse array in the
      store); both shapes deserialize in index order
"""

from dataclasses import dataclass, field
from typing import Any

from tablero.core.domain_types import (
    BoardId, CardId, ColumnColor, ColumnId, PropertyId, PropertyType,
)


@dataclass
class Column:
    id: ColumnId
    name: str
    color: ColumnColor = ColumnColor.BLUE
    order: int = 0
    width: int | None = None

    def to_record(self) -> dict:
        record = {
            "id": self.id,
            "name": self.name,
            "color": self.color.value,
            "order": self.order,
        }
        if self.width is not None:
            record["width"] = self.width
        return record

    @classmethod
    def from_record(cls, data: dict) -> "Column":
        width = data.get("width")
        return cls(
            id=ColumnId(str(data.get("id", ""))),
            name=data.get("name", ""),
            color=ColumnColor.from_str(data.get("color")),
            order=_as_int(data.get("order")),
            width=_as_int(width) if width is not None else None,
        )


@dataclass
class PropertyDef:
    id: PropertyId
    name: str
    type: PropertyType = PropertyType.STRING

    def to_record(self) -> dict:
        return {"id": self.id, "name": self.name, "type": self.type.value}

    @classmethod
    def from_record(cls, data: dict) -> "PropertyDef":
        return cls(
            id=PropertyId(str(data.get("id", ""))),
            name=data.get("name", ""),
            type=PropertyType.from_str(data.get("type")),
        )


@dataclass
class Board:
    id: BoardId
    title: str
    columns: list[Column] = field(default_factory=list)
    properties: list[PropertyDef] = field(default_factory=list)
    created_at: int = 0
    updated_at: int = 0

    @property
    def ordered_columns(self) -> list[Column]:
        ranked = sorted(enumerate(self.columns), key=lambda pair: (pair[1].order, pair[0]))
        return [column for _, column in ranked]

    def find_column(self, column_id: str) -> Column | None:
        return next((c for c in self.columns if c.id == column_id), None)

    def find_column_by_name(self, name: str) -> Column | None:
        """Exact name match, first column in display order wins."""
        return next((c for c in self.ordered_columns if c.name == name), None)

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "columns": [c.to_record() for c in self.columns],
            "properties": [p.to_record() for p in self.properties],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, board_id: str, data: dict) -> "Board":
        return cls(
            id=BoardId(str(data.get("id") or board_id)),
            title=data.get("title", ""),
            columns=[Column.from_record(c) for c in _records(data.get("columns"))],
            properties=[PropertyDef.from_record(p) for p in _records(data.get("properties"))],
            created_at=_as_int(data.get("createdAt")),
            updated_at=_as_int(data.get("updatedAt")),
        )


@dataclass
class Card:
    id: CardId
    title: str
    content: str = ""
    order: int = 0
    created_at: int = 0
    updated_at: int = 0

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "order": self.order,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_record(cls, card_id: str, data: dict) -> "Card":
        # The store key is authoritative; partial nodes may lack an "id" field
        return cls(
            id=CardId(card_id),
            title=data.get("title", ""),
            content=data.get("content", ""),
            order=_as_int(data.get("order")),
            created_at=_as_int(data.get("createdAt")),
            updated_at=_as_int(data.get("updatedAt")),
        )


def _records(raw: Any) -> list[dict]:
    if isinstance(raw, list):
        return [item for item in raw if isinstance(item, dict)]
    if isinstance(raw, dict):
        keys = sorted(raw, key=lambda k: (not k.isdigit(), int(k) if k.isdigit() else 0, k))
        return [raw[k] for k in keys if isinstance(raw[k], dict)]
    return []


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
