"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - BoardId, ColumnId, CardId wrap str keys — never pass raw paths as ids
    - All valid color and property tags encoded as Enums — no raw string matching
    - Unknown stored tags degrade to a fallback member instead of raising

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to the store and to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

BoardId = NewType("BoardId", str)
ColumnId = NewType("ColumnId", str)
CardId = NewType("CardId", str)
PropertyId = NewType("PropertyId", str)

COLUMN_ID_PREFIX = "col_"
PROPERTY_ID_PREFIX = "prop_"

# Drop zones of the drag library are column-scoped: "column-<columnId>"
DROP_ZONE_PREFIX = "column-"

DEFAULT_CARD_TITLE = "Sin título"


# ─── Enums ───────────────────────────────────────────────────────

class ColumnColor(str, Enum):
    """Named lane colors offered by the board wizard."""
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    PURPLE = "purple"
    PINK = "pink"
    INDIGO = "indigo"
    GRAY = "gray"
    ORANGE = "orange"
    TEAL = "teal"
    CYAN = "cyan"
    LIME = "lime"
    AMBER = "amber"
    VIOLET = "violet"
    FUCHSIA = "fuchsia"

    @classmethod
    def from_str(cls, value: str | None) -> "ColumnColor":
        """Lenient parse for stored data — unknown colors render gray."""
        try:
            return cls(value)
        except ValueError:
            return cls.GRAY


class PropertyType(str, Enum):
    """Card property type tags defined at board creation."""
    STRING = "string"
    EMAIL = "email"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE = "date"
    SELECT = "select"
    MULTISELECT = "multiselect"
    CHECKBOX = "checkbox"
    URL = "url"
    PHONE = "phone"
    TEXTAREA = "textarea"

    @classmethod
    def from_str(cls, value: str | None) -> "PropertyType":
        try:
            return cls(value)
        except ValueError:
            return cls.STRING


class StoreBackend(str, Enum):
    """Entity store implementations selectable from settings."""
    MEMORY = "memory"
    SQL = "sql"
