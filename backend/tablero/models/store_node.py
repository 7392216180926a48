"""Store Node ORM — one row per leaf of the entity tree.

Invariants:
    - path is the full "/"-joined leaf path and the primary key
    - Rows never overlap: no row's path is an ancestor of another row's path
    - value holds a JSON scalar or array, never a mapping (mappings are flattened)

Design Decisions:
    - Leaf rows over one JSON blob per board: subtree reads are a single
      prefix scan, and card writes touch only the card's own rows
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from tablero.db.base import Base


class StoreNode(Base):
    """Leaf of the tree-shaped store."""
    __tablename__ = "store_nodes"

    path: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
