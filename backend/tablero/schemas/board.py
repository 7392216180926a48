"""Board Schemas — Pydantic request models for board, column and card endpoints.

Invariants:
    - Titles and names are stripped; blank board titles are rejected here AND
      again by the repository (the repository is the authority)
    - Colors and property types validate against the core enums
    - Insertion indexes are >= 0

Design Decisions:
    - Blank column entries are accepted by BoardCreate and dropped by the
      repository, so the wizard can submit its raw rows
"""

from pydantic import BaseModel, Field, field_validator

from tablero.core.domain_types import ColumnColor, PropertyType


class ColumnInput(BaseModel):
    """One column row of the board creation wizard."""
    name: str = Field("", max_length=200)
    color: ColumnColor | None = None


class PropertyInput(BaseModel):
    name: str = Field("", max_length=200)
    type: PropertyType | None = None


class BoardCreate(BaseModel):
    """Board creation — title plus the wizard's column and property rows."""
    title: str = Field(max_length=500)
    columns: list[ColumnInput] = Field(default_factory=list)
    properties: list[PropertyInput] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class BoardUpdate(BaseModel):
    title: str = Field(max_length=500)


class ColumnCreate(BaseModel):
    name: str = Field(max_length=200)
    color: ColumnColor | None = None


class ColumnUpdate(BaseModel):
    """Partial column edit; omitted fields are left unchanged."""
    name: str | None = Field(None, max_length=200)
    color: ColumnColor | None = None
    width: int | None = Field(None, gt=0)


class CardCreate(BaseModel):
    title: str = Field("", max_length=500)
    content: str = Field("", max_length=20_000)


class CardUpdate(BaseModel):
    title: str | None = Field(None, max_length=500)
    content: str | None = Field(None, max_length=20_000)


class CardMove(BaseModel):
    source_column_id: str
    target_column_id: str
    index: int = Field(ge=0)


class CardReorder(BaseModel):
    card_ids: list[str]


class DragEnd(BaseModel):
    """Drop event from the board UI: dragged card id and drop target id."""
    active_id: str
    over_id: str | None = None
