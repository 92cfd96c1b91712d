"""
Note Schemas.

Pydantic schemas for note API request/response validation. Field names are
camelCase on the wire (imageUrl, createdAt, updatedAt).
"""

from datetime import datetime

from pydantic import Field

from second_brain.backend.models.note import DEFAULT_COLOR
from second_brain.backend.schemas.base import CamelModel


class Position(CamelModel):
    """Canvas position of a note."""

    x: float = 0.0
    y: float = 0.0


class PositionPatch(CamelModel):
    """Partial position; only the provided coordinates change."""

    x: float | None = None
    y: float | None = None


class NoteCreate(CamelModel):
    """Schema for creating a new note."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note name",
        examples=["Graph theory"],
    )
    content: str = Field(
        ...,
        min_length=1,
        description="Note content",
        examples=["Vertices, edges and the paths between them."],
    )
    color: str = Field(default=DEFAULT_COLOR, max_length=64)
    tag: str = Field(default="", max_length=128)
    image_url: str = Field(default="", description="URL into object storage")
    position: Position = Field(default_factory=Position)
    width: float | None = None
    height: float | None = None


class NoteUpdate(CamelModel):
    """Schema for updating an existing note. Unset fields are left alone."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = Field(default=None, min_length=1)
    color: str | None = Field(default=None, max_length=64)
    tag: str | None = Field(default=None, max_length=128)
    image_url: str | None = None
    position: PositionPatch | None = None
    width: float | None = None
    height: float | None = None


class NoteResponse(CamelModel):
    """Schema for a note in API responses."""

    id: str = Field(description="Note unique identifier")
    name: str
    content: str
    color: str
    tag: str
    image_url: str
    position: Position
    width: float | None = None
    height: float | None = None
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class NoteSearchHit(CamelModel):
    """A note matched by the search index."""

    id: str
    name: str
    color: str = ""
    tag: str = ""
