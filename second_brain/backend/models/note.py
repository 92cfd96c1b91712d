"""
Note Model.

A note is a graph vertex: free text, a color, a tag, an optional image URL
and a position on the canvas.
"""

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from second_brain.backend.models.base import Base, TimestampMixin, UUIDMixin

DEFAULT_COLOR = "blue"


class Note(UUIDMixin, TimestampMixin, Base):
    """
    Note database model.

    Incident edges are deleted with the note: the service deletes them
    explicitly in the same transaction, and the foreign keys carry
    ON DELETE CASCADE as a backstop.
    """

    __tablename__ = "notes"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    color: Mapped[str] = mapped_column(
        String(64),
        default=DEFAULT_COLOR,
        nullable=False,
    )
    tag: Mapped[str] = mapped_column(
        String(128),
        default="",
        nullable=False,
    )
    image_url: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    position_x: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        nullable=False,
    )
    position_y: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        nullable=False,
    )
    width: Mapped[float | None] = mapped_column(Float, nullable=True)
    height: Mapped[float | None] = mapped_column(Float, nullable=True)

    @property
    def position(self) -> dict[str, float]:
        """Canvas position as an {x, y} pair."""
        return {"x": self.position_x, "y": self.position_y}

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, name={self.name!r})>"
