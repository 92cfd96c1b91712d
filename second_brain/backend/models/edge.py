"""
Edge Model.

A directed, styled connection between two notes. The primary key is derived
from the ordered (source, target) pair, so each direction exists at most once.
"""

from sqlalchemy import Boolean, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from second_brain.backend.models.base import Base, TimestampMixin

DEFAULT_STROKE = "hsl(var(--tree-connection))"
DEFAULT_STROKE_WIDTH = 2.0
DEFAULT_EDGE_TYPE = "default"


def edge_key(source: str, target: str) -> str:
    """
    Deterministic key of the edge from `source` to `target`.

    Used for both the uniqueness check on create and lookups on delete.
    The reverse direction yields a different key.
    """
    return f"e{source}-{target}"


class Edge(TimestampMixin, Base):
    """Edge database model."""

    __tablename__ = "edges"
    __table_args__ = (
        UniqueConstraint("source_id", "target_id", name="uq_edges_source_target"),
    )

    key: Mapped[str] = mapped_column(String(160), primary_key=True)
    source_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    target_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    stroke: Mapped[str] = mapped_column(
        String(128),
        default=DEFAULT_STROKE,
        nullable=False,
    )
    stroke_width: Mapped[float] = mapped_column(
        Float,
        default=DEFAULT_STROKE_WIDTH,
        nullable=False,
    )
    type: Mapped[str] = mapped_column(
        String(64),
        default=DEFAULT_EDGE_TYPE,
        nullable=False,
    )
    animated: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    label: Mapped[str] = mapped_column(
        String(255),
        default="",
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Edge(key={self.key!r})>"
