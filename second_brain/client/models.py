"""
Client Graph Models.

View records held by the client graph state, the notifications it surfaces,
and the reconciliation messages that drive every state change.
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class NotificationKind(str, Enum):
    """How a notification should be presented."""

    SUCCESS = "success"
    ERROR = "error"
    # Visually applied but not persisted
    UNSAVED = "unsaved"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    title: str
    message: str


@dataclass(frozen=True)
class FallbackLayout:
    """Vertical stack used for notes without a usable position."""

    x: float = 400.0
    y: float = 350.0
    step: float = 60.0

    def position(self, index: int) -> tuple[float, float]:
        return self.x, self.y + index * self.step


def _coordinate(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return float(value)


@dataclass
class ViewNode:
    """A note as rendered on the canvas."""

    id: str
    name: str
    content: str
    color: str
    tag: str = ""
    image_url: str = ""
    x: float = 0.0
    y: float = 0.0
    width: float | None = None
    height: float | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_wire(
        cls,
        data: dict[str, Any],
        index: int = 0,
        layout: FallbackLayout | None = None,
    ) -> "ViewNode":
        """
        Build a view node from a wire Note.

        A missing or non-numeric position falls back to the stacked layout
        slot for `index`, so a node never renders without coordinates.
        """
        position = data.get("position")
        x = y = None
        if isinstance(position, dict):
            x = _coordinate(position.get("x"))
            y = _coordinate(position.get("y"))
        if x is None or y is None:
            x, y = (layout or FallbackLayout()).position(index)

        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            content=data.get("content", ""),
            color=data.get("color", ""),
            tag=data.get("tag", ""),
            image_url=data.get("imageUrl", ""),
            x=x,
            y=y,
            width=data.get("width"),
            height=data.get("height"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


@dataclass
class ViewEdge:
    """A directed connection as rendered on the canvas."""

    id: str
    source: str
    target: str
    style: dict[str, Any] = field(default_factory=dict)
    type: str = "default"
    animated: bool = False
    label: str = ""

    @classmethod
    def from_wire(cls, data: dict[str, Any]) -> "ViewEdge":
        return cls(
            id=str(data["id"]),
            source=str(data["source"]),
            target=str(data["target"]),
            style=dict(data.get("style") or {}),
            type=data.get("type", "default"),
            animated=bool(data.get("animated", False)),
            label=data.get("label", ""),
        )

    def touches(self, note_id: str) -> bool:
        return self.source == note_id or self.target == note_id


# =============================================================================
# Reconciliation messages
# =============================================================================


@dataclass(frozen=True)
class NoteConfirmed:
    """
    Authoritative note returned by the server.

    `seq` is None for a newly created note. For updates it is the request
    sequence number, and the message is dropped if the note is gone or a
    later request's response has already been applied.
    """

    node: ViewNode
    seq: int | None = None


@dataclass(frozen=True)
class NoteRemoved:
    note_id: str


@dataclass(frozen=True)
class EdgeConfirmed:
    edge: ViewEdge


@dataclass(frozen=True)
class EdgesRemoved:
    edge_ids: tuple[str, ...]


@dataclass(frozen=True)
class PositionMoved:
    note_id: str
    x: float
    y: float


GraphMessage = NoteConfirmed | NoteRemoved | EdgeConfirmed | EdgesRemoved | PositionMoved
