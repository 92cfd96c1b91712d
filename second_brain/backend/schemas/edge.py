"""
Edge Schemas.

Edges go over the wire with `source`/`target` as plain note ids and `id`
equal to the deterministic edge key.
"""

from pydantic import Field

from second_brain.backend.models.edge import Edge
from second_brain.backend.schemas.base import CamelModel


class EdgeStyle(CamelModel):
    """Stroke style of an edge."""

    stroke: str
    stroke_width: float


class EdgeCreate(CamelModel):
    """Schema for connecting two notes."""

    source: str = Field(..., min_length=1, description="Source note id")
    target: str = Field(..., min_length=1, description="Target note id")
    style: EdgeStyle | None = None
    type: str | None = None
    animated: bool | None = None
    label: str | None = None


class EdgeResponse(CamelModel):
    """Schema for an edge in API responses."""

    id: str = Field(description="Deterministic edge key")
    source: str
    target: str
    style: EdgeStyle
    type: str
    animated: bool
    label: str

    @classmethod
    def from_model(cls, edge: Edge) -> "EdgeResponse":
        return cls(
            id=edge.key,
            source=str(edge.source_id),
            target=str(edge.target_id),
            style=EdgeStyle(stroke=edge.stroke, stroke_width=edge.stroke_width),
            type=edge.type,
            animated=edge.animated,
            label=edge.label,
        )
