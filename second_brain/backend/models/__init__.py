# Database models package
from second_brain.backend.models.base import Base
from second_brain.backend.models.edge import Edge, edge_key
from second_brain.backend.models.note import Note

__all__ = ["Base", "Edge", "Note", "edge_key"]
