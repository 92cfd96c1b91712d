"""
Search Index Schema.

Collection definition for the notes index and the projection of a note into
a search document. Edges have no search representation.
"""

from typing import Any

from second_brain.backend.core.utils import to_epoch_millis
from second_brain.backend.schemas.note import NoteResponse


def notes_collection_schema(name: str) -> dict[str, Any]:
    """Collection definition created at startup when the index lacks it."""
    return {
        "name": name,
        "fields": [
            {"name": "id", "type": "string"},
            {"name": "name", "type": "string", "facet": False},
            {"name": "content", "type": "string", "facet": False},
            {"name": "color", "type": "string", "facet": True},
            {"name": "tag", "type": "string", "facet": True},
            {"name": "position_x", "type": "float", "facet": False},
            {"name": "position_y", "type": "float", "facet": False},
            {"name": "createdAt", "type": "int64", "facet": False},
            {"name": "updatedAt", "type": "int64", "facet": False},
        ],
        "default_sorting_field": "createdAt",
    }


def to_search_document(note: NoteResponse) -> dict[str, Any]:
    """Flatten a note into its search document."""
    return {
        "id": note.id,
        "name": note.name,
        "content": note.content,
        "color": note.color,
        "tag": note.tag,
        "position_x": float(note.position.x or 0),
        "position_y": float(note.position.y or 0),
        "createdAt": to_epoch_millis(note.created_at),
        "updatedAt": to_epoch_millis(note.updated_at),
    }
