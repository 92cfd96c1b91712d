"""Search test fixtures."""

from datetime import datetime

import pytest

from second_brain.backend.schemas.note import NoteResponse, Position


@pytest.fixture
def note_snapshot() -> NoteResponse:
    """A committed note as handed to the synchronizer."""
    return NoteResponse(
        id="note-1",
        name="Graph theory",
        content="Vertices and edges.",
        color="green",
        tag="math",
        image_url="",
        position=Position(x=12.5, y=40),
        created_at=datetime(2024, 1, 1, 0, 0, 0),
        updated_at=datetime(2024, 1, 1, 0, 0, 1),
    )
