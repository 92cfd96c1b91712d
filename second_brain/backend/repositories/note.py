"""
Note Repository.

Data access layer for notes.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.models.note import Note
from second_brain.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """Repository for Note model."""

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_many(self, ids: list[str]) -> list[Note]:
        """Fetch the notes whose ids are in `ids`; missing ids are skipped."""
        if not ids:
            return []
        result = await self.session.execute(select(Note).where(Note.id.in_(ids)))
        return list(result.scalars().all())
