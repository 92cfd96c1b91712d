"""
Edge Repository.

Data access layer for edges. Edges are addressed by their deterministic key.
"""

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.models.edge import Edge
from second_brain.backend.repositories.base import BaseRepository


class EdgeRepository(BaseRepository[Edge]):
    """Repository for Edge model."""

    model = Edge
    id_attr = "key"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def get_for_note(self, note_id: str) -> list[Edge]:
        """
        Get every edge where the note is source or target.

        Args:
            note_id: Note ID

        Returns:
            Incident edges, outgoing and incoming
        """
        result = await self.session.execute(
            select(Edge)
            .where(or_(Edge.source_id == note_id, Edge.target_id == note_id))
            .order_by(Edge.created_at)
        )
        return list(result.scalars().all())

    async def delete_for_note(self, note_id: str) -> int:
        """
        Delete every edge incident to a note.

        Returns:
            Number of edges removed
        """
        result = await self.session.execute(
            delete(Edge)
            .where(or_(Edge.source_id == note_id, Edge.target_id == note_id))
            .execution_options(synchronize_session="fetch")
        )
        await self.session.flush()
        return result.rowcount or 0
