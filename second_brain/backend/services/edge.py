"""
Edge Service.

Business logic for directed connections between notes. An edge is only
created when both endpoints exist, the endpoints differ, and no edge with
the same (source, target) key exists yet.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.exceptions import ConflictError, NotFoundError, ValidationError
from second_brain.backend.models.edge import (
    DEFAULT_EDGE_TYPE,
    DEFAULT_STROKE,
    DEFAULT_STROKE_WIDTH,
    Edge,
    edge_key,
)
from second_brain.backend.repositories.edge import EdgeRepository
from second_brain.backend.repositories.note import NoteRepository
from second_brain.backend.schemas.edge import EdgeCreate
from second_brain.backend.services.base import BaseService


class EdgeService(BaseService):
    """Service for edge business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = EdgeRepository(session)
        self.note_repo = NoteRepository(session)

    async def create_edge(self, data: EdgeCreate) -> Edge:
        """
        Connect two notes.

        The existence checks and the insert share one transaction; the
        primary key on the edge key turns a concurrent duplicate insert into
        a ConflictError as well.

        Raises:
            ValidationError: If source and target are the same note
            NotFoundError: If either endpoint does not exist
            ConflictError: If the edge already exists in this direction
        """
        if data.source == data.target:
            raise ValidationError(
                "A note cannot be connected to itself",
                details={"source": data.source, "target": data.target},
            )

        endpoints = await self.note_repo.get_many([data.source, data.target])
        if len(endpoints) < 2:
            raise NotFoundError("One or both notes not found")

        key = edge_key(data.source, data.target)
        if await self.repo.exists(key):
            raise ConflictError("Connection already exists")

        self._log_operation("Creating edge", edge_key=key)

        style = data.style
        return await self._execute_db_operation(
            "create_edge",
            self.repo.create(
                key=key,
                source_id=data.source,
                target_id=data.target,
                stroke=style.stroke if style else DEFAULT_STROKE,
                stroke_width=style.stroke_width if style else DEFAULT_STROKE_WIDTH,
                type=data.type or DEFAULT_EDGE_TYPE,
                animated=bool(data.animated),
                label=data.label or "",
            ),
        )

    async def delete_edge(self, key: str) -> None:
        """
        Remove a single edge.

        Raises:
            NotFoundError: If no edge has this key
        """
        self._log_operation("Deleting edge", edge_key=key)
        if not await self.repo.exists(key):
            raise NotFoundError("Connection not found")
        await self._execute_db_operation("delete_edge", self.repo.delete(key))

    async def list_edges(self) -> list[Edge]:
        """List every edge."""
        return await self.repo.get_all()

    async def list_edges_for_note(self, note_id: str) -> list[Edge]:
        """List edges where the note is source or target. Unknown ids yield []."""
        return await self.repo.get_for_note(note_id)
