"""
Note Service.

Business logic for notes: creation with required-field checks, partial
updates (including position-only patches from drag), and deletion that
cascades to every incident edge inside the same transaction.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.models.note import Note
from second_brain.backend.repositories.edge import EdgeRepository
from second_brain.backend.repositories.note import NoteRepository
from second_brain.backend.schemas.note import NoteCreate, NoteUpdate
from second_brain.backend.services.base import BaseService

# Columns that may not be set to NULL through an update
_NON_NULLABLE = {"name", "content", "color", "tag", "image_url"}


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, updates, deletion and retrieval with
    proper validation and error handling.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)
        self.edge_repo = EdgeRepository(session)

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note.

        Raises:
            ValidationError: If name or content is blank
        """
        self._validate_required(
            {"name": data.name, "content": data.content},
            ["name", "content"],
        )
        self._log_operation("Creating note", name=data.name)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                name=data.name,
                content=data.content,
                color=data.color,
                tag=data.tag,
                image_url=data.image_url,
                position_x=data.position.x,
                position_y=data.position.y,
                width=data.width,
                height=data.height,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def list_notes(self) -> list[Note]:
        """List every note. Order is not significant."""
        return await self.repo.get_all()

    async def update_note(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Update an existing note.

        Only fields present in the request change. A position patch may carry
        just one coordinate; the other keeps its stored value.

        Raises:
            NotFoundError: If note not found
            ValidationError: If name or content is set to a blank value
        """
        update_data = self._build_update(data)

        if not update_data:
            return await self.repo.get_by_id(note_id)

        for field in ("name", "content"):
            if field in update_data:
                self._validate_required(update_data, [field])

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(update_data.keys()),
        )

        return await self._execute_db_operation(
            "update_note",
            self.repo.update(note_id, **update_data),
        )

    async def delete_note(self, note_id: str) -> int:
        """
        Delete a note and every edge where it is source or target.

        Both deletes run on this service's session, so they commit or roll
        back together and no reader sees a dangling edge.

        Returns:
            Number of edges removed by the cascade

        Raises:
            NotFoundError: If note not found
        """
        note = await self.repo.get_by_id(note_id)

        self._log_operation("Deleting note", note_id=note_id)

        removed = await self._execute_db_operation(
            "delete_note_edges",
            self.edge_repo.delete_for_note(note.id),
        )
        await self._execute_db_operation(
            "delete_note",
            self.repo.delete(note.id),
        )

        self._log_debug("Note deleted", note_id=note_id, edges_removed=removed)
        return removed

    def _build_update(self, data: NoteUpdate) -> dict[str, Any]:
        """Translate a NoteUpdate into column values."""
        update_data = data.model_dump(exclude_unset=True, exclude={"position"})
        update_data = {
            key: value
            for key, value in update_data.items()
            if value is not None or key not in _NON_NULLABLE
        }

        if data.position is not None:
            if data.position.x is not None:
                update_data["position_x"] = data.position.x
            if data.position.y is not None:
                update_data["position_y"] = data.position.y

        return update_data
