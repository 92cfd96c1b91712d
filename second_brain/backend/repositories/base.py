"""
Base Repository.

Base class for all repositories with common CRUD operations.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.exceptions import NotFoundError
from second_brain.backend.core.utils import utc_now
from second_brain.backend.models.base import Base, TimestampMixin

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses should set the model class, and the primary key attribute
    when it is not `id`:

        class EdgeRepository(BaseRepository[Edge]):
            model = Edge
            id_attr = "key"
    """

    model: type[ModelType]
    id_attr: str = "id"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def _id_column(self) -> Any:
        return getattr(self.model, self.id_attr)

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)

        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")

        return instance

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            select(self.model).where(self._id_column == str(id))
        )
        return result.scalar_one_or_none()

    async def get_all(self, limit: int | None = None, offset: int = 0) -> list[ModelType]:
        """Get all records, optionally paginated."""
        stmt = select(self.model).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record. Both timestamps start out equal."""
        if issubclass(self.model, TimestampMixin):
            now = utc_now()
            kwargs.setdefault("created_at", now)
            kwargs.setdefault("updated_at", now)

        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str, **kwargs: Any) -> ModelType:
        """
        Update an existing record and refresh its updated_at.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        if isinstance(instance, TimestampMixin):
            instance.updated_at = utc_now()

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str) -> None:
        """
        Delete a record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def exists(self, id: str) -> bool:
        """Check if a record exists by ID."""
        result = await self.session.execute(
            select(self._id_column).where(self._id_column == str(id))
        )
        return result.scalar_one_or_none() is not None
