"""
FastAPI Dependencies.

Shared dependencies for request handling. Process-lifetime collaborators
(search synchronizer, object store) are constructed in the application
lifespan and stored on app.state; endpoints receive them through these
dependencies so tests can substitute fakes via dependency_overrides.
"""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from second_brain.backend.core.database import get_db_session
from second_brain.backend.search.sync import SearchSynchronizer
from second_brain.backend.storage.object_store import ObjectStore

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    import uuid

    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


def get_search_sync(request: Request) -> SearchSynchronizer:
    """Return the application's search synchronizer."""
    return request.app.state.search_sync


def get_object_store(request: Request) -> ObjectStore:
    """Return the application's object store."""
    return request.app.state.object_store


SearchSync = Annotated[SearchSynchronizer, Depends(get_search_sync)]
ObjectStorage = Annotated[ObjectStore, Depends(get_object_store)]
