"""
Edges API Endpoints.

REST endpoints for directed connections, mounted under /notes/edges.
Mutations commit before the response is sent.
"""

from fastapi import APIRouter

from second_brain.backend.core.dependencies import DbSession, RequestId
from second_brain.backend.schemas.base import MessageResponse
from second_brain.backend.schemas.edge import EdgeCreate, EdgeResponse
from second_brain.backend.services.edge import EdgeService

router = APIRouter()


@router.get(
    "/edges",
    response_model=list[EdgeResponse],
    summary="List edges",
)
async def list_edges(db: DbSession, request_id: RequestId) -> list[EdgeResponse]:
    """List all edges with plain endpoint ids."""
    service = EdgeService(db)
    edges = await service.list_edges()
    return [EdgeResponse.from_model(edge) for edge in edges]


@router.post(
    "/edges",
    response_model=EdgeResponse,
    status_code=201,
    summary="Connect two notes",
    description="404 if an endpoint is missing, 409 if the connection exists in this direction.",
)
async def create_edge(data: EdgeCreate, db: DbSession, request_id: RequestId) -> EdgeResponse:
    """Create a directed edge."""
    service = EdgeService(db)
    edge = await service.create_edge(data)
    await service.commit()
    return EdgeResponse.from_model(edge)


@router.delete(
    "/edges/{edge_id}",
    response_model=MessageResponse,
    summary="Delete an edge",
)
async def delete_edge(edge_id: str, db: DbSession, request_id: RequestId) -> MessageResponse:
    """Delete an edge by its key."""
    service = EdgeService(db)
    await service.delete_edge(edge_id)
    await service.commit()
    return MessageResponse(message="Connection deleted successfully")


@router.get(
    "/edges/note/{note_id}",
    response_model=list[EdgeResponse],
    summary="Edges for a note",
)
async def list_note_edges(note_id: str, db: DbSession, request_id: RequestId) -> list[EdgeResponse]:
    """List edges where the note is source or target."""
    service = EdgeService(db)
    edges = await service.list_edges_for_note(note_id)
    return [EdgeResponse.from_model(edge) for edge in edges]
