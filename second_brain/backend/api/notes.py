"""
Notes API Endpoints.

REST endpoints for notes. Each mutation commits before the response is
built; the search index is updated afterwards as a background task from a
snapshot of the committed note, so index trouble never changes the response
or holds the store transaction open.
"""

from fastapi import APIRouter, BackgroundTasks, File, Query, UploadFile

from second_brain.backend.core.dependencies import DbSession, ObjectStorage, RequestId, SearchSync
from second_brain.backend.core.exceptions import ValidationError
from second_brain.backend.schemas.base import MessageResponse
from second_brain.backend.schemas.note import (
    NoteCreate,
    NoteResponse,
    NoteSearchHit,
    NoteUpdate,
)
from second_brain.backend.services.note import NoteService

router = APIRouter()


@router.get(
    "",
    response_model=list[NoteResponse],
    summary="List notes",
    description="Get every note. Order is not significant.",
)
async def list_notes(db: DbSession, request_id: RequestId) -> list[NoteResponse]:
    """List all notes."""
    service = NoteService(db)
    notes = await service.list_notes()
    return [NoteResponse.model_validate(note) for note in notes]


@router.post(
    "",
    response_model=NoteResponse,
    status_code=201,
    summary="Create a note",
    description="Create a note. name and content are required.",
)
async def create_note(
    data: NoteCreate,
    db: DbSession,
    request_id: RequestId,
    search_sync: SearchSync,
    background_tasks: BackgroundTasks,
) -> NoteResponse:
    """Create a new note and schedule its search document."""
    service = NoteService(db)
    note = await service.create_note(data)
    await service.commit()
    snapshot = NoteResponse.model_validate(note)
    background_tasks.add_task(search_sync.upsert, snapshot)
    return snapshot


@router.post(
    "/upload",
    summary="Upload a file",
    description="Store a file in object storage and return its public URL.",
)
async def upload_file(
    object_store: ObjectStorage,
    request_id: RequestId,
    file: UploadFile | None = File(default=None),
) -> dict[str, str]:
    """Forward an uploaded file to object storage."""
    if file is None:
        raise ValidationError("No file uploaded")
    data = await file.read()
    if not data:
        raise ValidationError("Uploaded file is empty")
    url = await object_store.upload(data, filename=file.filename)
    return {"url": url}


@router.get(
    "/search",
    response_model=list[NoteSearchHit],
    summary="Search notes",
    description="Full-text search over note names and content in the search index.",
)
async def search_notes(
    search_sync: SearchSync,
    request_id: RequestId,
    q: str = Query(..., min_length=1, max_length=200, description="Search query"),
    tag: str | None = Query(default=None, description="Only notes with this tag"),
    color: str | None = Query(default=None, description="Only notes with this color"),
    limit: int = Query(default=20, ge=1, le=100),
) -> list[NoteSearchHit]:
    """Search notes through the secondary index."""
    return await search_sync.search(q, tag=tag, color=color, limit=limit)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    summary="Get a note",
)
async def get_note(note_id: str, db: DbSession, request_id: RequestId) -> NoteResponse:
    """Get a note by ID."""
    service = NoteService(db)
    note = await service.get_note(note_id)
    return NoteResponse.model_validate(note)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    summary="Update a note",
    description="Update a note. Only provided fields change, including a bare position.",
)
async def update_note(
    note_id: str,
    data: NoteUpdate,
    db: DbSession,
    request_id: RequestId,
    search_sync: SearchSync,
    background_tasks: BackgroundTasks,
) -> NoteResponse:
    """Update a note and schedule its search document."""
    service = NoteService(db)
    note = await service.update_note(note_id, data)
    await service.commit()
    snapshot = NoteResponse.model_validate(note)
    background_tasks.add_task(search_sync.upsert, snapshot)
    return snapshot


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    summary="Delete a note",
    description="Delete a note together with every connection touching it.",
)
async def delete_note(
    note_id: str,
    db: DbSession,
    request_id: RequestId,
    search_sync: SearchSync,
    background_tasks: BackgroundTasks,
) -> MessageResponse:
    """Delete a note and its edges."""
    service = NoteService(db)
    await service.delete_note(note_id)
    await service.commit()
    background_tasks.add_task(search_sync.remove, note_id)
    return MessageResponse(message="Note and related connections deleted")
