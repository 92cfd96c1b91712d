"""
API Router.

Aggregates the graph endpoint routers. Edge routes are registered first so
/notes/edges is never captured by /notes/{note_id}.
"""

from fastapi import APIRouter

from second_brain.backend.api import edges, notes

router = APIRouter()

router.include_router(edges.router, prefix="/notes", tags=["edges"])
router.include_router(notes.router, prefix="/notes", tags=["notes"])
