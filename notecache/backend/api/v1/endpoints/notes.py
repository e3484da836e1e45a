"""
Notes API Endpoints.

REST API endpoints for note management. Each handler is a thin call
into NoteService; error mapping happens in the exception handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Path

from notecache.backend.core.dependencies import NoteServiceDep
from notecache.backend.schemas.base import ApiResponse
from notecache.backend.schemas.note import (
    NoteCreate,
    NoteDeleteResponse,
    NoteResponse,
    NoteUpdate,
)

router = APIRouter()

# Note ids are INTEGER columns; larger values cannot name a row.
NOTE_ID_MAX = 2**31 - 1

NoteId = Annotated[int, Path(ge=1, le=NOTE_ID_MAX, description="Note ID")]


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a new note. Titles must be unique.",
)
async def create_note(
    data: NoteCreate,
    service: NoteServiceDep,
) -> ApiResponse[NoteResponse]:
    """Create a new note."""
    note = await service.create_note(data.title, data.content)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
    description="Get a single note by ID.",
)
async def get_note(
    service: NoteServiceDep,
    note_id: NoteId,
) -> ApiResponse[NoteResponse]:
    """Get a note by ID."""
    note = await service.get_note(note_id)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.patch(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Update a note",
    description="Replace the content of an existing note.",
)
async def update_note(
    data: NoteUpdate,
    service: NoteServiceDep,
    note_id: NoteId,
) -> ApiResponse[NoteResponse]:
    """Update a note's content."""
    note = await service.update_note(note_id, data.content)
    return ApiResponse(data=NoteResponse.model_validate(note))


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[NoteDeleteResponse],
    summary="Delete a note",
    description="Delete a note and its cache entries.",
)
async def delete_note(
    service: NoteServiceDep,
    note_id: NoteId,
) -> ApiResponse[NoteDeleteResponse]:
    """Delete a note."""
    await service.delete_note(note_id)
    return ApiResponse(data=NoteDeleteResponse(id=note_id))
