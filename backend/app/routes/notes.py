"""
PromptShelf Backend — Notes Routes
===================================

What:  /api/notes: the scratch-note board (CRUD, pin, color, folders).
How:   Thin handlers over NoteService. /folders is declared before
       /{note_id} so it is never parsed as an id.
"""

import logging
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.note import (
    ColorUpdate,
    FolderUpdate,
    NoteCreate,
    NoteDeleteResponse,
    NoteReplace,
    NoteResponse,
)
from app.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

NoteId = Annotated[int, Path(ge=1, description="Note id")]

NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[NoteResponse],
    summary="List notes, pinned first",
)
async def list_notes(
    folder: Optional[str] = Query(
        default=None, max_length=100, description="Only notes in this folder",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    """Pinned notes first, then most recently updated."""
    folder = folder.strip() if folder else None
    return await note_service.list_notes(db, folder=folder or None)


@router.get("/folders", response_model=List[str], summary="List folder names")
async def list_folders(db: AsyncSession = Depends(get_db_session)) -> List[str]:
    return await note_service.list_folders(db)


@router.get("/{note_id}", response_model=NoteResponse, responses=NOT_FOUND)
async def get_note(
    note_id: NoteId,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    body: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, body)


@router.put("/{note_id}", response_model=NoteResponse, responses=NOT_FOUND)
async def update_note(
    body: NoteReplace,
    note_id: NoteId,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db, note_id, body)


@router.patch("/{note_id}/pin", response_model=NoteResponse, responses=NOT_FOUND)
async def toggle_pin(
    note_id: NoteId,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.toggle_pin(db, note_id)


@router.patch("/{note_id}/color", response_model=NoteResponse, responses=NOT_FOUND)
async def update_color(
    body: ColorUpdate,
    note_id: NoteId,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_color(db, note_id, body.color)


@router.patch("/{note_id}/folder", response_model=NoteResponse, responses=NOT_FOUND)
async def move_to_folder(
    body: FolderUpdate,
    note_id: NoteId,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.move_to_folder(db, note_id, body.folder)


@router.delete("/{note_id}", response_model=NoteDeleteResponse, responses=NOT_FOUND)
async def delete_note(
    note_id: NoteId,
    db: AsyncSession = Depends(get_db_session),
) -> NoteDeleteResponse:
    deleted = await note_service.delete_note(db, note_id)
    return NoteDeleteResponse(note=deleted)
