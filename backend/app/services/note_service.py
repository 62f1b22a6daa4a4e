"""
PromptShelf Backend — Note Service
===================================

What:  CRUD, pinning, coloring and folder moves for scratch notes.
How:   SQLAlchemy 2.0 statements on the request's AsyncSession; flush here,
       commit in get_db_session.
Who:   Called by the /api/notes route handlers.

Board order is pinned notes first, then most recently updated. Toggling a
pin or changing a color counts as an update, so the note moves to the top
of its group.
"""

import logging
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, PromptShelfError
from app.models.note import Note
from app.models.prompt import utc_now
from app.schemas.note import NoteCreate, NoteResponse

logger = logging.getLogger(__name__)


class NoteService:
    """
    Business logic for notes.

    Error Handling Strategy:
        NotFoundError propagates as-is (404). Unknown exceptions are wrapped
        in DatabaseError so internal details never reach the client.
    """

    async def _get_or_404(self, db: AsyncSession, note_id: int) -> Note:
        result = await db.execute(select(Note).where(Note.id == note_id))
        note = result.scalar_one_or_none()
        if note is None:
            raise NotFoundError(resource="note", resource_id=note_id)
        return note

    async def list_notes(self, db: AsyncSession, folder: Optional[str] = None) -> List[NoteResponse]:
        """
        Notes for the board, optionally limited to one folder.

        Query plan:
            SELECT * FROM notes [WHERE folder = :folder]
            ORDER BY is_pinned DESC, updated_at DESC
            → idx_notes_pinned_updated
        """
        try:
            query = select(Note)
            if folder:
                query = query.where(Note.folder == folder)
            query = query.order_by(desc(Note.is_pinned), desc(Note.updated_at))
            result = await db.execute(query)
            return [NoteResponse.model_validate(n) for n in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch notes",
                context={"error_type": type(e).__name__},
            )

    async def list_folders(self, db: AsyncSession) -> List[str]:
        """Distinct non-empty folder names, alphabetically."""
        try:
            result = await db.execute(
                select(Note.folder)
                .where(Note.folder.is_not(None), Note.folder != "")
                .distinct()
                .order_by(Note.folder)
            )
            return list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing folders: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch folders",
                context={"error_type": type(e).__name__},
            )

    async def get_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        try:
            return NoteResponse.model_validate(await self._get_or_404(db, note_id))
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Failed to fetch note",
                context={"note_id": note_id},
            )

    async def create_note(self, db: AsyncSession, data: NoteCreate) -> NoteResponse:
        try:
            now = utc_now()
            note = Note(**data.model_dump(), created_at=now, updated_at=now)
            db.add(note)
            await db.flush()
            logger.info("Note created: %s", note.id)
            return NoteResponse.model_validate(note)
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create note",
                context={"error_type": type(e).__name__},
            )

    async def _apply(self, db: AsyncSession, note_id: int, action: str, **values) -> NoteResponse:
        """Loads a note, sets ``values``, bumps updated_at and flushes."""
        try:
            note = await self._get_or_404(db, note_id)
            for field, value in values.items():
                setattr(note, field, value)
            note.updated_at = utc_now()
            await db.flush()
            return NoteResponse.model_validate(note)
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error("Database error (%s) on note %s: %s", action, note_id, str(e))
            raise DatabaseError(
                message=f"Failed to {action}",
                context={"note_id": note_id},
            )

    async def update_note(self, db: AsyncSession, note_id: int, data: NoteCreate) -> NoteResponse:
        """Replaces every editable column; omitted fields take their defaults."""
        return await self._apply(db, note_id, "update note", **data.model_dump())

    async def toggle_pin(self, db: AsyncSession, note_id: int) -> NoteResponse:
        try:
            note = await self._get_or_404(db, note_id)
            note.is_pinned = not note.is_pinned
            note.updated_at = utc_now()
            await db.flush()
            return NoteResponse.model_validate(note)
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error("Database error (toggle pin) on note %s: %s", note_id, str(e))
            raise DatabaseError(message="Failed to toggle pin", context={"note_id": note_id})

    async def update_color(self, db: AsyncSession, note_id: int, color: str) -> NoteResponse:
        return await self._apply(db, note_id, "update color", color=color)

    async def move_to_folder(
        self, db: AsyncSession, note_id: int, folder: Optional[str]
    ) -> NoteResponse:
        return await self._apply(db, note_id, "move note", folder=folder)

    async def delete_note(self, db: AsyncSession, note_id: int) -> NoteResponse:
        try:
            note = await self._get_or_404(db, note_id)
            deleted = NoteResponse.model_validate(note)
            await db.delete(note)
            await db.flush()
            logger.info("Note deleted: %s", note_id)
            return deleted
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Failed to delete note",
                context={"note_id": note_id},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
note_service = NoteService()
