"""
PromptShelf Backend — Prompt Service
=====================================

What:  CRUD and partial updates for the saved prompt library.
How:   Plain SQLAlchemy 2.0 statements on the request's AsyncSession.
       Changes are flushed here and committed by get_db_session.
Who:   Called by the /api/prompts route handlers.

Error Handling:
    Missing rows raise NotFoundError (404). Anything unexpected from the
    database is logged and wrapped in DatabaseError (500); application
    exceptions pass through unchanged.
"""

import logging
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError, PromptShelfError
from app.models.prompt import Prompt, utc_now
from app.schemas.prompt import PromptCreate, PromptResponse

logger = logging.getLogger(__name__)


class PromptService:
    """
    Business logic for prompts.

    Every method takes the session as its first argument; the service itself
    holds no state.
    """

    async def _get_or_404(self, db: AsyncSession, prompt_id: int) -> Prompt:
        result = await db.execute(select(Prompt).where(Prompt.id == prompt_id))
        prompt = result.scalar_one_or_none()
        if prompt is None:
            raise NotFoundError(resource="prompt", resource_id=prompt_id)
        return prompt

    async def list_prompts(self, db: AsyncSession) -> List[PromptResponse]:
        """All prompts, newest first."""
        try:
            result = await db.execute(select(Prompt).order_by(desc(Prompt.created_at)))
            return [PromptResponse.model_validate(p) for p in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing prompts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch prompts",
                context={"error_type": type(e).__name__},
            )

    async def list_prompt_rows(self, db: AsyncSession) -> List[Prompt]:
        """Same ordering as list_prompts, as ORM rows (used by the CSV export)."""
        try:
            result = await db.execute(select(Prompt).order_by(desc(Prompt.created_at)))
            return list(result.scalars().all())
        except Exception as e:
            logger.error("Database error exporting prompts: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to export prompts",
                context={"error_type": type(e).__name__},
            )

    async def get_prompt(self, db: AsyncSession, prompt_id: int) -> PromptResponse:
        try:
            return PromptResponse.model_validate(await self._get_or_404(db, prompt_id))
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error("Database error fetching prompt %s: %s", prompt_id, str(e))
            raise DatabaseError(
                message="Failed to fetch prompt",
                context={"prompt_id": prompt_id},
            )

    async def create_prompt(self, db: AsyncSession, data: PromptCreate) -> PromptResponse:
        """
        Inserts a prompt and returns it with its new id.

        Timestamps are set here rather than left to column defaults so the
        response can be built right after the flush.
        """
        try:
            now = utc_now()
            prompt = Prompt(**data.model_dump(), created_at=now, updated_at=now)
            db.add(prompt)
            await db.flush()
            logger.info("Prompt created: %s (%d chars)", prompt.id, len(prompt.content))
            return PromptResponse.model_validate(prompt)
        except Exception as e:
            logger.error("Database error creating prompt: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to create prompt",
                context={"error_type": type(e).__name__},
            )

    async def update_prompt(
        self, db: AsyncSession, prompt_id: int, data: PromptCreate
    ) -> PromptResponse:
        """Replaces every editable column of a prompt."""
        try:
            prompt = await self._get_or_404(db, prompt_id)
            for field, value in data.model_dump().items():
                setattr(prompt, field, value)
            prompt.updated_at = utc_now()
            await db.flush()
            return PromptResponse.model_validate(prompt)
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error("Database error updating prompt %s: %s", prompt_id, str(e))
            raise DatabaseError(
                message="Failed to update prompt",
                context={"prompt_id": prompt_id},
            )

    async def _patch(self, db: AsyncSession, prompt_id: int, **values) -> PromptResponse:
        try:
            prompt = await self._get_or_404(db, prompt_id)
            for field, value in values.items():
                setattr(prompt, field, value)
            prompt.updated_at = utc_now()
            await db.flush()
            return PromptResponse.model_validate(prompt)
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error(
                "Database error updating %s of prompt %s: %s",
                ", ".join(values), prompt_id, str(e),
            )
            raise DatabaseError(
                message=f"Failed to update {', '.join(values)}",
                context={"prompt_id": prompt_id},
            )

    async def update_rating(self, db: AsyncSession, prompt_id: int, rating: int) -> PromptResponse:
        return await self._patch(db, prompt_id, rating=rating)

    async def update_note(self, db: AsyncSession, prompt_id: int, note) -> PromptResponse:
        return await self._patch(db, prompt_id, note=note)

    async def update_tags(self, db: AsyncSession, prompt_id: int, tags: List[str]) -> PromptResponse:
        return await self._patch(db, prompt_id, tags=tags)

    async def delete_prompt(self, db: AsyncSession, prompt_id: int) -> PromptResponse:
        """Deletes a prompt and returns it as it was before deletion."""
        try:
            prompt = await self._get_or_404(db, prompt_id)
            deleted = PromptResponse.model_validate(prompt)
            await db.delete(prompt)
            await db.flush()
            logger.info("Prompt deleted: %s", prompt_id)
            return deleted
        except PromptShelfError:
            raise
        except Exception as e:
            logger.error("Database error deleting prompt %s: %s", prompt_id, str(e))
            raise DatabaseError(
                message="Failed to delete prompt",
                context={"prompt_id": prompt_id},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
prompt_service = PromptService()
