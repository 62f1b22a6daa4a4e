"""
PromptShelf Backend — Prompt Library Routes
============================================

What:  /api/prompts: CRUD, partial updates, CSV export, AI refinement and
       prompt analysis.
How:   Thin handlers; validation lives in the schemas, logic in services.

Static paths (export.csv, refine, analyze) are declared before
/{prompt_id} so they are never parsed as ids.
"""

import logging
from typing import Annotated, List

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.schemas.common import ErrorResponse
from app.schemas.prompt import (
    AnalyzeRequest,
    AnalyzeResponse,
    NoteUpdate,
    PromptCreate,
    PromptDeleteResponse,
    PromptResponse,
    PromptUpdate,
    RatingUpdate,
    RefineRequest,
    RefineResponse,
    TagsUpdate,
)
from app.services.export_service import export_filename, prompts_to_csv
from app.services.gemini_service import gemini_service
from app.services.prompt_analysis import analyze_prompt
from app.services.prompt_service import prompt_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prompts", tags=["Prompts"])

PromptId = Annotated[int, Path(ge=1, description="Prompt id")]

NOT_FOUND = {404: {"description": "Prompt not found", "model": ErrorResponse}}


@router.get("", response_model=List[PromptResponse], summary="List all prompts, newest first")
async def list_prompts(db: AsyncSession = Depends(get_db_session)) -> List[PromptResponse]:
    return await prompt_service.list_prompts(db)


@router.get(
    "/export.csv",
    summary="Export the prompt library as CSV",
    response_class=Response,
    responses={200: {"content": {"text/csv": {}}}},
)
async def export_prompts(db: AsyncSession = Depends(get_db_session)) -> Response:
    rows = await prompt_service.list_prompt_rows(db)
    logger.info("Exporting %d prompts to CSV", len(rows))
    return Response(
        content=prompts_to_csv(rows),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post(
    "/refine",
    response_model=RefineResponse,
    summary="Refine a prompt with the configured LLM",
    responses={
        400: {"description": "Empty prompt", "model": ErrorResponse},
        503: {"description": "LLM not configured or unavailable", "model": ErrorResponse},
    },
)
async def refine_prompt(body: RefineRequest) -> RefineResponse:
    """
    Rewrites the prompt for clarity and completeness.

    503 with ``llm_not_configured`` when no GEMINI_API_KEY is set, and
    ``llm_service_error`` / ``service_unavailable`` when the provider fails.
    """
    refined = await gemini_service.refine_prompt(body.prompt)
    return RefineResponse(refined_prompt=refined)


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    summary="Estimate tokens and score prompt quality",
)
async def analyze(body: AnalyzeRequest) -> AnalyzeResponse:
    return analyze_prompt(body.content, body.token_count)


@router.get("/{prompt_id}", response_model=PromptResponse, responses=NOT_FOUND)
async def get_prompt(
    prompt_id: PromptId,
    db: AsyncSession = Depends(get_db_session),
) -> PromptResponse:
    return await prompt_service.get_prompt(db, prompt_id)


@router.post(
    "",
    response_model=PromptResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a new prompt",
)
async def create_prompt(
    body: PromptCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PromptResponse:
    return await prompt_service.create_prompt(db, body)


@router.put("/{prompt_id}", response_model=PromptResponse, responses=NOT_FOUND)
async def update_prompt(
    body: PromptUpdate,
    prompt_id: PromptId,
    db: AsyncSession = Depends(get_db_session),
) -> PromptResponse:
    return await prompt_service.update_prompt(db, prompt_id, body)


@router.patch("/{prompt_id}/rating", response_model=PromptResponse, responses=NOT_FOUND)
async def update_rating(
    body: RatingUpdate,
    prompt_id: PromptId,
    db: AsyncSession = Depends(get_db_session),
) -> PromptResponse:
    return await prompt_service.update_rating(db, prompt_id, body.rating)


@router.patch("/{prompt_id}/note", response_model=PromptResponse, responses=NOT_FOUND)
async def update_note(
    body: NoteUpdate,
    prompt_id: PromptId,
    db: AsyncSession = Depends(get_db_session),
) -> PromptResponse:
    return await prompt_service.update_note(db, prompt_id, body.note)


@router.patch("/{prompt_id}/tags", response_model=PromptResponse, responses=NOT_FOUND)
async def update_tags(
    body: TagsUpdate,
    prompt_id: PromptId,
    db: AsyncSession = Depends(get_db_session),
) -> PromptResponse:
    return await prompt_service.update_tags(db, prompt_id, body.tags)


@router.delete("/{prompt_id}", response_model=PromptDeleteResponse, responses=NOT_FOUND)
async def delete_prompt(
    prompt_id: PromptId,
    db: AsyncSession = Depends(get_db_session),
) -> PromptDeleteResponse:
    deleted = await prompt_service.delete_prompt(db, prompt_id)
    return PromptDeleteResponse(prompt=deleted)
