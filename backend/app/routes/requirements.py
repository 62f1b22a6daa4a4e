"""
PromptShelf Backend — Requirements Constructor Routes
======================================================

What:  /api/requirements: option catalogs, document generation and the
       three-way merge used by the constructor's editing pane.
How:   Pure, synchronous calls into app.constructor; no database access.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query

from app.constructor.catalog import filtered_options
from app.constructor.document import is_placeholder
from app.constructor.generator import generate_text
from app.constructor.merge import merge_documents
from app.schemas.requirements import (
    FieldCatalog,
    FormState,
    GenerateResponse,
    MergeRequest,
    MergeResponse,
    OptionsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/requirements", tags=["Requirements"])


@router.get(
    "/options",
    response_model=OptionsResponse,
    summary="Option catalogs for the constructor form",
)
async def get_options(
    backend_framework: Optional[str] = Query(
        default=None,
        max_length=200,
        description="Narrow databases, migrations, messaging, caching, gateways and testing tools",
    ),
) -> OptionsResponse:
    catalogs = filtered_options(backend_framework)
    return OptionsResponse(
        backend_framework=backend_framework or None,
        fields={key: FieldCatalog(**catalog) for key, catalog in catalogs.items()},
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    summary="Generate a requirements document from the form",
)
async def generate(form: FormState) -> GenerateResponse:
    document = generate_text(form)
    return GenerateResponse(document=document, is_empty=is_placeholder(document))


@router.post(
    "/merge",
    response_model=MergeResponse,
    summary="Merge a new generation into an edited document",
)
async def merge(body: MergeRequest) -> MergeResponse:
    """
    Keeps the user's custom lines and sections, updates lines owned by the
    form, and removes lines whose field was cleared since ``previous``.
    """
    merged = merge_documents(body.displayed, body.generated, body.previous)
    logger.debug(
        "Merged document: %d → %d chars", len(body.displayed), len(merged),
    )
    return MergeResponse(document=merged)
