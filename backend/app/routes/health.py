"""
PromptShelf Backend — Health Check Route
=========================================

What:  GET /health for Docker health checks and uptime monitors.
How:   Probes the database with SELECT 1 and asks the LLM service whether
       it is configured and reachable.

Status levels:
    - healthy:   database up, refinement available
    - degraded:  database up, refinement not configured or unavailable
                 (the prompt library still works)
    - unhealthy: database down (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from app import __version__
from app.database import engine
from app.schemas.common import HealthResponse
from app.services.gemini_service import gemini_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    llm_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check LLM ─────────────────────────────────────────────────────────
    if not gemini_service.configured:
        llm_status = "not_configured"
    elif gemini_service.circuit_breaker.state == gemini_service.circuit_breaker.OPEN:
        llm_status = "circuit_open"
    elif not await gemini_service.health_check():
        llm_status = "unavailable"

    if llm_status != "available" and overall == "healthy":
        overall = "degraded"

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        llm=llm_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
