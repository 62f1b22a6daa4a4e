"""
PromptShelf Backend — Google Gemini Refinement Service
=======================================================

What:  LLMService implementation that refines prompts with Google Gemini.
How:   Fills a fixed refinement template with the user's prompt, sends it
       with generate_content_async, and returns the trimmed answer.
Who:   Singleton used by POST /api/prompts/refine and GET /health.

Resilience Strategy:
    1. Tenacity retry with exponential backoff + jitter for transient failures
    2. Circuit breaker so a dead provider fails fast instead of stacking
       retries on every request
    3. Per-call timeout passed to the SDK

Refinement is optional: without GEMINI_API_KEY the service raises
LLMConfigurationError and the rest of the API is unaffected.
"""

import logging
import time
import uuid
from typing import Optional

import google.generativeai as genai
from tenacity import (
    RetryError,
    before_sleep_log,
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.config import settings
from app.exceptions import (
    CircuitBreakerOpenError,
    LLMConfigurationError,
    LLMServiceError,
    ValidationError,
)
from app.services.llm_base import LLMService

logger = logging.getLogger(__name__)


REFINEMENT_PROMPT = """You are an expert at refining and improving prompts for AI systems. Your task is to enhance the following prompt while maintaining its original intent and structure.

Original Prompt:
{prompt}

Please refine this prompt by:
1. Improving clarity and specificity
2. Adding missing context or details that would help the AI better understand the requirements
3. Ensuring the prompt is well-structured and easy to follow
4. Maintaining all original requirements and specifications
5. Using clear, professional language
6. Organizing sections logically if needed

Return only the refined prompt without any additional commentary or explanation."""


# ══════════════════════════════════════════════════════════════════════════
# Circuit Breaker
# ══════════════════════════════════════════════════════════════════════════

class CircuitBreaker:
    """
    Fails fast after repeated provider errors.

    State Machine:
        CLOSED    → failures counted; at ``failure_threshold`` → OPEN
        OPEN      → calls rejected with CircuitBreakerOpenError until
                    ``recovery_timeout`` seconds have passed → HALF_OPEN
        HALF_OPEN → one trial call; success → CLOSED, failure → OPEN

    Single-process state: each uvicorn worker keeps its own breaker.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.opened_at: Optional[float] = None

    def seconds_until_retry(self) -> int:
        if self.opened_at is None:
            return 0
        remaining = self.recovery_timeout - (time.monotonic() - self.opened_at)
        return max(0, int(remaining))

    def can_execute(self) -> bool:
        """
        Returns True when a call may proceed; moves OPEN → HALF_OPEN once the
        recovery window has passed.

        Raises:
            CircuitBreakerOpenError: still inside the recovery window
        """
        if self.state != self.OPEN:
            return True
        if time.monotonic() - (self.opened_at or 0.0) < self.recovery_timeout:
            raise CircuitBreakerOpenError(recovery_time=self.seconds_until_retry())
        logger.info("Circuit breaker HALF_OPEN; allowing one trial refinement")
        self.state = self.HALF_OPEN
        return True

    def record_success(self) -> None:
        if self.state != self.CLOSED:
            logger.info("Circuit breaker CLOSED; Gemini recovered")
        self.state = self.CLOSED
        self.failure_count = 0
        self.opened_at = None

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self._trip()

    def _trip(self) -> None:
        if self.state != self.OPEN:
            logger.warning(
                "Circuit breaker OPEN after %d failures; rejecting refinements for %ds",
                self.failure_count,
                self.recovery_timeout,
            )
        self.state = self.OPEN
        self.opened_at = time.monotonic()

# ══════════════════════════════════════════════════════════════════════════
# Gemini Service
# ══════════════════════════════════════════════════════════════════════════

class GeminiService(LLMService):
    """
    Gemini implementation of prompt refinement.

    Error Handling Chain:
        blank prompt → ValidationError (no API call)
        no key       → LLMConfigurationError (no API call)
        API failure  → tenacity retries → RetryError → LLMServiceError
                     → breaker failure recorded; at threshold further calls
                       get CircuitBreakerOpenError immediately
        empty answer → LLMServiceError (not retried)
    """

    def __init__(self):
        self.model: Optional[genai.GenerativeModel] = None
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )
        if settings.gemini_configured:
            self._configure()
        else:
            logger.warning("GEMINI_API_KEY not set; prompt refinement disabled")

    def _configure(self) -> genai.GenerativeModel:
        """Configures the SDK once and returns the shared model object."""
        if self.model is None:
            genai.configure(api_key=settings.gemini_api_key)
            self.model = genai.GenerativeModel(
                settings.gemini_model,
                generation_config={"temperature": settings.gemini_temperature},
            )
            logger.info(
                "GeminiService initialized with model=%s, "
                "circuit_breaker(threshold=%d, recovery=%ds)",
                settings.gemini_model,
                settings.cb_failure_threshold,
                settings.cb_recovery_timeout,
            )
        return self.model

    @property
    def configured(self) -> bool:
        return settings.gemini_configured

    async def refine_prompt(self, prompt: str) -> str:
        """
        Sends ``prompt`` through the refinement template.

        Flow:
            1. Reject blank input and a missing key (no breaker impact)
            2. Ask the circuit breaker; may raise CircuitBreakerOpenError
            3. Call Gemini with retries
            4. Record the outcome in the breaker
        """
        if not prompt or not prompt.strip():
            raise ValidationError(message="Prompt cannot be empty", field="prompt")
        if not self.configured:
            raise LLMConfigurationError()

        model = self._configure()
        request_id = str(uuid.uuid4())[:8]
        self.circuit_breaker.can_execute()

        logger.info("[%s] Refining prompt (%d chars)", request_id, len(prompt))

        try:
            refined = await self._call_gemini_with_retry(model, prompt, request_id)
        except CircuitBreakerOpenError:
            raise
        except RetryError as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "[%s] All Gemini retries exhausted: %s",
                request_id,
                str(e.last_attempt.exception()) if e.last_attempt else "Unknown error",
            )
            raise LLMServiceError(
                message="Prompt refinement failed after multiple attempts. Please try again later.",
                retry_after=self.circuit_breaker.recovery_timeout,
                context={"request_id": request_id, "attempts": settings.retry_max_attempts},
            )
        except LLMServiceError:
            self.circuit_breaker.record_failure()
            raise
        except Exception as e:
            self.circuit_breaker.record_failure()
            logger.error("[%s] Unexpected Gemini error: %s", request_id, str(e), exc_info=True)
            raise LLMServiceError(
                message="Failed to refine prompt",
                context={"request_id": request_id, "error_type": type(e).__name__},
            )

        self.circuit_breaker.record_success()
        return refined

    @retry(
        # Empty answers are final; everything else from the SDK may be transient
        retry=retry_if_not_exception_type(LLMServiceError),
        stop=stop_after_attempt(settings.retry_max_attempts),
        # wait = min(max_wait, min_wait * 2^attempt) + random(0, 1)
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
    async def _call_gemini_with_retry(
        self, model: genai.GenerativeModel, prompt: str, request_id: str
    ) -> str:
        """
        One Gemini round trip, retried by tenacity.

        Kept apart from refine_prompt so the breaker check is not retried.
        Without ``reraise`` tenacity raises RetryError once attempts run out.
        """
        start_time = time.time()
        try:
            response = await model.generate_content_async(
                REFINEMENT_PROMPT.format(prompt=prompt),
                request_options={"timeout": settings.gemini_timeout},
            )
        except Exception as e:
            logger.warning(
                "[%s] Gemini API call failed after %.0fms: %s",
                request_id,
                (time.time() - start_time) * 1000,
                str(e),
            )
            raise

        refined = (response.text or "").strip()
        if not refined:
            raise LLMServiceError(
                message="Received empty response from AI",
                context={"request_id": request_id},
            )

        logger.info(
            "[%s] Gemini refinement completed in %.0fms, %d chars",
            request_id,
            (time.time() - start_time) * 1000,
            len(refined),
        )
        return refined

    async def health_check(self) -> bool:
        """
        Lists models to verify the key and connectivity (no token cost).

        Returns False without a network call when no key is configured.
        """
        if not self.configured:
            return False
        try:
            self._configure()
            model_names = [m.name for m in genai.list_models()]
            target = f"models/{settings.gemini_model}"
            if target not in model_names:
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
# Holds the circuit breaker, which must be shared across requests
gemini_service = GeminiService()
