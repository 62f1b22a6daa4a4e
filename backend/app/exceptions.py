"""
PromptShelf Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different error scenarios.
How:   Each exception carries a user-safe message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON
       error responses with the matching HTTP status code.
Who:   Raised by services and middleware; caught by the global handlers.

Exception Hierarchy:
    PromptShelfError (base)
    ├── ValidationError          → 400 Bad Request
    ├── NotFoundError            → 404 Not Found
    ├── LLMServiceError          → 503 Service Unavailable
    │   └── LLMConfigurationError → 503 (no API credential configured)
    ├── CircuitBreakerOpenError  → 503 Service Unavailable (circuit open)
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Note that the requirements merge engine has no entry here: it never raises.
"""

from typing import Any, Dict, List, Optional


class PromptShelfError(Exception):
    """
    Base exception for all PromptShelf application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only returned where the
                  handler says so)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PromptShelfError):
    """
    Raised when client input fails a business rule the schemas cannot express.

    Schema-level failures (missing title, rating out of range, ...) are raised
    by FastAPI as RequestValidationError and rendered with the same
    ``validation_error`` shape; see main.register_exception_handlers.

    HTTP: 400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Prompt cannot be empty",
            "details": [{"field": "prompt", "message": "Prompt cannot be empty"}]
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field

    @property
    def details(self) -> List[Dict[str, str]]:
        """Field-level error list, same shape as schema validation errors."""
        return [{"field": self.field or "", "message": self.message}]


class NotFoundError(PromptShelfError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None (or no row for UPDATE ... RETURNING) for missing
    records; services convert that into this exception.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource


class LLMServiceError(PromptShelfError):
    """
    Raised when the LLM (Gemini) call fails after all retries, or returns
    nothing usable.

    HTTP: 503 Service Unavailable, with Retry-After when known.
    """

    def __init__(
        self,
        message: str = "AI prompt refinement is temporarily unavailable",
        retry_after: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if retry_after:
            ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class LLMConfigurationError(LLMServiceError):
    """
    Raised when refinement is requested but no API credential is configured.

    Kept distinct from LLMServiceError so the client can tell "the server is
    not set up for this" apart from "the provider failed, try later".

    HTTP: 503 Service Unavailable (error code ``llm_not_configured``)
    """

    def __init__(
        self,
        message: str = "GEMINI_API_KEY is not set. Prompt refinement is not configured on this server.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CircuitBreakerOpenError(PromptShelfError):
    """
    Raised when the circuit breaker is in OPEN state.

    CLOSED → failures increment counter
    → after cb_failure_threshold failures → OPEN (reject calls)
    → after cb_recovery_timeout seconds → HALF_OPEN (one test call)
    → success → CLOSED; failure → OPEN again

    HTTP: 503 Service Unavailable
    """

    def __init__(
        self,
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"AI service is temporarily unavailable due to repeated failures. "
            f"Try again in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time


class DatabaseError(PromptShelfError):
    """
    Raised when database operations fail unexpectedly.

    The client always receives a generic message; the original error type
    travels in ``context`` and is only logged.

    HTTP: 500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(PromptShelfError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP: 429 Too Many Requests (with Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
