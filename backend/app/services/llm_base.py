"""
PromptShelf Backend — Abstract LLM Service Interface
=====================================================

What:  Contract for the AI provider that rewrites prompts.
How:   Concrete providers subclass LLMService; routes only talk to this
       interface, so a provider can be swapped without touching them.
Who:   POST /api/prompts/refine and the health endpoint.
"""

from abc import ABC, abstractmethod


class LLMService(ABC):
    """
    Abstract interface for prompt refinement.

    Contract:
        - refine_prompt() returns the refined text, trimmed and non-empty
        - Provider errors are wrapped in LLMServiceError; a missing
          credential raises LLMConfigurationError before any network call
        - Implementations own their retry and circuit breaker logic
    """

    @abstractmethod
    async def refine_prompt(self, prompt: str) -> str:
        """
        Rewrites ``prompt`` for clarity and completeness, keeping its intent.

        Raises:
            ValidationError: Prompt is blank
            LLMConfigurationError: No API credential configured
            LLMServiceError: Provider failed or returned nothing
            CircuitBreakerOpenError: Too many recent provider failures
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """True if the provider is configured and reachable."""
        ...
