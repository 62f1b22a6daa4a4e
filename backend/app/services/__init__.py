# Services package init
"""
PromptShelf Backend — Services Layer
=====================================

Service Inventory:
    - LLMService (abstract): interface for prompt refinement providers
    - GeminiService: Google Gemini implementation with retry and circuit breaker
    - PromptService: prompt library CRUD and partial updates
    - NoteService: scratch notes, pins, colors and folders
    - prompt_analysis: token estimate and confidence heuristic (pure functions)
    - export_service: CSV rendering of the prompt library

Services receive the AsyncSession as an argument and never commit; the
request dependency owns the transaction.
"""
