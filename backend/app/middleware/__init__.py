# Middleware package init
"""
PromptShelf Backend — Middleware Package
=========================================

Middleware Chain:
    Request → [Rate Limit] → [Request ID] → [Logging] → [GZip] → [CORS] → Route

    - rate_limit.py: per-IP sliding window; rejected requests never reach a route
    - request_id.py: X-Request-ID correlation id, stored in a ContextVar
    - logging.py:    one access log line per request with status and duration
"""
