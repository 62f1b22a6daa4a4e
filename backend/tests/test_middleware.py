"""
PromptShelf Backend — Middleware Unit Tests
============================================

What:  Sliding window limiter arithmetic, request id sanitizing and the
       access log level mapping.
"""

import logging

from app.middleware.logging import level_for_status
from app.middleware.rate_limit import SlidingWindowLimiter
from app.middleware.request_id import resolve_request_id


class TestSlidingWindowLimiter:

    def test_allows_up_to_limit(self):
        limiter = SlidingWindowLimiter(limit=3, window=60)

        assert [limiter.hit("1.2.3.4", now=100.0 + i) for i in range(3)] == [None, None, None]
        assert limiter.hit("1.2.3.4", now=103.0) == 58

    def test_clients_are_counted_separately(self):
        limiter = SlidingWindowLimiter(limit=1, window=60)

        assert limiter.hit("a", now=0.0) is None
        assert limiter.hit("b", now=0.0) is None
        assert limiter.hit("a", now=1.0) is not None

    def test_window_slides(self):
        limiter = SlidingWindowLimiter(limit=1, window=10)
        limiter.hit("a", now=0.0)

        assert limiter.hit("a", now=5.0) == 6
        assert limiter.hit("a", now=10.5) is None

    def test_sweep_forgets_idle_clients(self):
        limiter = SlidingWindowLimiter(limit=5, window=10)
        limiter.SWEEP_EVERY = 2
        limiter.hit("idle", now=0.0)

        limiter.hit("busy", now=100.0)

        assert "idle" not in limiter._hits
        assert "busy" in limiter._hits


class TestRequestId:

    def test_client_id_is_kept_when_safe(self):
        assert resolve_request_id("trace-42") == "trace-42"

    def test_unsafe_or_missing_ids_are_replaced(self):
        for value in ["", "has space", "x" * 65, "bad\nnewline"]:
            rid = resolve_request_id(value)
            assert rid != value
            assert len(rid) == 8


class TestAccessLogLevel:

    def test_levels_follow_status_class(self):
        assert level_for_status(200) == logging.INFO
        assert level_for_status(404) == logging.WARNING
        assert level_for_status(503) == logging.ERROR
