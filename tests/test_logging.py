"""Tests for logging context helpers."""

import structlog

from laundra.core.logging import (
    PerformanceLogger,
    clear_context,
    get_logger,
    get_request_id,
    order_context,
    set_request_id,
    set_user_id,
)


class TestCorrelationContext:
    def test_set_request_id_generates_when_missing(self):
        request_id = set_request_id()

        assert request_id
        assert get_request_id() == request_id
        clear_context()

    def test_clear_context_resets_ids(self):
        set_request_id("counter-1")
        set_user_id("staff-7")

        clear_context()

        assert get_request_id() == ""

    def test_order_context_binds_and_unbinds(self):
        with order_context("1042"):
            assert structlog.contextvars.get_contextvars()["order_number"] == "1042"

        assert "order_number" not in structlog.contextvars.get_contextvars()

    def test_order_context_without_number(self):
        with order_context(None):
            assert "order_number" not in structlog.contextvars.get_contextvars()


class TestPerformanceLogger:
    def test_records_duration(self):
        with PerformanceLogger(get_logger(__name__), "order_quote") as perf:
            pass

        assert perf.duration_ms is not None
        assert perf.duration_ms >= 0
