"""
Structured logging for the back office.

structlog renders key/value events: a console renderer while developing,
JSON lines everywhere else. Each event carries the request ID and, when the
identity provider sent one, the staff user ID. Code that works on a single
order can bind its number with ``order_context`` so every event inside the
block is tagged with it.
"""

import logging
import sys
import time
from contextvars import ContextVar
from typing import Any, Optional
from uuid import uuid4

import structlog
from structlog.types import EventDict, Processor

from laundra.core.config import get_settings

request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")
user_id_ctx: ContextVar[Optional[str]] = ContextVar("user_id", default=None)


def add_correlation_ids(
    logger: logging.Logger, method_name: str, event_dict: EventDict
) -> EventDict:
    """structlog processor adding ``request_id`` and ``user_id`` when set."""
    request_id = request_id_ctx.get()
    if request_id:
        event_dict.setdefault("request_id", request_id)
    user_id = user_id_ctx.get()
    if user_id:
        event_dict.setdefault("user_id", user_id)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_correlation_ids,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    renderer: Processor
    if settings.is_development:
        renderer = structlog.dev.ConsoleRenderer(
            exception_formatter=structlog.dev.plain_traceback,
        )
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*_shared_processors(), renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level),
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_request_id(request_id: Optional[str] = None) -> str:
    """
    Bind the request ID for the current request.

    Args:
        request_id: ID sent by the caller, or None to generate a UUID

    Returns:
        The request ID now bound
    """
    if not request_id:
        request_id = str(uuid4())
    request_id_ctx.set(request_id)
    return request_id


def get_request_id() -> str:
    return request_id_ctx.get()


def set_user_id(user_id: Optional[str]) -> None:
    """Bind the staff user ID supplied by the identity provider."""
    user_id_ctx.set(user_id)


def order_context(order_number: Optional[str]):
    """
    Bind an order number to every log event emitted inside the block.

    Example:
        >>> with order_context("1042"):
        ...     logger.info("Receipt built")
    """
    if order_number is None:
        return structlog.contextvars.bound_contextvars()
    return structlog.contextvars.bound_contextvars(order_number=order_number)


def clear_context() -> None:
    """Reset correlation IDs and bound order context at the end of a request."""
    request_id_ctx.set("")
    user_id_ctx.set(None)
    structlog.contextvars.clear_contextvars()


class PerformanceLogger:
    """
    Time a block and log how long it took.

    Blocks slower than ``slow_threshold_ms`` log at warning level; a block
    that raises logs at error level and the exception propagates.
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        slow_threshold_ms: float = 500,
        **context: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.slow_threshold_ms = slow_threshold_ms
        self.context = context
        self.duration_ms: Optional[float] = None
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._started is None:
            return
        self.duration_ms = round((time.perf_counter() - self._started) * 1000, 2)

        if exc_type is not None:
            self.logger.error(
                "Operation failed",
                operation=self.operation,
                duration_ms=self.duration_ms,
                error_type=exc_type.__name__,
                **self.context,
            )
        elif self.duration_ms > self.slow_threshold_ms:
            self.logger.warning(
                "Slow operation",
                operation=self.operation,
                duration_ms=self.duration_ms,
                **self.context,
            )
        else:
            self.logger.debug(
                "Operation completed",
                operation=self.operation,
                duration_ms=self.duration_ms,
                **self.context,
            )


def log_performance(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    **context: Any,
) -> PerformanceLogger:
    return PerformanceLogger(logger, operation, **context)
