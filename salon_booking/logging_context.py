"""Correlation ID logging context for tracing availability requests.

Provides a request_id-aware logger that attaches a correlation ID to
every log message, so the rows fetched, the days resolved and the slots
returned for one caller can be followed through the logs.

Usage:
    from salon_booking.logging_context import get_request_logger, set_request_id

    set_request_id("REQ-abc123")
    logger = get_request_logger(__name__)
    logger.info("Resolving week")  # -> [REQ-abc123] Resolving week
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Optional

DEFAULT_REQUEST_ID = "NO_REQUEST_ID"

_request_id: ContextVar[str] = ContextVar("request_id", default=DEFAULT_REQUEST_ID)


def set_request_id(request_id: Optional[str] = None) -> str:
    """Set the correlation ID for the current async context.

    A fresh ``REQ-xxxxxxxx`` id is generated when none is given.
    """
    if request_id is None:
        request_id = f"REQ-{uuid.uuid4().hex[:8]}"
    _request_id.set(request_id)
    return request_id


def get_request_id() -> str:
    """Retrieve the current correlation ID."""
    return _request_id.get()


class RequestIdFilter(logging.Filter):
    """Injects request_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = _request_id.get()  # type: ignore[attr-defined]
        return True


def get_request_logger(name: str) -> logging.Logger:
    """Return a logger with the RequestIdFilter attached.

    The filter adds ``request_id`` to each record so formatters can
    include ``%(request_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, RequestIdFilter) for f in logger.filters):
        logger.addFilter(RequestIdFilter())
    return logger
