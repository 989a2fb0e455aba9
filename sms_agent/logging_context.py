"""Correlation ID logging context for tracing inbound messages across modules.

Provides a message-aware logger that attaches the inbound message SID to
every log record, so a single text's path through escalation, pricing,
generation and delivery can be followed in the logs.

Usage:
    from sms_agent.logging_context import get_message_logger, set_message_id

    set_message_id("SM8f3a...")
    logger = get_message_logger(__name__)
    logger.info("Reply sent")  # record.message_id == "SM8f3a..."
"""

import logging
from contextvars import ContextVar

_message_id: ContextVar[str] = ContextVar("message_id", default="NO_MESSAGE_ID")


def set_message_id(message_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _message_id.set(message_id)


def get_message_id() -> str:
    """Retrieve the current correlation ID."""
    return _message_id.get()


class MessageIdFilter(logging.Filter):
    """Injects message_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.message_id = _message_id.get()  # type: ignore[attr-defined]
        return True


def get_message_logger(name: str) -> logging.Logger:
    """Return a logger with the MessageIdFilter attached.

    The filter adds ``message_id`` to each record so formatters can
    include ``%(message_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, MessageIdFilter) for f in logger.filters):
        logger.addFilter(MessageIdFilter())
    return logger
