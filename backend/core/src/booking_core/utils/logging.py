"""Structured logging utilities with correlation ID support.

Provides:
- Correlation ID context management for request tracing
- Structured logging formatter for consistent log output
- Helper functions for reservation and refund operation logging

Usage:
    from booking_core.utils.logging import get_logger, set_correlation_id

    # In middleware/request handler:
    set_correlation_id(request.headers.get("X-Correlation-ID"))

    # In service code:
    logger = get_logger(__name__)
    logger.info("Cancelling reservation", extra={"reservation_id": "RES-2025-ABC123"})
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

# Context variable for correlation ID - thread-safe and async-safe
_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    """Generate a new correlation ID.

    Returns:
        UUID-based correlation ID string
    """
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Set the correlation ID for the current request context.

    Args:
        correlation_id: Optional existing correlation ID. If None, generates new one.

    Returns:
        The correlation ID that was set
    """
    cid = correlation_id or generate_correlation_id()
    _correlation_id.set(cid)
    return cid


def get_correlation_id() -> str | None:
    """Get the current correlation ID."""
    return _correlation_id.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID context."""
    _correlation_id.set(None)


class CorrelationIdFilter(logging.Filter):
    """Logging filter that adds correlation_id to log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation-id"
        return True


class StructuredFormatter(logging.Formatter):
    """Formatter prefixing every line with the correlation ID."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_correlation_id() or "no-correlation-id"

        base = super().format(record)

        # Prefix for easy grep/filtering
        return f"[{record.correlation_id}] {base}"


def get_logger(name: str) -> logging.Logger:
    """Get a logger with correlation ID support.

    Args:
        name: Logger name (usually __name__)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())

    return logger


def configure_logging(level: int = logging.INFO) -> None:
    """Install a correlation-aware handler on the root logger once."""
    root = logging.getLogger()
    if any(isinstance(h.formatter, StructuredFormatter) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        StructuredFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)
    root.setLevel(level)


def _build_message(title: str, context: dict[str, Any], skip: set[str]) -> str:
    parts = [title]
    for key, value in context.items():
        if key not in skip:
            parts.append(f"{key}={value}")
    return " | ".join(parts)


def log_reservation_operation(
    logger: logging.Logger,
    operation: str,
    *,
    reservation_id: str | None = None,
    status: str | None = None,
    amount: int | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a reservation lifecycle operation with structured context.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "book", "cancel", "confirm")
        reservation_id: Reservation ID if available
        status: Resulting reservation status
        amount: Price or refund amount if relevant
        error: Error message if operation failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"operation": operation}

    if reservation_id:
        context["reservation_id"] = reservation_id
    if status:
        context["status"] = status
    if amount is not None:
        context["amount"] = amount
    if error:
        context["error"] = error

    context.update(extra)

    message = _build_message(f"Reservation operation: {operation}", context, {"operation"})

    if error:
        logger.error(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_refund_operation(
    logger: logging.Logger,
    reservation_id: str,
    amount: int,
    *,
    provider: str | None = None,
    ticket_id: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a refund request with structured context.

    Args:
        logger: Logger instance
        reservation_id: Reservation being refunded
        amount: Refund amount
        provider: Payment provider handling the refund
        ticket_id: Refund ticket ID once accepted
        result: Processing result (accepted, already_issued, skipped, error)
        error: Error message if the refund failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {
        "reservation_id": reservation_id,
        "amount": amount,
    }

    if provider:
        context["provider"] = provider
    if ticket_id:
        context["ticket_id"] = ticket_id
    if result:
        context["result"] = result
    if error:
        context["error"] = error

    context.update(extra)

    message = _build_message(
        f"Refund: {reservation_id} ({amount})", context, {"reservation_id", "amount"}
    )

    if result == "error" or error:
        logger.error(message, extra=context)
    elif result == "skipped":
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)
