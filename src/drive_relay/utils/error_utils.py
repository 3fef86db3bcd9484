"""
Request context helpers shared by the middleware, handlers and log formatters.
"""

import logging
from contextvars import ContextVar
from typing import Any, Dict, Optional

from drive_relay.exceptions import RelayException

# Context variables for request tracking
correlation_id_var: ContextVar[str] = ContextVar('correlation_id', default='')

logger = logging.getLogger(__name__)


def set_correlation_id(correlation_id: str) -> None:
    """Set correlation ID in context."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get correlation ID from context."""
    return correlation_id_var.get() or None


def log_error(
    exception: Exception,
    message: str = None,
    extra_context: Dict[str, Any] = None,
    include_traceback: bool = True
) -> None:
    """
    Log an error with structured context information.

    Args:
        exception: The exception that occurred
        message: Optional custom message
        extra_context: Additional context to include in logs
        include_traceback: Whether to include full traceback
    """
    context = {
        "correlation_id": get_correlation_id(),
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
    }

    if extra_context:
        context.update(extra_context)

    if isinstance(exception, RelayException):
        context["error_data"] = exception.to_dict()

    logger.error(
        message or f"Error occurred: {type(exception).__name__}",
        extra=context,
        exc_info=include_traceback
    )


def log_info(message: str, extra_context: Dict[str, Any] = None) -> None:
    """Log an info message with the current correlation ID attached."""
    context = {"correlation_id": get_correlation_id()}
    if extra_context:
        context.update(extra_context)
    logger.info(message, extra=context)
