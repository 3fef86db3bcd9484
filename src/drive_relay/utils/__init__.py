"""Utility modules for the Drive upload relay."""

from .error_utils import (
    set_correlation_id,
    get_correlation_id,
    log_error,
    log_info,
)

__all__ = [
    "set_correlation_id",
    "get_correlation_id",
    "log_error",
    "log_info",
]
