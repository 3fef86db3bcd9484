"""
Logging configuration for the Drive upload relay.

JSON output for staging and production, colored single-line output for
development. Both formatters attach the correlation ID of the request being
served, group the request fields set by the middleware, and mask any
credential that reaches a log record.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from drive_relay.credentials import mask_token
from drive_relay.utils.error_utils import get_correlation_id

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message", "asctime", "taskName",
}

REQUEST_FIELDS = ("method", "path", "status_code", "process_time", "client_ip")
UPLOAD_FIELDS = ("file_name", "file_id", "mime_type", "parents")
SENSITIVE_FIELDS = frozenset({"token", "access_token", "authorization"})


def split_record_fields(record: logging.LogRecord) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    """
    Separate the fields passed through ``extra`` into request fields and the rest.

    Credential fields are masked on the way out.
    """
    request, other = {}, {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key == "correlation_id":
            continue
        if key in SENSITIVE_FIELDS:
            value = mask_token(value)
        if key in REQUEST_FIELDS:
            request[key] = value
        else:
            other[key] = value
    return request, other


def _jsonable(value: Any) -> Any:
    try:
        json.dumps(value)
    except (TypeError, ValueError):
        return str(value)
    return value


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, with request fields under ``request``."""

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            log_entry["correlation_id"] = correlation_id

        request, other = split_record_fields(record)
        if request:
            log_entry["request"] = {key: _jsonable(value) for key, value in request.items()}
        if self.include_extra and other:
            log_entry["extra"] = {key: _jsonable(value) for key, value in other.items()}

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_entry, ensure_ascii=False)


class ColoredConsoleFormatter(logging.Formatter):
    """
    Single-line development output.

    Request lines read ``POST /upload 200 0.0123s``; upload fields and the
    masked token follow as ``key=value`` pairs.
    """

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.COLORS.get(record.levelname, '')
        parts = [
            datetime.fromtimestamp(record.created, timezone.utc).strftime('%Y-%m-%d %H:%M:%S'),
            f"{level_color}{record.levelname:8}{self.RESET}",
            record.name,
            record.getMessage(),
        ]

        request, other = split_record_fields(record)
        if request:
            summary = " ".join(
                str(request[key]) for key in ("method", "path", "status_code") if key in request
            )
            if "process_time" in request:
                summary += f" {request['process_time']}s"
            parts.append(summary)

        pairs = [
            f"{key}={other[key]}"
            for key in UPLOAD_FIELDS + tuple(sorted(SENSITIVE_FIELDS))
            if other.get(key) is not None
        ]
        if pairs:
            parts.append(" ".join(pairs))

        correlation_id = getattr(record, "correlation_id", None) or get_correlation_id()
        if correlation_id:
            parts.append(f"[corr_id={correlation_id[:8]}]")

        if record.levelno >= logging.ERROR:
            parts.append(f"({record.filename}:{record.lineno})")

        log_line = " | ".join(parts)

        if record.exc_info:
            log_line += "\n" + self.formatException(record.exc_info)

        return log_line


def setup_logging(
    environment: str = "development",
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_json_logs: Optional[bool] = None,
    enable_console_logs: bool = True
) -> None:
    """
    Set up logging for the relay.

    Args:
        environment: Environment name (development, staging, production)
        log_level: Minimum log level to capture
        log_file: Optional file path for JSON log output
        enable_json_logs: Whether to use JSON formatting (auto-detected if None)
        enable_console_logs: Whether to log to stdout
    """
    if enable_json_logs is None:
        enable_json_logs = environment in ("staging", "production")

    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = []

    if enable_console_logs:
        console_handler = logging.StreamHandler(sys.stdout)
        if enable_json_logs:
            console_handler.setFormatter(StructuredFormatter())
        else:
            console_handler.setFormatter(ColoredConsoleFormatter())
        console_handler.setLevel(numeric_level)
        handlers.append(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(StructuredFormatter())
        file_handler.setLevel(numeric_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=numeric_level,
        handlers=handlers,
        force=True
    )

    logger_configs = {
        "uvicorn.access": logging.WARNING,
        "googleapiclient": logging.WARNING,
        "google": logging.WARNING,
        "urllib3": logging.WARNING,
        "drive_relay": numeric_level,
    }

    for logger_name, level in logger_configs.items():
        logging.getLogger(logger_name).setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "environment": environment,
            "log_level": log_level,
            "json_logs": enable_json_logs,
            "log_file": log_file,
        }
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the specified name."""
    return logging.getLogger(name)
