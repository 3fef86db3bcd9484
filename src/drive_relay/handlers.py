"""
Exception handlers for the relay.

Every error variant is turned into ``(status, envelope)`` by
``to_error_response``; the FastAPI handlers below only add logging and wrap
the result in a JSONResponse.
"""

import logging
from typing import Any, Dict, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from drive_relay.exceptions import (
    InternalException,
    RelayException,
)
from drive_relay.schemas import ErrorEnvelope
from drive_relay.utils import log_error

logger = logging.getLogger(__name__)


def to_error_response(exc: RelayException) -> Tuple[int, Dict[str, Any]]:
    """Map an error variant to its HTTP status and JSON envelope."""
    envelope = ErrorEnvelope(error=exc.message, details=exc.details)
    return exc.status_code, envelope.model_dump(exclude_none=True)


def _log_failure(request: Request, exc: RelayException, status_code: int) -> None:
    extra = {
        "error_data": exc.to_dict(),
        "request_path": str(request.url.path),
        "request_method": request.method,
        "status_code": status_code,
    }
    if status_code >= 500:
        logger.error(f"Request failed: {exc.message}", extra=extra, exc_info=exc.__cause__ is not None)
    else:
        logger.warning(f"Request rejected: {exc.message}", extra=extra)


async def relay_exception_handler(request: Request, exc: RelayException) -> JSONResponse:
    status_code, content = to_error_response(exc)
    _log_failure(request, exc, status_code)
    return JSONResponse(status_code=status_code, content=content)


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """Handle routing errors (unknown path, wrong method)."""
    logger.warning(
        f"HTTP {exc.status_code} error",
        extra={
            "status_code": exc.status_code,
            "detail": exc.detail,
            "request_path": str(request.url.path),
            "request_method": request.method,
        }
    )
    envelope = ErrorEnvelope(error=str(exc.detail), details=[])
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for exceptions nothing else caught."""
    log_error(
        exc,
        message="Unhandled exception",
        extra_context={
            "request_path": str(request.url.path),
            "request_method": request.method,
        },
    )
    status_code, content = to_error_response(InternalException(str(exc) or None))
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI application."""
    app.add_exception_handler(RelayException, relay_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
