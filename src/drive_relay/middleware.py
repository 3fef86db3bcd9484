"""
Middleware for CORS headers, correlation ID tracking and request logging.
"""

import time
import uuid
import logging
from typing import Callable, Dict, Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from drive_relay.credentials import mask_token
from drive_relay.utils.error_utils import set_correlation_id

logger = logging.getLogger(__name__)


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """
    Attach permissive cross-origin headers to every response.

    OPTIONS requests to any path are answered here with an empty 200 and
    never reach the router.
    """

    def __init__(
        self,
        app: ASGIApp,
        allow_origin: str = "*",
        allow_headers: Iterable[str] = (),
        allow_methods: Iterable[str] = (),
    ):
        super().__init__(app)
        self.cors_headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Headers": ", ".join(allow_headers),
            "Access-Control-Allow-Methods": ", ".join(allow_methods),
        }

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        for header, value in self.cors_headers.items():
            response.headers[header] = value

        return response


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle correlation ID generation and propagation.

    The ID is stored on ``request.state``, in the logging context, and echoed
    in the response headers.
    """

    def __init__(self, app: ASGIApp, header_name: str = "x-correlation-id"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(self.header_name) or str(uuid.uuid4())

        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)

        response = await call_next(request)
        response.headers[self.header_name] = correlation_id

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request and its outcome.

    Credential headers are masked before they are logged.
    """

    def __init__(
        self,
        app: ASGIApp,
        sensitive_headers: Iterable[str] = ("authorization",),
        log_headers: bool = True,
        exclude_paths: list = None
    ):
        super().__init__(app)
        self.sensitive_headers = {h.lower() for h in sensitive_headers}
        self.log_headers = log_headers
        self.exclude_paths = exclude_paths or ["/health"]

    def _safe_headers(self, request: Request) -> Dict[str, str]:
        headers = {}
        for key, value in request.headers.items():
            if key.lower() in self.sensitive_headers:
                headers[key] = mask_token(value)
            else:
                headers[key] = value
        return headers

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in self.exclude_paths:
            return await call_next(request)

        start_time = time.time()
        request_info = {
            "method": request.method,
            "path": str(request.url.path),
            "client_ip": request.client.host if request.client else None,
        }
        if self.log_headers:
            request_info["headers"] = self._safe_headers(request)

        logger.info("Request started", extra=request_info)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed with exception",
                extra={
                    "exception_type": type(e).__name__,
                    "process_time": round(time.time() - start_time, 4),
                    "method": request.method,
                    "path": str(request.url.path),
                },
                exc_info=True
            )
            raise

        process_time = time.time() - start_time
        response_info = {
            "status_code": response.status_code,
            "process_time": round(process_time, 4),
            "method": request.method,
            "path": str(request.url.path),
        }
        response.headers["x-process-time"] = str(process_time)

        if response.status_code >= 500:
            logger.error("Request completed with server error", extra=response_info)
        elif response.status_code >= 400:
            logger.warning("Request completed with client error", extra=response_info)
        else:
            logger.info("Request completed successfully", extra=response_info)

        return response
