from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from drive_relay.api.router import api_router
from drive_relay.config import Settings, get_settings
from drive_relay.drive_client import DriveClientFactory, drive_client_factory
from drive_relay.handlers import register_exception_handlers
from drive_relay.logging_config import get_logger, setup_logging
from drive_relay.middleware import (
    CorrelationIdMiddleware,
    CorsHeadersMiddleware,
    RequestLoggingMiddleware,
)

logger = get_logger(__name__)

ENDPOINTS = (
    ("POST", "/upload", "Upload a file to Google Drive"),
    ("GET", "/health", "Service status"),
    ("POST", "/test-auth", "Validate a bearer token"),
)


def create_app(
    settings: Settings,
    client_factory: Optional[DriveClientFactory] = None,
) -> FastAPI:
    """Build the relay application from an immutable settings object."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Drive upload relay listening on port {settings.PORT}")
        for method, path, description in ENDPOINTS:
            logger.info(f"  {method:5} {path:11} {description}")
        yield
        logger.info("Drive upload relay stopped")

    app = FastAPI(
        title="Drive Upload Relay",
        description="Relays local files to Google Drive with a caller-supplied OAuth2 token",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.drive_client_factory = client_factory or drive_client_factory(
        settings.DRIVE_API_VERSION
    )

    # Added innermost first; CORS ends up outermost so OPTIONS never reaches routing.
    app.add_middleware(
        RequestLoggingMiddleware,
        sensitive_headers=("authorization", settings.ALTERNATE_AUTH_HEADER),
        log_headers=settings.logging.log_request_headers,
    )
    app.add_middleware(CorrelationIdMiddleware)
    app.add_middleware(
        CorsHeadersMiddleware,
        allow_origin=settings.cors.allow_origin,
        allow_headers=settings.cors.allow_headers,
        allow_methods=settings.cors.allow_methods,
    )

    register_exception_handlers(app)
    app.include_router(api_router)

    return app


def run(settings: Optional[Settings] = None) -> None:
    """Configure logging and serve the relay until interrupted."""
    settings = settings or get_settings()
    setup_logging(
        environment=settings.ENVIRONMENT,
        log_level=settings.logging.level,
        log_file=settings.logging.file,
        enable_json_logs=settings.logging.json_format,
        enable_console_logs=settings.logging.console,
    )
    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
