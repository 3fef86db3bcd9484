from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from drive_relay import __version__
from drive_relay.credentials import DEFAULT_ALTERNATE_HEADER


class LoggingSettings(BaseModel):
    """Logging configuration settings."""
    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    file: Optional[str] = None
    console: bool = True
    json_format: Optional[bool] = None  # Auto-detect based on environment
    log_request_headers: bool = True


class CorsSettings(BaseModel):
    """Cross-origin headers attached to every response."""
    model_config = ConfigDict(frozen=True)

    allow_origin: str = "*"
    allow_headers: list[str] = Field(default_factory=lambda: [
        "Origin",
        "X-Requested-With",
        "Content-Type",
        "Accept",
        "Authorization",
    ])
    allow_methods: list[str] = Field(default_factory=lambda: [
        "GET", "POST", "PUT", "DELETE", "OPTIONS",
    ])


class Settings(BaseSettings):
    """
    Relay configuration, loaded from environment variables and a .env file.

    Instances are immutable; build one at startup and hand it to
    ``create_app``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    # --- Server ---
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ENVIRONMENT: str = Field(default="development", description="Application environment")
    APP_VERSION: str = __version__

    # --- Provider ---
    ALTERNATE_AUTH_HEADER: str = DEFAULT_ALTERNATE_HEADER
    DEFAULT_MIME_TYPE: str = "video/mp4"
    ROOT_FOLDER_ID: str = "root"
    DRIVE_API_VERSION: str = "v3"

    # --- Service Configurations ---
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
