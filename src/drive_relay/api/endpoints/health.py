from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from drive_relay.config import Settings
from drive_relay.dependencies import get_settings
from drive_relay.schemas import HealthResponse

router = APIRouter()


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Liveness check. Never touches the provider."""
    return HealthResponse(timestamp=utc_timestamp(), version=settings.APP_VERSION)
