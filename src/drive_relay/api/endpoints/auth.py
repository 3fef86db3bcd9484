"""Read-only check of whether a bearer token is accepted by Drive."""

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from drive_relay.config import Settings
from drive_relay.credentials import extract_access_token
from drive_relay.dependencies import get_drive_client_factory, get_settings
from drive_relay.drive_client import DriveClientFactory, error_message
from drive_relay.exceptions import AuthenticationException, TokenRejectedException
from drive_relay.schemas import AuthCheckResponse

router = APIRouter()


@router.post("/test-auth", response_model=AuthCheckResponse, summary="Validate a bearer token")
async def check_auth(
    request: Request,
    settings: Settings = Depends(get_settings),
    client_factory: DriveClientFactory = Depends(get_drive_client_factory),
) -> AuthCheckResponse:
    access_token = extract_access_token(request.headers, settings.ALTERNATE_AUTH_HEADER)
    if not access_token:
        raise AuthenticationException("No access token provided")

    try:
        client = client_factory(access_token)
        test_file = await run_in_threadpool(client.first_file)
    except Exception as e:
        raise TokenRejectedException(error_message(e)) from e

    return AuthCheckResponse(testFile=test_file)
