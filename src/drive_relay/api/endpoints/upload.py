"""API endpoint that relays a local file to Google Drive."""

import os
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError
from fastapi.concurrency import run_in_threadpool

from drive_relay.config import Settings
from drive_relay.credentials import extract_access_token, mask_token
from drive_relay.dependencies import get_drive_client_factory, get_settings
from drive_relay.drive_client import DriveClientFactory
from drive_relay.exceptions import (
    FileNotFoundException,
    InternalException,
    MissingTokenException,
    RelayException,
    ValidationException,
)
from drive_relay.schemas import UploadedFile, UploadRequest, UploadResponse
from drive_relay.utils import log_info

router = APIRouter()


async def read_payload(request: Request) -> Dict[str, Any]:
    """Parse a JSON or URL-encoded body into a dict."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return dict(form)

    body = await request.body()
    if not body.strip():
        return {}
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationException("Request body is not valid JSON", field="body", reason="parseError")
    if not isinstance(payload, dict):
        raise ValidationException("Request body must be a JSON object", field="body", reason="invalid")
    return payload


def parse_upload_request(payload: Dict[str, Any]) -> UploadRequest:
    try:
        upload = UploadRequest.model_validate(payload)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(loc) for loc in error["loc"]) or "body"
        raise ValidationException(f"{field}: {error['msg']}", field=field, reason="invalid")

    if not upload.file_path:
        raise ValidationException("filePath is required", field="filePath")
    return upload


@router.post(
    "/upload",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload a local file to Google Drive",
)
async def upload_file(
    request: Request,
    settings: Settings = Depends(get_settings),
    client_factory: DriveClientFactory = Depends(get_drive_client_factory),
) -> UploadResponse:
    """
    Streams the file at ``filePath`` to Drive using the caller's bearer token.

    Checks run in order: token present, ``filePath`` given, file exists. The
    provider is only contacted once all three pass.
    """
    access_token = extract_access_token(request.headers, settings.ALTERNATE_AUTH_HEADER)
    if not access_token:
        raise MissingTokenException()

    log_info("Access token found", extra_context={"token": mask_token(access_token)})

    upload = parse_upload_request(await read_payload(request))

    if not os.path.exists(upload.file_path):
        raise FileNotFoundException(upload.file_path)

    name = upload.file_name or os.path.basename(upload.file_path)
    mime_type = upload.mime_type or settings.DEFAULT_MIME_TYPE
    parents = None
    if upload.folder_id and upload.folder_id != settings.ROOT_FOLDER_ID:
        parents = [upload.folder_id]

    log_info(
        "Starting upload",
        extra_context={
            "file_path": upload.file_path,
            "file_name": name,
            "mime_type": mime_type,
            "parents": parents,
        }
    )

    try:
        client = client_factory(access_token)
        created = await run_in_threadpool(
            client.create_file, upload.file_path, name, mime_type, parents
        )
    except RelayException:
        raise
    except Exception as e:
        raise InternalException(str(e) or None) from e

    log_info(
        "Upload completed",
        extra_context={"file_id": created.get("id"), "file_name": created.get("name")}
    )
    return UploadResponse(file=UploadedFile.from_provider(created))
