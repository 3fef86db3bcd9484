"""
Google Drive client bound to a single caller-supplied access token.

The credentials carry no refresh token, so an expired token surfaces as a
provider 401 instead of being renewed.
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

import google_auth_httplib2
import httplib2
from google.auth.exceptions import RefreshError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from drive_relay.exceptions import (
    InternalException,
    InvalidCredentialsException,
    ProviderException,
    RelayException,
)

logger = logging.getLogger(__name__)

UPLOAD_FIELDS = "id, name, webViewLink, webContentLink, mimeType, size"
LIST_FIELDS = "files(id, name)"

# googleapiclient sends the whole stream in one request for this chunk size.
STREAM_WHOLE_FILE = -1


def authorized_http(access_token: str) -> google_auth_httplib2.AuthorizedHttp:
    """
    HTTP transport that attaches the bearer token to every request.

    Refresh-on-401 is disabled so the provider's own 401 body reaches the
    caller as an ``HttpError``.
    """
    credentials = Credentials(token=access_token)
    return google_auth_httplib2.AuthorizedHttp(
        credentials,
        http=httplib2.Http(),
        refresh_status_codes=(),
    )


def parse_provider_error(error: HttpError) -> Optional[Dict[str, Any]]:
    """Return the ``error`` object of a Google API error body, if there is one."""
    content = error.content
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    try:
        payload = json.loads(content or "")
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    provider_error = payload.get("error")
    return provider_error if isinstance(provider_error, dict) else None


def translate_error(error: Exception) -> RelayException:
    """Map a failure from the provider call onto the relay's error variants."""
    if isinstance(error, RelayException):
        return error

    if isinstance(error, HttpError):
        provider_error = parse_provider_error(error)
        if provider_error is not None:
            details = provider_error.get("errors")
            if provider_error.get("code") == 401:
                return InvalidCredentialsException(details=details)
            return ProviderException(
                message=provider_error.get("message"),
                status_code=getattr(error.resp, "status", None),
                details=details,
                provider_code=provider_error.get("code"),
            )

    # Credentials without a refresh token can never be renewed.
    if isinstance(error, RefreshError):
        return InvalidCredentialsException()

    return InternalException(str(error) or None)


def error_message(error: Exception) -> str:
    """Best human-readable message for a failed provider call."""
    if isinstance(error, HttpError):
        provider_error = parse_provider_error(error)
        if provider_error and provider_error.get("message"):
            return provider_error["message"]
    if isinstance(error, RelayException):
        return error.message
    return str(error) or type(error).__name__


class DriveClient:
    """Thin wrapper over the Drive v3 ``files`` resource."""

    def __init__(self, access_token: str, api_version: str = "v3", service=None):
        if service is None:
            service = build(
                "drive",
                api_version,
                http=authorized_http(access_token),
                cache_discovery=False,
            )
        self._service = service

    def create_file(
        self,
        file_path: str,
        name: str,
        mime_type: str,
        parents: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """
        Upload a local file and return the selected fields.

        The open file object is handed to the transport as the body of one
        PUT, so the bytes are streamed from disk rather than read into
        memory. The session is never resumed after a failure.

        Raises:
            RelayException: every failure, already translated.
        """
        metadata: Dict[str, Any] = {"name": name, "mimeType": mime_type}
        if parents:
            metadata["parents"] = parents

        logger.info("Uploading to Google Drive", extra={"metadata": metadata})

        try:
            with open(file_path, "rb") as stream:
                media = MediaIoBaseUpload(
                    stream,
                    mimetype=mime_type,
                    chunksize=STREAM_WHOLE_FILE,
                    resumable=True,
                )
                return self._service.files().create(
                    body=metadata,
                    media_body=media,
                    fields=UPLOAD_FIELDS,
                ).execute(num_retries=0)
        except Exception as e:
            raise translate_error(e) from e

    def first_file(self) -> Optional[Dict[str, Any]]:
        """List at most one file; used only to prove the token works."""
        response = self._service.files().list(
            pageSize=1,
            fields=LIST_FIELDS,
        ).execute(num_retries=0)
        files = response.get("files") or []
        return files[0] if files else None


DriveClientFactory = Callable[[str], DriveClient]


def drive_client_factory(api_version: str = "v3") -> DriveClientFactory:
    """Return a callable that builds a DriveClient for a given token."""

    def factory(access_token: str) -> DriveClient:
        return DriveClient(access_token, api_version=api_version)

    return factory
