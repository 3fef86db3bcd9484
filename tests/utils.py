"""
Shared constants and helpers for the relay test suite.
"""

import json

import httplib2
from googleapiclient.errors import HttpError

TEST_TOKEN = "ya29.a0-test-access-token-that-must-never-be-logged"

UPLOADED_FILE = {
    "id": "1AbCdEfGhIjKlMnOpQrStUvWxYz",
    "name": "clip.mp4",
    "webViewLink": "https://drive.google.com/file/d/1AbCdEfGhIjKlMnOpQrStUvWxYz/view",
    "webContentLink": "https://drive.google.com/uc?id=1AbCdEfGhIjKlMnOpQrStUvWxYz&export=download",
    "mimeType": "video/mp4",
    "size": "2048",
}


def make_http_error(status: int, content: bytes) -> HttpError:
    """Build a googleapiclient HttpError with the given status and body."""
    resp = httplib2.Response({"status": status})
    resp.reason = "error"
    return HttpError(resp, content, uri="https://www.googleapis.com/upload/drive/v3/files")


def google_error_body(code: int, message: str, errors=None) -> bytes:
    """A Google API JSON error body."""
    error = {"code": code, "message": message}
    if errors is not None:
        error["errors"] = errors
    return json.dumps({"error": error}).encode("utf-8")


class ScriptedHttp:
    """
    Stands in for ``httplib2.Http.request`` beneath the real Google transport.

    Responses are returned in the order they were queued. Every request is
    recorded; a file-like body is read and flagged as streamed.
    """

    def __init__(self):
        self.responses = []
        self.requests = []

    def respond(self, status: int, content: bytes = b"", headers=None) -> None:
        info = {"status": status, "content-type": "application/json"}
        info.update(headers or {})
        self.responses.append((httplib2.Response(info), content))

    def request(self, uri, method="GET", body=None, headers=None, **kwargs):
        streamed = hasattr(body, "read")
        self.requests.append({
            "uri": uri,
            "method": method,
            "headers": dict(headers or {}),
            "streamed": streamed,
            "body": body.read() if streamed else body,
        })
        return self.responses.pop(0)
