import os
from typing import Dict
from unittest.mock import MagicMock

import httplib2
import pytest
from fastapi.testclient import TestClient

# Set test environment
os.environ["ENVIRONMENT"] = "test"

from drive_relay.config import Settings
from drive_relay.drive_client import DriveClient
from drive_relay.main import create_app

from tests.utils import TEST_TOKEN, UPLOADED_FILE, ScriptedHttp


@pytest.fixture
def settings() -> Settings:
    """Settings built from defaults only, ignoring any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def mock_drive_service():
    """Mocks the googleapiclient Drive resource."""
    service = MagicMock()
    service.files.return_value.create.return_value.execute.return_value = dict(UPLOADED_FILE)
    service.files.return_value.list.return_value.execute.return_value = {
        "files": [{"id": "notes-file", "name": "notes.txt"}]
    }
    return service


@pytest.fixture
def client_factory(mock_drive_service):
    """A DriveClient factory whose clients talk to the mocked service."""
    factory = MagicMock(side_effect=lambda token: DriveClient(token, service=mock_drive_service))
    return factory


@pytest.fixture
def client(settings, client_factory) -> TestClient:
    """Synchronous test client for the relay application."""
    app = create_app(settings, client_factory=client_factory)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {TEST_TOKEN}"}


@pytest.fixture
def sample_video(tmp_path):
    """A small file standing in for a video on the caller's disk."""
    path = tmp_path / "clip.mp4"
    path.write_bytes(os.urandom(2048))
    return path


@pytest.fixture
def scripted_http(monkeypatch) -> ScriptedHttp:
    """Replaces the network below google-auth-httplib2 with queued responses."""
    scripted = ScriptedHttp()

    def request(http, uri, method="GET", body=None, headers=None, **kwargs):
        return scripted.request(uri, method=method, body=body, headers=headers, **kwargs)

    monkeypatch.setattr(httplib2.Http, "request", request)
    return scripted


@pytest.fixture
def live_client(settings, scripted_http) -> TestClient:
    """Test client wired to the real Drive client factory and transport."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
