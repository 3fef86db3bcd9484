import pytest
from pydantic import ValidationError

from drive_relay import __version__
from drive_relay.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.HOST == "0.0.0.0"
    assert settings.PORT == 3000
    assert settings.APP_VERSION == "1.0.0"
    assert settings.DEFAULT_MIME_TYPE == "video/mp4"
    assert settings.ROOT_FOLDER_ID == "root"
    assert settings.ALTERNATE_AUTH_HEADER == "x-goog-authenticated-user-oauth2"
    assert settings.cors.allow_origin == "*"
    assert settings.cors.allow_methods == ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DEFAULT_MIME_TYPE", "application/octet-stream")
    monkeypatch.setenv("LOGGING__LEVEL", "DEBUG")

    settings = Settings(_env_file=None)

    assert settings.PORT == 8080
    assert settings.DEFAULT_MIME_TYPE == "application/octet-stream"
    assert settings.logging.level == "DEBUG"


def test_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("PORT=4000\nALTERNATE_AUTH_HEADER=x-forwarded-access-token\n")

    settings = Settings(_env_file=env_file)

    assert settings.PORT == 4000
    assert settings.ALTERNATE_AUTH_HEADER == "x-forwarded-access-token"


def test_invalid_port(monkeypatch):
    monkeypatch.setenv("PORT", "not-a-port")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_are_immutable():
    settings = Settings(_env_file=None)

    with pytest.raises(ValidationError):
        settings.PORT = 9000
    with pytest.raises(ValidationError):
        settings.logging.level = "DEBUG"


def test_app_version_follows_package_version():
    assert Settings(_env_file=None).APP_VERSION == __version__
