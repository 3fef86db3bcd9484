from fastapi import Request

from drive_relay.config import Settings
from drive_relay.drive_client import DriveClientFactory


def get_settings(request: Request) -> Settings:
    """Returns the settings the application was created with."""
    return request.app.state.settings


def get_drive_client_factory(request: Request) -> DriveClientFactory:
    """
    Returns the callable used to build a Drive client for a request's token.
    Set from the ``client_factory`` argument of ``create_app``.
    """
    return request.app.state.drive_client_factory
