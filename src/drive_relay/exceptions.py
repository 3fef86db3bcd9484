"""
Custom exception hierarchy for the Drive upload relay.

Every failure the relay can report is one of the variants below. Each carries
the HTTP status it maps to, the summary string placed in the ``error`` field of
the response envelope, and the ``details`` payload.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from fastapi import status


class ErrorCode(str, Enum):
    """Enumeration of error codes for consistent error identification."""

    # General errors
    INTERNAL_SERVER_ERROR = "DR1000"
    VALIDATION_ERROR = "DR1001"

    # Authentication errors
    MISSING_TOKEN = "DR2000"
    INVALID_TOKEN = "DR2001"

    # Local file errors
    FILE_NOT_FOUND = "DR3000"

    # Provider errors
    PROVIDER_ERROR = "DR5000"


Details = Union[List[Dict[str, Any]], str, None]


def error_detail(
    message: str,
    reason: str,
    location: Optional[str] = None,
    location_type: Optional[str] = None,
    domain: str = "global",
) -> Dict[str, Any]:
    """Build a single error detail in the Google API error-detail shape."""
    detail = {"message": message, "domain": domain, "reason": reason}
    if location:
        detail["location"] = location
    if location_type:
        detail["locationType"] = location_type
    return detail


class RelayException(Exception):
    """
    Base exception class for all relay exceptions.

    Subclasses fix the status code and the error summary; ``details`` is
    either a list of error details, a plain message string, or None.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        details: Details = None,
        status_code: Optional[int] = None,
        correlation_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_code": self.error_code.value,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
            "correlation_id": self.correlation_id,
            "timestamp": self.timestamp,
            "exception_type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.message}"


# Authentication exceptions
class AuthenticationException(RelayException):
    """Base class for credential-related failures. Always a 401."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error_code = ErrorCode.INVALID_TOKEN


class MissingTokenException(AuthenticationException):
    """Raised when neither supported header carried a bearer token."""

    error_code = ErrorCode.MISSING_TOKEN

    def __init__(self, message: str = "Invalid Credentials", **kwargs):
        details = kwargs.pop("details", None)
        if details is None:
            details = [
                error_detail(
                    "No access token provided",
                    reason="authError",
                    location="Authorization",
                    location_type="header",
                )
            ]
        super().__init__(message=message, details=details, **kwargs)


class InvalidCredentialsException(AuthenticationException):
    """Raised when the provider rejected the bearer token."""

    def __init__(self, details: Details = None, **kwargs):
        if details is None:
            details = [
                error_detail(
                    "The access token is expired or invalid",
                    reason="authError",
                    location="Authorization",
                    location_type="header",
                )
            ]
        super().__init__(message="Invalid Credentials", details=details, **kwargs)


class TokenRejectedException(AuthenticationException):
    """Raised by the auth check when the provider call fails for any reason."""

    def __init__(self, reason: str, **kwargs):
        super().__init__(message="Invalid token", details=reason, **kwargs)


# Request exceptions
class ValidationException(RelayException):
    """Raised when a required request field is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        field: str,
        reason: str = "required",
        **kwargs
    ):
        self.field = field
        super().__init__(
            message="Bad Request",
            details=[
                error_detail(
                    message,
                    reason=reason,
                    location=field,
                    location_type="parameter",
                )
            ],
            **kwargs
        )


class FileNotFoundException(RelayException):
    """Raised when the requested local file does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = ErrorCode.FILE_NOT_FOUND

    def __init__(self, file_path: str, **kwargs):
        self.file_path = file_path
        super().__init__(
            message="File Not Found",
            details=[
                error_detail(
                    f"File not found: {file_path}",
                    reason="notFound",
                    location="filePath",
                    location_type="parameter",
                )
            ],
            **kwargs
        )


# Provider exceptions
class ProviderException(RelayException):
    """
    Raised when the storage provider returned a structured error.

    The status code, message and detail list are the provider's own.
    """

    error_code = ErrorCode.PROVIDER_ERROR

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[List[Dict[str, Any]]] = None,
        provider_code: Optional[int] = None,
        **kwargs
    ):
        self.provider_code = provider_code
        super().__init__(
            message=message or "Google Drive API Error",
            details=details or [],
            status_code=status_code or status.HTTP_500_INTERNAL_SERVER_ERROR,
            **kwargs
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["provider_code"] = self.provider_code
        return data


class InternalException(RelayException):
    """Raised for any other failure, local or network."""

    def __init__(self, reason: Optional[str] = None, **kwargs):
        super().__init__(
            message="Internal Server Error",
            details=[
                error_detail(
                    reason or "An unexpected error occurred",
                    reason="internalError",
                )
            ],
            **kwargs
        )
