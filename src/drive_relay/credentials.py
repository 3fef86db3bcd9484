"""Bearer token extraction from inbound request headers."""

from typing import Mapping, Optional

BEARER_PREFIX = "Bearer "
DEFAULT_ALTERNATE_HEADER = "x-goog-authenticated-user-oauth2"

# Number of leading token characters that may appear in logs.
TOKEN_LOG_PREFIX = 20


def _header(headers: Mapping[str, str], name: str) -> Optional[str]:
    # Starlette's Headers is already case-insensitive; plain dicts are not.
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def extract_access_token(
    headers: Optional[Mapping[str, str]],
    alternate_header: str = DEFAULT_ALTERNATE_HEADER,
) -> Optional[str]:
    """
    Return the access token carried by the request, or None.

    An ``Authorization: Bearer <token>`` header wins; otherwise the raw value
    of the alternate header is used. The token format is not validated here.
    """
    if not headers:
        return None

    authorization = _header(headers, "Authorization")
    if authorization and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]

    alternate = _header(headers, alternate_header)
    if alternate:
        return alternate

    return None


def mask_token(token: Optional[str]) -> str:
    """Truncate a token so it can be written to logs."""
    if not token:
        return "<none>"
    return token[:TOKEN_LOG_PREFIX] + "..."
