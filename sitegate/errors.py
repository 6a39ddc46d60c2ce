"""
Denial Responses and Errors
===========================
Fixed, non-descriptive denial responses for the guard and the signed API,
plus the configuration error raised by strict secret loaders.

CRITICAL: Never tell the caller which verification step failed.
"""

from typing import Any, Optional

from fastapi import HTTPException
from starlette.responses import JSONResponse


# Fixed messages shown to callers
INVALID_TOKEN_MESSAGE = "Invalid token. Access denied."
TOKEN_NOT_FOUND_MESSAGE = "Token not found."
INVALID_SIGNATURE_MESSAGE = "Invalid signature"


class ConfigurationError(Exception):
    """Raised when a secret store or API key is missing or unreadable."""

    def __init__(self, message: str, source: str = "unknown"):
        self.message = message
        self.source = source
        super().__init__(f"[{source}] {message}")


def create_denial_response(
    message: str,
    code: str,
    status_code: int = 403,
) -> JSONResponse:
    """
    Create a fixed denial JSONResponse.

    Args:
        message: Fixed user-facing message
        code: Stable machine-readable code
        status_code: HTTP status code (default 403)

    Returns:
        JSONResponse with the denial body
    """
    return JSONResponse(
        status_code=status_code,
        content={
            "error": "access_denied",
            "message": message,
            "code": code,
        },
    )


def create_denial_exception() -> HTTPException:
    """Create the 401 HTTPException returned for any failed signature check."""
    return HTTPException(
        status_code=401,
        detail={
            "code": "forbidden",
            "message": INVALID_SIGNATURE_MESSAGE,
        },
    )


class SiteRequestError(Exception):
    """Base exception for signed calls to a site's API."""

    def __init__(self, message: str, site: str = "unknown", status_code: Optional[int] = None, details: Any = None):
        self.message = message
        self.site = site
        self.status_code = status_code
        self.details = details
        super().__init__(f"[{site}] {message} (Status: {status_code})")


class SiteUnavailableError(SiteRequestError):
    """Raised when the site is unreachable or returns a 5xx."""
    pass


class SiteTimeoutError(SiteUnavailableError):
    """Raised specifically on timeouts."""
    pass


class SiteAuthenticationError(SiteRequestError):
    """Raised when the site rejects the signature (401/403)."""
    pass
