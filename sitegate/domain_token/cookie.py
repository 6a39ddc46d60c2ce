"""
Access Cookie
=============
Builds the access cookie attributes and applies a guard result's cookie
action to a Starlette response.
"""

from dataclasses import dataclass

from starlette.responses import Response

from ..config import COOKIE_NAME, COOKIE_MAX_AGE_SECONDS
from .models import CookieAction, GuardResult


@dataclass(frozen=True)
class AccessCookie:
    """Attributes of the cookie that remembers a verified visitor."""
    value: str
    secure: bool = False
    name: str = COOKIE_NAME
    max_age: int = COOKIE_MAX_AGE_SECONDS
    path: str = "/"
    httponly: bool = True


def apply_cookie_action(
    result: GuardResult,
    response: Response,
    secure: bool = False,
    cookie_name: str = COOKIE_NAME,
    max_age: int = COOKIE_MAX_AGE_SECONDS,
) -> None:
    """
    Write the guard's cookie decision onto the response.

    Args:
        result: Guard result carrying the cookie action
        response: Outgoing response
        secure: Whether the request arrived over HTTPS
        cookie_name: Cookie name
        max_age: Cookie lifetime in seconds
    """
    if result.cookie_action == CookieAction.SET:
        cookie = AccessCookie(
            value=result.cookie_value,
            secure=secure,
            name=cookie_name,
            max_age=max_age,
        )
        response.set_cookie(
            cookie.name,
            cookie.value,
            max_age=cookie.max_age,
            path=cookie.path,
            secure=cookie.secure,
            httponly=cookie.httponly,
        )
    elif result.cookie_action == CookieAction.CLEAR:
        # Empty value with an expiry in the past
        response.delete_cookie(cookie_name, path="/")
