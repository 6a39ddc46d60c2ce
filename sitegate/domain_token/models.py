"""
Domain Token Models
===================
Data models and enums for the domain access token guard.
"""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class GuardDecision(str, Enum):
    """Guard decision types."""
    ALLOW = "ALLOW"
    REJECT = "REJECT"


class RejectReason(str, Enum):
    """Reasons for rejecting a page request."""
    INVALID_TOKEN = "invalid_token"
    TOKEN_NOT_FOUND = "token_not_found"


class CookieAction(str, Enum):
    """What the response should do with the access cookie."""
    NONE = "none"
    SET = "set"
    CLEAR = "clear"


@dataclass(frozen=True)
class GuardRequest:
    """The parts of a page request the guard looks at."""
    cookie_value: Optional[str] = None
    query_token: Optional[str] = None
    is_rest_request: bool = False
    is_ajax_request: bool = False
    is_authenticated: bool = False


@dataclass(frozen=True)
class GuardResult:
    """Result of a guard check, applied to the response afterwards."""
    decision: GuardDecision
    cookie_action: CookieAction = CookieAction.NONE
    cookie_value: Optional[str] = None
    reason: Optional[RejectReason] = None
    message: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return self.decision == GuardDecision.ALLOW
