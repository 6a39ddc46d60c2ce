"""
Domain Token Guard
==================
Per-request decision for token protected staging sites.

The guard is pure: it reads a ``GuardRequest`` and the stored hash and
returns a ``GuardResult``. Writing the cookie and ending the request are left
to the caller (see ``apply_cookie_action`` and the middleware).
"""

import structlog

from ..errors import INVALID_TOKEN_MESSAGE, TOKEN_NOT_FOUND_MESSAGE
from .hashing import hash_token, hashes_match
from .models import (
    CookieAction,
    GuardDecision,
    GuardRequest,
    GuardResult,
    RejectReason,
)
from .store import SecretHashStore

logger = structlog.get_logger(__name__)


class DomainTokenGuard:
    """
    Verifies a visitor against the site's shared token.

    Order of checks:
    1. REST/AJAX requests and signed-in users pass untouched
    2. A matching access cookie passes; a stale one is cleared
    3. A matching ``token`` query parameter passes and sets the cookie
    4. Anything else is rejected
    """

    def __init__(self, store: SecretHashStore):
        self.store = store

    def check_request(self, request: GuardRequest) -> GuardResult:
        """
        Decide whether a page request may proceed.

        Args:
            request: Request facts extracted by the caller

        Returns:
            GuardResult with decision and cookie action
        """
        if request.is_rest_request or request.is_ajax_request or request.is_authenticated:
            return GuardResult(decision=GuardDecision.ALLOW)

        stored_hash = self.store.get_hash()
        cookie_action = CookieAction.NONE

        if request.cookie_value is not None:
            if hashes_match(stored_hash, request.cookie_value):
                return GuardResult(decision=GuardDecision.ALLOW)

            # Stale cookie: clear it, a fresh token may still be in the URL
            logger.info("domain_token_cookie_cleared")
            cookie_action = CookieAction.CLEAR

        if request.query_token is not None:
            token_hash = hash_token(request.query_token.strip())

            if not hashes_match(stored_hash, token_hash):
                logger.warning("domain_token_rejected", reason=RejectReason.INVALID_TOKEN.value)
                return GuardResult(
                    decision=GuardDecision.REJECT,
                    cookie_action=cookie_action,
                    reason=RejectReason.INVALID_TOKEN,
                    message=INVALID_TOKEN_MESSAGE,
                )

            logger.info("domain_token_accepted")
            return GuardResult(
                decision=GuardDecision.ALLOW,
                cookie_action=CookieAction.SET,
                cookie_value=token_hash,
            )

        logger.info("domain_token_rejected", reason=RejectReason.TOKEN_NOT_FOUND.value)
        return GuardResult(
            decision=GuardDecision.REJECT,
            cookie_action=cookie_action,
            reason=RejectReason.TOKEN_NOT_FOUND,
            message=TOKEN_NOT_FOUND_MESSAGE,
        )
