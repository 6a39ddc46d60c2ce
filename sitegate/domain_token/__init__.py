"""
Domain Token Module
===================
Shared-token protection for staging sites: token hashing, stored-hash
sources, the pure guard and its Starlette middleware.
"""

from .models import (
    CookieAction,
    GuardDecision,
    GuardRequest,
    GuardResult,
    RejectReason,
)
from .hashing import derive_site_token, hash_token, hashes_match, verify_token
from .store import (
    FileHashStore,
    SecretHashStore,
    StaticHashStore,
    provision_hash_file,
    remove_hash_file,
    sync_hash_file,
)
from .domain import get_parent_domain, is_subdomain, should_guard
from .cookie import AccessCookie, apply_cookie_action
from .guard import DomainTokenGuard
from .middleware import DomainTokenGuardMiddleware

__all__ = [
    # Models
    "CookieAction",
    "GuardDecision",
    "GuardRequest",
    "GuardResult",
    "RejectReason",
    # Hashing
    "derive_site_token",
    "hash_token",
    "hashes_match",
    "verify_token",
    # Stores
    "FileHashStore",
    "SecretHashStore",
    "StaticHashStore",
    "provision_hash_file",
    "remove_hash_file",
    "sync_hash_file",
    # Domain
    "get_parent_domain",
    "is_subdomain",
    "should_guard",
    # Cookie
    "AccessCookie",
    "apply_cookie_action",
    # Guard
    "DomainTokenGuard",
    "DomainTokenGuardMiddleware",
]
