"""
Sitegate
========
Access gates for staging sites and their signed REST API:

- Domain access token guard (cookie-persisted shared token)
- HMAC request signing with a timestamp replay window
"""

__version__ = "0.9.1"

# Config
from sitegate.config import GateSettings

# Errors
from sitegate.errors import (
    ConfigurationError,
    SiteAuthenticationError,
    SiteRequestError,
    SiteTimeoutError,
    SiteUnavailableError,
)

# Domain Token
from sitegate.domain_token import (
    DomainTokenGuard,
    DomainTokenGuardMiddleware,
    FileHashStore,
    StaticHashStore,
    GuardDecision,
    GuardRequest,
    GuardResult,
    derive_site_token,
    hash_token,
    get_parent_domain,
    should_guard,
    provision_hash_file,
    sync_hash_file,
    apply_cookie_action,
)

# Request Signing
from sitegate.request_signing import (
    HmacRequestVerifier,
    SignatureRequired,
    SignedRequest,
    SignedSiteClient,
    JsonPayload,
    MultipartPayload,
    compute_signature,
    create_signed_headers,
    create_signed_upload_headers,
    create_signed_router,
    create_version_router,
)

# Vault
from sitegate.vault import SitegateVault, load_api_key

# Logging
from sitegate.log_config import setup_logging

__all__ = [
    # Config
    "GateSettings",
    # Errors
    "ConfigurationError",
    "SiteAuthenticationError",
    "SiteRequestError",
    "SiteTimeoutError",
    "SiteUnavailableError",
    # Domain Token
    "DomainTokenGuard",
    "DomainTokenGuardMiddleware",
    "FileHashStore",
    "StaticHashStore",
    "GuardDecision",
    "GuardRequest",
    "GuardResult",
    "derive_site_token",
    "hash_token",
    "get_parent_domain",
    "should_guard",
    "provision_hash_file",
    "sync_hash_file",
    "apply_cookie_action",
    # Request Signing
    "HmacRequestVerifier",
    "SignatureRequired",
    "SignedRequest",
    "SignedSiteClient",
    "JsonPayload",
    "MultipartPayload",
    "compute_signature",
    "create_signed_headers",
    "create_signed_upload_headers",
    "create_signed_router",
    "create_version_router",
    # Vault
    "SitegateVault",
    "load_api_key",
    # Logging
    "setup_logging",
]
