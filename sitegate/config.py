"""
Sitegate Configuration
======================
Configuration constants and environment variables.
"""

import os
from dataclasses import dataclass
from typing import FrozenSet, Optional

# Placeholder/staging parent domains whose sites are token protected
DEFAULT_TEMP_DOMAINS: FrozenSet[str] = frozenset({
    "hp-standard.net",
    "hp-standard.com",
    "hp-standard.info",
    "sv511.com",
    "sv533.com",
    "hp-standard.xyz",
})

COOKIE_NAME = "temp_domain_token"
COOKIE_MAX_AGE_SECONDS = 31536000  # 1 year
TOKEN_QUERY_PARAM = "token"

DEFAULT_HASH_FILE = ".hash_data"
DEFAULT_REST_PREFIX = "/wp-json"
DEFAULT_AJAX_PATH = "/wp-admin/admin-ajax.php"

MAX_TIMESTAMP_SKEW_SECONDS = 300  # 5 minutes

VAULT_MOUNT_POINT = os.getenv("SITEGATE_VAULT_MOUNT", "sitegate")
VAULT_SECRET_PATH = os.getenv("SITEGATE_VAULT_PATH", "rest-api")


def _split_domains(raw: Optional[str]) -> FrozenSet[str]:
    if not raw:
        return DEFAULT_TEMP_DOMAINS
    return frozenset(d.strip().lower() for d in raw.split(",") if d.strip())


@dataclass(frozen=True)
class GateSettings:
    """Read-only settings injected into the guard and verifier at startup."""
    temp_domains: FrozenSet[str] = DEFAULT_TEMP_DOMAINS
    site_host: Optional[str] = None
    hash_file: str = DEFAULT_HASH_FILE
    api_key: Optional[str] = None
    rest_prefix: str = DEFAULT_REST_PREFIX
    ajax_path: str = DEFAULT_AJAX_PATH
    cookie_name: str = COOKIE_NAME
    cookie_max_age: int = COOKIE_MAX_AGE_SECONDS
    max_skew_seconds: int = MAX_TIMESTAMP_SKEW_SECONDS
    email_field: str = "email"
    file_field: str = "file"

    @classmethod
    def from_env(cls, api_key: Optional[str] = None) -> "GateSettings":
        """
        Build settings from the process environment.

        Args:
            api_key: Already-resolved API key. When omitted, only
                SITEGATE_API_KEY is consulted; use
                ``sitegate.vault.load_api_key`` to fall back to Vault.

        Returns:
            GateSettings instance
        """
        return cls(
            temp_domains=_split_domains(os.getenv("SITEGATE_TEMP_DOMAINS")),
            site_host=os.getenv("SITEGATE_SITE_HOST") or None,
            hash_file=os.getenv("SITEGATE_HASH_FILE", DEFAULT_HASH_FILE),
            api_key=api_key if api_key is not None else os.getenv("SITEGATE_API_KEY") or None,
            rest_prefix=os.getenv("SITEGATE_REST_PREFIX", DEFAULT_REST_PREFIX),
            ajax_path=os.getenv("SITEGATE_AJAX_PATH", DEFAULT_AJAX_PATH),
            max_skew_seconds=int(
                os.getenv("SITEGATE_MAX_SKEW_SECONDS", str(MAX_TIMESTAMP_SKEW_SECONDS))
            ),
        )
