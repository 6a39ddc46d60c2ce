"""
HashiCorp Vault Client for Sitegate
===================================

Usage:
    from sitegate.vault import SitegateVault, load_api_key

    vault = SitegateVault()

    # Strict: raises ConfigurationError when missing
    api_key = vault.get_api_key()

    # Lenient: env first, then Vault, None when unavailable
    api_key = load_api_key()
"""

import os
from typing import Any, Dict, Optional

import hvac
import structlog

from ..config import VAULT_MOUNT_POINT, VAULT_SECRET_PATH
from ..errors import ConfigurationError

logger = structlog.get_logger(__name__)

API_KEY_ENV = "SITEGATE_API_KEY"


class SitegateVault:
    """HashiCorp Vault client for site secrets."""

    def __init__(
        self,
        url: Optional[str] = None,
        token: Optional[str] = None,
        mount_point: str = VAULT_MOUNT_POINT,
    ):
        self.url = url or os.environ.get("VAULT_ADDR", "http://127.0.0.1:8200")
        self.token = token or os.environ.get("VAULT_TOKEN")
        self.mount_point = mount_point
        self._client: Optional[hvac.Client] = None

    @property
    def client(self) -> hvac.Client:
        """Lazy-loaded Vault client."""
        if self._client is None:
            client = hvac.Client(url=self.url, token=self.token)
            if not client.is_authenticated():
                raise ConfigurationError("Vault authentication failed. Check VAULT_TOKEN.", source="vault")
            self._client = client
        return self._client

    def get_secret(self, path: str, version: Optional[int] = None) -> Dict[str, Any]:
        """
        Get a secret from Vault KV v2.

        Args:
            path: Secret path (e.g., "rest-api")
            version: Optional specific version to retrieve

        Returns:
            Dictionary of secret key-value pairs
        """
        try:
            secret = self.client.secrets.kv.v2.read_secret_version(
                path=path,
                mount_point=self.mount_point,
                version=version,
            )
            return secret["data"]["data"]
        except hvac.exceptions.InvalidPath:
            logger.error("vault_secret_not_found", mount_point=self.mount_point, path=path)
            raise ConfigurationError(f"Secret not found at {self.mount_point}/{path}", source="vault")
        except hvac.exceptions.VaultError as e:
            logger.error("vault_read_failed", path=path, error=str(e))
            raise ConfigurationError(f"Failed to read {self.mount_point}/{path}", source="vault") from e

    def get_api_key(self, path: str = VAULT_SECRET_PATH) -> str:
        """
        Get the signed-API key.

        Raises:
            ConfigurationError: when the secret or its key is missing
        """
        secret = self.get_secret(path)
        api_key = secret.get("api_key") or secret.get("API_KEY")
        if not api_key:
            raise ConfigurationError(f"api_key missing in {self.mount_point}/{path}", source="vault")
        return api_key


# Singleton instance for convenience
_vault_instance: Optional[SitegateVault] = None


def get_vault() -> SitegateVault:
    """Get the global Vault client instance."""
    global _vault_instance
    if _vault_instance is None:
        _vault_instance = SitegateVault()
    return _vault_instance


def load_api_key(path: str = VAULT_SECRET_PATH, vault: Optional[SitegateVault] = None) -> Optional[str]:
    """
    Resolve the API key without raising.

    SITEGATE_API_KEY wins; otherwise Vault is asked when a token is
    available. Any failure is logged and reported as None, which makes the
    verifier reject every request.
    """
    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        return api_key

    vault = vault or (get_vault() if os.environ.get("VAULT_TOKEN") else None)
    if vault is None:
        logger.error("api_key_not_configured", source="environment")
        return None

    try:
        return vault.get_api_key(path)
    except (ConfigurationError, hvac.exceptions.VaultError, OSError) as e:
        logger.error("api_key_not_configured", source="vault", error=str(e))
        return None
