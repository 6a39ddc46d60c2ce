"""
Secret Hash Stores
==================
Read-only sources of the stored ``sha256(token)`` value, plus the
provisioning helpers the deployer uses to write or remove it.
"""

import os
from pathlib import Path
from typing import Optional, Union

import structlog

from .domain import is_subdomain
from .hashing import derive_site_token, hash_token

logger = structlog.get_logger(__name__)

_UNSET = object()


class SecretHashStore:
    """
    Base class for stored-hash sources.

    Subclasses implement ``_load``; the value is loaded once and cached for
    the life of the process. ``reload()`` re-reads it after re-provisioning.
    """

    def __init__(self):
        self._cached = _UNSET

    def get_hash(self) -> Optional[str]:
        """
        Get the stored hash.

        Returns:
            Hex digest, or None when no token is configured
        """
        if self._cached is _UNSET:
            self._cached = self._load()
        return self._cached

    def reload(self) -> Optional[str]:
        """Drop the cached value and load it again."""
        self._cached = _UNSET
        return self.get_hash()

    def _load(self) -> Optional[str]:
        raise NotImplementedError


class StaticHashStore(SecretHashStore):
    """Stored hash supplied directly (injected configuration, tests)."""

    def __init__(self, stored_hash: Optional[str]):
        super().__init__()
        self._stored_hash = stored_hash

    def _load(self) -> Optional[str]:
        return self._stored_hash or None


class FileHashStore(SecretHashStore):
    """
    Stored hash kept in a file on disk (``.hash_data`` next to the site).

    A missing file means "no token configured": every comparison fails.
    """

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)

    def _load(self) -> Optional[str]:
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            logger.warning("secret_hash_file_missing", path=str(self.path))
            return None
        except OSError as e:
            logger.error("secret_hash_file_unreadable", path=str(self.path), error=str(e))
            return None

        value = data.decode("utf-8", errors="replace").strip()
        if not value:
            logger.warning("secret_hash_file_empty", path=str(self.path))
            return None
        return value


def provision_hash_file(
    path: Union[str, Path],
    token: str,
    mode: int = 0o644,
) -> str:
    """
    Write the stored hash for a token.

    Args:
        path: Destination file (e.g., "<plugin dir>/.hash_data")
        token: Plaintext token the site should accept
        mode: File permissions

    Returns:
        The hash that was written
    """
    path = Path(path)
    stored_hash = hash_token(token)
    path.write_text(stored_hash, encoding="utf-8")
    os.chmod(path, mode)
    logger.info("secret_hash_file_provisioned", path=str(path))
    return stored_hash


def remove_hash_file(path: Union[str, Path]) -> bool:
    """
    Remove the stored hash file when a site leaves staging.

    Returns:
        True if a file was removed
    """
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    logger.info("secret_hash_file_removed", path=str(path))
    return True


def sync_hash_file(
    path: Union[str, Path],
    domain: str,
    phrase: str,
) -> Optional[str]:
    """
    Bring a deployment's stored hash in line with its domain.

    Subdomain deployments (staging/placeholder sites) get the hash of their
    derived token; apex-domain deployments have the file removed so the
    guard finds no token.

    Args:
        path: Stored hash file of the deployment
        domain: Domain the site is deployed under
        phrase: Deployment-wide secret phrase

    Returns:
        The hash written, or None if the file was removed
    """
    if is_subdomain(domain):
        return provision_hash_file(path, derive_site_token(domain, phrase))

    remove_hash_file(path)
    return None
