"""
Token Hashing
=============
SHA-256 token hashing, per-site token derivation and constant-time matching.
"""

import hashlib
import hmac
from typing import Optional


def hash_token(token: str) -> str:
    """
    Hash a plaintext token for storage or cookie use.

    Args:
        token: Plaintext token

    Returns:
        Lowercase hex SHA-256 digest (64 chars)
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def derive_site_token(domain: str, phrase: str) -> str:
    """
    Derive the access token handed out for a staging site.

    The deployer hashes the site's domain together with a private phrase;
    the site itself only ever stores ``hash_token`` of the result.

    Args:
        domain: Full site domain (e.g., "shop.hp-standard.net")
        phrase: Private hash phrase known only to the deployer

    Returns:
        Hex token to share with site reviewers
    """
    return hashlib.sha256(f"{domain}{phrase}".encode("utf-8")).hexdigest()


def hashes_match(stored_hash: Optional[str], candidate_hash: Optional[str]) -> bool:
    """
    Compare two token hashes using constant-time comparison.

    A missing stored hash never matches anything.
    """
    if not stored_hash or candidate_hash is None:
        return False
    return hmac.compare_digest(
        stored_hash.encode("utf-8"),
        candidate_hash.encode("utf-8"),
    )


def verify_token(stored_hash: Optional[str], token: str) -> bool:
    """Check a plaintext token (already trimmed) against the stored hash."""
    return hashes_match(stored_hash, hash_token(token))
