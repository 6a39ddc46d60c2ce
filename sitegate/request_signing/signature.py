"""
Signature Functions
===================
HMAC signature computation and verification for signed API requests.
"""

import hmac
import hashlib
import time
from typing import Optional, Union

from ..config import MAX_TIMESTAMP_SKEW_SECONDS
from .models import JsonPayload, MultipartPayload, SigningPayload

SIGNATURE_ALGORITHM = "sha256"
# Longer values cannot be a plausible Unix timestamp
MAX_TIMESTAMP_DIGITS = 20


def _to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def build_signing_message(timestamp: str, payload: SigningPayload) -> bytes:
    """
    Build the canonical message covered by the signature.

    - JSON: ``timestamp + "." + raw_body``
    - Multipart: ``timestamp + "." + email + "." + filename``

    Args:
        timestamp: Timestamp exactly as sent in X-Timestamp
        payload: Classified payload

    Returns:
        Message bytes
    """
    if isinstance(payload, MultipartPayload):
        return _to_bytes(f"{timestamp}.{payload.email}.{payload.filename}")
    if isinstance(payload, JsonPayload):
        return _to_bytes(timestamp) + b"." + _to_bytes(payload.body)
    raise TypeError(f"Unsupported signing payload: {type(payload).__name__}")


def compute_signature(secret: str, message: Union[str, bytes]) -> str:
    """
    Compute HMAC-SHA256 signature of a canonical message.

    Args:
        secret: Shared API key
        message: Canonical message

    Returns:
        Hex-encoded HMAC-SHA256 signature
    """
    return hmac.new(
        _to_bytes(secret),
        _to_bytes(message),
        hashlib.sha256,
    ).hexdigest()


def verify_signature(
    secret: str,
    message: Union[str, bytes],
    provided_signature: str,
) -> bool:
    """
    Verify a signature using constant-time comparison.

    Args:
        secret: Shared API key
        message: Canonical message
        provided_signature: Signature sent by the caller

    Returns:
        True if signature is valid
    """
    expected_signature = compute_signature(secret, message)
    return hmac.compare_digest(
        expected_signature.encode("ascii"),
        _to_bytes(provided_signature),
    )


def parse_timestamp(raw: Optional[str]) -> Optional[int]:
    """Parse a decimal Unix-seconds timestamp, None if malformed."""
    if raw is None:
        return None
    raw = raw.strip()
    if len(raw) > MAX_TIMESTAMP_DIGITS:
        return None
    if not raw.isdigit() or not raw.isascii():
        return None
    return int(raw)


def check_timestamp_skew(
    timestamp: int,
    max_skew: int = MAX_TIMESTAMP_SKEW_SECONDS,
    now: Optional[float] = None,
) -> bool:
    """
    Check if timestamp is within acceptable skew.

    Args:
        timestamp: Unix timestamp from request
        max_skew: Maximum allowed skew in seconds (inclusive)
        now: Current time, defaults to time.time()

    Returns:
        True if timestamp is acceptable
    """
    current_time = int(time.time() if now is None else now)
    return abs(current_time - timestamp) <= max_skew
