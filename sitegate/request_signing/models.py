"""
Request Signing Models
======================
Data models and enums for HMAC request verification.
"""

from typing import Optional, Union
from dataclasses import dataclass
from enum import Enum


class VerifyFailure(str, Enum):
    """Why a signed request failed (logged only, never returned to callers)."""
    API_KEY_MISSING = "api_key_missing"
    MISSING_HEADERS = "missing_headers"
    INVALID_TIMESTAMP = "invalid_timestamp"
    TIMESTAMP_SKEW = "timestamp_skew"
    MISSING_UPLOAD_FIELDS = "missing_upload_fields"
    INVALID_SIGNATURE = "invalid_signature"


@dataclass(frozen=True)
class JsonPayload:
    """JSON (default) endpoints sign the raw request body."""
    body: bytes = b""


@dataclass(frozen=True)
class MultipartPayload:
    """Upload endpoints sign the uploader's email and the file name."""
    email: str = ""
    filename: str = ""


SigningPayload = Union[JsonPayload, MultipartPayload]


@dataclass(frozen=True)
class SignedRequest:
    """A request carrying an HMAC signature for verification."""
    signature: Optional[str]
    timestamp: Optional[str]
    content_type: str
    payload: SigningPayload


@dataclass(frozen=True)
class VerificationResult:
    """Result of a signature check."""
    valid: bool
    failure: Optional[VerifyFailure] = None

    def __bool__(self) -> bool:
        return self.valid
