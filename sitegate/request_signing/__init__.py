"""
Request Signing Module
======================
HMAC-SHA256 signed API requests with a timestamp replay window.
"""

from .models import (
    JsonPayload,
    MultipartPayload,
    SignedRequest,
    SigningPayload,
    VerificationResult,
    VerifyFailure,
)
from .signature import (
    build_signing_message,
    check_timestamp_skew,
    compute_signature,
    parse_timestamp,
    verify_signature,
    SIGNATURE_ALGORITHM,
)
from .headers import (
    ChainedHeaderSource,
    EnvironHeaderSource,
    HeaderSource,
    MappingHeaderSource,
    create_signed_headers,
    create_signed_upload_headers,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
)
from .classify import (
    classify_payload,
    header_source_for,
    is_multipart,
    signed_request_from_starlette,
)
from .verifier import HmacRequestVerifier
from .dependencies import (
    SignatureRequired,
    VersionResponse,
    create_signed_router,
    create_version_router,
)
from .client import SignedSiteClient

__all__ = [
    # Models
    "JsonPayload",
    "MultipartPayload",
    "SignedRequest",
    "SigningPayload",
    "VerificationResult",
    "VerifyFailure",
    # Signature
    "build_signing_message",
    "check_timestamp_skew",
    "compute_signature",
    "parse_timestamp",
    "verify_signature",
    "SIGNATURE_ALGORITHM",
    # Headers
    "ChainedHeaderSource",
    "EnvironHeaderSource",
    "HeaderSource",
    "MappingHeaderSource",
    "create_signed_headers",
    "create_signed_upload_headers",
    "SIGNATURE_HEADER",
    "TIMESTAMP_HEADER",
    # Classification
    "classify_payload",
    "header_source_for",
    "is_multipart",
    "signed_request_from_starlette",
    # Verifier
    "HmacRequestVerifier",
    # FastAPI
    "SignatureRequired",
    "VersionResponse",
    "create_signed_router",
    "create_version_router",
    # Client
    "SignedSiteClient",
]
