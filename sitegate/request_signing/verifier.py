"""
HMAC Request Verifier
=====================
Authenticates signed API requests with a shared API key, rejecting tampered
payloads and timestamps outside the replay window.
"""

import time
from typing import Callable, Optional, Union

import structlog

from ..config import MAX_TIMESTAMP_SKEW_SECONDS
from .classify import classify_payload
from .headers import SIGNATURE_HEADER, TIMESTAMP_HEADER, HeaderSource
from .models import (
    MultipartPayload,
    SignedRequest,
    VerificationResult,
    VerifyFailure,
)
from .signature import (
    build_signing_message,
    check_timestamp_skew,
    parse_timestamp,
    verify_signature,
)

logger = structlog.get_logger(__name__)


class HmacRequestVerifier:
    """
    Verifies ``X-Signature`` / ``X-Timestamp`` signed requests.

    Fails closed: no API key, a missing header, a stale or malformed
    timestamp, missing upload fields and a wrong signature all yield False.
    """

    def __init__(
        self,
        api_key: Optional[str],
        max_skew_seconds: int = MAX_TIMESTAMP_SKEW_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.api_key = api_key
        self.max_skew_seconds = max_skew_seconds
        self.clock = clock

        if not api_key:
            logger.error("hmac_api_key_not_configured")

    def check(self, request: SignedRequest) -> VerificationResult:
        """
        Verify a signed request and report which step failed.

        The failure is for logging only; callers must map any failure to the
        same denial.
        """
        if not self.api_key:
            logger.error("hmac_api_key_not_configured")
            return self._fail(VerifyFailure.API_KEY_MISSING)

        if not request.signature or not request.timestamp:
            return self._fail(VerifyFailure.MISSING_HEADERS)

        timestamp = parse_timestamp(request.timestamp)
        if timestamp is None:
            return self._fail(VerifyFailure.INVALID_TIMESTAMP)

        if not check_timestamp_skew(timestamp, self.max_skew_seconds, now=self.clock()):
            return self._fail(VerifyFailure.TIMESTAMP_SKEW)

        payload = request.payload
        if isinstance(payload, MultipartPayload) and not (payload.email and payload.filename):
            return self._fail(VerifyFailure.MISSING_UPLOAD_FIELDS)

        message = build_signing_message(request.timestamp, payload)
        if not verify_signature(self.api_key, message, request.signature):
            return self._fail(VerifyFailure.INVALID_SIGNATURE)

        return VerificationResult(valid=True)

    def verify(self, request: SignedRequest) -> bool:
        """Verify a signed request."""
        return self.check(request).valid

    def verify_parts(
        self,
        headers: HeaderSource,
        content_type: Optional[str],
        body: Union[str, bytes, None] = None,
        email: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> bool:
        """
        Verify a request given as loose parts (framework-independent).

        Args:
            headers: Source of X-Signature / X-Timestamp
            content_type: Content-Type header
            body: Raw body for JSON requests
            email: ``email`` form field for multipart requests
            filename: Uploaded file name for multipart requests

        Returns:
            True if the request is authentic and fresh
        """
        signed = SignedRequest(
            signature=headers.get(SIGNATURE_HEADER),
            timestamp=headers.get(TIMESTAMP_HEADER),
            content_type=content_type or "",
            payload=classify_payload(content_type, body=body, email=email, filename=filename),
        )
        return self.verify(signed)

    def _fail(self, failure: VerifyFailure) -> VerificationResult:
        logger.info("hmac_verification_failed", reason=failure.value)
        return VerificationResult(valid=False, failure=failure)
