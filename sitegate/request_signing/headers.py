"""
Header Functions
================
Header sources used to read X-Signature / X-Timestamp, and the functions
that create those headers on the signing side.
"""

import time
from typing import Dict, Mapping, Optional, Union

from .models import JsonPayload, MultipartPayload
from .signature import build_signing_message, compute_signature

SIGNATURE_HEADER = "X-Signature"
TIMESTAMP_HEADER = "X-Timestamp"


class HeaderSource:
    """Anything that can look up a request header by name."""

    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError


class EnvironHeaderSource(HeaderSource):
    """
    CGI/WSGI environ lookup: ``X-Signature`` is read from ``HTTP_X_SIGNATURE``.
    """

    def __init__(self, environ: Mapping[str, str]):
        self.environ = environ

    def get(self, name: str) -> Optional[str]:
        key = "HTTP_" + name.upper().replace("-", "_")
        return self.environ.get(key) or None


class MappingHeaderSource(HeaderSource):
    """Case-insensitive lookup over a plain header mapping."""

    def __init__(self, headers: Mapping[str, str]):
        self.headers = headers

    def get(self, name: str) -> Optional[str]:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered and value:
                return value
        return None


class ChainedHeaderSource(HeaderSource):
    """Tries each source in order; the first non-empty value wins."""

    def __init__(self, *sources: HeaderSource):
        self.sources = [s for s in sources if s is not None]

    def get(self, name: str) -> Optional[str]:
        for source in self.sources:
            value = source.get(name)
            if value:
                return value
        return None


def create_signed_headers(
    secret: str,
    body: Union[str, bytes] = b"",
    timestamp: Optional[int] = None,
) -> Dict[str, str]:
    """
    Create headers for a signed JSON request.

    Args:
        secret: Shared API key
        body: Exact body bytes that will be sent
        timestamp: Unix seconds, defaults to now

    Returns:
        Dictionary of headers to include in request
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    ts = str(int(time.time()) if timestamp is None else timestamp)
    signature = compute_signature(secret, build_signing_message(ts, JsonPayload(body)))

    return {
        SIGNATURE_HEADER: signature,
        TIMESTAMP_HEADER: ts,
    }


def create_signed_upload_headers(
    secret: str,
    email: str,
    filename: str,
    timestamp: Optional[int] = None,
) -> Dict[str, str]:
    """
    Create headers for a signed multipart upload.

    Args:
        secret: Shared API key
        email: Value of the ``email`` form field
        filename: Name of the uploaded file

    Returns:
        Dictionary of headers to include in request
    """
    ts = str(int(time.time()) if timestamp is None else timestamp)
    message = build_signing_message(ts, MultipartPayload(email=email, filename=filename))

    return {
        SIGNATURE_HEADER: compute_signature(secret, message),
        TIMESTAMP_HEADER: ts,
    }
