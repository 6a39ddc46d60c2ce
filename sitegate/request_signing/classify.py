"""
Payload Classification
======================
Turns an incoming request into a ``SignedRequest``: picks the signing payload
shape from the Content-Type and gathers the signature headers.
"""

from typing import Optional, Union

from starlette.requests import Request
import structlog

from .headers import (
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    ChainedHeaderSource,
    EnvironHeaderSource,
    HeaderSource,
    MappingHeaderSource,
)
from .models import JsonPayload, MultipartPayload, SignedRequest, SigningPayload

logger = structlog.get_logger(__name__)

MULTIPART_FORM_DATA = "multipart/form-data"


def is_multipart(content_type: Optional[str]) -> bool:
    """Case-insensitive substring check for multipart/form-data."""
    return MULTIPART_FORM_DATA in (content_type or "").lower()


def classify_payload(
    content_type: Optional[str],
    body: Union[str, bytes, None] = None,
    email: Optional[str] = None,
    filename: Optional[str] = None,
) -> SigningPayload:
    """
    Pick the payload shape for a request.

    Args:
        content_type: Content-Type header (may be missing)
        body: Raw body, used for JSON/default requests
        email: ``email`` form field, used for multipart requests
        filename: Uploaded file name, used for multipart requests

    Returns:
        MultipartPayload or JsonPayload
    """
    if is_multipart(content_type):
        return MultipartPayload(email=email or "", filename=filename or "")

    if isinstance(body, str):
        body = body.encode("utf-8")
    return JsonPayload(body=body or b"")


def header_source_for(request: Request) -> HeaderSource:
    """
    Header source for a Starlette request.

    A WSGI environ (when the app runs behind a WSGI bridge) is consulted
    first, then the request's own headers.
    """
    environ = request.scope.get("environ")
    return ChainedHeaderSource(
        EnvironHeaderSource(environ) if environ else None,
        MappingHeaderSource(request.headers),
    )


async def _read_upload_fields(
    request: Request,
    email_field: str,
    file_field: str,
) -> tuple:
    try:
        form = await request.form()
    except Exception as e:
        logger.warning("signed_request_form_unreadable", error=str(e))
        return "", ""

    email = form.get(email_field)
    upload = form.get(file_field)
    email = email if isinstance(email, str) else ""
    filename = getattr(upload, "filename", None) or ""
    return email, filename


async def signed_request_from_starlette(
    request: Request,
    headers: Optional[HeaderSource] = None,
    email_field: str = "email",
    file_field: str = "file",
) -> SignedRequest:
    """
    Build a SignedRequest from a Starlette/FastAPI request.

    The body (or form) is read through Starlette's cache, so handlers can
    still read it afterwards.
    """
    headers = headers or header_source_for(request)
    content_type = request.headers.get("content-type", "")

    if is_multipart(content_type):
        email, filename = await _read_upload_fields(request, email_field, file_field)
        payload = classify_payload(content_type, email=email, filename=filename)
    else:
        payload = classify_payload(content_type, body=await request.body())

    return SignedRequest(
        signature=headers.get(SIGNATURE_HEADER),
        timestamp=headers.get(TIMESTAMP_HEADER),
        content_type=content_type,
        payload=payload,
    )
