"""
Signed Site Client
==================
Async HTTP client that calls a site's signed API.

Features:
- Signs the exact JSON bytes it sends (no re-serialization on the wire).
- Signs multipart uploads over ``timestamp.email.filename``.
- Automatic retries on network errors and 5xx responses.
- Standardized exception mapping.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import (
    SiteAuthenticationError,
    SiteRequestError,
    SiteTimeoutError,
    SiteUnavailableError,
)
from .headers import create_signed_headers, create_signed_upload_headers

logger = logging.getLogger(__name__)


class SignedSiteClient:
    """Client for one site's signed REST API."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers={"User-Agent": "sitegate-client"},
            transport=transport,
        )

    async def aclose(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def __aenter__(self) -> "SignedSiteClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _map_exception(self, exc: Exception) -> Exception:
        """Map httpx exceptions to site request exceptions."""
        site = self.base_url
        if isinstance(exc, httpx.TimeoutException):
            return SiteTimeoutError("Request timed out", site=site)
        if isinstance(exc, (httpx.ConnectError, httpx.NetworkError)):
            return SiteUnavailableError(f"Failed to connect: {exc}", site=site)
        if isinstance(exc, httpx.HTTPStatusError):
            status = exc.response.status_code
            text = exc.response.text
            if status in (401, 403):
                return SiteAuthenticationError("Signature rejected", site=site, status_code=status)
            if status >= 500:
                return SiteUnavailableError("Server error", site=site, status_code=status, details=text)
            return SiteRequestError(f"HTTP {status} Error", site=site, status_code=status, details=text)

        return SiteRequestError(f"Unexpected error: {exc}", site=site)

    @retry(
        retry=retry_if_exception_type((SiteUnavailableError, SiteTimeoutError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _request(self, method: str, path: str, sign, **kwargs) -> Any:
        """Execute request with retries; headers are re-signed per attempt."""
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(sign())
        try:
            response = await self.client.request(method, path, headers=headers, **kwargs)
            response.raise_for_status()

            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        except httpx.HTTPError as e:
            raise self._map_exception(e)

    async def post_json(self, path: str, payload: Dict[str, Any]) -> Any:
        """
        POST a signed JSON body.

        Args:
            path: Endpoint path (e.g., "/wp-json/rodut/v1/create-post")
            payload: JSON-serializable body

        Returns:
            Decoded JSON response
        """
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        return await self._request(
            "POST",
            path,
            lambda: create_signed_headers(self.api_key, body),
            content=body,
            headers={"Content-Type": "application/json"},
        )

    async def upload_file(
        self,
        path: str,
        email: str,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> Any:
        """
        POST a signed multipart upload (``email`` field + ``file`` part).

        Args:
            path: Endpoint path (e.g., "/wp-json/rodut/v1/upload-media")
            email: Uploader email, covered by the signature
            filename: File name, covered by the signature
            content: File bytes
            content_type: File MIME type

        Returns:
            Decoded JSON response
        """
        return await self._request(
            "POST",
            path,
            lambda: create_signed_upload_headers(self.api_key, email, filename),
            data={"email": email},
            files={"file": (filename, content, content_type)},
        )

    async def get_version(self, path: str = "/version") -> Optional[str]:
        """Fetch the site's API version (unsigned endpoint)."""
        result = await self._request("GET", path, lambda: {})
        return result.get("version") if result else None
