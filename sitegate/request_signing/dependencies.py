"""
FastAPI Integration
===================
Dependency that gates routes behind the HMAC signature, and a router
factory for the signed API surface.

Usage:
    verifier = HmacRequestVerifier(api_key=load_api_key())
    require_signature = SignatureRequired(verifier)

    app.include_router(create_version_router("v1.7.6", prefix="/wp-json/rodut/v1"))
    router = create_signed_router(require_signature, prefix="/wp-json/rodut/v1")

    @router.post("/posts")
    async def create_post(request: Request):
        payload = await request.json()
        ...
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
import structlog

from ..config import GateSettings
from ..errors import create_denial_exception
from .classify import signed_request_from_starlette
from .models import SignedRequest
from .verifier import HmacRequestVerifier

logger = structlog.get_logger(__name__)


class VersionResponse(BaseModel):
    version: str


class SignatureRequired:
    """
    FastAPI dependency that raises 401 unless the request is signed.

    Returns the verified SignedRequest to the route.
    """

    def __init__(
        self,
        verifier: HmacRequestVerifier,
        email_field: str = "email",
        file_field: str = "file",
    ):
        self.verifier = verifier
        self.email_field = email_field
        self.file_field = file_field

    @classmethod
    def from_settings(cls, settings: GateSettings) -> "SignatureRequired":
        verifier = HmacRequestVerifier(
            api_key=settings.api_key,
            max_skew_seconds=settings.max_skew_seconds,
        )
        return cls(verifier, email_field=settings.email_field, file_field=settings.file_field)

    async def __call__(self, request: Request) -> SignedRequest:
        signed = await signed_request_from_starlette(
            request,
            email_field=self.email_field,
            file_field=self.file_field,
        )
        result = self.verifier.check(signed)
        if not result.valid:
            logger.warning(
                "signed_request_rejected",
                path=request.url.path,
                method=request.method,
                reason=result.failure.value if result.failure else None,
            )
            raise create_denial_exception()
        return signed


def create_signed_router(
    require_signature: SignatureRequired,
    prefix: str = "",
) -> APIRouter:
    """Create a router whose routes all require a valid signature."""
    return APIRouter(prefix=prefix, dependencies=[Depends(require_signature)])


def create_version_router(version: str, prefix: str = "") -> APIRouter:
    """Create the open router exposing ``GET /version``."""
    router = APIRouter(prefix=prefix)

    @router.get("/version", response_model=VersionResponse)
    async def get_version() -> VersionResponse:
        return VersionResponse(version=version)

    return router
