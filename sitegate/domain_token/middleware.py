"""
Domain Token Guard Middleware
=============================
Starlette middleware that puts every page of a staging site behind the
shared domain token.

Usage:
    from sitegate.domain_token import DomainTokenGuardMiddleware, FileHashStore

    app.add_middleware(
        DomainTokenGuardMiddleware,
        store=FileHashStore("/srv/site/.hash_data"),
        site_host="shop.hp-standard.net",
    )
"""

from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

from ..config import (
    COOKIE_MAX_AGE_SECONDS,
    COOKIE_NAME,
    DEFAULT_AJAX_PATH,
    DEFAULT_REST_PREFIX,
    DEFAULT_TEMP_DOMAINS,
    TOKEN_QUERY_PARAM,
    GateSettings,
)
from ..errors import create_denial_response
from .cookie import apply_cookie_action
from .domain import should_guard
from .guard import DomainTokenGuard
from .models import GuardRequest, GuardResult
from .store import FileHashStore, SecretHashStore, StaticHashStore

logger = structlog.get_logger(__name__)


class DomainTokenGuardMiddleware(BaseHTTPMiddleware):
    """
    Middleware that challenges anonymous visitors of staging sites.

    When ``site_host`` is given, the allow-list check runs once here and an
    inactive middleware passes everything through. Without it, the Host
    header of each request decides, so that mode is only safe behind a
    proxy that rejects unknown hosts.
    """

    def __init__(
        self,
        app,
        store: SecretHashStore = None,
        site_host: Optional[str] = None,
        temp_domains: Iterable[str] = None,
        rest_prefix: str = DEFAULT_REST_PREFIX,
        ajax_path: str = DEFAULT_AJAX_PATH,
        cookie_name: str = COOKIE_NAME,
        cookie_max_age: int = COOKIE_MAX_AGE_SECONDS,
    ):
        super().__init__(app)
        self.guard = DomainTokenGuard(store or StaticHashStore(None))
        self.site_host = site_host
        self.temp_domains = frozenset(temp_domains or DEFAULT_TEMP_DOMAINS)
        self.rest_prefix = rest_prefix
        self.ajax_path = ajax_path
        self.cookie_name = cookie_name
        self.cookie_max_age = cookie_max_age

        self.active = True
        if site_host is not None:
            self.active = should_guard(site_host, self.temp_domains)
            logger.info(
                "domain_token_guard_configured",
                site_host=site_host,
                active=self.active,
            )

    @classmethod
    def options_from_settings(cls, settings: GateSettings) -> dict:
        """Keyword arguments for ``app.add_middleware`` built from settings."""
        return {
            "store": FileHashStore(settings.hash_file),
            "site_host": settings.site_host,
            "temp_domains": settings.temp_domains,
            "rest_prefix": settings.rest_prefix,
            "ajax_path": settings.ajax_path,
            "cookie_name": settings.cookie_name,
            "cookie_max_age": settings.cookie_max_age,
        }

    def _is_rest_request(self, request: Request) -> bool:
        path = request.url.path
        return bool(self.rest_prefix) and (
            path == self.rest_prefix or path.startswith(self.rest_prefix.rstrip("/") + "/")
        )

    def _is_ajax_request(self, request: Request) -> bool:
        if request.headers.get("X-Requested-With", "").lower() == "xmlhttprequest":
            return True
        return bool(self.ajax_path) and request.url.path == self.ajax_path

    def _is_authenticated(self, request: Request) -> bool:
        user = request.scope.get("user")
        return bool(user is not None and getattr(user, "is_authenticated", False))

    def _build_guard_request(self, request: Request) -> GuardRequest:
        return GuardRequest(
            cookie_value=request.cookies.get(self.cookie_name),
            query_token=request.query_params.get(TOKEN_QUERY_PARAM),
            is_rest_request=self._is_rest_request(request),
            is_ajax_request=self._is_ajax_request(request),
            is_authenticated=self._is_authenticated(request),
        )

    def _apply(self, result: GuardResult, request: Request, response: Response) -> Response:
        apply_cookie_action(
            result,
            response,
            secure=request.url.scheme == "https",
            cookie_name=self.cookie_name,
            max_age=self.cookie_max_age,
        )
        return response

    async def dispatch(self, request: Request, call_next):
        if not self.active:
            return await call_next(request)

        if self.site_host is None and not should_guard(
            request.headers.get("host"), self.temp_domains
        ):
            return await call_next(request)

        result = self.guard.check_request(self._build_guard_request(request))

        if not result.allowed:
            logger.warning(
                "domain_token_guard_blocked",
                path=request.url.path,
                reason=result.reason.value if result.reason else None,
            )
            response = create_denial_response(
                result.message,
                code=result.reason.value.upper() if result.reason else "ACCESS_DENIED",
            )
            return self._apply(result, request, response)

        response = await call_next(request)
        return self._apply(result, request, response)
