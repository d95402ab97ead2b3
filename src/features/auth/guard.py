"""Route guard for dashboard pages."""

import logging

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """
    Redirect to login when a protected path is requested without a session cookie.

    Only presence is checked. Whether the cookie still maps to a live session
    is decided later, when a view asks the session provider.
    """

    def __init__(
        self,
        app: ASGIApp,
        cookie_name: str,
        login_url: str = "/login",
        protected_prefixes: tuple[str, ...] = ("/dashboard",),
    ):
        super().__init__(app)
        self.cookie_name = cookie_name
        self.login_url = login_url
        self.protected_prefixes = protected_prefixes

    def is_protected(self, path: str) -> bool:
        return any(
            path == prefix or path.startswith(prefix + "/")
            for prefix in self.protected_prefixes
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if not self.is_protected(request.url.path):
            return await call_next(request)

        try:
            cookie = request.cookies.get(self.cookie_name)
        except Exception:
            logger.exception("Could not read cookies for %s", request.url.path)
            cookie = None

        if not cookie:
            return RedirectResponse(url=self.login_url, status_code=307)

        return await call_next(request)
