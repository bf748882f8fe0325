"""Edge routing guard — cookie-gated redirects plus fixed security headers."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from listing_pipeline.outcome import Continue, Redirect

logger = logging.getLogger(__name__)

AUTH_COOKIE_NAME = "authToken"
FALLBACK_PATH = "/real-estate"

PROTECTED_PREFIXES: tuple[str, ...] = (
    "/real-estate/my-properties",
    "/real-estate/account-infoo",
    "/agent/dashboard",
)

# Note: add-property is matched here but is not in PROTECTED_PREFIXES.
DEFAULT_MATCHER: tuple[str, ...] = (
    "/real-estate/add-property/:path*",
    "/real-estate/my-properties/:path*",
    "/real-estate/account-infoo/:path*",
    "/agent/dashboard/:path*",
)

SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
}

_WILDCARD = "/:path*"


def matches_pattern(path: str, pattern: str) -> bool:
    """Match ``path`` against ``/prefix/:path*`` (prefix and below) or an exact path."""
    if pattern.endswith(_WILDCARD):
        base = pattern[: -len(_WILDCARD)]
        return path == base or path.startswith(base + "/")
    return path == pattern


@dataclass(frozen=True)
class RouteGuard:
    """Decides redirect vs. continue from the path and auth token alone.

    The token is checked for presence only. ``matcher`` restricts which
    paths the guard looks at; ``None`` means every path.
    """

    protected_prefixes: tuple[str, ...] = PROTECTED_PREFIXES
    fallback_path: str = FALLBACK_PATH
    cookie_name: str = AUTH_COOKIE_NAME
    matcher: tuple[str, ...] | None = None

    def applies_to(self, path: str) -> bool:
        if self.matcher is None:
            return True
        return any(matches_pattern(path, pattern) for pattern in self.matcher)

    def is_protected(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.protected_prefixes)

    def decide(self, path: str, token: str | None) -> Continue | Redirect:
        if self.is_protected(path) and not token:
            return Redirect(self.fallback_path)
        return Continue()


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Starlette middleware applying a RouteGuard to every inbound request."""

    def __init__(self, app: ASGIApp, guard: RouteGuard | None = None) -> None:
        super().__init__(app)
        self.guard = guard or RouteGuard()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if not self.guard.applies_to(path):
            return await call_next(request)

        decision = self.guard.decide(path, request.cookies.get(self.guard.cookie_name))
        if isinstance(decision, Redirect):
            logger.info("Unauthenticated request to %s; redirecting", path)
            target = request.url.replace(path=decision.location, query="")
            return RedirectResponse(url=str(target), status_code=decision.status_code)

        response = await call_next(request)
        apply_security_headers(response, SECURITY_HEADERS)
        return response


def apply_security_headers(response: Response, headers: dict[str, str]) -> None:
    for name, value in headers.items():
        response.headers[name] = value
