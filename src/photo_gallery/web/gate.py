"""Access gate: every request passes through here before reaching a route."""

from pathlib import Path
from typing import FrozenSet, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response
from starlette.types import ASGIApp

from ..core.logger import get_logger
from .auth import SessionAuthenticator

logger = get_logger(__name__)

LOGIN_PATH = "/login"

PUBLIC_PATHS: FrozenSet[str] = frozenset({
    "/login",
    "/login.html",
    "/logout",
    "/styles.css",
    "/favicon.ico",
})

CONTENT_TYPES = {
    '.html': 'text/html; charset=utf-8',
    '.css': 'text/css; charset=utf-8',
    '.js': 'application/javascript; charset=utf-8',
    '.json': 'application/json; charset=utf-8',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.webp': 'image/webp',
    '.avif': 'image/avif',
    '.svg': 'image/svg+xml',
    '.gif': 'image/gif',
    '.ico': 'image/x-icon',
    '.zip': 'application/zip',
}


class PathTraversalError(PermissionError):
    """A request path resolved outside the served root."""


def redirect(location: str) -> RedirectResponse:
    return RedirectResponse(location, status_code=303)


def resolve_static_path(site_root: Path, request_path: str) -> Path:
    """Map a URL path onto a file below ``site_root``.

    Raises :class:`PathTraversalError` if the resolved path escapes the root.
    """
    root = site_root.resolve()
    try:
        candidate = (root / request_path.lstrip("/")).resolve()
    except (OSError, ValueError) as e:
        raise PathTraversalError(f"Unresolvable path {request_path!r}: {e}") from e

    if candidate != root and root not in candidate.parents:
        raise PathTraversalError(f"Path traversal attempt detected: {request_path!r}")
    return candidate


def content_type_for(path: Path) -> Optional[str]:
    return CONTENT_TYPES.get(path.suffix.lower())


class AccessGateMiddleware(BaseHTTPMiddleware):
    """Redirects unauthorized requests for non-public paths to the login page.

    The authorization result is left on ``request.state.authorized`` for the
    routes behind the gate.
    """

    def __init__(
        self,
        app: ASGIApp,
        authenticator: SessionAuthenticator,
        public_paths: FrozenSet[str] = PUBLIC_PATHS,
    ) -> None:
        super().__init__(app)
        self.authenticator = authenticator
        self.public_paths = public_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        token = request.cookies.get(self.authenticator.cookie_name)
        authorized = self.authenticator.is_authorized(token)
        request.state.authorized = authorized

        if authorized or request.url.path in self.public_paths:
            return await call_next(request)

        logger.debug(f"Unauthorized request for {request.url.path}, redirecting to login")
        return redirect(LOGIN_PATH)
