"""Password-gated gallery web server."""

from .auth import COOKIE_NAME, SessionAuthenticator, SharedPasswordAuthenticator
from .gate import PUBLIC_PATHS, AccessGateMiddleware

__all__ = [
    'COOKIE_NAME',
    'SessionAuthenticator',
    'SharedPasswordAuthenticator',
    'PUBLIC_PATHS',
    'AccessGateMiddleware',
]
