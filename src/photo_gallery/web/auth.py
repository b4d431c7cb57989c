"""Shared-password session authentication.

The session token is ``sha256(password + "|" + secret)`` in hex. When no
secret is configured it is derived from the password and a fixed application
salt, so two deployments sharing a password and no custom secret also share
tokens; the password remains the real secret.
"""

import hashlib
from abc import ABC, abstractmethod
from typing import Optional

from ..core.config import Config
from ..core.exceptions import AuthMismatch, ConfigurationError, ValidationError
from ..core.logger import get_logger

logger = get_logger(__name__)

COOKIE_NAME = "gallery_session"
SESSION_MAX_AGE = 60 * 60 * 8
DEFAULT_SESSION_SALT = "photo-gallery-secret"


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def derive_session_secret(password: str, session_secret: Optional[str] = None) -> str:
    """Operator secret if given, else a hash of the password and the fixed salt."""
    if session_secret:
        return session_secret
    return sha256_hex(password + DEFAULT_SESSION_SALT)


def compute_token(value: str, session_secret: str) -> str:
    return sha256_hex(f"{value}|{session_secret}")


class SessionAuthenticator(ABC):
    """Issues and checks the session cookie value.

    The access gate only talks to this interface.
    """

    cookie_name: str = COOKIE_NAME
    max_age: int = SESSION_MAX_AGE

    @abstractmethod
    def login(self, submitted: str) -> str:
        """Return the cookie value for a correct submission.

        Raises :class:`ValidationError` for an empty submission and
        :class:`AuthMismatch` for a wrong one.
        """

    @abstractmethod
    def is_authorized(self, token: Optional[str]) -> bool:
        """Check a cookie value taken from a request."""


class SharedPasswordAuthenticator(SessionAuthenticator):
    """Single shared password, plain string comparison of derived tokens."""

    def __init__(self, password: str, session_secret: Optional[str] = None):
        if not password:
            raise ConfigurationError("Gallery password is not set (GALLERY_PASSWORD)")
        self._session_secret = derive_session_secret(password, session_secret)
        self._expected_token = compute_token(password, self._session_secret)

    @classmethod
    def from_config(cls, config: Config) -> "SharedPasswordAuthenticator":
        return cls(config.password or "", config.session_secret)

    @property
    def expected_token(self) -> str:
        return self._expected_token

    def compute_token(self, value: str) -> str:
        return compute_token(value, self._session_secret)

    def login(self, submitted: str) -> str:
        if not submitted:
            raise ValidationError("Please enter the password.")

        if self.compute_token(submitted) != self._expected_token:
            raise AuthMismatch("Incorrect password.")

        return self._expected_token

    def is_authorized(self, token: Optional[str]) -> bool:
        if not token:
            return False
        return token == self._expected_token
