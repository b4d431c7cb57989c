"""Error types raised by the gallery tooling and server."""


class GalleryError(Exception):
    """Base class for all photo gallery errors."""


class MalformedHeader(GalleryError, ValueError):
    """Image bytes do not carry a readable PNG or JPEG header."""


class ValidationError(GalleryError, ValueError):
    """User or operator input was rejected (missing photo root, empty password)."""


class AuthMismatch(GalleryError):
    """A submitted password did not produce the expected session token."""


class ReconciliationConflict(GalleryError):
    """Two files claimed the same role under one reconciliation key."""

    def __init__(self, key: str, role: str, kept: str, replaced: str):
        self.key = key
        self.role = role
        self.kept = kept
        self.replaced = replaced
        super().__init__(f"{key}: {role} candidate {replaced} collides with {kept}")


class ConfigurationError(GalleryError):
    """Required configuration is missing or invalid."""
