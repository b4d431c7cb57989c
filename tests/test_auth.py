"""Tests for shared-password session tokens."""

import hashlib
from unittest.mock import patch

import pytest

from photo_gallery.core.config import Config
from photo_gallery.core.exceptions import AuthMismatch, ConfigurationError, ValidationError
from photo_gallery.web.auth import (
    COOKIE_NAME,
    SESSION_MAX_AGE,
    SharedPasswordAuthenticator,
    compute_token,
    derive_session_secret,
)

from conftest import TEST_PASSWORD


def sha256(value):
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class TestTokens:
    """Test token derivation."""

    def test_token_with_custom_secret(self):
        auth = SharedPasswordAuthenticator("hunter2", session_secret="s3cret")
        assert auth.expected_token == sha256("hunter2|s3cret")

    def test_token_with_default_secret(self):
        auth = SharedPasswordAuthenticator("hunter2")
        default_secret = sha256("hunter2photo-gallery-secret")
        assert auth.expected_token == sha256(f"hunter2|{default_secret}")

    def test_default_secret_is_shared_across_instances(self):
        assert SharedPasswordAuthenticator("hunter2").expected_token == \
            SharedPasswordAuthenticator("hunter2").expected_token

    def test_secret_changes_token(self):
        assert SharedPasswordAuthenticator("hunter2", "a").expected_token != \
            SharedPasswordAuthenticator("hunter2", "b").expected_token

    def test_blank_secret_uses_default(self):
        assert derive_session_secret("hunter2", "") == derive_session_secret("hunter2")

    def test_token_is_hex(self):
        token = compute_token("hunter2", "s3cret")
        assert len(token) == 64
        assert set(token) <= set("0123456789abcdef")

    def test_non_ascii_password(self):
        auth = SharedPasswordAuthenticator("pässwörd", session_secret="s")
        assert auth.login("pässwörd") == sha256("pässwörd|s")

    def test_cookie_settings(self):
        auth = SharedPasswordAuthenticator("hunter2")
        assert auth.cookie_name == COOKIE_NAME == "gallery_session"
        assert auth.max_age == SESSION_MAX_AGE == 28800


class TestLogin:
    """Test password submission handling."""

    @pytest.fixture
    def auth(self):
        return SharedPasswordAuthenticator(TEST_PASSWORD, session_secret="test-secret")

    def test_correct_password(self, auth):
        assert auth.login(TEST_PASSWORD) == auth.expected_token

    def test_wrong_password(self, auth):
        with pytest.raises(AuthMismatch):
            auth.login("wrong")

    def test_wrong_password_has_different_token(self, auth):
        assert auth.compute_token("wrong") != auth.expected_token

    def test_password_is_case_sensitive(self, auth):
        with pytest.raises(AuthMismatch):
            auth.login(TEST_PASSWORD.upper())

    def test_empty_submission_rejected_before_hashing(self, auth):
        with patch("photo_gallery.web.auth.compute_token") as mock_compute:
            with pytest.raises(ValidationError, match="Please enter the password"):
                auth.login("")
        mock_compute.assert_not_called()

    def test_is_authorized(self, auth):
        assert auth.is_authorized(auth.expected_token)
        assert not auth.is_authorized(None)
        assert not auth.is_authorized("")
        assert not auth.is_authorized(auth.expected_token + "0")
        assert not auth.is_authorized(TEST_PASSWORD)


class TestConfiguration:
    """Test building the authenticator from configuration."""

    def test_missing_password(self):
        with pytest.raises(ConfigurationError):
            SharedPasswordAuthenticator("")

    def test_missing_password_in_config(self):
        with pytest.raises(ConfigurationError, match="GALLERY_PASSWORD"):
            SharedPasswordAuthenticator.from_config(Config(password=None))

    def test_from_config(self):
        auth = SharedPasswordAuthenticator.from_config(Config(password="hunter2", session_secret="s3cret"))
        assert auth.expected_token == sha256("hunter2|s3cret")

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("GALLERY_PASSWORD", "hunter2")
        monkeypatch.setenv("SESSION_SECRET", "from-env")

        auth = SharedPasswordAuthenticator.from_config(Config())

        assert auth.expected_token == sha256("hunter2|from-env")
