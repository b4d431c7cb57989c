"""Pytest configuration and fixtures."""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from photo_gallery.core.config import Config, reset_config
from photo_gallery.web.app import create_app
from photo_gallery.web.auth import SharedPasswordAuthenticator

from image_bytes import make_png

TEST_PASSWORD = "correct horse battery staple"


@pytest.fixture(autouse=True)
def clean_global_config():
    """Keep the global configuration from leaking between tests."""
    reset_config()
    yield
    reset_config()
    for name in ("photo_gallery", "photo_gallery.audit"):
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
    logging.getLogger("photo_gallery.audit").propagate = True


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Hosting variables from the surrounding shell must not reach the tests."""
    for name in ("PORT", "SESSION_SECRET", "GALLERY_PASSWORD", "GALLERY_SESSION_SECRET",
                 "GALLERY_PORT", "GALLERY_ASSETS_DIR", "GALLERY_SITE_ROOT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    temp_dir = Path(tempfile.mkdtemp())
    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def assets_dir(temp_dir):
    """Empty assets/photos tree."""
    assets = temp_dir / "assets"
    (assets / "photos").mkdir(parents=True)
    return assets


@pytest.fixture
def write_photo(assets_dir):
    """Write image bytes below assets/photos and return the path."""
    def _write(relative_path: str, data: bytes = b"") -> Path:
        path = assets_dir / "photos" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    return _write


@pytest.fixture
def site_root(temp_dir):
    """A small static site as the server would serve it."""
    root = temp_dir / "site"
    (root / "assets" / "photos").mkdir(parents=True)
    (root / "scripts").mkdir()
    (root / "index.html").write_text("<html><body>gallery index</body></html>")
    (root / "styles.css").write_text("body { margin: 0; }")
    (root / "app.js").write_text("console.log('gallery');")
    (root / "assets" / "gallery.json").write_text('{"photos": []}')
    (root / "assets" / "photos" / "beach.png").write_bytes(make_png(4, 3))
    (root / "scripts" / "generate.txt").write_text("script")
    (temp_dir / "secret.txt").write_text("outside the site root")
    return root


@pytest.fixture
def test_config(temp_dir, site_root, assets_dir):
    """Create test configuration."""
    return Config(
        password=TEST_PASSWORD,
        session_secret="test-secret",
        site_root=site_root,
        assets_dir=assets_dir,
    )


@pytest.fixture
def authenticator(test_config):
    return SharedPasswordAuthenticator.from_config(test_config)


@pytest.fixture
def test_client(test_config, authenticator):
    """TestClient for the gallery app; redirects are not followed."""
    app = create_app(test_config, authenticator=authenticator)
    with TestClient(app, follow_redirects=False) as client:
        yield client


@pytest.fixture
def authorized_client(test_client, authenticator):
    """TestClient carrying a valid session cookie."""
    test_client.cookies.set(authenticator.cookie_name, authenticator.expected_token)
    return test_client


# Markers for different test categories
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
