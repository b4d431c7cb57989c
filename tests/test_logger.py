"""Tests for logging setup and the audit log."""

import logging

from photo_gallery.core.logger import audit_log, get_logger, setup_logging


class TestSetupLogging:
    """Test handler installation."""

    def test_console_only_without_log_dir(self, temp_dir):
        logger = setup_logging("warning")

        assert logger.name == "photo_gallery"
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        assert list(temp_dir.iterdir()) == []

    def test_repeated_setup_replaces_handlers(self):
        setup_logging()
        logger = setup_logging()
        assert len(logger.handlers) == 1

    def test_log_files(self, temp_dir):
        log_dir = temp_dir / "logs"
        setup_logging("INFO", log_dir=log_dir, enable_color=False)

        get_logger("pipeline").error("manifest write failed")
        audit_log("LOGIN_FAILED", client="10.0.0.7")
        for handler in logging.getLogger("photo_gallery").handlers + logging.getLogger("photo_gallery.audit").handlers:
            handler.flush()

        main_log = (log_dir / "photo_gallery.log").read_text(encoding="utf-8")
        assert "manifest write failed" in main_log
        assert "LOGIN_FAILED" not in main_log
        assert "manifest write failed" in (log_dir / "errors.log").read_text(encoding="utf-8")
        assert "AUDIT - [10.0.0.7] LOGIN_FAILED" in (log_dir / "audit.log").read_text(encoding="utf-8")
        assert logging.getLogger("photo_gallery.audit").propagate is False


class TestGetLogger:
    """Test logger naming."""

    def test_namespacing(self):
        assert get_logger().name == "photo_gallery"
        assert get_logger("web.app").name == "photo_gallery.web.app"
        assert get_logger("photo_gallery.web.app").name == "photo_gallery.web.app"


class TestAuditLog:
    """Test audit message formatting."""

    def test_details_are_appended(self, caplog):
        caplog.set_level(logging.INFO, logger="photo_gallery.audit")

        audit_log("LOGOUT", client="testclient", reason="expired")

        record = caplog.records[-1]
        assert record.name == "photo_gallery.audit"
        assert record.getMessage() == "LOGOUT - reason=expired"
        assert record.client == "[testclient] "
