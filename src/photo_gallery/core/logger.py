"""Logging configuration for the photo gallery."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import colorlog

ROOT_LOGGER = "photo_gallery"
AUDIT_LOGGER = "photo_gallery.audit"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PLAIN_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
AUDIT_FORMAT = "%(asctime)s - AUDIT - %(client)s%(message)s"

LOG_COLORS = {
    'DEBUG': 'cyan',
    'INFO': 'green',
    'WARNING': 'yellow',
    'ERROR': 'red',
    'CRITICAL': 'red,bg_white',
}


def _rotating_handler(path: Path, level: int, formatter: logging.Formatter,
                      max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    enable_color: bool = True,
) -> logging.Logger:
    """Configure the ``photo_gallery`` logger tree.

    Console output always goes to stderr. With ``log_dir`` set, everything is
    also written to ``photo_gallery.log``, errors to ``errors.log`` and login
    events to ``audit.log``; audit records then stay out of the other files.
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    if enable_color:
        console_handler.setFormatter(colorlog.ColoredFormatter(
            "%(log_color)s" + PLAIN_FORMAT, datefmt=DATE_FORMAT, log_colors=LOG_COLORS
        ))
    else:
        console_handler.setFormatter(logging.Formatter(PLAIN_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(console_handler)

    if log_dir is None:
        return logger

    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    file_formatter = logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT)
    logger.addHandler(_rotating_handler(log_dir / "photo_gallery.log", logging.DEBUG, file_formatter))
    logger.addHandler(_rotating_handler(log_dir / "errors.log", logging.ERROR, file_formatter))

    audit_logger = logging.getLogger(AUDIT_LOGGER)
    audit_logger.handlers.clear()
    audit_logger.addHandler(_rotating_handler(
        log_dir / "audit.log", logging.INFO, logging.Formatter(AUDIT_FORMAT, datefmt=DATE_FORMAT),
        max_bytes=50 * 1024 * 1024, backup_count=10,
    ))
    audit_logger.setLevel(logging.INFO)
    audit_logger.propagate = False

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """Get a logger instance under the ``photo_gallery`` namespace."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(AUDIT_LOGGER)


def audit_log(operation: str, client: Optional[str] = None, **details):
    """Record a login, failed login or logout.

    The client address becomes a ``[client]`` prefix in ``audit.log``.
    """
    detail_str = " ".join(f"{k}={v}" for k, v in details.items())
    message = f"{operation} - {detail_str}" if detail_str else operation
    get_audit_logger().info(message, extra={"client": f"[{client}] " if client else ""})
