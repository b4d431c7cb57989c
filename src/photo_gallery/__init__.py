"""Photo Gallery - password-protected static gallery server and manifest generator."""

__version__ = "0.1.0"
__author__ = "Photo Gallery Team"
__description__ = "Password-protected photo gallery with an offline manifest generator"

from .core.config import Config, get_config
from .core.logger import get_logger, setup_logging

__all__ = [
    'Config',
    'get_config',
    'get_logger',
    'setup_logging',
]
