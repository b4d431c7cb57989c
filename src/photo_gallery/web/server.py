"""Uvicorn launcher for the gallery server."""

import uvicorn

from photo_gallery.core.config import Config
from photo_gallery.core.logger import get_logger
from photo_gallery.web.app import create_app

logger = get_logger(__name__)


def run_server(config: Config, host: str = None, port: int = None, reload: bool = False) -> None:
    """Run the gallery server until interrupted.

    Reload mode needs an import string, so the app factory rebuilds its
    configuration from the environment in the reloaded process.
    """
    host = host or config.host
    port = port or config.port

    if reload:
        uvicorn.run(
            "photo_gallery.web.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=True,
            log_level=config.log_level.lower(),
        )
        return

    # Build eagerly so a missing password fails before the socket is bound
    app = create_app(config)
    logger.info(f"Starting gallery server on http://{host}:{port}")
    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=config.log_level.lower(),
        access_log=True,
    )
