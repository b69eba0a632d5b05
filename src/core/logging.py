"""
PetAlert - Logging Configuration

Modules log through logging.getLogger(__name__), so every logger in the
project hangs off the top-level package logger configured here.
"""

import logging
import sys
from typing import Optional

from src.core.config import settings

APP_LOGGER = __name__.split(".")[0]

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"

# Chatty at INFO; only shown when running with DEBUG=true
QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "uvicorn.access")


def setup_logging(level: Optional[str] = None, debug: Optional[bool] = None) -> logging.Logger:
    """
    Configure the stdout handler and the project's log levels.

    Args:
        level: Level for project loggers (default LOG_LEVEL setting)
        debug: Let third-party loggers through at INFO (default DEBUG setting)

    Returns:
        The top-level project logger
    """
    log_level = getattr(logging, (level or settings.log_level).upper())
    debug = settings.debug if debug is None else debug

    # No-op when handlers are already installed (uvicorn, pytest)
    logging.basicConfig(
        level=logging.WARNING,
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO if debug else logging.WARNING)

    return app_logger
