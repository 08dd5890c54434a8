from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from .settings import Settings

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"

_ROOT_LOGGER = "todo_api"

# Server loggers routed through the application handlers
_SERVER_LOGGERS = ("uvicorn", "uvicorn.access")

# One file per level, mirroring the console output
_LEVEL_FILES = (
    ("info.log", logging.INFO),
    ("warn.log", logging.WARNING),
    ("error.log", logging.ERROR),
)


class _ExactLevelFilter(logging.Filter):
    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno == self._level


# PUBLIC_INTERFACE
def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the application namespace."""
    if not name or name == _ROOT_LOGGER:
        return logging.getLogger(_ROOT_LOGGER)
    if name.startswith(_ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_ROOT_LOGGER}.{name}")


# PUBLIC_INTERFACE
def configure_logging(settings: Settings) -> logging.Logger:
    """
    Configure the application logger from settings.

    Logs always go to stdout. When LOG_DIR is set, info/warn/error records are
    also appended to one file per level inside that directory. Calling this
    again replaces the previously installed handlers. The uvicorn server and
    access loggers are given the same handlers so server output shares the format.
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    if settings.log_dir:
        os.makedirs(settings.log_dir, exist_ok=True)
        for filename, level in _LEVEL_FILES:
            file_handler = logging.FileHandler(os.path.join(settings.log_dir, filename), encoding="utf-8")
            file_handler.setFormatter(formatter)
            file_handler.addFilter(_ExactLevelFilter(level))
            logger.addHandler(file_handler)

    for name in _SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = list(logger.handlers)
        server_logger.setLevel(logger.level)
        server_logger.propagate = False

    return logger
