"""Logging setup for the cliptagger CLI.

Records go to a rotating file only; writing them to the terminal would corrupt
the interactive screens.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from cliptagger.config import DEFAULT_LOG_PATH
from cliptagger.config.models import LoggingSettings

LOGGER_NAME = "cliptagger"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_log_path(settings: LoggingSettings) -> Path:
    """Return the log file path configured in ``settings``."""
    return Path(settings.file or DEFAULT_LOG_PATH).expanduser()


def configure_logging(settings: LoggingSettings, log_path: Path | None = None) -> logging.Logger:
    """Attach a rotating file handler to the package logger.

    Calling this again replaces the previous handler, so tests and repeated CLI
    invocations in one process do not stack handlers.

    Args:
        settings: Logging section of the configuration.
        log_path: Explicit log file, overriding ``settings.file``.

    Returns:
        logging.Logger: The configured ``cliptagger`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    level = logging.getLevelName(settings.level.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    path = log_path or resolve_log_path(settings)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            path,
            maxBytes=settings.max_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "configure_logging", "resolve_log_path"]
