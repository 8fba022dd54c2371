"""Logging configuration and utilities.

All loggers live under the ``throw_tracker`` namespace so a single call to
``setup_logging`` controls detector, session and sensor output together.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from throw_tracker.core.config import LoggingSettings

NAMESPACE = "throw_tracker"

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
    return handler


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    app_logger = logging.getLogger(NAMESPACE)
    app_logger.setLevel(log_level)
    app_logger.handlers.clear()
    app_logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), log_level))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        app_logger.addHandler(_make_handler(logging.FileHandler(log_path), log_level))

    # asyncio reports slow callbacks at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)


def configure_logging(settings: LoggingSettings, debug: bool = False) -> None:
    """Configure logging from the settings section.

    Args:
        settings: Logging section of the application settings
        debug: Force DEBUG regardless of the configured level
    """
    setup_logging("DEBUG" if debug else settings.level, settings.file)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger under the application namespace
    """
    if not name.startswith(NAMESPACE):
        name = f"{NAMESPACE}.{name}"

    return logging.getLogger(name)
