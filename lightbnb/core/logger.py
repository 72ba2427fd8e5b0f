"""
Logging for the LightBnB data layer

All loggers hang off the ``lightbnb`` logger, whose level and handlers come
from ``LoggingSettings`` (``LOG_LEVEL`` / ``LOG_FILE``, environment or .env).
Console lines carry [OK], [WARNING], [ERROR] prefixes; the optional log file
gets timestamped lines.

Usage:
    from lightbnb.core.logger import get_logger
    logger = get_logger(__name__)

    logger.info("Retrieved 4 properties")   # [OK] Retrieved 4 properties
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .config import LoggingSettings, get_settings

ROOT_LOGGER_NAME = "lightbnb"

# Handler names, so a reconfigure only replaces what it installed
_CONSOLE_HANDLER = "lightbnb.console"
_FILE_HANDLER = "lightbnb.file"

_configured = False


class PrefixFormatter(logging.Formatter):
    """Renders records as ``[OK] message``, ``[ERROR] message`` and so on."""

    LEVEL_PREFIXES = {
        logging.DEBUG: "[DEBUG]",
        logging.INFO: "[OK]",
        logging.WARNING: "[WARNING]",
        logging.ERROR: "[ERROR]",
        logging.CRITICAL: "[CRITICAL]",
    }

    def formatMessage(self, record: logging.LogRecord) -> str:
        prefix = self.LEVEL_PREFIXES.get(record.levelno, "[INFO]")
        return f"{prefix} {record.message}"


def configure_logging(logging_settings: Optional[LoggingSettings] = None) -> logging.Logger:
    """
    Apply level and handlers to the ``lightbnb`` logger.

    Safe to call again (e.g. after settings change): handlers installed by a
    previous call are replaced, handlers added by the host app are kept.
    Records still propagate, so an application's own logging config and
    pytest's caplog see them.

    Args:
        logging_settings: Defaults to ``get_settings().logging``.
    """
    global _configured

    logging_settings = logging_settings or get_settings().logging
    level = logging.getLevelName(logging_settings.log_level)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        if handler.get_name() in (_CONSOLE_HANDLER, _FILE_HANDLER):
            root_logger.removeHandler(handler)
            handler.close()

    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.set_name(_CONSOLE_HANDLER)
    console_handler.setFormatter(PrefixFormatter())
    root_logger.addHandler(console_handler)

    if logging_settings.log_file:
        log_path = Path(logging_settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.set_name(_FILE_HANDLER)
        file_handler.setFormatter(logging.Formatter(
            "[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
            "%Y-%m-%d %H:%M:%S",
        ))
        root_logger.addHandler(file_handler)

    _configured = True
    return root_logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get the logger for a module, e.g. ``get_logger(__name__)``.

    ``lightbnb.db.search`` and ``db.search`` both map to the
    ``lightbnb.db.search`` logger. With no name, the ``lightbnb`` logger.
    """
    if not _configured:
        configure_logging()

    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    prefix = f"{ROOT_LOGGER_NAME}."
    if name.startswith(prefix):
        name = name[len(prefix):]
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


logger = get_logger()


__all__ = [
    "logger",
    "get_logger",
    "configure_logging",
    "PrefixFormatter",
    "ROOT_LOGGER_NAME",
]
