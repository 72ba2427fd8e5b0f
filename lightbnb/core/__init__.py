"""
Core module for the LightBnB data layer.

Contains centralized configuration, logging and exceptions.
"""

from .config import settings, get_settings, Settings
from .logger import logger, get_logger
from .exceptions import (
    LightBnBError,
    ValidationError,
    InvalidLimitError,
    InvalidCriteriaError,
    InvalidRecordError,
    DatabaseConnectionError,
    DatabaseQueryError,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    "Settings",
    # Logger
    "logger",
    "get_logger",
    # Exceptions
    "LightBnBError",
    "ValidationError",
    "InvalidLimitError",
    "InvalidCriteriaError",
    "InvalidRecordError",
    "DatabaseConnectionError",
    "DatabaseQueryError",
]
