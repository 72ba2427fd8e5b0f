"""
Custom Exceptions for the LightBnB data layer

Provides domain-specific exceptions for validation and database failures.

Usage:
    from lightbnb.core.exceptions import InvalidLimitError

    if limit <= 0:
        raise InvalidLimitError(limit)
"""

from typing import Optional, Any


class LightBnBError(Exception):
    """
    Base exception for all LightBnB data-layer errors.

    All custom exceptions inherit from this class, allowing
    catch-all handling when needed.
    """

    def __init__(
        self,
        message: str = "LightBnB error occurred",
        details: Optional[Any] = None,
    ):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ValidationError(LightBnBError):
    """Raised when caller input is rejected before any SQL is built."""

    def __init__(
        self,
        field: str,
        message: str = "Invalid input",
        details: Optional[Any] = None,
    ):
        self.field = field
        super().__init__(f"{message}: {field}", details)


class InvalidLimitError(ValidationError):
    """Raised when a result limit is not a positive integer."""

    def __init__(
        self,
        limit: Any,
        message: str = "Limit must be a positive integer",
    ):
        self.limit = limit
        super().__init__("limit", message, details=f"got {limit!r}")


class InvalidCriteriaError(ValidationError):
    """Raised when a search criterion has the wrong type or value."""

    def __init__(
        self,
        field: str,
        value: Any = None,
        message: str = "Invalid search criterion",
        details: Optional[Any] = None,
    ):
        self.value = value
        super().__init__(field, message, details)


class InvalidRecordError(ValidationError):
    """Raised when a record to insert is missing a required field."""

    def __init__(
        self,
        field: str,
        message: str = "Missing required field",
        details: Optional[Any] = None,
    ):
        super().__init__(field, message, details)


class DatabaseConnectionError(LightBnBError):
    """Raised when database connection fails."""

    def __init__(
        self,
        message: str = "Database connection failed",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


class DatabaseQueryError(LightBnBError):
    """Raised when a database query fails."""

    def __init__(
        self,
        message: str = "Database query failed",
        details: Optional[Any] = None,
    ):
        super().__init__(message, details)


__all__ = [
    "LightBnBError",
    "ValidationError",
    "InvalidLimitError",
    "InvalidCriteriaError",
    "InvalidRecordError",
    "DatabaseConnectionError",
    "DatabaseQueryError",
]
