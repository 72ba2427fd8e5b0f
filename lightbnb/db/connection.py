"""
Database Connection Management

Handles PostgreSQL connections and statement execution.
Provides a context manager for safe connection handling and the executor
that the data-access functions hand their query plans to.
"""

import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

import psycopg2
from psycopg2.extras import RealDictCursor

from ..core.config import DatabaseSettings, get_settings
from ..core.exceptions import DatabaseConnectionError, DatabaseQueryError
from ..core.logger import get_logger

logger = get_logger(__name__)

_NUMBERED_PLACEHOLDER = re.compile(r"\$(\d+)")


class QueryExecutor(Protocol):
    """Anything that runs a ``$n`` template with its params and returns rows."""

    def execute(self, template: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        ...


def to_pyformat(template: str, params: Sequence[Any]) -> Tuple[str, Tuple[Any, ...]]:
    """
    Rewrite ``$n`` placeholders as psycopg2 ``%s`` markers.

    Params are reordered (and repeated) to follow the order in which the
    placeholders occur. Literal ``%`` characters are escaped.

    Raises:
        DatabaseQueryError: if a placeholder has no matching param.
    """
    ordered: List[Any] = []

    def substitute(match: "re.Match") -> str:
        index = int(match.group(1))
        if index < 1 or index > len(params):
            raise DatabaseQueryError(
                "Placeholder has no matching parameter",
                details=f"${index} with {len(params)} params",
            )
        ordered.append(params[index - 1])
        return "%s"

    sql = _NUMBERED_PLACEHOLDER.sub(substitute, template.replace("%", "%%"))
    return sql, tuple(ordered)


def get_db_connection(db_settings: Optional[DatabaseSettings] = None):
    """
    Open a new database connection.
    Uses DATABASE_URL if provided, otherwise uses individual parameters.

    Returns:
        psycopg2.connection: Database connection

    Raises:
        DatabaseConnectionError: if the server cannot be reached.
    """
    db_settings = db_settings or get_settings().database
    try:
        return psycopg2.connect(**db_settings.connect_kwargs())
    except psycopg2.OperationalError as e:
        logger.error(f"Could not connect to database: {e}")
        raise DatabaseConnectionError(details=str(e)) from e


@contextmanager
def get_connection(db_settings: Optional[DatabaseSettings] = None):
    """
    Context manager for database connections. The connection is closed on exit.

    Yields:
        psycopg2.connection: Database connection
    """
    conn = None
    try:
        conn = get_db_connection(db_settings)
        yield conn
    finally:
        if conn:
            conn.close()


def test_connection(db_settings: Optional[DatabaseSettings] = None) -> bool:
    """
    Test database connection.

    Returns:
        True if connection successful, False otherwise
    """
    try:
        with get_connection(db_settings) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1")
            cursor.close()
        logger.info("Database connection test successful")
        return True
    except (DatabaseConnectionError, psycopg2.Error) as e:
        logger.error(f"Database connection test failed: {e}")
        return False


class PostgresExecutor:
    """
    Runs query plans against PostgreSQL, one connection per statement.

    Each statement is committed on success and rolled back on failure.
    """

    def __init__(self, db_settings: Optional[DatabaseSettings] = None):
        self.db_settings = db_settings

    def execute(self, template: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        sql, args = to_pyformat(template, params)

        with get_connection(self.db_settings) as conn:
            cursor = conn.cursor(cursor_factory=RealDictCursor)
            try:
                cursor.execute(sql, args)
                rows = [dict(row) for row in cursor.fetchall()] if cursor.description else []
                conn.commit()
                return rows
            except psycopg2.Error as e:
                logger.error(f"Database error: {e}")
                conn.rollback()
                raise DatabaseQueryError(details=str(e)) from e
            finally:
                cursor.close()


__all__ = [
    "QueryExecutor",
    "PostgresExecutor",
    "to_pyformat",
    "get_db_connection",
    "get_connection",
    "test_connection",
]
