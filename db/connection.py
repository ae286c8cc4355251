"""
db/connection.py
----------------
Hands out PostgreSQL connections, one per repository call.
Pooling (if any) is left to the driver; this module keeps no shared state
beyond the validated connection string.
"""

from typing import Any, Callable, Optional

import psycopg2
from psycopg2 import extensions

from exceptions import ConfigurationError
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionHandle:
    """
    A not-yet-opened connection to the store.

    Use it as a context manager: entering opens the driver connection,
    leaving commits (or rolls back on error) and always closes it.
    """

    def __init__(self, dsn: str, connect: Callable[..., Any]):
        self._dsn = dsn
        self._connect = connect
        self._conn: Optional[Any] = None

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def open(self):
        """
        Open the underlying connection (once).

        Returns:
            The DB-API connection object.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        if self._conn is None:
            self._conn = self._connect(self._dsn)
        return self._conn

    def close(self) -> None:
        """Close the underlying connection, if it was opened."""
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        conn = self._conn
        try:
            if conn is not None:
                if exc_type is None:
                    conn.commit()
                else:
                    self._rollback_quietly(conn)
        finally:
            self.close()

    @staticmethod
    def _rollback_quietly(conn) -> None:
        """Roll back after a failure without masking the original error."""
        try:
            conn.rollback()
        except psycopg2.Error as e:
            logger.warning(f"Rollback failed after an earlier error: {e}")


class ConnectionProvider:
    """
    Produces independent, unopened connection handles.

    Built once at startup; the connection string is validated here and
    never again.
    """

    def __init__(self, connection_string: Optional[str], connect: Callable[..., Any] = psycopg2.connect):
        """
        Args:
            connection_string: libpq DSN or ``postgresql://`` URI.
            connect: Driver connect function (``psycopg2.connect`` by default).

        Raises:
            ConfigurationError: If the connection string is empty or malformed.
        """
        if not connection_string or not connection_string.strip():
            raise ConfigurationError("DATABASE_URL is not set.")
        try:
            extensions.parse_dsn(connection_string)
        except psycopg2.ProgrammingError as e:
            raise ConfigurationError(f"DATABASE_URL is malformed: {e}") from e
        self._dsn = connection_string
        self._connect = connect
        logger.info("Database connection provider configured.")

    def create_connection(self) -> ConnectionHandle:
        """Return a fresh, unopened handle. The caller owns its lifecycle."""
        return ConnectionHandle(self._dsn, self._connect)
