"""PostgreSQL database backend."""
import functools
import logging
import time
from typing import Any, Optional, Tuple

import psycopg2
import psycopg2.extensions

from persondb.core.exceptions import ConnectionException, DatabaseException

from .backend_base import DatabaseBackend, ExecResult
from .db_utils import bind_positional_args

logger = logging.getLogger(__name__)


def retry_on_connect_error(max_attempts=3, initial_backoff=5.0):
    """Decorator to retry connection attempts with exponential backoff.

    Every failed attempt is followed by a wait (5s, 10s, 20s with the
    defaults) before the next attempt or the final ConnectionException.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            last_error = None
            backoff = initial_backoff
            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except psycopg2.OperationalError as e:
                    last_error = e
                    logger.warning(
                        f"Database connection failed on attempt {attempt + 1}/{max_attempts}. "
                        f"Retrying in {backoff:.2f}s..."
                    )
                    time.sleep(backoff)
                    backoff *= 2  # Exponential backoff
            raise ConnectionException(
                f"cannot connect to database after {max_attempts} attempts",
                detail=str(last_error).strip() if last_error else None,
            ) from last_error
        return wrapper
    return decorator


class PostgresBackend(DatabaseBackend):
    """PostgreSQL database backend implementation."""

    name = "postgres"

    def __init__(self, connect_attempts: int = 3, connect_backoff: float = 5.0):
        super().__init__()
        self.connect_attempts = connect_attempts
        self.connect_backoff = connect_backoff
        self._connection: Optional[psycopg2.extensions.connection] = None

    def connect(self, dsn: str) -> None:
        opener = retry_on_connect_error(self.connect_attempts, self.connect_backoff)(self._open)
        try:
            self._connection = opener(dsn)
        except psycopg2.Error as e:
            # Only OperationalError is retried; other driver errors fail at once.
            raise ConnectionException("cannot connect to database", detail=str(e).strip()) from e
        self.dsn = dsn

    @staticmethod
    def _open(dsn: str) -> psycopg2.extensions.connection:
        """Open a connection and ping it."""
        conn = psycopg2.connect(dsn)
        try:
            conn.autocommit = True
            with conn.cursor() as cursor:
                cursor.execute("SELECT 1")
        except Exception:
            conn.close()
            raise
        return conn

    @property
    def connected(self) -> bool:
        return self._connection is not None and not self._connection.closed

    @property
    def target(self) -> str:
        """The DSN in key=value form without the password."""
        if not self.dsn:
            return ""
        params = psycopg2.extensions.parse_dsn(self.dsn)
        params.pop("password", None)
        return psycopg2.extensions.make_dsn(**params)

    @property
    def connection(self) -> psycopg2.extensions.connection:
        if self._connection is None:
            raise DatabaseException("database not connected")
        return self._connection

    def _convert_placeholders(self, sql: str, args: Tuple[Any, ...]) -> Tuple[str, Optional[Tuple[Any, ...]]]:
        """Convert $N placeholders to %s for psycopg2."""
        if not args:
            # Without parameters psycopg2 leaves '%' untouched.
            return sql, None
        return bind_positional_args(sql.replace("%", "%%"), args, marker="%s")

    def _query(self, sql: str, args: Tuple[Any, ...]) -> psycopg2.extensions.cursor:
        # Client-side cursors hold the whole result once execute returns.
        sql, params = self._convert_placeholders(sql, args)
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, params)
        except Exception:
            cursor.close()
            raise
        return cursor

    def _execute(self, sql: str, args: Tuple[Any, ...]) -> ExecResult:
        sql, params = self._convert_placeholders(sql, args)
        with self.connection.cursor() as cursor:
            cursor.execute(sql, params)
            return ExecResult(cursor.rowcount)

    def _execute_script(self, sql: str) -> None:
        with self.connection.cursor() as cursor:
            cursor.execute(sql)

    def _interrupt(self) -> None:
        if self.connected:
            self._connection.cancel()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
