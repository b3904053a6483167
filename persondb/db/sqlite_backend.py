"""SQLite database backend."""
import sqlite3
from typing import Any, Optional, Sequence

from persondb.core.exceptions import ConnectionException, DatabaseException

from .backend_base import BufferedCursor, DatabaseBackend, ExecResult
from .db_utils import bind_positional_args, replace_postgres_placeholders


class SQLiteBackend(DatabaseBackend):
    """SQLite database backend implementation.

    The file engine has no network dependency, so ``connect`` tries once.
    """

    name = "sqlite"

    def __init__(self):
        super().__init__()
        self._connection: Optional[sqlite3.Connection] = None

    def connect(self, dsn: str) -> None:
        try:
            # One handle is shared by every request thread; statements autocommit.
            self._connection = sqlite3.connect(
                dsn,
                check_same_thread=False,
                isolation_level=None,
                uri=dsn.startswith("file:"),
            )
        except sqlite3.Error as e:
            raise ConnectionException(f"cannot open database {dsn}", detail=str(e)) from e
        self.dsn = dsn

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._connection is None:
            raise DatabaseException("database not connected")
        return self._connection

    def _query(self, sql: str, args: Sequence[Any]) -> BufferedCursor:
        sql, params = bind_positional_args(sql, args)
        cursor = self.connection.execute(sql, params)
        try:
            # SQLite steps the statement while rows are fetched.
            return BufferedCursor(cursor.fetchall(), cursor.description)
        finally:
            cursor.close()

    def _execute(self, sql: str, args: Sequence[Any]) -> ExecResult:
        sql, params = bind_positional_args(sql, args)
        cursor = self.connection.execute(sql, params)
        try:
            return ExecResult(cursor.rowcount, cursor.lastrowid)
        finally:
            cursor.close()

    def _execute_script(self, sql: str) -> None:
        self.connection.executescript(replace_postgres_placeholders(sql))

    def _interrupt(self) -> None:
        if self._connection is not None:
            self._connection.interrupt()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
