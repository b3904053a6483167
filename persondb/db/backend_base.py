"""Abstract base class for database backends."""
import functools
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

import anyio
import anyio.to_thread

from persondb.core.exceptions import DatabaseException


class ExecResult(NamedTuple):
    """Summary of a write statement."""

    rowcount: int
    lastrowid: Optional[int] = None


class BufferedCursor:
    """Read-only cursor over rows that were fetched while the statement ran."""

    def __init__(self, rows: Sequence[Any], description: Any = None):
        self._rows: List[Any] = list(rows)
        self._position = 0
        self.description = description
        self.rowcount = len(self._rows)

    def fetchone(self) -> Optional[Any]:
        if self._position >= len(self._rows):
            return None
        row = self._rows[self._position]
        self._position += 1
        return row

    def fetchmany(self, size: int = 1) -> List[Any]:
        rows = self._rows[self._position:self._position + size]
        self._position += len(rows)
        return rows

    def fetchall(self) -> List[Any]:
        rows = self._rows[self._position:]
        self._position = len(self._rows)
        return rows

    def __iter__(self):
        return iter(self.fetchall())

    def close(self) -> None:
        self._rows = []
        self._position = 0


class StatementTicket:
    """Identifies one cancellable statement on a shared connection."""

    def __init__(self):
        self.cancelled = False


class DatabaseBackend(ABC):
    """Abstract database backend interface.

    Statements are written with PostgreSQL ``$N`` placeholders; each backend
    converts them to what its driver expects.

    One connection is shared by every request, and both drivers interrupt
    whatever runs on a connection. Statements therefore run one at a time
    under ``_statement_lock``, and an interrupt is only sent while the
    statement that asked for it owns the connection.
    """

    name: str = ""

    def __init__(self):
        self.dsn: Optional[str] = None
        self._statement_lock = threading.Lock()
        self._owner_lock = threading.Lock()
        self._owner: Optional[StatementTicket] = None

    @abstractmethod
    def connect(self, dsn: str) -> None:
        """Open the connection handle for ``dsn``."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the connection. A no-op when not connected."""
        pass

    @property
    @abstractmethod
    def connected(self) -> bool:
        pass

    @abstractmethod
    def _query(self, sql: str, args: Sequence[Any]) -> Any:
        """Run a read statement; the result must not touch the connection again."""
        pass

    @abstractmethod
    def _execute(self, sql: str, args: Sequence[Any]) -> ExecResult:
        pass

    @abstractmethod
    def _execute_script(self, sql: str) -> None:
        pass

    @abstractmethod
    def _interrupt(self) -> None:
        """Abort the statement running on the connection."""
        pass

    def _run_statement(
        self, func: Callable[..., Any], *args: Any, ticket: Optional[StatementTicket] = None
    ) -> Any:
        with self._statement_lock:
            with self._owner_lock:
                if ticket is not None and ticket.cancelled:
                    raise DatabaseException("statement cancelled before it started")
                self._owner = ticket
            try:
                return func(*args)
            finally:
                with self._owner_lock:
                    self._owner = None

    def query(self, sql: str, *args: Any) -> Any:
        """Execute a read statement and return a DB-API style cursor.

        The caller owns the cursor and must close it.
        """
        return self._run_statement(self._query, sql, args)

    def execute(self, sql: str, *args: Any) -> ExecResult:
        """Execute a write statement."""
        return self._run_statement(self._execute, sql, args)

    def execute_script(self, sql: str) -> None:
        """Execute a script that may contain several statements."""
        self._run_statement(self._execute_script, sql)

    def interrupt(self, ticket: StatementTicket) -> None:
        """Cancel the statement identified by ``ticket``.

        A statement still waiting for the connection never starts; one that
        is running is aborted. Statements of other callers are not affected.
        """
        with self._owner_lock:
            ticket.cancelled = True
            if self._owner is ticket:
                self._interrupt()

    async def execute_async(self, sql: str, *args: Any) -> ExecResult:
        """Run :meth:`execute` on a worker thread, bound to the calling task.

        When the awaiting task is cancelled this statement is interrupted
        and the cancellation is re-raised.
        """
        ticket = StatementTicket()
        try:
            return await anyio.to_thread.run_sync(
                functools.partial(self._run_statement, self._execute, sql, args, ticket=ticket),
                abandon_on_cancel=True,
            )
        except anyio.get_cancelled_exc_class():
            self.interrupt(ticket)
            raise

    @property
    def target(self) -> str:
        """Connection target safe to show in logs."""
        return self.dsn or ""

    def __repr__(self):
        state = "connected" if self.connected else "closed"
        return f"<{self.__class__.__name__} {self.name} {self.target} {state}>"
