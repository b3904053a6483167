from .backend_base import DatabaseBackend, ExecResult
from .database import close_database, get_backend, get_database, init_database
from .migrations import run_migration
from .postgres_backend import PostgresBackend
from .sqlite_backend import SQLiteBackend

__all__ = [
    "DatabaseBackend",
    "ExecResult",
    "PostgresBackend",
    "SQLiteBackend",
    "close_database",
    "get_backend",
    "get_database",
    "init_database",
    "run_migration",
]
