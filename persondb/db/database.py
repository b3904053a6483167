import logging
from typing import Optional

from persondb.core.exceptions import ConfigurationException, DatabaseException

from .backend_base import DatabaseBackend
from .postgres_backend import PostgresBackend
from .sqlite_backend import SQLiteBackend

logger = logging.getLogger(__name__)

_BACKENDS = {
    "sqlite": SQLiteBackend,
    "postgres": PostgresBackend,
}

# Process-wide connection handle shared by every request
_DB_INSTANCE: Optional[DatabaseBackend] = None


def get_backend(connector: str, **options) -> DatabaseBackend:
    """Construct the backend registered under ``connector``.

    ``options`` are passed to the backend constructor; the SQLite backend
    takes none, so they are dropped for it.
    """
    backend_cls = _BACKENDS.get(connector)
    if backend_cls is None:
        raise ConfigurationException(
            f"unknown database connector: {connector}",
            detail=f"expected one of {', '.join(sorted(_BACKENDS))}",
        )
    if backend_cls is SQLiteBackend:
        return SQLiteBackend()
    return backend_cls(**options)


def init_database(backend: DatabaseBackend) -> DatabaseBackend:
    """Install ``backend`` as the shared connection handle."""
    global _DB_INSTANCE

    if _DB_INSTANCE is not None and _DB_INSTANCE is not backend:
        logger.warning("Replacing existing database handle")
        _DB_INSTANCE.close()
    _DB_INSTANCE = backend
    return _DB_INSTANCE


def get_database() -> DatabaseBackend:
    """FastAPI dependency for database access (singleton pattern)"""
    if _DB_INSTANCE is None:
        raise DatabaseException("database not initialized")
    return _DB_INSTANCE


def close_database() -> None:
    """Close and forget the shared connection handle."""
    global _DB_INSTANCE

    if _DB_INSTANCE is not None:
        logger.info("Closing database connection")
        _DB_INSTANCE.close()
        _DB_INSTANCE = None
