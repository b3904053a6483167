"""Startup schema migration, one idempotent script per backend."""
import functools
import logging
from pathlib import Path

from persondb.core.exceptions import MigrationException

from .backend_base import DatabaseBackend

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "schema"


@functools.lru_cache(maxsize=None)
def load_schema(connector: str) -> str:
    """Return the schema script for ``connector``; read once per process."""
    schema_path = SCHEMA_DIR / f"schema.{connector}.sql"
    try:
        return schema_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise MigrationException(f"no schema script for connector: {connector}") from e


def run_migration(backend: DatabaseBackend, connector: str) -> None:
    """Apply the schema script; failure must stop the server from starting."""
    schema_sql = load_schema(connector)
    try:
        backend.execute_script(schema_sql)
    except Exception as e:
        raise MigrationException(f"cannot migrate schema: {e}", detail=str(e)) from e
    logger.info(f"Schema migration applied for {connector}")
