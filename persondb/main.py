"""
FastAPI application for persondb

Records randomly generated persons into SQLite or PostgreSQL and lists the
most recent ones. ``main`` parses flags, opens and migrates the database,
then serves HTTP with uvicorn until interrupted.
"""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from persondb import __version__
from persondb.core.config import Settings, parse_bind_address
from persondb.core.exception_handlers import (
    general_exception_handler,
    persondb_exception_handler,
    starlette_http_exception_handler,
)
from persondb.core.exceptions import PersonDBException
from persondb.db import close_database, get_backend, init_database, run_migration
from persondb.db.backend_base import DatabaseBackend
from persondb.routes import persons

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI application"""
    logger.info("Starting persondb")

    yield

    # Shutdown
    close_database()
    logger.info("Shutting down persondb")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the FastAPI app; the database handle is installed separately."""
    app = FastAPI(
        title="persondb",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings or Settings()

    app.add_exception_handler(PersonDBException, persondb_exception_handler)
    app.add_exception_handler(StarletteHTTPException, starlette_http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    app.include_router(persons.router)
    return app


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="persondb",
        description="Serve a list of generated persons from SQLite or PostgreSQL",
    )
    # Defaults live in Settings so PERSONDB_* environment variables still apply.
    parser.add_argument("--dsn", help="datasource name")
    parser.add_argument("--addr", help="bind address (default :8080)")
    parser.add_argument(
        "--db", help="database connector: sqlite or postgres (default sqlite)"
    )
    parser.add_argument("--log-level", dest="log_level", help="logging level (default INFO)")
    return parser.parse_args(argv)


def load_settings(argv: Optional[List[str]] = None) -> Settings:
    """Settings from the environment, overridden by command line flags."""
    args = parse_args(argv)
    overrides = {key: value for key, value in vars(args).items() if value is not None}
    return Settings(**overrides)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def open_database(settings: Settings) -> DatabaseBackend:
    """Connect the configured backend, migrate it and install it as the shared handle."""
    backend = get_backend(
        settings.db,
        connect_attempts=settings.connect_attempts,
        connect_backoff=settings.connect_backoff,
    )
    backend.connect(settings.dsn)
    logger.info(f"{backend.name} database opened: {backend!r}")

    try:
        run_migration(backend, settings.db)
    except Exception:
        backend.close()
        raise

    return init_database(backend)


def format_error(exc: PersonDBException) -> str:
    if exc.detail and exc.detail not in exc.message:
        return f"{exc.message}: {exc.detail}"
    return exc.message


def main(argv: Optional[List[str]] = None) -> int:
    """Run the server; returns the process exit status."""
    try:
        settings = load_settings(argv)
    except ValidationError as e:
        print(f"invalid configuration: {e}", file=sys.stderr)
        return 1
    configure_logging(settings.log_level)

    try:
        settings.validate_required()
        host, port = parse_bind_address(settings.addr)
        open_database(settings)
    except PersonDBException as e:
        print(format_error(e), file=sys.stderr)
        return 1

    app = create_app(settings)
    logger.info(f"http server listening on {settings.addr}")
    try:
        uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    finally:
        close_database()
    return 0


def cli() -> None:
    sys.exit(main())


app = create_app()


if __name__ == "__main__":
    cli()
