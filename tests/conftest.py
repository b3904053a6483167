"""
PyTest configuration and shared fixtures for persondb tests
"""

import threading

import pytest
from fastapi.testclient import TestClient

from persondb.core.config import Settings
from persondb.db import database as database_module
from persondb.db.backend_base import ExecResult
from persondb.db.database import init_database
from persondb.db.migrations import run_migration
from persondb.db.sqlite_backend import SQLiteBackend
from persondb.main import create_app


@pytest.fixture(scope="function", autouse=True)
def clear_database_cache():
    """Clear the global database handle between tests"""
    database_module._DB_INSTANCE = None

    yield

    if database_module._DB_INSTANCE is not None:
        database_module._DB_INSTANCE.close()
    database_module._DB_INSTANCE = None


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep PERSONDB_* and region variables from the host out of the tests"""
    for name in (
        "PERSONDB_DSN",
        "PERSONDB_ADDR",
        "PERSONDB_DB",
        "PERSONDB_LOG_LEVEL",
        "PERSONDB_CONNECT_ATTEMPTS",
        "PERSONDB_CONNECT_BACKOFF",
        "PERSONDB_REGION_ENV_VAR",
        "FLY_REGION",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="function")
def db_path(tmp_path):
    """Path of a fresh SQLite database file"""
    return str(tmp_path / "persons.db")


@pytest.fixture(scope="function")
def sqlite_backend(db_path):
    """Connected SQLite backend without schema"""
    backend = SQLiteBackend()
    backend.connect(db_path)
    yield backend
    backend.close()


@pytest.fixture(scope="function")
def migrated_backend(sqlite_backend):
    """Connected SQLite backend with the persons table"""
    run_migration(sqlite_backend, "sqlite")
    return sqlite_backend


@pytest.fixture(scope="function")
def test_settings(db_path):
    return Settings(dsn=db_path, db="sqlite", addr=":8080", log_level="DEBUG")


@pytest.fixture(scope="function")
def region(monkeypatch):
    """Run the app as if deployed in the iad region"""
    monkeypatch.setenv("FLY_REGION", "iad")
    return "iad"


@pytest.fixture(scope="function")
def test_client_with_app(test_settings, migrated_backend, region):
    """Test client backed by a migrated SQLite file - returns both client and app"""
    init_database(migrated_backend)
    app = create_app(test_settings)
    client = TestClient(app)
    yield client, app
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def test_client(test_client_with_app):
    client, _ = test_client_with_app
    return client


def insert_persons(backend, *people):
    """Insert ``(name, phone, company)`` tuples in order"""
    for name, phone, company in people:
        backend.execute(
            "INSERT INTO persons (name, phone, company) VALUES ($1, $2, $3)",
            name,
            phone,
            company,
        )


def count_persons(backend):
    cursor = backend.query("SELECT COUNT(*) FROM persons")
    try:
        return cursor.fetchone()[0]
    finally:
        cursor.close()


class BlockingSQLiteBackend(SQLiteBackend):
    """Backend whose writes block until their statement is interrupted"""

    def __init__(self):
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()
        self.interrupted = False

    def _execute(self, sql, args):
        self.started.set()
        self.release.wait(5)
        return ExecResult(0)

    def _interrupt(self):
        self.interrupted = True
        self.release.set()
