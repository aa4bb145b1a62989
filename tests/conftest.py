"""Shared fixtures for persistence-benchmark tests."""

from __future__ import annotations

import os
import tempfile

import pytest

from persistence_benchmark.backends import (
    APSWBackend,
    BaseBackend,
    MemoryBackend,
    ScopedSQLiteBackend,
    SQLiteBackend,
)


@pytest.fixture
def db_path():
    """Create a temporary database file."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    yield path
    # Cleanup database and WAL files
    for suffix in ["", "-wal", "-shm"]:
        try:
            os.unlink(path + suffix)
        except OSError:
            pass


def _pysqlite3_backend(db_path: str) -> BaseBackend:
    pytest.importorskip("pysqlite3")
    from persistence_benchmark.backends.pysqlite3_backend import Pysqlite3Backend

    return Pysqlite3Backend(db_path)


@pytest.fixture(
    params=[
        lambda path: SQLiteBackend(path),
        lambda path: ScopedSQLiteBackend(path),
        lambda path: APSWBackend(path),
        _pysqlite3_backend,
        lambda path: MemoryBackend(),
    ],
    ids=["sqlite", "sqlite_scoped", "apsw", "pysqlite3", "memory"],
)
def backend(request, db_path):
    """Fixture that provides each backend for testing."""
    instance = request.param(db_path)
    yield instance
    instance.close()
