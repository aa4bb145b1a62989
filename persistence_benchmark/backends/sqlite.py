"""SQLite backends built on the DB-API style connection interface."""

from __future__ import annotations

import logging
import os
import sqlite3
import tempfile
from abc import abstractmethod
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from ..exceptions import BackendClosedError, BackendInitializationError
from ..models import Person
from .base import BaseBackend

logger = logging.getLogger("persistence_benchmark.backends.sqlite")

TABLE_NAME = "person"

CREATE_TABLE_SQL = f"""
    CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        age INTEGER NOT NULL
    )
"""
INSERT_SQL = f"INSERT INTO {TABLE_NAME} (id, name, age) VALUES (?, ?, ?)"
SELECT_ALL_SQL = f"SELECT id, name, age FROM {TABLE_NAME}"
SELECT_ONE_SQL = f"SELECT id, name, age FROM {TABLE_NAME} WHERE id = ?"
COUNT_SQL = f"SELECT COUNT(*) FROM {TABLE_NAME}"
DELETE_ALL_SQL = f"DELETE FROM {TABLE_NAME}"

# Stay below SQLITE_MAX_VARIABLE_NUMBER on old builds (999), leaving room for name and age
MAX_IDS_PER_STATEMENT = 900


class SQLBackend(BaseBackend):
    """
    Shared SQL for SQLite based backends.

    Subclasses provide the connection. Statements run in autocommit mode, so
    every statement outside an explicit transaction is its own unit of work.

    ``update_by_name_pattern`` uses SQL ``LIKE``: ``%`` and ``_`` are
    wildcards and matching is case-insensitive for ASCII letters.
    """

    # Exception raised by the driver when the database cannot be opened
    engine_error: type[Exception] = sqlite3.Error

    def __init__(self, database: str | None = None, directory: str | Path | None = None) -> None:
        """
        Open the database and create the table.

        Args:
            database: Path to the SQLite database, ":memory:", or None to
                create a temporary file that is removed on close.
            directory: Directory for the temporary file when ``database`` is None.

        Raises:
            BackendInitializationError: If the database cannot be opened.
        """
        self._owns_file = database is None
        if database is None:
            try:
                fd, database = tempfile.mkstemp(suffix=".db", prefix="persistence-benchmark-", dir=directory)
            except OSError as e:
                raise BackendInitializationError(f"Unable to create a database file for {self.display_name}") from e
            os.close(fd)

        self._database = database
        self._conn: Any = None
        self._closed = False

        try:
            self._open()
        except self.engine_error as e:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            self._remove_files()
            raise BackendInitializationError(f"Unable to open {self.display_name} database at {database}") from e

        logger.debug("Opened %s database at %s", self.display_name, database)

    @abstractmethod
    def _connect(self, database: str) -> Any:
        """Open a driver connection in autocommit mode."""
        pass

    def _configure(self, conn: Any) -> None:
        conn.execute("PRAGMA busy_timeout=5000")
        if self._database != ":memory:":
            conn.execute("PRAGMA journal_mode=WAL")

    def _open(self) -> None:
        self._conn = self._connect(self._database)
        self._configure(self._conn)
        self._conn.execute(CREATE_TABLE_SQL)

    @contextmanager
    def _session(self) -> Iterator[Any]:
        """Yield the connection to use for one contract call."""
        self._check_closed()
        yield self._conn

    @contextmanager
    def _transaction(self, conn: Any) -> Iterator[Any]:
        """Run the enclosed statements as one transaction."""
        conn.execute("BEGIN")
        try:
            yield conn
        except BaseException:
            # SQLite may already have rolled back on its own (e.g. SQLITE_FULL)
            if self._in_transaction(conn):
                conn.execute("ROLLBACK")
            raise
        conn.execute("COMMIT")

    def _in_transaction(self, conn: Any) -> bool:
        return conn.in_transaction

    def _check_closed(self) -> None:
        """Raise an error if the backend is closed."""
        if self._closed:
            raise BackendClosedError(f"{self.display_name} backend is closed")

    @property
    def database(self) -> str:
        """Path of the underlying database."""
        return self._database

    # ==================== Inserts ====================

    def insert_single(self, records: Sequence[Person]) -> None:
        with self._session() as conn:
            conn.execute(DELETE_ALL_SQL)
            for person in records:
                conn.execute(INSERT_SQL, (person.id, person.name, person.age))

    def insert_bulk(self, records: Sequence[Person]) -> None:
        with self._session() as conn:
            conn.execute(DELETE_ALL_SQL)
            with self._transaction(conn):
                if records:
                    conn.executemany(INSERT_SQL, [(p.id, p.name, p.age) for p in records])

    # ==================== Reads ====================

    def fetch_all(self) -> int:
        read = 0
        with self._session() as conn:
            for id_, name, age in conn.execute(SELECT_ALL_SQL):
                read += 1
        return read

    def fetch_single(self, id: int) -> Person | None:
        with self._session() as conn:
            rows = list(conn.execute(SELECT_ONE_SQL, (id,)))
        if not rows:
            return None
        id_, name, age = rows[0]
        return Person(id=id_, name=name, age=age)

    def count(self) -> int:
        with self._session() as conn:
            rows = list(conn.execute(COUNT_SQL))
        return rows[0][0]

    # ==================== Deletes ====================

    def delete_all(self) -> None:
        with self._session() as conn:
            conn.execute(DELETE_ALL_SQL)

    # ==================== Updates ====================

    def update_single_by_id(self, id: int, new_name: str, new_age: int) -> None:
        with self._session() as conn:
            conn.execute(f"UPDATE {TABLE_NAME} SET name = ?, age = ? WHERE id = ?", (new_name, new_age, id))

    def update_single_by_name(self, old_name: str, new_name: str, new_age: int) -> None:
        with self._session() as conn:
            conn.execute(
                f"""
                UPDATE {TABLE_NAME} SET name = ?, age = ?
                WHERE id = (SELECT id FROM {TABLE_NAME} WHERE name = ? ORDER BY id LIMIT 1)
                """,
                (new_name, new_age, old_name),
            )

    def update_all_records(self, new_name: str, new_age: int) -> None:
        with self._session() as conn:
            conn.execute(f"UPDATE {TABLE_NAME} SET name = ?, age = ?", (new_name, new_age))

    def update_multiple_by_ids(self, ids: Iterable[int], new_name: str, new_age: int) -> None:
        ids = list(ids)
        if not ids:
            return

        chunks = [ids[i : i + MAX_IDS_PER_STATEMENT] for i in range(0, len(ids), MAX_IDS_PER_STATEMENT)]

        def run(conn: Any) -> None:
            for chunk in chunks:
                placeholders = ",".join("?" for _ in chunk)
                conn.execute(
                    f"UPDATE {TABLE_NAME} SET name = ?, age = ? WHERE id IN ({placeholders})",
                    (new_name, new_age, *chunk),
                )

        with self._session() as conn:
            if len(chunks) == 1:
                run(conn)
            else:
                with self._transaction(conn):
                    run(conn)

    def update_by_age_range(self, min_age: int, max_age: int, new_name: str, new_age: int) -> None:
        with self._session() as conn:
            conn.execute(
                f"UPDATE {TABLE_NAME} SET name = ?, age = ? WHERE age >= ? AND age <= ?",
                (new_name, new_age, min_age, max_age),
            )

    def update_by_name_pattern(self, pattern: str, new_name: str, new_age: int) -> None:
        with self._session() as conn:
            conn.execute(f"UPDATE {TABLE_NAME} SET name = ?, age = ? WHERE name LIKE ?", (new_name, new_age, pattern))

    def increment_age_by(self, amount: int) -> None:
        with self._session() as conn:
            conn.execute(f"UPDATE {TABLE_NAME} SET age = age + ?", (amount,))

    def append_to_names(self, suffix: str) -> None:
        with self._session() as conn:
            conn.execute(f"UPDATE {TABLE_NAME} SET name = name || ?", (suffix,))

    # ==================== Lifecycle ====================

    def close(self) -> None:
        """Close the connection and remove the temporary database, if owned."""
        if self._closed:
            return
        self._closed = True
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        self._remove_files()
        logger.debug("Closed %s database at %s", self.display_name, self._database)

    def _remove_files(self) -> None:
        if not self._owns_file:
            return
        for suffix in ("", "-wal", "-shm"):
            Path(f"{self._database}{suffix}").unlink(missing_ok=True)

    @property
    def closed(self) -> bool:
        return self._closed


class SQLiteBackend(SQLBackend):
    """
    SQLite through the standard library ``sqlite3`` module.

    This is the baseline: one long-lived connection in autocommit mode.
    """

    display_name = "SQLite"

    def _connect(self, database: str) -> sqlite3.Connection:
        # isolation_level=None: each statement is its own transaction unless BEGIN is issued
        # Calls are serialized by the runner but may come from a worker thread
        return sqlite3.connect(database, isolation_level=None, check_same_thread=False)


class ScopedSQLiteBackend(SQLiteBackend):
    """
    SQLite with a fresh connection for every call.

    Nothing is shared between calls, so the backend can be driven from any
    thread. The cost of opening a connection is part of every measurement.
    """

    display_name = "SQLite (scoped)"

    def __init__(self, database: str | None = None, directory: str | Path | None = None) -> None:
        if database == ":memory:":
            raise ValueError("ScopedSQLiteBackend needs a database file; ':memory:' is private to each connection")
        super().__init__(database, directory=directory)

    def _open(self) -> None:
        # Set up WAL mode and the schema once, then release the connection
        conn = self._connect(self._database)
        try:
            self._configure(conn)
            conn.execute(CREATE_TABLE_SQL)
        finally:
            conn.close()

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Connection]:
        self._check_closed()
        conn = self._connect(self._database)
        try:
            conn.execute("PRAGMA busy_timeout=5000")
            yield conn
        finally:
            conn.close()
