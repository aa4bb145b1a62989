"""SQLite backend using the standalone pysqlite3 package."""

from __future__ import annotations

import pysqlite3

from .sqlite import SQLBackend


class Pysqlite3Backend(SQLBackend):
    """
    SQLite through pysqlite3.

    pysqlite3 is the ``sqlite3`` module packaged separately, usually linked
    against a newer SQLite than the interpreter ships with. Install it with
    the ``pysqlite3`` extra.
    """

    display_name = "pysqlite3"
    engine_error = pysqlite3.Error

    def _connect(self, database: str) -> pysqlite3.Connection:
        # Autocommit mode - each statement is its own transaction
        return pysqlite3.connect(database, isolation_level=None, check_same_thread=False)
