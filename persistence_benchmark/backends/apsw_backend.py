"""SQLite backend using APSW (Another Python SQLite Wrapper)."""

from __future__ import annotations

import apsw

from .sqlite import SQLBackend


class APSWBackend(SQLBackend):
    """
    SQLite through APSW.

    APSW is a thin wrapper over the SQLite C API with no implicit
    transaction handling, so it runs in autocommit mode by default. Pattern
    updates use SQL ``LIKE`` like every other SQL backend.
    """

    display_name = "APSW"
    engine_error = apsw.Error

    def _connect(self, database: str) -> apsw.Connection:
        return apsw.Connection(database)

    def _in_transaction(self, conn: apsw.Connection) -> bool:
        return not conn.getautocommit()
