"""Storage backends that implement the benchmark contract."""

from __future__ import annotations

from typing import Any

from ..exceptions import BackendInitializationError
from .apsw_backend import APSWBackend
from .base import BaseBackend
from .memory import MemoryBackend, MemoryStore
from .sqlite import ScopedSQLiteBackend, SQLBackend, SQLiteBackend

BACKEND_NAMES = ("sqlite", "sqlite_scoped", "apsw", "pysqlite3", "memory")


def create_backend(name: str, **kwargs: Any) -> BaseBackend:
    """
    Create a backend by name.

    ``pysqlite3`` is imported on demand since it is an optional dependency.
    """
    if name == "pysqlite3":
        try:
            from .pysqlite3_backend import Pysqlite3Backend
        except ImportError as e:
            raise BackendInitializationError(
                "pysqlite3 is not installed; install the 'pysqlite3' extra to use this backend"
            ) from e

        return Pysqlite3Backend(**kwargs)

    backends: dict[str, type[BaseBackend]] = {
        "sqlite": SQLiteBackend,
        "sqlite_scoped": ScopedSQLiteBackend,
        "apsw": APSWBackend,
        "memory": MemoryBackend,
    }
    if name not in backends:
        raise ValueError(f"Unknown backend: {name}")
    return backends[name](**kwargs)


__all__ = [
    "BACKEND_NAMES",
    "APSWBackend",
    "BaseBackend",
    "MemoryBackend",
    "MemoryStore",
    "SQLBackend",
    "SQLiteBackend",
    "ScopedSQLiteBackend",
    "create_backend",
]
