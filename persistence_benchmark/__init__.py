"""
persistence-benchmark: compare storage backends on identical CRUD workloads.

Every backend implements the same contract; the runner drives them one
after another with the same generated data and reports the averages.
"""

from .backends import (
    BACKEND_NAMES,
    APSWBackend,
    BaseBackend,
    MemoryBackend,
    MemoryStore,
    ScopedSQLiteBackend,
    SQLiteBackend,
    create_backend,
)
from .config import BenchmarkConfig
from .exceptions import (
    BackendClosedError,
    BackendError,
    BackendInitializationError,
    BenchmarkError,
    TransactionError,
)
from .models import Person
from .results import BenchmarkResult, TimingStats
from .runner import BenchmarkRunner
from .timing import average, repeat_measure
from .workload import generate_test_data

__version__ = "0.1.0"

__all__ = [
    # Runner
    "BenchmarkRunner",
    "BenchmarkConfig",
    "BenchmarkResult",
    "TimingStats",
    "Person",
    "generate_test_data",
    "repeat_measure",
    "average",
    # Backends
    "BACKEND_NAMES",
    "BaseBackend",
    "SQLiteBackend",
    "ScopedSQLiteBackend",
    "APSWBackend",
    "MemoryBackend",
    "MemoryStore",
    "create_backend",
    # Exceptions
    "BenchmarkError",
    "BackendError",
    "BackendInitializationError",
    "BackendClosedError",
    "TransactionError",
    # Version
    "__version__",
]
