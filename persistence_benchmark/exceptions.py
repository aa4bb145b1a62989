"""Custom exceptions for persistence-benchmark."""


class BenchmarkError(Exception):
    """Base exception for benchmark errors."""

    pass


class BackendError(BenchmarkError):
    """Base exception for storage backend errors."""

    pass


class BackendInitializationError(BackendError):
    """Raised when a backend cannot open its underlying storage."""

    pass


class BackendClosedError(BackendError):
    """Raised when attempting to use a closed backend."""

    pass


class TransactionError(BackendError):
    """Raised when a store transaction is misused (e.g. nested transactions)."""

    pass
