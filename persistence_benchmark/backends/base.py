"""Common interface for storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from typing import Any

from ..models import Person


class BaseBackend(ABC):
    """
    Base class for storage backends.

    A backend owns exactly one dataset of ``Person`` records keyed by id.
    Storage is opened in ``__init__`` so a broken engine fails before any
    benchmarking starts.

    Lookups and updates that target a single id or name are no-ops when
    nothing matches. Every other failure propagates to the caller.
    """

    # Human readable name used in results and reports
    display_name: str = "Backend"

    # ==================== Inserts ====================

    @abstractmethod
    def insert_single(self, records: Sequence[Person]) -> None:
        """Clear the dataset, then insert records one per unit of work."""
        pass

    @abstractmethod
    def insert_bulk(self, records: Sequence[Person]) -> None:
        """Clear the dataset, then insert all records in a single unit of work."""
        pass

    # ==================== Reads ====================

    @abstractmethod
    def fetch_all(self) -> int:
        """Read every field of every record and return how many were read."""
        pass

    @abstractmethod
    def fetch_single(self, id: int) -> Person | None:
        """Return the record with the given id, or None."""
        pass

    @abstractmethod
    def count(self) -> int:
        """Return the number of records in the dataset."""
        pass

    # ==================== Deletes ====================

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every record in a single operation."""
        pass

    # ==================== Updates ====================

    @abstractmethod
    def update_single_by_id(self, id: int, new_name: str, new_age: int) -> None:
        """Update the record with the given id, if any."""
        pass

    @abstractmethod
    def update_single_by_name(self, old_name: str, new_name: str, new_age: int) -> None:
        """Update the first record (lowest id) named ``old_name``, if any."""
        pass

    @abstractmethod
    def update_all_records(self, new_name: str, new_age: int) -> None:
        """Overwrite name and age on every record."""
        pass

    @abstractmethod
    def update_multiple_by_ids(self, ids: Iterable[int], new_name: str, new_age: int) -> None:
        """Overwrite name and age on every record whose id is in ``ids``."""
        pass

    @abstractmethod
    def update_by_age_range(self, min_age: int, max_age: int, new_name: str, new_age: int) -> None:
        """Overwrite name and age on records with ``min_age <= age <= max_age``."""
        pass

    @abstractmethod
    def update_by_name_pattern(self, pattern: str, new_name: str, new_age: int) -> None:
        """Overwrite name and age on records whose name matches ``pattern``."""
        pass

    @abstractmethod
    def increment_age_by(self, amount: int) -> None:
        """Add ``amount`` to every record's age."""
        pass

    @abstractmethod
    def append_to_names(self, suffix: str) -> None:
        """Append ``suffix`` to every record's name."""
        pass

    # ==================== Lifecycle ====================

    @abstractmethod
    def close(self) -> None:
        """Release the underlying storage."""
        pass

    @property
    @abstractmethod
    def closed(self) -> bool:
        """Return True if the backend is closed."""
        pass

    def __enter__(self) -> BaseBackend:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.display_name!r}>"
