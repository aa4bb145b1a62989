"""Pure Python in-memory object store backend."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import replace

from ..exceptions import BackendClosedError, TransactionError
from ..models import Person
from .base import BaseBackend

logger = logging.getLogger("persistence_benchmark.backends.memory")


class Transaction:
    """
    A write transaction on a MemoryStore.

    Writes are staged and only become visible to other readers when the
    transaction commits. Reads inside the transaction see the staged writes.
    """

    def __init__(self, committed: dict[int, Person]) -> None:
        self._committed = committed
        self._staged: dict[int, Person] = {}
        self._cleared = False

    def get(self, id: int) -> Person | None:
        if id in self._staged:
            return self._staged[id]
        if self._cleared:
            return None
        return self._committed.get(id)

    def objects(self) -> Iterator[Person]:
        """Iterate over visible records in id order."""
        ids = set(self._staged)
        if not self._cleared:
            ids.update(self._committed)
        for id in sorted(ids):
            yield self._staged[id] if id in self._staged else self._committed[id]

    def add(self, person: Person) -> None:
        self._staged[person.id] = person

    def add_all(self, people: Iterable[Person]) -> None:
        for person in people:
            self.add(person)

    def delete_all(self) -> None:
        self._staged.clear()
        self._cleared = True

    def _apply(self) -> None:
        if self._cleared:
            self._committed.clear()
        self._committed.update(self._staged)


class MemoryStore:
    """
    A shared container of Person records.

    The store is created by the caller and handed to every backend that
    should see the same data. Each write happens inside a ``transaction()``;
    only one transaction runs at a time. Reads never wait for an open
    transaction and always see the last committed state.
    """

    def __init__(self) -> None:
        self._rows: dict[int, Person] = {}
        # Held for the whole transaction
        self._write_lock = threading.Lock()
        # Held only while the committed rows are read or replaced
        self._rows_lock = threading.Lock()
        self._owner: int | None = None

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """
        Open a write transaction.

        Staged writes are applied when the block exits normally and
        discarded if it raises.

        Raises:
            TransactionError: If the calling thread already holds a transaction.
        """
        if self._owner == threading.get_ident():
            raise TransactionError("Nested transactions are not supported")

        with self._write_lock:
            self._owner = threading.get_ident()
            try:
                txn = Transaction(self._rows)
                yield txn
                with self._rows_lock:
                    txn._apply()
            finally:
                self._owner = None

    def snapshot(self) -> list[Person]:
        """Committed records in id order."""
        with self._rows_lock:
            return [self._rows[id] for id in sorted(self._rows)]

    def get(self, id: int) -> Person | None:
        with self._rows_lock:
            return self._rows.get(id)

    def __len__(self) -> int:
        with self._rows_lock:
            return len(self._rows)


class MemoryBackend(BaseBackend):
    """
    Backend on top of a MemoryStore.

    Every call opens its own transaction on the store instead of holding one
    across calls. ``update_by_name_pattern`` matches names that contain the
    pattern as a case-sensitive substring.
    """

    display_name = "Memory"

    def __init__(self, store: MemoryStore | None = None) -> None:
        self._store = store if store is not None else MemoryStore()
        self._closed = False
        logger.debug("Attached memory backend to store %#x", id(self._store))

    @property
    def store(self) -> MemoryStore:
        return self._store

    @contextmanager
    def _transaction(self) -> Iterator[Transaction]:
        self._check_closed()
        with self._store.transaction() as txn:
            yield txn

    def _check_closed(self) -> None:
        """Raise an error if the backend is closed."""
        if self._closed:
            raise BackendClosedError(f"{self.display_name} backend is closed")

    def _update_where(self, predicate: Callable[[Person], bool], **changes: object) -> None:
        with self._transaction() as txn:
            for person in list(txn.objects()):
                if predicate(person):
                    txn.add(replace(person, **changes))

    # ==================== Inserts ====================

    def insert_single(self, records: Sequence[Person]) -> None:
        self.delete_all()
        for person in records:
            with self._transaction() as txn:
                txn.add(person)

    def insert_bulk(self, records: Sequence[Person]) -> None:
        self.delete_all()
        with self._transaction() as txn:
            txn.add_all(records)

    # ==================== Reads ====================

    def fetch_all(self) -> int:
        self._check_closed()
        read = 0
        for person in self._store.snapshot():
            _ = (person.id, person.name, person.age)
            read += 1
        return read

    def fetch_single(self, id: int) -> Person | None:
        self._check_closed()
        return self._store.get(id)

    def count(self) -> int:
        self._check_closed()
        return len(self._store)

    # ==================== Deletes ====================

    def delete_all(self) -> None:
        with self._transaction() as txn:
            txn.delete_all()

    # ==================== Updates ====================

    def update_single_by_id(self, id: int, new_name: str, new_age: int) -> None:
        with self._transaction() as txn:
            person = txn.get(id)
            if person is not None:
                txn.add(replace(person, name=new_name, age=new_age))

    def update_single_by_name(self, old_name: str, new_name: str, new_age: int) -> None:
        with self._transaction() as txn:
            person = next((p for p in txn.objects() if p.name == old_name), None)
            if person is not None:
                txn.add(replace(person, name=new_name, age=new_age))

    def update_all_records(self, new_name: str, new_age: int) -> None:
        self._update_where(lambda p: True, name=new_name, age=new_age)

    def update_multiple_by_ids(self, ids: Iterable[int], new_name: str, new_age: int) -> None:
        with self._transaction() as txn:
            for id in set(ids):
                person = txn.get(id)
                if person is not None:
                    txn.add(replace(person, name=new_name, age=new_age))

    def update_by_age_range(self, min_age: int, max_age: int, new_name: str, new_age: int) -> None:
        self._update_where(lambda p: min_age <= p.age <= max_age, name=new_name, age=new_age)

    def update_by_name_pattern(self, pattern: str, new_name: str, new_age: int) -> None:
        self._update_where(lambda p: pattern in p.name, name=new_name, age=new_age)

    def increment_age_by(self, amount: int) -> None:
        with self._transaction() as txn:
            for person in list(txn.objects()):
                txn.add(replace(person, age=person.age + amount))

    def append_to_names(self, suffix: str) -> None:
        with self._transaction() as txn:
            for person in list(txn.objects()):
                txn.add(replace(person, name=person.name + suffix))

    # ==================== Lifecycle ====================

    def close(self) -> None:
        """Detach from the store. The store itself keeps its data."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
