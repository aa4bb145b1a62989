"""Tests for BenchmarkRunner."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from persistence_benchmark import (
    APSWBackend,
    BenchmarkConfig,
    BenchmarkRunner,
    MemoryBackend,
    ScopedSQLiteBackend,
    SQLiteBackend,
)
from persistence_benchmark.runner import (
    INSERT_BULK,
    INSERT_SINGLE,
    UPDATE_BULK,
    UPDATE_CONDITIONAL,
    UPDATE_INCREMENTAL,
    UPDATE_MULTIPLE,
    UPDATE_SINGLE,
)

ALL_LABELS = [
    "Insert Single",
    "Insert Bulk",
    "Update Single",
    "Update Bulk",
    "Update Conditional",
    "Update Incremental",
    "Update Multiple",
]


class RecordingBackend(MemoryBackend):
    """Memory backend that records every timed call and can be slowed down."""

    def __init__(self, delay: float = 0.0, log: list[tuple[str, str]] | None = None, label: str = "") -> None:
        super().__init__()
        self.delay = delay
        self.log = log if log is not None else []
        self.label = label

    def _record(self, operation: str) -> None:
        self.log.append((self.label, operation))
        if self.delay:
            time.sleep(self.delay)

    def insert_single(self, records):
        self._record("insert_single")
        super().insert_single(records)

    def insert_bulk(self, records):
        self._record("insert_bulk")
        super().insert_bulk(records)

    def update_single_by_id(self, id, new_name, new_age):
        self._record("update_single_by_id")
        super().update_single_by_id(id, new_name, new_age)

    def update_all_records(self, new_name, new_age):
        self._record("update_all_records")
        super().update_all_records(new_name, new_age)

    def update_by_age_range(self, min_age, max_age, new_name, new_age):
        self._record("update_by_age_range")
        super().update_by_age_range(min_age, max_age, new_name, new_age)

    def increment_age_by(self, amount):
        self._record("increment_age_by")
        super().increment_age_by(amount)

    def update_multiple_by_ids(self, ids, new_name, new_age):
        self._record("update_multiple_by_ids")
        super().update_multiple_by_ids(ids, new_name, new_age)


class FailingBackend(MemoryBackend):
    """Memory backend whose incremental update always fails."""

    def increment_age_by(self, amount):
        raise RuntimeError("disk on fire")


@pytest.fixture
def fast_and_slow():
    fast = RecordingBackend(label="Fast")
    slow = RecordingBackend(delay=0.005, label="Slow")
    yield fast, slow
    fast.close()
    slow.close()


class TestRunAllBenchmarks:
    """End-to-end tests for run_all_benchmarks."""

    def test_labels_order_and_backends(self, fast_and_slow) -> None:
        """Seven results, fixed labels, every backend in every result."""
        fast, slow = fast_and_slow
        runner = BenchmarkRunner([("Fast", fast), ("Slow", slow)], records=100, repetitions=3)

        results = runner.run_all_benchmarks()

        assert [r.operation for r in results] == ALL_LABELS
        for result in results:
            assert list(result.averages) == ["Fast", "Slow"]
            assert all(value >= 0 for value in result.averages.values())
            assert all(s.repetitions == 3 for s in result.stats.values())

    def test_slow_backend_never_wins(self, fast_and_slow) -> None:
        """A backend that sleeps in every call is never reported fastest."""
        fast, slow = fast_and_slow
        runner = BenchmarkRunner({"Fast": fast, "Slow": slow}, records=100, repetitions=3)

        for result in runner.run_all_benchmarks():
            assert result.fastest == "Fast"
            assert result.averages["Slow"] >= 0.005
            assert 0 < result.performance_improvement <= 100

    def test_label_constants(self) -> None:
        """Public labels map to the exported constants."""
        assert [
            INSERT_SINGLE,
            INSERT_BULK,
            UPDATE_SINGLE,
            UPDATE_BULK,
            UPDATE_CONDITIONAL,
            UPDATE_INCREMENTAL,
            UPDATE_MULTIPLE,
        ] == ALL_LABELS

    def test_errors_abort_the_run(self) -> None:
        """A failing backend call propagates instead of producing partial results."""
        with MemoryBackend() as ok, FailingBackend() as broken:
            runner = BenchmarkRunner([("OK", ok), ("Broken", broken)], records=10, repetitions=2)
            with pytest.raises(RuntimeError, match="disk on fire"):
                runner.run_all_benchmarks()

    def test_runs_against_sql_and_memory(self, db_path) -> None:
        """Real backends complete the full suite."""
        with SQLiteBackend(db_path) as sqlite, MemoryBackend() as memory:
            runner = BenchmarkRunner([("SQLite", sqlite), ("Memory", memory)], records=50, repetitions=2)
            results = runner.run_all_benchmarks()

        assert [r.operation for r in results] == ALL_LABELS
        assert all(set(r.averages) == {"SQLite", "Memory"} for r in results)


class TestInsertPhase:
    """Tests for run_single_vs_bulk."""

    def test_call_order(self) -> None:
        """Each backend runs all single inserts, then all bulk inserts, before the next backend."""
        log: list[tuple[str, str]] = []
        with RecordingBackend(log=log, label="A") as a, RecordingBackend(log=log, label="B") as b:
            runner = BenchmarkRunner([("A", a), ("B", b)], records=5, repetitions=2)
            results = runner.run_single_vs_bulk()

        assert [r.operation for r in results] == ["Insert Single", "Insert Bulk"]
        assert log == [
            ("A", "insert_single"),
            ("A", "insert_single"),
            ("A", "insert_bulk"),
            ("A", "insert_bulk"),
            ("B", "insert_single"),
            ("B", "insert_single"),
            ("B", "insert_bulk"),
            ("B", "insert_bulk"),
        ]

    def test_leaves_full_dataset(self) -> None:
        """After the phase every backend holds exactly the workload."""
        with MemoryBackend() as a, MemoryBackend() as b:
            BenchmarkRunner([("A", a), ("B", b)], records=40, repetitions=2).run_single_vs_bulk()
            assert a.count() == 40
            assert b.count() == 40


class TestUpdatePhase:
    """Tests for run_update_benchmarks."""

    def test_primes_then_runs_operations_in_order(self) -> None:
        """One untimed bulk insert per backend, then each operation across all backends."""
        log: list[tuple[str, str]] = []
        with RecordingBackend(log=log, label="A") as a, RecordingBackend(log=log, label="B") as b:
            runner = BenchmarkRunner([("A", a), ("B", b)], records=5, repetitions=1)
            results = runner.run_update_benchmarks()

        assert [r.operation for r in results] == ALL_LABELS[2:]
        assert log == [
            ("A", "insert_bulk"),
            ("B", "insert_bulk"),
            ("A", "update_single_by_id"),
            ("B", "update_single_by_id"),
            ("A", "update_all_records"),
            ("B", "update_all_records"),
            ("A", "update_by_age_range"),
            ("B", "update_by_age_range"),
            ("A", "increment_age_by"),
            ("B", "increment_age_by"),
            ("A", "update_multiple_by_ids"),
            ("B", "update_multiple_by_ids"),
        ]

    def test_mutations_compound_across_repetitions(self) -> None:
        """Repetitions are not reset: three increments add three years."""
        with MemoryBackend() as backend:
            runner = BenchmarkRunner([("Memory", backend)], records=150, repetitions=3)
            runner.run_update_benchmarks()

            # update_all -> 30, range update -> 35, three increments -> 38
            for id in [0, *range(101, 150)]:
                person = backend.fetch_single(id)
                assert person is not None
                assert (person.name, person.age) == ("Range Updated", 38)

            # ids 1..100 end with the "Update Multiple" values
            for id in range(1, 101):
                person = backend.fetch_single(id)
                assert (person.name, person.age) == ("Multiple Updated", 28)

            assert backend.count() == 150

    def test_every_backend_ends_in_the_same_state(self, db_path) -> None:
        """All backends experience the same compounding."""
        with SQLiteBackend(db_path) as sqlite, MemoryBackend() as memory:
            runner = BenchmarkRunner([("SQLite", sqlite), ("Memory", memory)], records=120, repetitions=4)
            runner.run_update_benchmarks()

            for id in range(120):
                assert sqlite.fetch_single(id) == memory.fetch_single(id)


class TestRunnerConstruction:
    """Tests for runner arguments and configuration."""

    def test_requires_backends(self) -> None:
        with pytest.raises(ValueError):
            BenchmarkRunner([])

    def test_rejects_duplicate_names(self) -> None:
        with MemoryBackend() as a, MemoryBackend() as b:
            with pytest.raises(ValueError, match="Duplicate"):
                BenchmarkRunner([("Same", a), ("Same", b)])

    def test_rejects_invalid_counts(self) -> None:
        with MemoryBackend() as backend:
            with pytest.raises(ValueError):
                BenchmarkRunner({"M": backend}, repetitions=0)
            with pytest.raises(ValueError):
                BenchmarkRunner({"M": backend}, records=-1)

    def test_defaults(self) -> None:
        with MemoryBackend() as backend:
            runner = BenchmarkRunner({"M": backend})
            assert runner.records == 1000
            assert runner.repetitions == 10
            assert runner.backends == {"M": backend}

    def test_from_config_owns_backends(self, tmp_path: Path) -> None:
        """Backends created from a config are closed with the runner."""
        config = BenchmarkConfig(records=20, repetitions=2, backends=("sqlite", "memory"), database_dir=tmp_path)

        with BenchmarkRunner.from_config(config) as runner:
            assert list(runner.backends) == ["SQLite", "Memory"]
            assert list(tmp_path.glob("*.db"))
            results = runner.run_all_benchmarks()
            backends = list(runner.backends.values())

        assert len(results) == 7
        assert all(backend.closed for backend in backends)
        assert not list(tmp_path.glob("*.db"))

    def test_caller_backends_stay_open(self) -> None:
        """A runner does not close backends it was given."""
        with MemoryBackend() as backend:
            with BenchmarkRunner({"M": backend}, records=1, repetitions=1):
                pass
            assert not backend.closed

    def test_from_config_validates(self) -> None:
        with pytest.raises(ValueError):
            BenchmarkRunner.from_config(BenchmarkConfig(backends=("nope",)))


class TestWorkerThread:
    """Tests for running the suite off the thread that opened the backends."""

    def test_run_all_benchmarks_in_executor(self, db_path, tmp_path: Path) -> None:
        """Backends opened here can be driven from a single worker thread."""
        opened_on = threading.get_ident()
        with (
            SQLiteBackend(db_path) as sqlite,
            APSWBackend(directory=tmp_path) as ap,
            ScopedSQLiteBackend(directory=tmp_path) as scoped,
            MemoryBackend() as memory,
        ):
            runner = BenchmarkRunner(
                [("SQLite", sqlite), ("APSW", ap), ("Scoped", scoped), ("Memory", memory)],
                records=30,
                repetitions=2,
            )
            with ThreadPoolExecutor(max_workers=1) as executor:
                worker = executor.submit(threading.get_ident).result(timeout=30)
                results = executor.submit(runner.run_all_benchmarks).result(timeout=120)

            assert worker != opened_on
            assert [r.operation for r in results] == ALL_LABELS
            assert all(list(r.averages) == ["SQLite", "APSW", "Scoped", "Memory"] for r in results)
            # Results written from the worker are visible here
            assert sqlite.count() == ap.count() == scoped.count() == memory.count() == 30
