"""
Benchmark orchestration.

Runs the same workload against every registered backend and turns the raw
timings into one BenchmarkResult per operation.

Phases:
1. Insert single vs bulk - both clear and reload the dataset every repetition
2. Update variants - run against a dataset primed once with an untimed bulk
   insert; mutations accumulate across repetitions

Backends are measured one after another, never concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .backends import BaseBackend, create_backend
from .config import DEFAULT_RECORDS, BenchmarkConfig
from .models import Person
from .results import BenchmarkResult
from .timing import DEFAULT_REPETITIONS, repeat_measure
from .workload import generate_test_data

logger = logging.getLogger("persistence_benchmark.runner")

INSERT_SINGLE = "Insert Single"
INSERT_BULK = "Insert Bulk"
UPDATE_SINGLE = "Update Single"
UPDATE_BULK = "Update Bulk"
UPDATE_CONDITIONAL = "Update Conditional"
UPDATE_INCREMENTAL = "Update Incremental"
UPDATE_MULTIPLE = "Update Multiple"

# Ids targeted by the "Update Multiple" benchmark
MULTIPLE_UPDATE_IDS = tuple(range(1, 101))

# User-facing label -> contract call, in execution order
UPDATE_BENCHMARKS: list[tuple[str, Callable[[BaseBackend], Any]]] = [
    (UPDATE_SINGLE, lambda b: b.update_single_by_id(1, "Updated", 25)),
    (UPDATE_BULK, lambda b: b.update_all_records("Bulk Updated", 30)),
    (UPDATE_CONDITIONAL, lambda b: b.update_by_age_range(20, 40, "Range Updated", 35)),
    (UPDATE_INCREMENTAL, lambda b: b.increment_age_by(1)),
    (UPDATE_MULTIPLE, lambda b: b.update_multiple_by_ids(MULTIPLE_UPDATE_IDS, "Multiple Updated", 28)),
]

BackendsArg = Mapping[str, BaseBackend] | Sequence[tuple[str, BaseBackend]]


class BenchmarkRunner:
    """
    Benchmark runner.

    Every public ``run_*`` call blocks until all backends are measured. Long
    runs should be started from a worker thread by the caller.
    """

    def __init__(
        self,
        backends: BackendsArg,
        records: int = DEFAULT_RECORDS,
        repetitions: int = DEFAULT_REPETITIONS,
    ) -> None:
        """
        Initialize the runner.

        Args:
            backends: Backend name to backend, as a mapping or a sequence of
                ``(name, backend)`` pairs. Order is kept in every result.
            records: Number of records in each generated workload.
            repetitions: Timed repetitions per (backend, operation) pair.
        """
        pairs = list(backends.items()) if isinstance(backends, Mapping) else list(backends)
        if not pairs:
            raise ValueError("At least one backend is required")

        self._backends: dict[str, BaseBackend] = {}
        for name, backend in pairs:
            if name in self._backends:
                raise ValueError(f"Duplicate backend name: {name}")
            self._backends[name] = backend

        if records < 0:
            raise ValueError(f"records must be non-negative, got {records}")
        if repetitions < 1:
            raise ValueError(f"repetitions must be at least 1, got {repetitions}")

        self.records = records
        self.repetitions = repetitions
        self._owns_backends = False

    @classmethod
    def from_config(cls, config: BenchmarkConfig) -> BenchmarkRunner:
        """
        Create a runner and its backends from a config.

        The runner owns the backends and closes them in ``close()``. If one
        backend cannot be opened, the ones already opened are closed and the
        error propagates.
        """
        config.validate()

        backends: list[tuple[str, BaseBackend]] = []
        try:
            for name in config.backends:
                kwargs: dict[str, Any] = {}
                if name != "memory" and config.database_dir is not None:
                    kwargs["directory"] = config.database_dir
                backend = create_backend(name, **kwargs)
                backends.append((backend.display_name, backend))
        except Exception:
            for _, backend in backends:
                backend.close()
            raise

        runner = cls(backends, records=config.records, repetitions=config.repetitions)
        runner._owns_backends = True
        return runner

    @property
    def backends(self) -> dict[str, BaseBackend]:
        """Registered backends in measurement order."""
        return dict(self._backends)

    # ==================== Phases ====================

    def run_single_vs_bulk(self) -> list[BenchmarkResult]:
        """Benchmark: per-record inserts against one bulk insert."""
        logger.info("Running insert benchmarks (%d records, %d repetitions)", self.records, self.repetitions)
        test_data = generate_test_data(self.records)

        single: dict[str, list[float]] = {}
        bulk: dict[str, list[float]] = {}
        for name, backend in self._backends.items():
            single[name] = repeat_measure(lambda: backend.insert_single(test_data), self.repetitions)
            bulk[name] = repeat_measure(lambda: backend.insert_bulk(test_data), self.repetitions)

        results = [
            BenchmarkResult.from_timings(INSERT_SINGLE, single),
            BenchmarkResult.from_timings(INSERT_BULK, bulk),
        ]
        for result in results:
            self._log_result(result)
        return results

    def run_update_benchmarks(self) -> list[BenchmarkResult]:
        """Benchmark: update variants against an identically primed dataset."""
        logger.info("Running update benchmarks (%d records, %d repetitions)", self.records, self.repetitions)
        test_data = generate_test_data(self.records)
        self._prime(test_data)

        results: list[BenchmarkResult] = []
        for operation, call in UPDATE_BENCHMARKS:
            timings = {
                name: repeat_measure(lambda: call(backend), self.repetitions)
                for name, backend in self._backends.items()
            }
            result = BenchmarkResult.from_timings(operation, timings)
            self._log_result(result)
            results.append(result)
        return results

    def run_all_benchmarks(self) -> list[BenchmarkResult]:
        """Run the insert phase then the update phase and return all results in order."""
        results = self.run_single_vs_bulk()
        results.extend(self.run_update_benchmarks())
        return results

    # ==================== Helpers ====================

    def _prime(self, test_data: Sequence[Person]) -> None:
        """Load the same dataset into every backend (untimed)."""
        for name, backend in self._backends.items():
            logger.debug("Priming %s with %d records", name, len(test_data))
            backend.insert_bulk(test_data)

    def _log_result(self, result: BenchmarkResult) -> None:
        for name, value in result.averages.items():
            logger.info("%s - %s avg: %.4fs", result.operation, name, value)
        logger.info(
            "%s - fastest: %s (%.1f%% improvement)",
            result.operation,
            result.fastest,
            result.performance_improvement,
        )

    # ==================== Lifecycle ====================

    def close(self) -> None:
        """Close the backends if this runner created them."""
        if not self._owns_backends:
            return
        for backend in self._backends.values():
            backend.close()

    def __enter__(self) -> BenchmarkRunner:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
