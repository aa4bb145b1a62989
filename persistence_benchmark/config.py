"""Configuration for benchmark runs."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from .backends import BACKEND_NAMES
from .timing import DEFAULT_REPETITIONS

DEFAULT_RECORDS = 1_000
DEFAULT_BACKENDS = ("sqlite", "apsw", "memory")


@dataclass
class BenchmarkConfig:
    """Configuration for benchmark execution."""

    records: int = DEFAULT_RECORDS
    repetitions: int = DEFAULT_REPETITIONS
    backends: tuple[str, ...] = DEFAULT_BACKENDS

    # Where SQL backends create their temporary database files (None: system temp dir)
    database_dir: Path | None = None

    @classmethod
    def from_env(cls) -> BenchmarkConfig:
        """Create config from environment variables."""
        config = cls()

        if val := os.getenv("PERSISTENCE_BENCHMARK_RECORDS"):
            config.records = int(val)
        if val := os.getenv("PERSISTENCE_BENCHMARK_REPETITIONS"):
            config.repetitions = int(val)
        if val := os.getenv("PERSISTENCE_BENCHMARK_BACKENDS"):
            config.backends = tuple(name.strip() for name in val.split(",") if name.strip())
        if val := os.getenv("PERSISTENCE_BENCHMARK_DATABASE_DIR"):
            config.database_dir = Path(val)

        return config

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot be run."""
        if self.records < 0:
            raise ValueError(f"records must be non-negative, got {self.records}")
        if self.repetitions < 1:
            raise ValueError(f"repetitions must be at least 1, got {self.repetitions}")
        if not self.backends:
            raise ValueError("At least one backend is required")
        unknown = [name for name in self.backends if name not in BACKEND_NAMES]
        if unknown:
            raise ValueError(f"Unknown backend(s): {', '.join(unknown)}")
        if len(set(self.backends)) != len(self.backends):
            raise ValueError("Backends must not be listed more than once")
