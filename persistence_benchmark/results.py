"""Aggregated benchmark results."""

from __future__ import annotations

import statistics
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .timing import average


@dataclass(frozen=True)
class TimingStats:
    """Summary statistics for one (backend, operation) timing series, in seconds."""

    repetitions: int
    total_time: float
    mean_time: float
    median_time: float
    min_time: float
    max_time: float
    std_dev: float

    @classmethod
    def from_times(cls, times: Sequence[float]) -> TimingStats:
        return cls(
            repetitions=len(times),
            total_time=sum(times),
            mean_time=average(times),
            median_time=statistics.median(times),
            min_time=min(times),
            max_time=max(times),
            std_dev=statistics.stdev(times) if len(times) > 1 else 0.0,
        )


@dataclass
class BenchmarkResult:
    """
    Comparison of every registered backend for a single operation.

    ``averages`` maps backend name to mean elapsed seconds and keeps the order
    in which backends were registered. ``fastest`` and
    ``performance_improvement`` are derived from it on access.
    """

    operation: str
    averages: dict[str, float]
    stats: dict[str, TimingStats] = field(default_factory=dict, repr=False)

    @classmethod
    def from_timings(cls, operation: str, timings: Mapping[str, Sequence[float]]) -> BenchmarkResult:
        """
        Build a result from raw timing series.

        Args:
            operation: User-facing operation label.
            timings: Backend name to elapsed seconds per repetition.
        """
        stats = {name: TimingStats.from_times(times) for name, times in timings.items()}
        return cls(
            operation=operation,
            averages={name: s.mean_time for name, s in stats.items()},
            stats=stats,
        )

    @property
    def fastest(self) -> str:
        """
        Name of the backend with the lowest average.

        When several backends share the exact minimum the result reads
        ``"Tie: A & B"`` instead of naming one of them.
        """
        if not self.averages:
            raise ValueError(f"No backend timings recorded for {self.operation!r}")

        best = min(self.averages.values())
        winners = [name for name, value in self.averages.items() if value == best]
        if len(winners) > 1:
            return "Tie: " + " & ".join(winners)
        return winners[0]

    @property
    def slowest(self) -> str:
        """Name of the first backend with the highest average."""
        if not self.averages:
            raise ValueError(f"No backend timings recorded for {self.operation!r}")
        return max(self.averages, key=self.averages.__getitem__)

    @property
    def performance_improvement(self) -> float:
        """Percentage by which the fastest average beats the slowest one."""
        if not self.averages:
            return 0.0
        fastest = min(self.averages.values())
        slowest = max(self.averages.values())
        if slowest == 0:
            return 0.0
        return (slowest - fastest) / slowest * 100

    def ranking(self) -> list[tuple[str, float]]:
        """Backends ordered from fastest to slowest average."""
        return sorted(self.averages.items(), key=lambda item: item[1])
