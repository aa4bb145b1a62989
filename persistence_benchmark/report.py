"""Plain text rendering of benchmark results."""

from __future__ import annotations

from collections.abc import Sequence

from .results import BenchmarkResult


def format_result(result: BenchmarkResult) -> str:
    """
    Render one result as a short multi-line summary.

    Example::

        Insert Bulk
          SQLite: 0.0123s
          Memory: 0.0040s
          Fastest: Memory
          Performance improvement: 67.5%
    """
    lines = [result.operation]
    for name, value in result.averages.items():
        lines.append(f"  {name}: {value:.4f}s")
    lines.append(f"  Fastest: {result.fastest}")
    lines.append(f"  Performance improvement: {result.performance_improvement:.1f}%")
    return "\n".join(lines)


def print_benchmark_results(result: BenchmarkResult) -> None:
    """Print one result as a table sorted by mean time."""
    repetitions = next(iter(result.stats.values())).repetitions if result.stats else 0
    print(f"\n{'=' * 80}")
    print(f"Benchmark: {result.operation} ({repetitions} repetitions)")
    print(f"{'=' * 80}")
    print(
        f"{'Backend':<20} {'Mean (ms)':<12} {'Median (ms)':<12} "
        f"{'Min (ms)':<12} {'Max (ms)':<12} {'Std Dev':<12}"
    )
    print("-" * 80)

    for name, mean in result.ranking():
        stats = result.stats.get(name)
        if stats is None:
            print(f"{name:<20} {mean * 1000:<12.3f}")
            continue
        print(
            f"{name:<20} {stats.mean_time * 1000:<12.3f} {stats.median_time * 1000:<12.3f} "
            f"{stats.min_time * 1000:<12.3f} {stats.max_time * 1000:<12.3f} {stats.std_dev * 1000:<12.3f}"
        )


def print_summary(results: Sequence[BenchmarkResult]) -> None:
    """Print the fastest backend and its margin for every operation."""
    print("\n" + "=" * 80)
    print("SUMMARY: Fastest backend per operation")
    print("=" * 80)

    for result in results:
        print(f"\n{result.operation}:")
        print(f"  Fastest: {result.fastest}")
        print(f"  Performance improvement: {result.performance_improvement:.1f}%")
        slowest = max(result.averages.values())
        for name, mean in result.ranking():
            if mean > 0 and slowest > 0:
                speedup = slowest / mean
                print(f"  {name:<20}: {speedup:.2f}x vs slowest")


def print_results(results: Sequence[BenchmarkResult]) -> None:
    """Print detailed tables followed by the summary."""
    for result in results:
        print_benchmark_results(result)
    print_summary(results)
