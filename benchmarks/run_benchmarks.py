#!/usr/bin/env python3
"""
Performance benchmarks comparing persistence backends.

Compares (by default):
1. SQLite - stdlib sqlite3, one long-lived connection (baseline)
2. APSW - thin wrapper over the SQLite C API
3. Memory - pure Python object store

Benchmark categories:
- Insert single vs bulk (clear and reload every repetition)
- Update single / bulk / conditional / incremental / multiple
"""

from __future__ import annotations

import argparse
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from persistence_benchmark import BACKEND_NAMES, BenchmarkConfig, BenchmarkRunner
from persistence_benchmark.report import format_result, print_results


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    defaults = BenchmarkConfig.from_env()
    parser = argparse.ArgumentParser(description="Benchmark persistence backends")
    parser.add_argument(
        "--records",
        "-n",
        type=int,
        default=defaults.records,
        help=f"Records per workload (default: {defaults.records})",
    )
    parser.add_argument(
        "--repetitions",
        "-r",
        type=int,
        default=defaults.repetitions,
        help=f"Repetitions per operation (default: {defaults.repetitions})",
    )
    parser.add_argument(
        "--backends",
        "-b",
        nargs="+",
        choices=BACKEND_NAMES,
        default=list(defaults.backends),
        help=f"Backends to compare (default: {' '.join(defaults.backends)})",
    )
    parser.add_argument(
        "--database-dir",
        type=Path,
        default=defaults.database_dir,
        help="Directory for temporary database files (default: system temp dir)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")

    config = BenchmarkConfig(
        records=args.records,
        repetitions=args.repetitions,
        backends=tuple(args.backends),
        database_dir=args.database_dir,
    )

    print(f"\n{'#' * 80}")
    print(f"# Benchmarking: {', '.join(config.backends)}")
    print(f"# {config.records} records, {config.repetitions} repetitions")
    print(f"{'#' * 80}")

    with BenchmarkRunner.from_config(config) as runner:
        # Keep the calling thread free while the benchmark runs
        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="benchmark") as executor:
            results = executor.submit(runner.run_all_benchmarks).result()

    print("\n\n" + "#" * 80)
    print("# DETAILED RESULTS")
    print("#" * 80)
    print_results(results)

    print("\n\n" + "#" * 80)
    print("# RESULTS")
    print("#" * 80)
    for result in results:
        print()
        print(format_result(result))

    return 0


if __name__ == "__main__":
    sys.exit(main())
