#!/usr/bin/env python3
"""Run benchmarks for persistence-benchmark."""

import argparse
import sys

from common import print_error, print_header, print_success, run


def run_benchmarks(records: int, repetitions: int, backends: list[str] | None, verbose: bool) -> bool:
    """Run the benchmark suite."""
    print_header("Running benchmarks")
    cmd = [
        sys.executable,
        "benchmarks/run_benchmarks.py",
        "--records",
        str(records),
        "--repetitions",
        str(repetitions),
    ]
    if backends:
        cmd.extend(["--backends", *backends])
    if verbose:
        cmd.append("--verbose")
    try:
        run(cmd)
        print_success("Benchmarks completed")
        return True
    except Exception as e:
        print_error(f"Benchmarks failed: {e}")
        return False


def main() -> int:
    parser = argparse.ArgumentParser(description="Run persistence-benchmark benchmarks")
    parser.add_argument(
        "--install-deps",
        action="store_true",
        help="Install the package with dev dependencies before running",
    )
    parser.add_argument(
        "--records",
        "-n",
        type=int,
        default=1000,
        help="Records per workload (default: 1000)",
    )
    parser.add_argument(
        "--repetitions",
        "-r",
        type=int,
        default=10,
        help="Repetitions per operation (default: 10)",
    )
    parser.add_argument(
        "--backends",
        "-b",
        nargs="+",
        help="Backends to compare (default: runner defaults)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    args = parser.parse_args()

    if args.install_deps:
        print_header("Installing dependencies")
        try:
            run([sys.executable, "-m", "pip", "install", "-e", ".[dev]"])
        except Exception as e:
            print_error(f"Failed to install dependencies: {e}")
            return 1

    if not run_benchmarks(args.records, args.repetitions, args.backends, args.verbose):
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
