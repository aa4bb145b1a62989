#!/usr/bin/env python3
"""Run tests for persistence-benchmark."""

import argparse
import sys

from common import print_error, print_header, print_success, run


def run_tests(verbose: bool = False, keyword: str | None = None) -> bool:
    """Run the pytest suite."""
    print_header("Running tests")
    cmd = [sys.executable, "-m", "pytest", "tests/"]
    if verbose:
        cmd.append("-v")
    if keyword:
        cmd.extend(["-k", keyword])
    try:
        run(cmd)
    except Exception as e:
        print_error(f"Tests failed: {e}")
        return False
    print_success("Tests passed")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Run persistence-benchmark tests")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("-k", dest="keyword", help="Only run tests matching this expression")
    args = parser.parse_args()

    return 0 if run_tests(verbose=args.verbose, keyword=args.keyword) else 1


if __name__ == "__main__":
    sys.exit(main())
