#!/usr/bin/env python3
"""Run linters for persistence-benchmark."""

import argparse
import sys

from common import print_error, print_header, print_success, run


def lint(fix: bool = False) -> bool:
    """Run ruff check and format (or fix in place with --fix)."""
    print_header("Formatting code" if fix else "Running linters")
    success = True

    check_cmd = ["ruff", "check", "--fix", "."] if fix else ["ruff", "check", "."]
    format_cmd = ["ruff", "format", "."] if fix else ["ruff", "format", "--check", "."]

    for cmd in (check_cmd, format_cmd):
        label = " ".join(cmd[:2])
        try:
            run(cmd)
            print_success(f"{label} passed")
        except Exception:
            print_error(f"{label} failed")
            success = False

    return success


def main() -> int:
    parser = argparse.ArgumentParser(description="Run persistence-benchmark linters")
    parser.add_argument("--fix", action="store_true", help="Apply fixes and format in place")
    args = parser.parse_args()

    success = lint(fix=args.fix)
    print_header("All linters passed" if success else "Some linters failed")
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
