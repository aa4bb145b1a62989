"""Wall-clock timing with repetition."""

from __future__ import annotations

import statistics
import time
from collections.abc import Sequence
from typing import Any, Callable

DEFAULT_REPETITIONS = 10


def repeat_measure(func: Callable[[], Any], repetitions: int = DEFAULT_REPETITIONS) -> list[float]:
    """
    Run ``func`` several times and return the elapsed seconds of each call.

    Calls run strictly one after another. Whatever setup ``func`` does
    internally is part of the measurement.
    """
    if repetitions < 1:
        raise ValueError(f"repetitions must be at least 1, got {repetitions}")

    times: list[float] = []
    for _ in range(repetitions):
        start = time.perf_counter()
        func()
        end = time.perf_counter()
        times.append(end - start)
    return times


def average(samples: Sequence[float]) -> float:
    """Arithmetic mean of a timing series."""
    if not samples:
        raise ValueError("Cannot average an empty timing series")
    return statistics.mean(samples)
