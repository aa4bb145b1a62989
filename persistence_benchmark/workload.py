"""Synthetic workload generation."""

from __future__ import annotations

import random

from .models import Person

MIN_AGE = 18
MAX_AGE = 65


def generate_test_data(count: int) -> list[Person]:
    """
    Generate ``count`` records for a benchmark run.

    Ids run from 0 to ``count - 1`` and names follow ``"Person {id}"`` so
    lookups and pattern updates can target them. Ages are drawn uniformly
    from ``[MIN_AGE, MAX_AGE]`` and are not seeded.

    Args:
        count: Number of records to generate.

    Returns:
        List of Person records ordered by id.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    return [Person(id=i, name=f"Person {i}", age=random.randint(MIN_AGE, MAX_AGE)) for i in range(count)]
