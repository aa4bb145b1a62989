"""Record type shared by every backend."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Person:
    """
    A single flat record.

    ``id`` is assigned by the caller and is the unique key in every backend.
    """

    id: int
    name: str
    age: int
