"""Warehouse domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Warehouse:
    """A warehouse trips depart from."""

    id: int
    name: str
