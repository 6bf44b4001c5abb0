"""Ports (interfaces) for the ports-and-adapters architecture."""

from trip_tracker.domain.ports.trip_repository import TripRepository
from trip_tracker.domain.ports.warehouse_repository import WarehouseRepository

__all__ = [
    "TripRepository",
    "WarehouseRepository",
]
