"""Warehouse repository port."""

from typing import Protocol

from trip_tracker.domain.models.warehouse import Warehouse


class WarehouseRepository(Protocol):
    """Port for looking up warehouses."""

    async def lookup_warehouses(self) -> list[Warehouse]:
        """Get all warehouses as id/name pairs."""
        ...
