"""Trip and warehouse repositories backed by the REST API."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from trip_tracker.adapters.rest_api.constants import (
    ACTIVE_TRIPS_PATH,
    TRIPS_PATH,
    WAREHOUSES_PATH,
)
from trip_tracker.adapters.rest_api.query_params import build_trip_list_params
from trip_tracker.adapters.rest_api.trip_parser import parse_trips, parse_warehouses
from trip_tracker.domain.models import Trip, TripPage, TripQuery, Warehouse
from trip_tracker.domain.ports import TripRepository, WarehouseRepository

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from trip_tracker.adapters.rest_api.http_client import TripApiHttpClient


class RestTripRepository(TripRepository):
    """Adapter for the trip endpoints."""

    def __init__(self, client: "TripApiHttpClient") -> None:
        """Initialize with an API client."""
        self._client = client

    async def list_trips(self, query: TripQuery, now: datetime) -> TripPage:
        """Get one server-side page of trips.

        The backend returns ``{"items": [...], "totalCount": n}``.
        """
        data = await self._client.get_json(TRIPS_PATH, build_trip_list_params(query, now))
        if not isinstance(data, dict):
            logger.warning(f"Unexpected trip list payload of type {type(data).__name__}")
            return TripPage(items=[], total_count=0)

        items = parse_trips(data.get("items", []))
        total_count = data.get("totalCount")
        return TripPage(
            items=items,
            total_count=int(total_count) if total_count is not None else len(items),
        )

    async def list_active_trips(self, dispatcher_id: int | None = None) -> list[Trip]:
        """Get all active trips with their stops."""
        params: dict[str, str | int] = {}
        if dispatcher_id is not None:
            params["dispatcherId"] = dispatcher_id
        data = await self._client.get_json(ACTIVE_TRIPS_PATH, params or None)
        trips = parse_trips(data)
        logger.debug(f"Fetched {len(trips)} active trips")
        return trips


class RestWarehouseRepository(WarehouseRepository):
    """Adapter for the warehouse lookup endpoint."""

    def __init__(self, client: "TripApiHttpClient") -> None:
        """Initialize with an API client."""
        self._client = client

    async def lookup_warehouses(self) -> list[Warehouse]:
        """Get all warehouses."""
        return parse_warehouses(await self._client.get_json(WAREHOUSES_PATH))
