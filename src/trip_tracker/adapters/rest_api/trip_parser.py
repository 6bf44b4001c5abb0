"""Parser for trip API payloads."""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from trip_tracker.adapters.rest_api.constants import STOP_STATUS_ALIASES, TRIP_STATUS_ALIASES
from trip_tracker.domain.models import Stop, StopStatus, Trip, TripStatus, Warehouse

logger = logging.getLogger(__name__)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp. Naive timestamps are taken as UTC."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Ignoring unparseable timestamp: {value!r}")
        return None
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)


def parse_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        return Decimal(str(value))
    except InvalidOperation:
        logger.warning(f"Ignoring unparseable amount: {value!r}")
        return Decimal("0")


def parse_trip_status(value: Any) -> TripStatus:
    """Map an API trip status to the enum, accepting legacy spellings."""
    raw = str(value or "")
    return TripStatus(TRIP_STATUS_ALIASES.get(raw, raw))


def parse_stop_status(value: Any) -> StopStatus:
    """Map an API stop status to the enum, accepting legacy spellings."""
    raw = str(value or "Pending")
    return StopStatus(STOP_STATUS_ALIASES.get(raw, raw))


def parse_stop(data: dict[str, Any]) -> Stop | None:
    """Parse one stop (assignment) from API data."""
    if not isinstance(data, dict) or data.get("id") is None:
        return None

    status = parse_stop_status(data.get("status"))
    return Stop(
        id=int(data["id"]),
        store_id=int(data.get("storeId") or 0),
        store_name=data.get("storeName") or "",
        status=status,
        delivered_at=(
            parse_timestamp(data.get("deliveredAt")) if status == StopStatus.DELIVERED else None
        ),
    )


def _single_in_transit(trip_id: int, stops: list[Stop]) -> list[Stop]:
    """Keep only the first in-transit stop; later ones go back to Pending."""
    seen_in_transit = False
    result: list[Stop] = []
    for stop in stops:
        if stop.status == StopStatus.IN_TRANSIT:
            if seen_in_transit:
                logger.warning(
                    f"Trip {trip_id} reports stop {stop.id} in transit as well, "
                    "treating it as Pending"
                )
                stop = replace(stop, status=StopStatus.PENDING)
            seen_in_transit = True
        result.append(stop)
    return result


def parse_trip(data: dict[str, Any]) -> Trip | None:
    """Parse one trip with its stops from API data.

    Returns None for entries that are not trips, carry an unknown status or
    have non-numeric ids.
    """
    if not isinstance(data, dict) or data.get("id") is None:
        return None

    try:
        trip_id = int(data["id"])
        warehouse_id = int(data.get("warehouseId") or 0)
        dispatcher_id = int(data.get("dispatcherId") or 0)
        status = parse_trip_status(data.get("status"))
        raw_stops = data.get("assignments") or data.get("stops") or []
        stops = [stop for stop in (parse_stop(s) for s in raw_stops) if stop is not None]
    except ValueError as e:
        logger.warning(f"Skipping malformed trip {data.get('id')!r}: {e}")
        return None

    return Trip(
        id=trip_id,
        warehouse_id=warehouse_id,
        dispatcher_id=dispatcher_id,
        vehicle_id=str(data.get("vehicle") or data.get("vehicleId") or ""),
        dispatcher_name=data.get("dispatcherName") or "",
        warehouse_name=data.get("warehouseName"),
        status=status,
        stops=tuple(_single_in_transit(trip_id, stops)),
        departure_at=parse_timestamp(data.get("departureAt")),
        completed_at=parse_timestamp(data.get("completedAt")),
        total_value=parse_decimal(data.get("totalValue")),
        cancel_reason=data.get("cancelReason"),
    )


def parse_trips(items: Any) -> list[Trip]:
    """Parse a list of trips, skipping malformed entries."""
    if not isinstance(items, list):
        return []
    return [trip for trip in (parse_trip(item) for item in items) if trip is not None]


def parse_warehouses(items: Any) -> list[Warehouse]:
    """Parse id/name pairs, skipping entries without a numeric id."""
    if not isinstance(items, list):
        return []
    warehouses: list[Warehouse] = []
    for item in items:
        if not isinstance(item, dict) or item.get("id") is None:
            continue
        try:
            warehouse_id = int(item["id"])
        except (TypeError, ValueError):
            logger.warning(f"Skipping warehouse with non-numeric id {item['id']!r}")
            continue
        warehouses.append(Warehouse(id=warehouse_id, name=str(item.get("name") or item["id"])))
    return warehouses
