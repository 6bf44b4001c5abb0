"""REST API adapters for the trip backend."""

from trip_tracker.adapters.rest_api.http_client import TripApiHttpClient
from trip_tracker.adapters.rest_api.rest_trip_repository import (
    RestTripRepository,
    RestWarehouseRepository,
)

__all__ = ["RestTripRepository", "RestWarehouseRepository", "TripApiHttpClient"]
