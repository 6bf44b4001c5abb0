"""Trip repository port."""

from datetime import datetime
from typing import Protocol

from trip_tracker.domain.models.trip import Trip
from trip_tracker.domain.models.trip_page import TripPage
from trip_tracker.domain.models.trip_query import TripQuery


class TripRepository(Protocol):
    """Port for retrieving trips from the backend."""

    async def list_trips(self, query: TripQuery, now: datetime) -> TripPage:
        """Get one server-side page of trips matching a query."""
        ...

    async def list_active_trips(self, dispatcher_id: int | None = None) -> list[Trip]:
        """Get all active trips, each with its full stop sequence."""
        ...
