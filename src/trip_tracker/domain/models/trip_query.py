"""Trip query domain model."""

from dataclasses import dataclass
from enum import StrEnum

from trip_tracker.domain.models.trip_status import TripStatus


class DateRange(StrEnum):
    """Departure date window relative to the current instant."""

    ALL = "All"
    TODAY = "Today"
    WEEK = "Week"  # Trailing 7x24h
    MONTH = "Month"  # Trailing 30x24h


class TripSortField(StrEnum):
    """Fields a trip list can be sorted by."""

    DEPARTURE_AT = "departureAt"
    COMPLETED_AT = "completedAt"
    TOTAL_VALUE = "totalValue"
    ID = "id"


@dataclass(frozen=True)
class TripQuery:
    """Search, filter, sort and page parameters for a trip list.

    ``status`` and ``warehouse_id`` of None mean "All".
    """

    search: str = ""
    status: TripStatus | None = None
    date_range: DateRange = DateRange.ALL
    warehouse_id: int | None = None
    dispatcher_id: int | None = None
    sort_by: TripSortField = TripSortField.DEPARTURE_AT
    sort_descending: bool = True
    page: int = 1
    page_size: int = 10
