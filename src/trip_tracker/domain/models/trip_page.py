"""Trip page domain model."""

from dataclasses import dataclass

from trip_tracker.domain.models.pagination import Pagination
from trip_tracker.domain.models.trip import Trip


@dataclass(frozen=True)
class TripPage:
    """One page of trips plus the size of the whole filtered result set."""

    items: list[Trip]
    total_count: int
    pagination: Pagination | None = None
