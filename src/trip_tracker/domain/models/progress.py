"""Progress domain models."""

from dataclasses import dataclass
from decimal import Decimal

from trip_tracker.domain.models.stop import Stop
from trip_tracker.domain.models.trip import Trip


@dataclass(frozen=True)
class TripProgress:
    """A trip together with its derived progress metrics."""

    trip: Trip
    progress_percent: int
    success_rate: int
    current_stop: Stop | None


@dataclass(frozen=True)
class FleetProgress:
    """Aggregated progress across a collection of trips."""

    total_trips: int = 0
    in_progress_trips: int = 0
    completed_trips: int = 0
    total_stops: int = 0
    completed_stops: int = 0
    delivered_stops: int = 0
    active_dispatchers: int = 0
    completed_value: Decimal = Decimal("0")
    overall_progress: int = 0
    average_success_rate: int = 0
