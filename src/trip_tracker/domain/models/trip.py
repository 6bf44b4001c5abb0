"""Trip domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from trip_tracker.domain.models.stop import Stop
from trip_tracker.domain.models.trip_status import StopStatus, TripStatus


@dataclass(frozen=True)
class Trip:
    """A dispatcher's planned delivery run over an ordered set of stops.

    Stop counts are derived from ``stops`` on every access, so they can never
    diverge from the stops themselves.
    """

    id: int
    warehouse_id: int
    dispatcher_id: int
    vehicle_id: str
    dispatcher_name: str = ""
    warehouse_name: str | None = None
    status: TripStatus = TripStatus.CREATED
    stops: tuple[Stop, ...] = field(default_factory=tuple)  # Planned visitation order
    departure_at: datetime | None = None  # Set when status becomes InProgress
    completed_at: datetime | None = None  # Set when status becomes Completed or Cancelled
    total_value: Decimal = Decimal("0")  # Sum of order values, owned upstream
    cancel_reason: str | None = None

    @property
    def total_stop_count(self) -> int:
        return len(self.stops)

    @property
    def completed_stop_count(self) -> int:
        """Number of stops in a terminal status (Delivered or Failed)."""
        return sum(1 for stop in self.stops if stop.status.is_terminal)

    @property
    def delivered_stop_count(self) -> int:
        return sum(1 for stop in self.stops if stop.status == StopStatus.DELIVERED)

    @property
    def failed_stop_count(self) -> int:
        return sum(1 for stop in self.stops if stop.status == StopStatus.FAILED)

    @property
    def pending_stop_count(self) -> int:
        return sum(1 for stop in self.stops if stop.status == StopStatus.PENDING)

    @property
    def current_stop(self) -> Stop | None:
        """The stop the dispatcher is currently heading to, if any.

        Completed and Cancelled trips have none, even if a stop was left InTransit.
        """
        if self.status.is_terminal:
            return None
        return next((stop for stop in self.stops if stop.status == StopStatus.IN_TRANSIT), None)

    @property
    def is_active(self) -> bool:
        return not self.status.is_terminal

    def find_stop(self, stop_id: int) -> Stop | None:
        """Return the stop with the given id, or None."""
        return next((stop for stop in self.stops if stop.id == stop_id), None)
