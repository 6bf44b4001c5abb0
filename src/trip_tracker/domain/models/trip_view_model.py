"""Trip view model exposed to the presentation layer."""

from dataclasses import dataclass, field
from datetime import datetime

from trip_tracker.domain.models.error_details import ErrorDetails
from trip_tracker.domain.models.pagination import Pagination
from trip_tracker.domain.models.progress import FleetProgress, TripProgress


@dataclass(frozen=True)
class TripViewModel:
    """Read-only snapshot of a view for one refresh cycle."""

    rows: list[TripProgress] = field(default_factory=list)
    pagination: Pagination | None = None
    fleet: FleetProgress = field(default_factory=FleetProgress)
    last_refreshed_at: datetime | None = None
    is_fetching: bool = False
    last_error: ErrorDetails | None = None

    @property
    def is_stale(self) -> bool:
        """Whether the last refresh attempt failed."""
        return self.last_error is not None
