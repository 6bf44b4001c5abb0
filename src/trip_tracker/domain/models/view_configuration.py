"""View configuration domain model."""

from dataclasses import dataclass
from enum import StrEnum

from trip_tracker.domain.models.trip_query import DateRange, TripQuery
from trip_tracker.domain.models.trip_status import TripStatus


class ViewKind(StrEnum):
    """Whether a view monitors live trips or pages through history."""

    ACTIVE = "active"
    HISTORY = "history"


@dataclass(frozen=True)
class ViewConfiguration:
    """Configuration for one monitored trip view."""

    name: str
    kind: ViewKind = ViewKind.ACTIVE
    dispatcher_id: int | None = None  # Only this dispatcher's trips. None = all dispatchers
    warehouse_id: int | None = None
    status: TripStatus | None = None
    date_range: DateRange = DateRange.ALL
    page_size: int = 10
    refresh_interval_seconds: int | None = (
        None  # View-specific refresh period. None = use the global refresh_interval_seconds
    )

    def to_query(self) -> TripQuery:
        """Initial query of the view: its fixed filters on the first page."""
        return TripQuery(
            status=self.status,
            date_range=self.date_range,
            warehouse_id=self.warehouse_id,
            dispatcher_id=self.dispatcher_id,
            page=1,
            page_size=self.page_size,
        )
