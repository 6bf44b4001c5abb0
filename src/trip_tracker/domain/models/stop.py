"""Stop domain model."""

from dataclasses import dataclass
from datetime import datetime

from trip_tracker.domain.models.trip_status import StopStatus


@dataclass(frozen=True)
class Stop:
    """One store visit within a trip."""

    id: int
    store_id: int
    store_name: str = ""
    status: StopStatus = StopStatus.PENDING
    delivered_at: datetime | None = None  # Set only when status becomes Delivered
