"""Domain layer - core business models and ports."""

from trip_tracker.domain.exceptions import (
    InvalidStateTransition,
    TripFetchError,
    TripNotFoundError,
    TripTrackerError,
)
from trip_tracker.domain.models import (
    Stop,
    StopStatus,
    Trip,
    TripQuery,
    TripStatus,
)
from trip_tracker.domain.ports import (
    TripRepository,
    WarehouseRepository,
)

__all__ = [
    "InvalidStateTransition",
    "Stop",
    "StopStatus",
    "Trip",
    "TripFetchError",
    "TripNotFoundError",
    "TripQuery",
    "TripRepository",
    "TripStatus",
    "TripTrackerError",
    "WarehouseRepository",
]
