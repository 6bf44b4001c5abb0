"""Domain models for trip tracking."""

from trip_tracker.domain.models.error_details import ErrorDetails
from trip_tracker.domain.models.pagination import Pagination
from trip_tracker.domain.models.progress import FleetProgress, TripProgress
from trip_tracker.domain.models.status_badge import StatusBadge
from trip_tracker.domain.models.stop import Stop
from trip_tracker.domain.models.trip import Trip
from trip_tracker.domain.models.trip_page import TripPage
from trip_tracker.domain.models.trip_query import DateRange, TripQuery, TripSortField
from trip_tracker.domain.models.trip_status import StopStatus, TripStatus
from trip_tracker.domain.models.trip_view_model import TripViewModel
from trip_tracker.domain.models.view_configuration import ViewConfiguration, ViewKind
from trip_tracker.domain.models.warehouse import Warehouse

__all__ = [
    "DateRange",
    "ErrorDetails",
    "FleetProgress",
    "Pagination",
    "StatusBadge",
    "Stop",
    "StopStatus",
    "Trip",
    "TripPage",
    "TripProgress",
    "TripQuery",
    "TripSortField",
    "TripStatus",
    "TripViewModel",
    "ViewConfiguration",
    "ViewKind",
    "Warehouse",
]
