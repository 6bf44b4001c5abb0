"""Application services (use cases) for trip tracking."""

from trip_tracker.application.services.progress_aggregator import (
    average_success_rate,
    fleet_progress,
    overall_progress,
    progress_percent,
    success_rate,
    trip_progress,
)
from trip_tracker.application.services.query_reducer import (
    filter_trips,
    page_window,
    paginate,
    reduce_trips,
    sort_trips,
)
from trip_tracker.application.services.refresh_controller import RefreshController
from trip_tracker.application.services.trip_history_service import TripHistoryService
from trip_tracker.application.services.trip_lifecycle import TripLifecycle
from trip_tracker.application.services.trip_view_service import (
    TripViewService,
    build_view_model,
)

__all__ = [
    "RefreshController",
    "TripHistoryService",
    "TripLifecycle",
    "TripViewService",
    "average_success_rate",
    "build_view_model",
    "filter_trips",
    "fleet_progress",
    "overall_progress",
    "page_window",
    "paginate",
    "progress_percent",
    "reduce_trips",
    "sort_trips",
    "success_rate",
    "trip_progress",
]
