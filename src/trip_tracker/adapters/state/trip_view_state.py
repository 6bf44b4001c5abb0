"""Trip view state dataclass."""

from dataclasses import dataclass, field
from datetime import datetime

from trip_tracker.domain.models import ErrorDetails, TripViewModel


@dataclass
class TripViewState:
    """Published state of one monitored view."""

    view_name: str
    view_model: TripViewModel = field(default_factory=TripViewModel)
    api_status: str = "unknown"  # unknown, success or error
    last_error: ErrorDetails | None = None
    last_error_at: datetime | None = None
    refresh_count: int = 0
