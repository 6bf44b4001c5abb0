"""Protocol for formatting trip data for display."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import datetime
    from decimal import Decimal

    from trip_tracker.domain.models.status_badge import StatusBadge
    from trip_tracker.domain.models.trip_status import StopStatus, TripStatus


class TripFormatterProtocol(Protocol):
    """Protocol for formatting trip data for display."""

    def trip_status_badge(self, status: "TripStatus") -> "StatusBadge":
        """Map a trip status to its badge."""
        ...

    def stop_status_badge(self, status: "StopStatus") -> "StatusBadge":
        """Map a stop status to its badge."""
        ...

    def time_ago(self, timestamp: "datetime | None", now: "datetime | None" = None) -> str:
        """Format elapsed time since a timestamp."""
        ...

    def format_currency(self, amount: "Decimal") -> str:
        """Format a monetary amount."""
        ...
