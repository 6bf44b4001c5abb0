"""Formatter for trip data shown to operators."""

import math
from datetime import UTC, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from trip_tracker.adapters.config.app_config import AppConfig
from trip_tracker.domain.contracts.trip_formatter import TripFormatterProtocol
from trip_tracker.domain.models import Pagination, StatusBadge, StopStatus, TripStatus


def trip_status_badge(status: TripStatus) -> StatusBadge:
    """Map every trip status to its badge. Unknown values are an error, not a default."""
    match status:
        case TripStatus.CREATED:
            return StatusBadge(label="Created", variant="default")
        case TripStatus.IN_PROGRESS:
            return StatusBadge(label="In Progress", variant="info")
        case TripStatus.COMPLETED:
            return StatusBadge(label="Completed", variant="success")
        case TripStatus.CANCELLED:
            return StatusBadge(label="Cancelled", variant="danger")
        case _:
            raise ValueError(f"Unknown trip status: {status!r}")


def stop_status_badge(status: StopStatus) -> StatusBadge:
    """Map every stop status to its badge. Unknown values are an error, not a default."""
    match status:
        case StopStatus.PENDING:
            return StatusBadge(label="Pending", variant="default")
        case StopStatus.IN_TRANSIT:
            return StatusBadge(label="In Transit", variant="warning")
        case StopStatus.DELIVERED:
            return StatusBadge(label="Delivered", variant="success")
        case StopStatus.FAILED:
            return StatusBadge(label="Failed", variant="danger")
        case _:
            raise ValueError(f"Unknown stop status: {status!r}")


def time_ago(timestamp: datetime, now: datetime) -> str:
    """Bucket elapsed time into seconds, minutes or hours (e.g. '42s ago', '5m ago', '3h ago')."""
    seconds = max(0, math.floor((now - timestamp).total_seconds()))
    if seconds < 60:
        return f"{seconds}s ago"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    return f"{minutes // 60}h ago"


class TripFormatter(TripFormatterProtocol):
    """Formatter for trip statuses, times and amounts based on configuration."""

    def __init__(self, config: AppConfig) -> None:
        """Initialize the formatter.

        Args:
            config: Application configuration with timezone and currency settings.
        """
        self.config = config

    def trip_status_badge(self, status: TripStatus) -> StatusBadge:
        return trip_status_badge(status)

    def stop_status_badge(self, status: StopStatus) -> StatusBadge:
        return stop_status_badge(status)

    def time_ago(self, timestamp: datetime | None, now: datetime | None = None) -> str:
        """Format time since the last refresh."""
        if timestamp is None:
            return "Never"
        return time_ago(timestamp, now or datetime.now(UTC))

    def format_currency(self, amount: Decimal) -> str:
        """Format an amount with the configured currency code (e.g. 'PHP 1,234.50')."""
        return f"{self.config.currency} {amount:,.2f}"

    def format_datetime(self, value: datetime | None) -> str:
        """Format a timestamp in the configured timezone (e.g. 'Oct 18, 2026 02:30 PM')."""
        if value is None:
            return "N/A"
        return value.astimezone(ZoneInfo(self.config.timezone)).strftime("%b %d, %Y %I:%M %p")

    def format_time(self, value: datetime | None) -> str:
        """Format a time of day in the configured timezone."""
        if value is None:
            return "Not set"
        return value.astimezone(ZoneInfo(self.config.timezone)).strftime("%H:%M")

    def format_range(self, pagination: Pagination) -> str:
        """Format the visible item range (e.g. '21-23 of 23')."""
        return (
            f"{pagination.first_item_number}-{pagination.last_item_number} of {pagination.total}"
        )
