"""Trip and stop status enumerations."""

from enum import StrEnum


class TripStatus(StrEnum):
    """Status of a delivery trip."""

    CREATED = "Created"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"

    @property
    def is_terminal(self) -> bool:
        """Whether the trip can no longer change status."""
        return self in (TripStatus.COMPLETED, TripStatus.CANCELLED)


class StopStatus(StrEnum):
    """Status of a single store visit within a trip."""

    PENDING = "Pending"
    IN_TRANSIT = "InTransit"
    DELIVERED = "Delivered"
    FAILED = "Failed"

    @property
    def is_terminal(self) -> bool:
        """Delivered and Failed never revert."""
        return self in (StopStatus.DELIVERED, StopStatus.FAILED)
