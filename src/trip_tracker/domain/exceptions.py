"""Domain exceptions for trip tracking."""

from typing import Any


class TripTrackerError(Exception):
    """Base exception for trip tracking errors."""


class InvalidStateTransition(TripTrackerError):
    """Raised when a trip or stop status change is not allowed.

    Identifies the attempted edge so callers can tell it apart from
    transport failures.
    """

    def __init__(
        self,
        entity: str,
        entity_id: Any,
        from_status: str | None,
        to_status: str | None,
        reason: str,
    ) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        super().__init__(
            f"Cannot move {entity} {entity_id} from {from_status} to {to_status}: {reason}"
        )


class TripNotFoundError(TripTrackerError):
    """Raised when a trip id is not present in the held collection."""

    def __init__(self, trip_id: int) -> None:
        self.trip_id = trip_id
        super().__init__(f"Trip with ID {trip_id} not found")


class TripFetchError(TripTrackerError):
    """Raised by repositories when trip data could not be fetched."""

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        self.reason = reason
        self.status_code = status_code
        message = reason if status_code is None else f"{reason} (HTTP {status_code})"
        super().__init__(message)
