"""Search, filter, sort and pagination over a trip collection."""

import logging
import math
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from trip_tracker.domain.models import (
    DateRange,
    Pagination,
    Trip,
    TripPage,
    TripQuery,
    TripSortField,
    TripStatus,
)

logger = logging.getLogger(__name__)

MAX_PAGE_BUTTONS = 5

_TRAILING_WINDOWS: dict[DateRange, timedelta] = {
    DateRange.WEEK: timedelta(days=7),
    DateRange.MONTH: timedelta(days=30),
}


def matches_search(trip: Trip, search: str) -> bool:
    """Case-insensitive substring match on dispatcher name, vehicle and trip id."""
    needle = search.strip().lower()
    if not needle:
        return True
    return (
        needle in str(trip.id)
        or needle in (trip.dispatcher_name or "").lower()
        or needle in (trip.vehicle_id or "").lower()
    )


def matches_status(trip: Trip, status: TripStatus | None) -> bool:
    return status is None or trip.status == status


def matches_date_range(trip: Trip, date_range: DateRange, now: datetime) -> bool:
    """Check the trip's departure time against a window ending at ``now``.

    Today compares calendar dates in ``now``'s timezone. Trips that have not
    departed only match ``DateRange.ALL``.
    """
    if date_range == DateRange.ALL:
        return True
    if trip.departure_at is None:
        return False
    departure = _align_timezone(trip.departure_at, now)
    if date_range == DateRange.TODAY:
        return departure.date() == now.date()
    return departure >= now - _TRAILING_WINDOWS[date_range]


def _align_timezone(moment: datetime, now: datetime) -> datetime:
    """Express ``moment`` in ``now``'s timezone; naive values are read as UTC."""
    if now.tzinfo is None:
        return moment if moment.tzinfo is None else moment.astimezone(UTC).replace(tzinfo=None)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    return moment.astimezone(now.tzinfo)


def matches_warehouse(trip: Trip, warehouse_id: int | None) -> bool:
    return warehouse_id is None or trip.warehouse_id == warehouse_id


def matches_dispatcher(trip: Trip, dispatcher_id: int | None) -> bool:
    return dispatcher_id is None or trip.dispatcher_id == dispatcher_id


def filter_trips(trips: Iterable[Trip], query: TripQuery, now: datetime) -> list[Trip]:
    """Apply search, status, date range, warehouse and dispatcher filters in that order."""
    return [
        trip
        for trip in trips
        if matches_search(trip, query.search)
        and matches_status(trip, query.status)
        and matches_date_range(trip, query.date_range, now)
        and matches_warehouse(trip, query.warehouse_id)
        and matches_dispatcher(trip, query.dispatcher_id)
    ]


def _as_aware(moment: datetime | None) -> datetime | None:
    if moment is None or moment.tzinfo is not None:
        return moment
    return moment.replace(tzinfo=UTC)


def _sort_value(trip: Trip, sort_by: TripSortField) -> object:
    match sort_by:
        case TripSortField.DEPARTURE_AT:
            return _as_aware(trip.departure_at)
        case TripSortField.COMPLETED_AT:
            return _as_aware(trip.completed_at)
        case TripSortField.TOTAL_VALUE:
            return trip.total_value
        case TripSortField.ID:
            return trip.id


def sort_trips(
    trips: Iterable[Trip],
    sort_by: TripSortField = TripSortField.DEPARTURE_AT,
    descending: bool = True,
) -> list[Trip]:
    """Sort trips by a field, ties broken by id. Missing values always sort last."""
    present: list[Trip] = []
    missing: list[Trip] = []
    for trip in trips:
        (missing if _sort_value(trip, sort_by) is None else present).append(trip)

    present.sort(key=lambda t: (_sort_value(t, sort_by), t.id), reverse=descending)
    missing.sort(key=lambda t: t.id, reverse=descending)
    return present + missing


def total_pages(total: int, page_size: int) -> int:
    """Number of pages, never less than 1."""
    return max(1, math.ceil(total / max(1, page_size)))


def clamp_page(current_page: int, total: int, page_size: int) -> int:
    """Clamp a 1-based page number into the valid range for a result set."""
    return min(max(1, current_page), total_pages(total, page_size))


def page_window(total_page_count: int, current_page: int) -> list[int]:
    """Page numbers to render as buttons, at most five, keeping the current page centred.

    Examples:
        page_window(10, 1) -> [1, 2, 3, 4, 5]
        page_window(10, 5) -> [3, 4, 5, 6, 7]
        page_window(10, 10) -> [6, 7, 8, 9, 10]
    """
    if total_page_count <= MAX_PAGE_BUTTONS:
        return list(range(1, total_page_count + 1))
    if current_page <= 3:
        first = 1
    elif current_page >= total_page_count - 2:
        first = total_page_count - 4
    else:
        first = current_page - 2
    return list(range(first, first + MAX_PAGE_BUTTONS))


def paginate(total: int, page_size: int, current_page: int) -> Pagination:
    """Compute the clamped page position and slice bounds for a result set.

    Page sizes below 1 are treated as 1.
    """
    size = max(1, page_size)
    pages = total_pages(total, size)
    page = clamp_page(current_page, total, size)
    if page != current_page:
        logger.debug(f"Clamped page {current_page} to {page} ({total} items, {pages} pages)")
    return Pagination(
        total=total,
        page_size=size,
        current_page=page,
        total_pages=pages,
        start_index=(page - 1) * size,
        end_index=min(page * size, total),
        page_numbers=page_window(pages, page),
    )


def reduce_trips(trips: Iterable[Trip], query: TripQuery, now: datetime) -> TripPage:
    """Filter, sort and paginate a trip collection for display.

    A query that matches nothing yields an empty page, never an error.
    """
    matching = sort_trips(filter_trips(trips, query, now), query.sort_by, query.sort_descending)
    pagination = paginate(len(matching), query.page_size, query.page)
    return TripPage(
        items=matching[pagination.start_index : pagination.end_index],
        total_count=len(matching),
        pagination=pagination,
    )
