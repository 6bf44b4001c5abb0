"""Translation of trip queries into API query parameters."""

from datetime import datetime, timedelta

from trip_tracker.domain.models import DateRange, TripQuery


def departure_from(date_range: DateRange, now: datetime) -> datetime | None:
    """Earliest departure time admitted by a date range, or None for ALL.

    TODAY starts at midnight in ``now``'s timezone.
    """
    match date_range:
        case DateRange.TODAY:
            return now.replace(hour=0, minute=0, second=0, microsecond=0)
        case DateRange.WEEK:
            return now - timedelta(days=7)
        case DateRange.MONTH:
            return now - timedelta(days=30)
        case DateRange.ALL:
            return None


def build_trip_list_params(query: TripQuery, now: datetime) -> dict[str, str | int]:
    """Build ``GET /trip`` parameters for a query."""
    params: dict[str, str | int] = {
        "pageNumber": max(1, query.page),
        "pageSize": max(1, query.page_size),
        "sortBy": query.sort_by.value,
        # aiohttp only accepts str/int/float parameter values
        "sortDescending": "true" if query.sort_descending else "false",
    }
    if query.status is not None:
        params["status"] = query.status.value
    from_time = departure_from(query.date_range, now)
    if from_time is not None:
        params["departureFrom"] = from_time.isoformat()
    if query.warehouse_id is not None:
        params["warehouseId"] = query.warehouse_id
    if query.dispatcher_id is not None:
        params["dispatcherId"] = query.dispatcher_id
    if query.search.strip():
        params["search"] = query.search.strip()
    return params
