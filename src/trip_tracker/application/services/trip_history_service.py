"""Server-side paged trip history."""

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from trip_tracker.application.services.progress_aggregator import fleet_progress, trip_progress
from trip_tracker.application.services.query_reducer import paginate
from trip_tracker.domain.models import TripPage, TripQuery, TripViewModel

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from trip_tracker.domain.ports import TripRepository


class TripHistoryService:
    """Service for paging through trips that the backend filters and sorts."""

    def __init__(self, trip_repository: "TripRepository") -> None:
        """Initialize with a trip repository."""
        self._trip_repository = trip_repository

    async def fetch_page(self, query: TripQuery, now: datetime | None = None) -> TripPage:
        """Fetch one page, clamping the page number against the returned total.

        When the requested page lies past the last page (for example because the
        result set shrank), the last page is requested once more instead.
        """
        now = now or datetime.now(UTC)
        query = replace(query, page=max(1, query.page), page_size=max(1, query.page_size))
        page = await self._trip_repository.list_trips(query, now)
        pagination = paginate(page.total_count, query.page_size, query.page)

        if pagination.current_page != query.page:
            logger.info(
                f"Page {query.page} is past the last page ({pagination.total_pages}), "
                f"fetching page {pagination.current_page} instead"
            )
            query = replace(query, page=pagination.current_page)
            page = await self._trip_repository.list_trips(query, now)
            pagination = paginate(page.total_count, query.page_size, query.page)

        return TripPage(items=page.items, total_count=page.total_count, pagination=pagination)

    async def fetch_view(self, query: TripQuery, now: datetime | None = None) -> TripViewModel:
        """Fetch one page and wrap it with progress rows and page statistics."""
        now = now or datetime.now(UTC)
        page = await self.fetch_page(query, now)
        return TripViewModel(
            rows=[trip_progress(trip) for trip in page.items],
            pagination=page.pagination,
            fleet=fleet_progress(page.items),
            last_refreshed_at=now,
        )
