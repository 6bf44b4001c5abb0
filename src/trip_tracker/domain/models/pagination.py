"""Pagination domain model."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Pagination:
    """A clamped page position within a result set.

    ``start_index`` and ``end_index`` are 0-based slice bounds.
    """

    total: int
    page_size: int
    current_page: int
    total_pages: int
    start_index: int
    end_index: int
    page_numbers: list[int] = field(default_factory=list)  # At most 5 page buttons

    @property
    def first_item_number(self) -> int:
        """1-based number of the first item on the page, 0 when empty."""
        return self.start_index + 1 if self.total else 0

    @property
    def last_item_number(self) -> int:
        return self.end_index

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages
