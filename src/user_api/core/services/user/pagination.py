"""Page arithmetic for offset-based listing."""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class PagePlan:
    """Bounds and navigation flags for one requested page."""

    page_number: int
    page_size: int
    total_count: int
    total_pages: int
    offset: int
    has_previous: bool
    has_next: bool

    @property
    def previous_page(self) -> int | None:
        return self.page_number - 1 if self.has_previous else None

    @property
    def next_page(self) -> int | None:
        return self.page_number + 1 if self.has_next else None


class PaginationPlanner:
    """Computes page bounds from a page number, a page size and a total count.

    Link construction is left to the caller; the planner only supplies the
    page numbers a previous/next link should point at.
    """

    @staticmethod
    def offset(page_number: int, page_size: int) -> int:
        return (page_number - 1) * page_size

    @staticmethod
    def total_pages(total_count: int, page_size: int) -> int:
        if total_count <= 0:
            return 0
        return math.ceil(total_count / page_size)

    def plan(self, page_number: int, page_size: int, total_count: int) -> PagePlan:
        if page_number < 1:
            raise ValueError("page_number must be at least 1")
        if page_size < 1:
            raise ValueError("page_size must be at least 1")

        total_pages = self.total_pages(total_count, page_size)
        return PagePlan(
            page_number=page_number,
            page_size=page_size,
            total_count=total_count,
            total_pages=total_pages,
            offset=self.offset(page_number, page_size),
            has_previous=page_number > 1,
            has_next=page_number < total_pages,
        )
