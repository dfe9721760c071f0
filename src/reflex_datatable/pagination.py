"""Pagination stage: page count, clamping and slicing.

Pages are 1-based.  An empty dataset still has one (empty) page, and a
requested page outside ``[1, total_pages]`` is clamped, never rejected.
"""

import math
from dataclasses import dataclass, field
from typing import Any

from reflex_datatable.exceptions import GridConfigurationError


def compute_total_pages(total_items: int, page_size: int) -> int:
    """Return ``max(1, ceil(total_items / page_size))``.

    Raises:
        GridConfigurationError: If *page_size* < 1 or *total_items* < 0.
    """
    if page_size < 1:
        raise GridConfigurationError("page_size must be >= 1", page_size=page_size)
    if total_items < 0:
        raise GridConfigurationError("total_items must be >= 0", total_items=total_items)
    return max(1, math.ceil(total_items / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    """Clamp *page* into ``[1, total_pages]``."""
    return min(max(1, page), max(1, total_pages))


@dataclass(frozen=True)
class PageSlice:
    """One page of a dataset plus the numbers a pagination footer needs.

    ``start_index`` and ``end_index`` are the 1-based positions of the first
    and last row on the page within the whole result ("Showing 11-20 of
    23"); both are 0 when there are no rows.
    """

    page_items: list[Any] = field(default_factory=list)
    current_page: int = 1
    page_size: int = 10
    total_pages: int = 1
    total_items: int = 0
    start_index: int = 0
    end_index: int = 0

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    @property
    def is_empty(self) -> bool:
        return not self.page_items


def paginate(
    rows: list[Any],
    current_page: int,
    page_size: int,
    total_items: int | None = None,
) -> PageSlice:
    """Slice *rows* to the requested page.

    Args:
        rows: The filtered and sorted dataset.  Never modified.
        current_page: Requested page, clamped into range.
        page_size: Rows per page (>= 1).
        total_items: Server-side mode.  When given, *rows* is taken to be
            the page the caller already fetched: it is returned unsliced and
            the page count is computed from *total_items*.

    Returns:
        A :class:`PageSlice`.
    """
    server_side = total_items is not None
    count = total_items if server_side else len(rows)
    total_pages = compute_total_pages(count, page_size)
    page = clamp_page(current_page, total_pages)

    start = (page - 1) * page_size
    page_items = list(rows) if server_side else rows[start : start + page_size]

    if page_items:
        start_index = start + 1
        end_index = min(start + len(page_items), count) if count else start + len(page_items)
    else:
        start_index = end_index = 0

    return PageSlice(
        page_items=page_items,
        current_page=page,
        page_size=page_size,
        total_pages=total_pages,
        total_items=count,
        start_index=start_index,
        end_index=end_index,
    )
