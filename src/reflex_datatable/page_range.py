"""Compressed page-number ranges for pagination controls.

For 20 pages and 7 slots the control shows, depending on the current page::

    page 2   ->  1 2 3 4 5 … 20
    page 10  ->  1 … 9 10 11 … 20
    page 19  ->  1 … 16 17 18 19 20

The first and last page are always shown.  Every run of hidden pages
collapses into one ellipsis, except a run of a single page, which is shown
as its number since it takes the same slot.  The same windowing rule is used
at both ends.
"""

import math

from reflex_datatable.exceptions import GridConfigurationError
from reflex_datatable.models import ELLIPSIS, PageToken
from reflex_datatable.pagination import clamp_page

MIN_VISIBLE_PAGES: int = 5
"""Smallest slot count that fits two anchors, two ellipses and the current page."""


def _with_gaps(pages: list[int]) -> list[PageToken]:
    tokens: list[PageToken] = []
    previous: int | None = None
    for page in pages:
        if previous is not None:
            gap = page - previous
            if gap == 2:
                tokens.append(previous + 1)
            elif gap > 2:
                tokens.append(ELLIPSIS)
        tokens.append(page)
        previous = page
    return tokens


def compute_page_range(
    current_page: int,
    total_pages: int,
    max_visible: int = 7,
) -> list[PageToken]:
    """Return the page tokens to display.

    Args:
        current_page: The active page; clamped into ``[1, total_pages]``.
        total_pages: Number of pages (>= 1).
        max_visible: Slot budget, ellipses included (>= 5).

    Returns:
        Page numbers and :data:`~reflex_datatable.models.ELLIPSIS` markers.
        At most *max_visible* tokens; first is ``1`` and last is
        *total_pages*; no number repeats.

    Raises:
        GridConfigurationError: If *total_pages* < 1 or *max_visible* < 5.
    """
    if total_pages < 1:
        raise GridConfigurationError("total_pages must be >= 1", total_pages=total_pages)
    if max_visible < MIN_VISIBLE_PAGES:
        raise GridConfigurationError(
            f"max_visible must be >= {MIN_VISIBLE_PAGES}", max_visible=max_visible
        )

    if total_pages <= max_visible:
        return list(range(1, total_pages + 1))

    current = clamp_page(current_page, total_pages)
    edge_span = max_visible - 2  # numbers shown next to an anchor at either end
    near = math.ceil(edge_span / 2) + 1

    if current <= near:
        pages = [*range(1, edge_span + 1), total_pages]
    elif current > total_pages - near:
        pages = [1, *range(total_pages - edge_span + 1, total_pages + 1)]
    else:
        inner = max_visible - 4
        start = current - (inner - 1) // 2
        pages = [1, *range(start, start + inner), total_pages]

    return _with_gaps(pages)
