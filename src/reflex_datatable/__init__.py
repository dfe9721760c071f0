"""reflex-datatable – filter, sort, paginate and select in-memory tabular data.

The core (:class:`GridEngine` and the stages it composes) is plain Python and
works with any row type: dicts, dataclasses, pydantic models.  Adapters are
included for polars frames and for Reflex state::

    pip install reflex-datatable

Minimal use::

    from reflex_datatable import ColumnDescriptor, GridEngine, PaginationOptions

    engine = GridEngine(rows, [ColumnDescriptor(field="status")],
                        pagination=PaginationOptions(page_size=10))
    engine.page_items
"""

from reflex_datatable.debounce import DebounceScheduler
from reflex_datatable.engine import GridEngine, GridView
from reflex_datatable.exceptions import (
    DataTableError,
    GridConfigurationError,
    GridDisposedError,
    InvalidPathError,
)
from reflex_datatable.filtering import active_filters, apply_filters
from reflex_datatable.models import (
    ELLIPSIS,
    ColumnDescriptor,
    FilteringOptions,
    FilterState,
    PageToken,
    PaginationOptions,
    PaginationState,
    SelectionMode,
    SelectionOptions,
    SelectionState,
    SortDirection,
    SortingOptions,
    SortState,
    default_get_id,
)
from reflex_datatable.page_range import compute_page_range
from reflex_datatable.pagination import PageSlice, clamp_page, compute_total_pages, paginate
from reflex_datatable.paths import resolve, validate_path
from reflex_datatable.selection import SelectionManager
from reflex_datatable.sorting import apply_sort, compare_values

__all__ = [
    "ELLIPSIS",
    "ColumnDescriptor",
    "DataTableError",
    "DebounceScheduler",
    "FilterState",
    "FilteringOptions",
    "GridConfigurationError",
    "GridDisposedError",
    "GridEngine",
    "GridView",
    "InvalidPathError",
    "PageSlice",
    "PageToken",
    "PaginationOptions",
    "PaginationState",
    "SelectionManager",
    "SelectionMode",
    "SelectionOptions",
    "SelectionState",
    "SortDirection",
    "SortState",
    "SortingOptions",
    "active_filters",
    "apply_filters",
    "apply_sort",
    "clamp_page",
    "compare_values",
    "compute_page_range",
    "compute_total_pages",
    "default_get_id",
    "paginate",
    "resolve",
    "validate_path",
]
