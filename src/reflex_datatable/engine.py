"""GridEngine: the filter -> sort -> paginate pipeline with selection.

The engine owns its inputs (rows, columns, page, page size, sort, filters,
selection) and recomputes the derived view synchronously after every change.
Each stage reruns only when one of its own inputs changed, so paging does not
re-filter and re-sorting does not re-filter.

Filter text is the one delayed input: :meth:`GridEngine.set_filter` records
it as *pending* and a :class:`~reflex_datatable.debounce.DebounceScheduler`
applies it once typing pauses.  Everything else is visible as soon as the
setter returns.

Typical usage::

    from reflex_datatable import (
        ColumnDescriptor, GridEngine, PaginationOptions, SortingOptions,
    )

    engine = GridEngine(
        loads,
        [ColumnDescriptor(field="status"), ColumnDescriptor(field="rate")],
        pagination=PaginationOptions(page_size=25),
        sorting=SortingOptions(default_sort_field="rate"),
    )
    engine.set_filter("status", "avail")
    engine.flush_filters()
    engine.page_items  # first 25 available loads, cheapest first

Call :meth:`GridEngine.dispose` (or use the engine as a context manager)
when done so no debounce timer outlives it.
"""

import threading
import time
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from reflex_datatable.config import get_settings
from reflex_datatable.debounce import DebounceScheduler, TimerFactory
from reflex_datatable.exceptions import GridConfigurationError, GridDisposedError
from reflex_datatable.filtering import active_filters, apply_filters
from reflex_datatable.log import debug
from reflex_datatable.models import (
    ColumnDescriptor,
    FilteringOptions,
    FilterState,
    Identity,
    PageToken,
    PaginationOptions,
    PaginationState,
    SelectionOptions,
    SelectionState,
    SortDirection,
    SortingOptions,
    SortState,
    find_column,
)
from reflex_datatable.page_range import MIN_VISIBLE_PAGES, compute_page_range
from reflex_datatable.pagination import PageSlice, paginate
from reflex_datatable.paths import validate_path
from reflex_datatable.selection import SelectionManager
from reflex_datatable.sorting import apply_sort


@dataclass(frozen=True)
class GridView:
    """Snapshot of everything a table and its pagination control display."""

    page_items: list[Any] = field(default_factory=list)
    current_page: int = 1
    page_size: int = 10
    total_pages: int = 1
    total_items: int = 0
    start_index: int = 0
    end_index: int = 0
    has_previous: bool = False
    has_next: bool = False
    page_tokens: list[PageToken] = field(default_factory=lambda: [1])
    sort: SortState = field(default_factory=SortState)
    filters: FilterState = field(default_factory=dict)
    pending_filters: FilterState = field(default_factory=dict)
    selected_ids: tuple[Identity, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.page_items

    @property
    def range_label(self) -> str:
        """Footer text such as ``"Showing 11-20 of 23"``."""
        if self.is_empty:
            return "No data"
        return f"Showing {self.start_index}-{self.end_index} of {self.total_items}"

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form for front-end state (rows are passed through as-is)."""
        return {
            "rows": list(self.page_items),
            "currentPage": self.current_page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "hasPrevious": self.has_previous,
            "hasNext": self.has_next,
            "pageTokens": [str(token) for token in self.page_tokens],
            "rangeLabel": self.range_label,
            "sortField": self.sort.field or "",
            "sortDirection": self.sort.direction.value,
            "filters": dict(self.filters),
            "selectedIds": [str(row_id) for row_id in self.selected_ids],
        }


def _coerce_columns(columns: Iterable[ColumnDescriptor | Mapping[str, Any]]) -> list[ColumnDescriptor]:
    result: list[ColumnDescriptor] = []
    for column in columns:
        if isinstance(column, ColumnDescriptor):
            result.append(column)
        else:
            result.append(ColumnDescriptor.model_validate(column))
    return result


class GridEngine:
    """Filtered, sorted, paginated and selectable view over an in-memory dataset.

    Args:
        rows: The dataset.  Treated as read-only; replace it with
            :meth:`set_rows`.
        columns: Column descriptors (or dicts accepted by
            :class:`ColumnDescriptor`).
        pagination: Pagination options; pagination is off when omitted.
        sorting: Sorting options; sorting is off when omitted.
        filtering: Filtering options; filtering is off when omitted.
        selection: Selection options; selection is off when omitted.
        timer_factory: Timer source for the filter debounce (see
            :mod:`reflex_datatable.debounce`).
        max_visible_pages: Slot budget for :meth:`page_tokens`.

    Raises:
        GridConfigurationError: If the default sort names a column declared
            ``sortable=False``, or *max_visible_pages* is below 5.
    """

    def __init__(
        self,
        rows: Sequence[Any],
        columns: Iterable[ColumnDescriptor | Mapping[str, Any]],
        *,
        pagination: PaginationOptions | None = None,
        sorting: SortingOptions | None = None,
        filtering: FilteringOptions | None = None,
        selection: SelectionOptions | None = None,
        timer_factory: TimerFactory | None = None,
        max_visible_pages: int | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._disposed = False

        self._rows: Sequence[Any] = rows
        self._columns = _coerce_columns(columns)

        self.pagination = pagination or PaginationOptions(enabled=False)
        self.sorting = sorting or SortingOptions(enabled=False)
        self.filtering = filtering or FilteringOptions(enabled=False)
        self.selection = selection or SelectionOptions(enabled=False)
        if max_visible_pages is None:
            max_visible_pages = get_settings().max_visible_pages
        elif max_visible_pages < MIN_VISIBLE_PAGES:
            raise GridConfigurationError(
                f"max_visible_pages must be >= {MIN_VISIBLE_PAGES}",
                max_visible_pages=max_visible_pages,
            )
        self.max_visible_pages = max_visible_pages

        self._page = self.pagination.current_page
        self._page_size = self.pagination.page_size
        self._total_items = self.pagination.total_items

        self._sort = SortState(
            field=self.sorting.default_sort_field,
            direction=self.sorting.default_sort_direction,
        )
        self._check_sortable(self._sort.field)

        self._filters: FilterState = dict(self.filtering.default_filters)
        self._pending_filters: FilterState = dict(self._filters)
        self._scheduler: DebounceScheduler[FilterState] = DebounceScheduler(
            timer_factory, name="filters"
        )

        self._selection = SelectionManager(
            mode=self.selection.mode,
            get_id=self.selection.get_id,
            selected_ids=self.selection.selected_ids,
        )

        self._filtered: list[Any] | None = None
        self._sorted: list[Any] | None = None
        self._slice: PageSlice | None = None
        self._recompute()

    # ------------------------------------------------------------------
    # Derived view
    # ------------------------------------------------------------------

    @property
    def rows(self) -> Sequence[Any]:
        return self._rows

    @property
    def columns(self) -> list[ColumnDescriptor]:
        return list(self._columns)

    @property
    def filtered_rows(self) -> list[Any]:
        """Rows passing the applied filters, in input order."""
        with self._lock:
            self._recompute()
            return list(self._filtered or [])

    @property
    def sorted_rows(self) -> list[Any]:
        """The filtered rows in sort order: the dataset selection resolves against."""
        with self._lock:
            self._recompute()
            return list(self._sorted or [])

    @property
    def page(self) -> PageSlice:
        with self._lock:
            self._recompute()
            assert self._slice is not None
            return self._slice

    @property
    def page_items(self) -> list[Any]:
        return list(self.page.page_items)

    @property
    def current_page(self) -> int:
        return self.page.current_page

    @property
    def total_pages(self) -> int:
        return self.page.total_pages

    @property
    def total_items(self) -> int:
        return self.page.total_items

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page_size_options(self) -> list[int]:
        return list(self.pagination.page_size_options)

    @property
    def pagination_state(self) -> PaginationState:
        page = self.page
        return PaginationState(
            current_page=page.current_page,
            page_size=self._page_size,
            total_items=page.total_items,
        )

    @property
    def sort(self) -> SortState:
        return self._sort

    @property
    def filters(self) -> FilterState:
        """The filters the current view was computed with."""
        return dict(self._filters)

    @property
    def pending_filters(self) -> FilterState:
        """The latest filter text, possibly not applied yet."""
        return dict(self._pending_filters)

    @property
    def filters_pending(self) -> bool:
        return self._scheduler.pending

    @property
    def selected_ids(self) -> tuple[Identity, ...]:
        return self._selection.selected_ids

    @property
    def selection_state(self) -> SelectionState:
        return self._selection.state

    @property
    def selected_items(self) -> list[Any]:
        """Selected rows present in the filtered and sorted dataset, in sort order."""
        return self._selection.get_selected_items(self.sorted_rows)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def is_selected(self, row: Any) -> bool:
        return self._selection.is_selected(self._selection.row_id(row))

    def page_tokens(self, max_visible: int | None = None) -> list[PageToken]:
        """Compressed page numbers for the current page (see :mod:`reflex_datatable.page_range`)."""
        page = self.page
        return compute_page_range(
            page.current_page,
            page.total_pages,
            self.max_visible_pages if max_visible is None else max_visible,
        )

    def view(self, max_visible: int | None = None) -> GridView:
        """Return a consistent snapshot of the whole view."""
        with self._lock:
            page = self.page
            return GridView(
                page_items=list(page.page_items),
                current_page=page.current_page,
                page_size=self._page_size,
                total_pages=page.total_pages,
                total_items=page.total_items,
                start_index=page.start_index,
                end_index=page.end_index,
                has_previous=page.has_previous,
                has_next=page.has_next,
                page_tokens=self.page_tokens(max_visible),
                sort=self._sort,
                filters=dict(self._filters),
                pending_filters=dict(self._pending_filters),
                selected_ids=self._selection.selected_ids,
            )

    # ------------------------------------------------------------------
    # Data and columns
    # ------------------------------------------------------------------

    def set_rows(self, rows: Sequence[Any]) -> None:
        """Replace the dataset.  The current page is kept, clamped to the new page count."""
        with self._lock:
            self._ensure_live()
            before = self._current_page_or_none()
            self._rows = rows
            self._invalidate_filter()
            self._commit_page(before)

    def set_columns(self, columns: Iterable[ColumnDescriptor | Mapping[str, Any]]) -> None:
        """Replace the column descriptors.

        Raises:
            GridConfigurationError: If the active sort field becomes unsortable.
        """
        with self._lock:
            self._ensure_live()
            new_columns = _coerce_columns(columns)
            self._check_sortable(self._sort.field, new_columns)
            before = self._current_page_or_none()
            self._columns = new_columns
            self._invalidate_filter()
            self._commit_page(before)

    def set_total_items(self, total_items: int | None) -> None:
        """Set (or with ``None`` clear) the server-side item count."""
        if total_items is not None and total_items < 0:
            raise GridConfigurationError("total_items must be >= 0", total_items=total_items)
        with self._lock:
            self._ensure_live()
            before = self._current_page_or_none()
            self._total_items = total_items
            self._slice = None
            self._commit_page(before)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def set_page(self, page: int) -> bool:
        """Go to *page*, clamped into range.  Returns whether the page changed."""
        with self._lock:
            self._ensure_live()
            if not self.pagination.enabled:
                return False
            before = self._current_page_or_none()
            self._page = page
            self._slice = None
            return self._commit_page(before)

    def next_page(self) -> bool:
        return self.set_page(self.current_page + 1)

    def previous_page(self) -> bool:
        return self.set_page(self.current_page - 1)

    def first_page(self) -> bool:
        return self.set_page(1)

    def last_page(self) -> bool:
        return self.set_page(self.total_pages)

    def set_page_size(self, page_size: int) -> bool:
        """Change the page size and return to page 1.

        Raises:
            GridConfigurationError: If *page_size* < 1.
        """
        if page_size < 1:
            raise GridConfigurationError("page_size must be >= 1", page_size=page_size)
        with self._lock:
            self._ensure_live()
            if not self.pagination.enabled or page_size == self._page_size:
                return False
            before = self._current_page_or_none()
            self._page_size = page_size
            self._page = 1
            self._slice = None
            self._recompute()
            debug(f"[GridEngine] page size -> {page_size}")
            self._emit(self.pagination.on_page_size_change, page_size)
            self._commit_page(before)
            return True

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------

    def set_sort(self, field: str | None, direction: SortDirection | str | None = None) -> bool:
        """Sort by *field* (``None`` restores input order).

        The current page is kept.  Returns whether the sort changed.

        Raises:
            GridConfigurationError: If *field* is malformed or names a column
                declared ``sortable=False``.
        """
        new_direction = SortDirection(direction) if direction is not None else SortDirection.ASC
        if field is not None:
            validate_path(field)
        with self._lock:
            self._ensure_live()
            if not self.sorting.enabled:
                return False
            self._check_sortable(field)
            new_sort = SortState(field=field, direction=new_direction)
            if new_sort == self._sort:
                return False
            before = self._current_page_or_none()
            self._sort = new_sort
            self._sorted = None
            self._slice = None
            self._recompute()
            debug(f"[GridEngine] sort -> {field} {new_direction.value}")
            self._emit(self.sorting.on_sort, field, new_direction)
            self._commit_page(before)
            return True

    def toggle_sort(self, field: str) -> bool:
        """Header-click behaviour: a new field sorts ascending, the same field flips."""
        with self._lock:
            if self._sort.field == field:
                return self.set_sort(field, self._sort.direction.flipped())
            return self.set_sort(field, SortDirection.ASC)

    def clear_sort(self) -> bool:
        return self.set_sort(None)

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def set_filter(self, field: str, text: str) -> bool:
        """Update one column's filter text; applied after the debounce delay.

        Returns:
            ``False`` when filtering is disabled, else ``True``.
        """
        validate_path(field)
        with self._lock:
            self._ensure_live()
            if not self.filtering.enabled:
                return False
            self._pending_filters = {**self._pending_filters, field: text}
            self._schedule_filters()
            return True

    def set_filters(self, filters: Mapping[str, str]) -> bool:
        """Replace all filter text; applied after the debounce delay."""
        for field in filters:
            validate_path(field)
        with self._lock:
            self._ensure_live()
            if not self.filtering.enabled:
                return False
            self._pending_filters = dict(filters)
            self._schedule_filters()
            return True

    def flush_filters(self) -> bool:
        """Apply pending filter text now.  Returns whether anything was pending."""
        with self._lock:
            self._ensure_live()
            return self._scheduler.flush()

    def clear_filters(self) -> bool:
        """Drop all filters immediately, cancelling any pending text."""
        with self._lock:
            self._ensure_live()
            if not self.filtering.enabled:
                return False
            self._scheduler.cancel()
            self._pending_filters = {}
            return self._apply_filters({})

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_selection(self, row_id: Identity, selected: bool | None = None) -> bool:
        """Select (``True``), deselect (``False``) or flip (``None``) a row identity."""
        with self._lock:
            self._ensure_live()
            if not self.selection.enabled:
                return False
            changed = self._selection.toggle(row_id, selected)
            if changed:
                self._selection_changed()
            return changed

    def toggle_row(self, row: Any, selected: bool | None = None) -> bool:
        """Like :meth:`toggle_selection`, taking the row itself."""
        return self.toggle_selection(self._selection.row_id(row), selected)

    def set_selected_ids(self, row_ids: Iterable[Identity]) -> bool:
        """Replace the selection, e.g. to follow a controlled value."""
        with self._lock:
            self._ensure_live()
            if not self.selection.enabled:
                return False
            changed = self._selection.replace(row_ids)
            if changed:
                self._selection_changed()
            return changed

    def clear_selection(self) -> bool:
        with self._lock:
            self._ensure_live()
            if not self.selection.enabled:
                return False
            changed = self._selection.clear()
            if changed:
                self._selection_changed()
            return changed

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Cancel the pending filter timer and refuse further changes."""
        with self._lock:
            if self._disposed:
                return
            self._scheduler.close()
            self._disposed = True
            debug("[GridEngine] disposed")

    def __enter__(self) -> "GridEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _ensure_live(self) -> None:
        if self._disposed:
            raise GridDisposedError("GridEngine has been disposed")

    def _check_sortable(
        self,
        field: str | None,
        columns: list[ColumnDescriptor] | None = None,
    ) -> None:
        if field is None:
            return
        column = find_column(self._columns if columns is None else columns, field)
        if column is not None and not column.sortable:
            raise GridConfigurationError("Column is not sortable", field=field)

    def _effective_filters(self, filters: Mapping[str, str]) -> FilterState:
        if self.filtering.filter_function is not None:
            return {k: v for k, v in filters.items() if v is not None and str(v).strip()}
        return active_filters(filters, self._columns)

    def _schedule_filters(self) -> None:
        self._scheduler.schedule(
            dict(self._pending_filters),
            self.filtering.debounce_ms,
            self._apply_filters,
        )

    def _apply_filters(self, filters: FilterState) -> bool:
        with self._lock:
            if self._disposed:
                return False
            changed = self._effective_filters(filters) != self._effective_filters(self._filters)
            self._filters = dict(filters)
            if not changed:
                return False
            before = self._current_page_or_none()
            self._page = 1
            self._invalidate_filter()
            self._recompute()
            debug(f"[GridEngine] filters applied: {self._effective_filters(self._filters)}")
            self._emit(self.filtering.on_filter, dict(self._filters))
            self._commit_page(before)
            return True

    def _invalidate_filter(self) -> None:
        self._filtered = None
        self._sorted = None
        self._slice = None

    def _current_page_or_none(self) -> int | None:
        return self._slice.current_page if self._slice is not None else None

    def _commit_page(self, before: int | None) -> bool:
        """Recompute, then report a page change relative to *before*."""
        self._recompute()
        assert self._slice is not None
        after = self._slice.current_page
        if before is None or after == before:
            return False
        debug(f"[GridEngine] page {before} -> {after}")
        self._emit(self.pagination.on_page_change, after)
        return True

    def _selection_changed(self) -> None:
        ids = list(self._selection.selected_ids)
        debug(f"[GridEngine] selection -> {ids}")
        if self.selection.on_selection_change is not None:
            self._recompute()
            items = self._selection.get_selected_items(self._sorted or [])
            self.selection.on_selection_change(ids, items)

    @staticmethod
    def _emit(callback: Callable[..., Any] | None, *args: Any) -> None:
        if callback is not None:
            callback(*args)

    def _recompute(self) -> None:
        if self._filtered is not None and self._sorted is not None and self._slice is not None:
            return

        t0 = time.perf_counter()
        stages: list[str] = []

        if self._filtered is None:
            self._filtered = self._run_filter()
            stages.append("filter")

        if self._sorted is None:
            if self.sorting.enabled:
                self._sorted = apply_sort(
                    self._filtered, self._sort, self._columns, self.sorting.sort_function
                )
            else:
                self._sorted = list(self._filtered)
            stages.append("sort")

        if self._slice is None:
            self._slice = self._run_paginate(self._sorted)
            # Clamping is sticky: the stored page follows the clamped one.
            self._page = self._slice.current_page
            stages.append("paginate")

        elapsed_ms = (time.perf_counter() - t0) * 1000
        debug(
            f"[GridEngine] recompute ({'+'.join(stages)}): "
            f"rows={len(self._rows)}, filtered={len(self._filtered)}, "
            f"page={self._slice.current_page}/{self._slice.total_pages}, "
            f"elapsed={elapsed_ms:.1f}ms"
        )

    def _run_filter(self) -> list[Any]:
        if not self.filtering.enabled:
            return list(self._rows)
        if self.filtering.filter_function is not None:
            effective = self._effective_filters(self._filters)
            if not effective:
                return list(self._rows)
            return list(self.filtering.filter_function(list(self._rows), effective))
        return apply_filters(self._rows, self._filters, self._columns)

    def _run_paginate(self, rows: list[Any]) -> PageSlice:
        if self.pagination.enabled:
            return paginate(rows, self._page, self._page_size, self._total_items)
        count = len(rows)
        return PageSlice(
            page_items=list(rows),
            current_page=1,
            page_size=self._page_size,
            total_pages=1,
            total_items=count,
            start_index=1 if count else 0,
            end_index=count,
        )
