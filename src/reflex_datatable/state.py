"""Reflex state mixin exposing a :class:`GridEngine` to the front end.

Users inherit from :class:`DataTableMixin` **and** ``rx.State``, call
:meth:`DataTableMixin.set_datatable` with rows (dicts) and columns, and bind
their own table and pagination components to the ``dt_*`` vars and
``handle_dt_*`` event handlers.

``DataTableMixin`` is a Reflex **state mixin** (``mixin=True``).  Each
subclass gets its own independent set of ``dt_*`` reactive variables, so
several tables on one page do not interfere with each other.

Typical usage::

    from reflex_datatable.state import DataTableMixin
    from reflex_datatable.polars_utils import frame_to_grid, scan_file

    class LoadsState(DataTableMixin, rx.State):
        def load_data(self):
            rows, columns, id_field = frame_to_grid(scan_file(Path("loads.csv")))
            self.set_datatable(rows, columns, id_field=id_field, page_size=25)

Keystroke debouncing is left to the input component (``rx.input`` with
``debounce_timeout``), so filter text reaching :meth:`handle_dt_filter` is
applied immediately.
"""

import uuid
from typing import Any

import reflex as rx

from reflex_datatable.engine import GridEngine
from reflex_datatable.log import debug, warn
from reflex_datatable.models import (
    ColumnDescriptor,
    FilteringOptions,
    PaginationOptions,
    SelectionMode,
    SelectionOptions,
    SortDirection,
    SortingOptions,
)
from reflex_datatable.paths import resolve


# ---------------------------------------------------------------------------
# Module-level engine registry
# ---------------------------------------------------------------------------

# GridEngine instances hold callables and a timer, so they cannot live inside
# rx.State.  They are kept here keyed by "<state class>:<client token>": an
# engine holds one user's page, sort, filters and selection, so each browser
# session gets its own.
_engine_registry: dict[str, GridEngine] = {}


def _get_engine(cache_id: str) -> GridEngine | None:
    """Return the engine registered under *cache_id*, if any."""
    return _engine_registry.get(cache_id)


def _register_engine(cache_id: str, engine: GridEngine) -> None:
    """Register *engine*, disposing the engine it replaces."""
    previous = _engine_registry.get(cache_id)
    if previous is not None and previous is not engine:
        previous.dispose()
    _engine_registry[cache_id] = engine


def _release_engine(cache_id: str) -> bool:
    """Dispose and forget the engine under *cache_id*.  Returns whether one existed."""
    engine = _engine_registry.pop(cache_id, None)
    if engine is None:
        return False
    engine.dispose()
    return True


# ---------------------------------------------------------------------------
# DataTableMixin
# ---------------------------------------------------------------------------

class DataTableMixin(rx.State, mixin=True):
    """Reflex State mixin wiring a :class:`GridEngine` to ``dt_*`` vars.

    All state variable names are prefixed with ``dt_`` to avoid collisions
    when composed with other state.
    """

    # -- Frontend state vars --
    dt_rows: list[dict[str, Any]] = []
    dt_columns: list[dict[str, Any]] = []
    dt_loaded: bool = False
    dt_current_page: int = 1
    dt_page_size: int = 10
    dt_page_size_options: list[int] = []
    dt_total_pages: int = 1
    dt_total_items: int = 0
    dt_has_previous: bool = False
    dt_has_next: bool = False
    dt_page_tokens: list[str] = []
    dt_range_label: str = ""
    dt_sort_field: str = ""
    dt_sort_direction: str = "asc"
    dt_filters: dict[str, str] = {}
    dt_selected_ids: list[str] = []

    # -- Backend-only vars (not sent to frontend) --
    _dt_cache_id: str = ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def set_datatable(
        self,
        rows: list[dict[str, Any]],
        columns: list[ColumnDescriptor],
        *,
        id_field: str = "id",
        page_size: int | None = None,
        sort_field: str | None = None,
        sort_direction: str = "asc",
        selection_mode: str = "multiple",
        total_items: int | None = None,
    ) -> None:
        """Build a fresh engine for *rows* and publish its first page.

        Args:
            rows: Row dicts (see :func:`~reflex_datatable.polars_utils.frame_to_rows`).
            columns: Column descriptors.
            id_field: Path of the row identity used for selection.
            page_size: Rows per page; the configured default when ``None``.
            sort_field: Initial sort field.
            sort_direction: ``"asc"`` or ``"desc"``.
            selection_mode: ``"single"`` or ``"multiple"``.
            total_items: Server-side item count (rows then hold one page).
        """
        cache_id = self._dt_cache_id or self._dt_session_key()
        self._dt_cache_id = cache_id  # type: ignore[assignment]

        pagination = (
            PaginationOptions(page_size=page_size, total_items=total_items)
            if page_size is not None
            else PaginationOptions(total_items=total_items)
        )
        engine = GridEngine(
            rows,
            columns,
            pagination=pagination,
            sorting=SortingOptions(
                default_sort_field=sort_field,
                default_sort_direction=SortDirection(sort_direction),
            ),
            filtering=FilteringOptions(debounce_ms=0),
            selection=SelectionOptions(
                mode=SelectionMode(selection_mode),
                get_id=lambda row: resolve(row, id_field),
            ),
        )
        _register_engine(cache_id, engine)

        self.dt_columns = [c.model_dump(by_alias=True) for c in engine.columns]  # type: ignore[assignment]
        self.dt_loaded = True  # type: ignore[assignment]
        self._sync_dt_vars(engine)
        debug(f"[DataTableMixin] {cache_id}: {len(rows)} rows, {len(columns)} columns")

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def handle_dt_page_change(self, page: int) -> None:
        """Go to *page* (clamped)."""
        engine = self._dt_engine()
        if engine is None:
            return
        engine.set_page(int(page))
        self._sync_dt_vars(engine)

    def handle_dt_page_size_change(self, page_size: int | str) -> None:
        """Change the page size (values from a ``<select>`` arrive as strings)."""
        engine = self._dt_engine()
        if engine is None:
            return
        engine.set_page_size(int(page_size))
        self._sync_dt_vars(engine)

    def handle_dt_sort(self, field: str) -> None:
        """Header click: sort ascending by a new field, or flip the current one."""
        engine = self._dt_engine()
        if engine is None:
            return
        engine.toggle_sort(field)
        self._sync_dt_vars(engine)

    def handle_dt_filter(self, field: str, text: str) -> None:
        """Apply filter *text* to *field*."""
        engine = self._dt_engine()
        if engine is None:
            return
        engine.set_filter(field, text)
        engine.flush_filters()
        self._sync_dt_vars(engine)

    def clear_dt_filters(self) -> None:
        engine = self._dt_engine()
        if engine is None:
            return
        engine.clear_filters()
        self._sync_dt_vars(engine)

    def handle_dt_row_toggle(self, row: dict[str, Any]) -> None:
        """Row click / checkbox: flip the row's selection."""
        engine = self._dt_engine()
        if engine is None or not row:
            return
        engine.toggle_row(row)
        self._sync_dt_vars(engine)

    def clear_dt_selection(self) -> None:
        engine = self._dt_engine()
        if engine is None:
            return
        engine.clear_selection()
        self._sync_dt_vars(engine)

    def release_datatable(self) -> None:
        """Dispose this session's engine, e.g. from a page's ``on_unload``."""
        if self._dt_cache_id and _release_engine(self._dt_cache_id):
            debug(f"[DataTableMixin] {self._dt_cache_id}: engine released")
        self.dt_loaded = False  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _dt_session_key(self) -> str:
        """Registry key for this state class and browser session."""
        token = self.router.session.client_token or uuid.uuid4().hex
        return f"{type(self).__name__}:{token}"

    def _dt_engine(self) -> GridEngine | None:
        engine = _get_engine(self._dt_cache_id) if self._dt_cache_id else None
        if engine is None:
            warn(f"[DataTableMixin] {type(self).__name__}: no engine; call set_datatable() first")
        return engine

    def _sync_dt_vars(self, engine: GridEngine) -> None:
        """Copy the engine's current view into the ``dt_*`` vars."""
        view = engine.view().to_dict()
        self.dt_rows = view["rows"]  # type: ignore[assignment]
        self.dt_current_page = view["currentPage"]  # type: ignore[assignment]
        self.dt_page_size = view["pageSize"]  # type: ignore[assignment]
        self.dt_page_size_options = engine.page_size_options  # type: ignore[assignment]
        self.dt_total_pages = view["totalPages"]  # type: ignore[assignment]
        self.dt_total_items = view["totalItems"]  # type: ignore[assignment]
        self.dt_has_previous = view["hasPrevious"]  # type: ignore[assignment]
        self.dt_has_next = view["hasNext"]  # type: ignore[assignment]
        self.dt_page_tokens = view["pageTokens"]  # type: ignore[assignment]
        self.dt_range_label = view["rangeLabel"]  # type: ignore[assignment]
        self.dt_sort_field = view["sortField"]  # type: ignore[assignment]
        self.dt_sort_direction = view["sortDirection"]  # type: ignore[assignment]
        self.dt_filters = view["filters"]  # type: ignore[assignment]
        self.dt_selected_ids = view["selectedIds"]  # type: ignore[assignment]
