"""Pydantic models for column descriptors, grid state and grid options.

Attributes are snake_case in Python and serialise to camelCase
(``model_dump(by_alias=True)``) for front-end state.  Callables (comparators,
callbacks, identity functions) are excluded from serialisation.
"""

import math
from collections.abc import Callable, Hashable
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from reflex_datatable.config import get_settings
from reflex_datatable.paths import humanize_path, resolve, validate_path

ELLIPSIS: Literal["..."] = "..."
"""Marker token for a run of hidden pages in a compressed page range."""

PageToken = int | Literal["..."]
FilterState = dict[str, str]
Identity = Hashable

DEFAULT_ID_FIELD: str = "id"


class SortDirection(str, Enum):
    """Sort direction of a column."""

    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class SelectionMode(str, Enum):
    """Row selection mode: at most one row, or any set of rows."""

    SINGLE = "single"
    MULTIPLE = "multiple"


def default_get_id(row: Any) -> Any:
    """Identity function used when none is supplied: the row's ``id`` field."""
    return resolve(row, DEFAULT_ID_FIELD)


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


# ---------------------------------------------------------------------------
# Columns
# ---------------------------------------------------------------------------

class ColumnDescriptor(_CamelModel):
    """Declarative description of one grid column.

    Attributes:
        field: Dot-separated path to the value inside a row.
        header: Column label.  Defaults to the humanised last path segment.
        sortable: Whether the grid may be sorted by this column.
        filterable: Whether a filter on ``field`` is honoured.
        comparator: Optional ``(a, b) -> int`` over two non-null *values*
            of this column, used instead of the default comparison.
    """

    model_config = ConfigDict(frozen=True)

    field: str
    header: str | None = None
    sortable: bool = True
    filterable: bool = True
    comparator: Callable[[Any, Any], int] | None = Field(default=None, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _default_header(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("header") is None:
            field = data.get("field")
            if isinstance(field, str):
                data = {**data, "header": humanize_path(field)}
        return data

    @field_validator("field")
    @classmethod
    def _check_field(cls, v: str) -> str:
        return validate_path(v)


def find_column(columns: list[ColumnDescriptor], field: str) -> ColumnDescriptor | None:
    """Return the first column whose ``field`` equals *field*, or ``None``."""
    for column in columns:
        if column.field == field:
            return column
    return None


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------

class SortState(_CamelModel):
    """Current sort: a field (or ``None`` for input order) and a direction."""

    model_config = ConfigDict(frozen=True)

    field: str | None = None
    direction: SortDirection = SortDirection.ASC

    @field_validator("field")
    @classmethod
    def _check_field(cls, v: str | None) -> str | None:
        return validate_path(v) if v is not None else None


class PaginationState(_CamelModel):
    """Page position with the derived page count."""

    model_config = ConfigDict(frozen=True)

    current_page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)
    total_items: int = Field(default=0, ge=0)

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_items / self.page_size))


class SelectionState(_CamelModel):
    """Selected row identities and the mode they were selected under."""

    model_config = ConfigDict(frozen=True)

    mode: SelectionMode = SelectionMode.MULTIPLE
    selected_ids: tuple[Any, ...] = ()


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

class PaginationOptions(_CamelModel):
    """Pagination configuration.

    Attributes:
        enabled: Slice the sorted rows into pages.
        page_size: Rows per page.
        current_page: Initial page (1-based).
        total_items: Server-side mode.  When set, the grid trusts this count
            for the page total and shows the rows it is given without
            slicing them.
        page_size_options: Page sizes a page-size selector may offer.
        on_page_change: Called with the new page whenever it changes.
        on_page_size_change: Called with the new page size.
    """

    enabled: bool = True
    page_size: int = Field(default_factory=lambda: get_settings().default_page_size, ge=1)
    current_page: int = Field(default=1, ge=1)
    total_items: int | None = Field(default=None, ge=0)
    page_size_options: list[int] = Field(
        default_factory=lambda: list(get_settings().page_size_options)
    )
    on_page_change: Callable[[int], Any] | None = Field(default=None, exclude=True)
    on_page_size_change: Callable[[int], Any] | None = Field(default=None, exclude=True)

    @field_validator("page_size_options")
    @classmethod
    def _check_options(cls, v: list[int]) -> list[int]:
        if any(size < 1 for size in v):
            raise ValueError("page_size_options must all be >= 1")
        return v

    @model_validator(mode="after")
    def _page_size_offered(self) -> "PaginationOptions":
        if self.page_size in self.page_size_options:
            return self
        if "page_size_options" in self.model_fields_set:
            raise ValueError(
                f"page_size {self.page_size} is not one of page_size_options "
                f"{self.page_size_options}"
            )
        # Defaults from settings: offer the configured size alongside them.
        self.page_size_options = sorted({*self.page_size_options, self.page_size})
        return self


class SortingOptions(_CamelModel):
    """Sorting configuration.

    ``sort_function(a, b, field, direction)`` replaces the whole row
    comparison, including the rule that missing values sort last.
    """

    enabled: bool = True
    default_sort_field: str | None = None
    default_sort_direction: SortDirection = SortDirection.ASC
    on_sort: Callable[[str | None, SortDirection], Any] | None = Field(default=None, exclude=True)
    sort_function: Callable[[Any, Any, str, SortDirection], int] | None = Field(
        default=None, exclude=True
    )

    @field_validator("default_sort_field")
    @classmethod
    def _check_field(cls, v: str | None) -> str | None:
        return validate_path(v) if v is not None else None


class FilteringOptions(_CamelModel):
    """Filtering configuration.

    Filter text is applied ``debounce_ms`` after the last change; ``0``
    applies it immediately.  ``filter_function(rows, filters)`` replaces
    the built-in substring filter.
    """

    enabled: bool = True
    default_filters: FilterState = Field(default_factory=dict)
    on_filter: Callable[[FilterState], Any] | None = Field(default=None, exclude=True)
    filter_function: Callable[[list[Any], FilterState], list[Any]] | None = Field(
        default=None, exclude=True
    )
    debounce_ms: int = Field(default_factory=lambda: get_settings().filter_debounce_ms, ge=0)

    @field_validator("default_filters")
    @classmethod
    def _check_filters(cls, v: FilterState) -> FilterState:
        for field in v:
            validate_path(field)
        return v


class SelectionOptions(_CamelModel):
    """Selection configuration.

    ``get_id`` maps a row to its identity; the default reads a field named
    ``id``.  Identities must be hashable.
    """

    enabled: bool = True
    mode: SelectionMode = SelectionMode.MULTIPLE
    selected_ids: list[Any] = Field(default_factory=list)
    on_selection_change: Callable[[list[Any], list[Any]], Any] | None = Field(
        default=None, exclude=True
    )
    get_id: Callable[[Any], Any] = Field(default=default_get_id, exclude=True)

    @field_validator("selected_ids")
    @classmethod
    def _check_hashable(cls, v: list[Any]) -> list[Any]:
        for item in v:
            if not isinstance(item, Hashable):
                raise ValueError(f"selected id {item!r} is not hashable")
        return v

    @model_validator(mode="after")
    def _single_mode_holds_one(self) -> "SelectionOptions":
        if self.mode is SelectionMode.SINGLE and len(set(self.selected_ids)) > 1:
            raise ValueError("SINGLE selection mode accepts at most one selected id")
        return self
