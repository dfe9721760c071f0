"""Filter stage: per-column, case-insensitive substring predicates.

A filter is active for a column when the column is ``filterable`` and its
query text is not blank.  A row survives when it satisfies *every* active
filter; a row whose value is missing (``None``) fails that column's filter.
Values are compared through ``str(value)``, so numbers and dates match on
their text form (``950`` matches ``"95"``), not by type-aware comparison.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from reflex_datatable.models import ColumnDescriptor, FilterState
from reflex_datatable.paths import resolve


def normalize_query(text: str | None) -> str:
    """Return the comparable form of a query, ``""`` when blank."""
    if text is None:
        return ""
    return str(text).strip().casefold()


def active_filters(
    filters: Mapping[str, str],
    columns: Iterable[ColumnDescriptor],
) -> FilterState:
    """Return the filters that constrain the dataset, keyed by field.

    Only filterable columns count, and blank or whitespace-only text is
    inactive.  Keys keep the column order.
    """
    active: FilterState = {}
    for column in columns:
        if not column.filterable:
            continue
        text = filters.get(column.field)
        if normalize_query(text):
            active[column.field] = str(text)
    return active


def matches(row: Any, active: Mapping[str, str]) -> bool:
    """Whether *row* satisfies every filter in *active* (see :func:`active_filters`)."""
    for field, text in active.items():
        value = resolve(row, field)
        if value is None:
            return False
        if normalize_query(text) not in str(value).casefold():
            return False
    return True


def apply_filters(
    rows: Iterable[Any],
    filters: Mapping[str, str],
    columns: Iterable[ColumnDescriptor],
) -> list[Any]:
    """Return the rows that satisfy all active filters, in input order.

    Args:
        rows: The dataset.  Never modified.
        filters: Field path -> query text.
        columns: Column descriptors; decide which fields are filterable.

    Returns:
        A new list.  With no active filter it holds every input row.

    Example::

        >>> cols = [ColumnDescriptor(field="status")]
        >>> rows = [{"status": "AVAILABLE"}, {"status": "CANCELLED"}]
        >>> apply_filters(rows, {"status": "avail"}, cols)
        [{'status': 'AVAILABLE'}]
    """
    active = active_filters(filters, columns)
    if not active:
        return list(rows)
    return [row for row in rows if matches(row, active)]
