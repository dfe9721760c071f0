"""Sort stage: stable single-field ordering with missing values last.

Rules, in order:

1. No sort field: the rows keep their input order.
2. Rows whose value is ``None`` go last, in input order, whatever the
   direction.
3. The remaining rows are compared with the column's ``comparator`` when it
   has one, otherwise by :func:`compare_values`.  ``DESC`` negates the
   comparison.
4. The sort is stable: rows that compare equal keep their input order in
   both directions.

An engine-level ``sort_function(a_row, b_row, field, direction)`` bypasses
rules 2 and 3 entirely.
"""

import locale
import numbers
from collections.abc import Callable, Iterable
from functools import cmp_to_key
from typing import Any

from reflex_datatable.models import ColumnDescriptor, SortDirection, SortState, find_column
from reflex_datatable.paths import resolve

RowSortFunction = Callable[[Any, Any, str, SortDirection], int]


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _sign(result: Any) -> int:
    return (result > 0) - (result < 0)


def compare_values(a: Any, b: Any) -> int:
    """Compare two non-null values, returning -1, 0 or 1.

    * two strings: locale-aware (:func:`locale.strcoll`),
    * two numbers: numeric,
    * otherwise ``<`` / ``>``; values Python cannot order against each
      other (``3`` vs ``"x"``) fall back to ``(type name, str(value))`` so
      mixed columns still sort deterministically.
    """
    if isinstance(a, str) and isinstance(b, str):
        return _sign(locale.strcoll(a, b))
    if _is_number(a) and _is_number(b):
        return _sign(a - b) if a != b else 0
    try:
        if a < b:
            return -1
        if a > b:
            return 1
        return 0
    except TypeError:
        left = (type(a).__name__, str(a))
        right = (type(b).__name__, str(b))
        return (left > right) - (left < right)


def apply_sort(
    rows: Iterable[Any],
    sort: SortState,
    columns: Iterable[ColumnDescriptor],
    sort_function: RowSortFunction | None = None,
) -> list[Any]:
    """Return *rows* ordered by *sort* as a new list.

    Args:
        rows: The dataset (typically already filtered).  Never modified.
        sort: Field and direction.  ``field=None`` keeps input order.
        columns: Column descriptors, consulted for a custom ``comparator``.
        sort_function: Optional row comparator replacing the built-in rules.

    Returns:
        A new, stably sorted list.
    """
    items = list(rows)
    field = sort.field
    if field is None:
        return items

    direction = sort.direction

    if sort_function is not None:
        key = cmp_to_key(lambda a, b: sort_function(a, b, field, direction))
        return sorted(items, key=key)

    column = find_column(list(columns), field)
    compare = column.comparator if column is not None and column.comparator else compare_values
    sign = -1 if direction is SortDirection.DESC else 1

    present: list[tuple[Any, Any]] = []
    missing: list[Any] = []
    for row in items:
        value = resolve(row, field)
        if value is None:
            missing.append(row)
        else:
            present.append((value, row))

    # sorted() is stable; negating the comparison keeps ties in input order.
    ordered = sorted(present, key=cmp_to_key(lambda a, b: sign * _sign(compare(a[0], b[0]))))
    return [row for _, row in ordered] + missing
