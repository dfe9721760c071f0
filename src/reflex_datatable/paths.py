"""Dot-path field access for generic rows.

Rows are opaque: a dict from JSON, a dataclass, a pydantic model or a
plain object.  Columns name their value with a dot-separated path such as
``"pickup.city"`` and :func:`resolve` walks it one segment at a time:

* mappings are indexed by key,
* lists and tuples are indexed by position when the segment is an integer,
* anything else is read with ``getattr``.

A missing segment, or a ``None`` met part-way, ends the walk with ``None``.
Resolution never raises for missing data, so the filter and sort stages can
treat "absent" as a value.
"""

from collections.abc import Mapping, Sequence
from functools import lru_cache
from typing import Any

from reflex_datatable.exceptions import InvalidPathError

PATH_SEPARATOR: str = "."


@lru_cache(maxsize=1024)
def split_path(path: str) -> tuple[str, ...]:
    """Split *path* into its segments, validating it on the way.

    Raises:
        InvalidPathError: If *path* is empty or has an empty segment
            (``"a..b"``, ``".a"``, ``"a."``).
    """
    if not isinstance(path, str) or not path.strip():
        raise InvalidPathError("Field path must be a non-empty string", path=path)
    segments = tuple(path.split(PATH_SEPARATOR))
    if any(not segment.strip() for segment in segments):
        raise InvalidPathError("Field path has an empty segment", path=path)
    return segments


def validate_path(path: str) -> str:
    """Return *path* unchanged if it is well formed, else raise :class:`InvalidPathError`."""
    split_path(path)
    return path


def _step(obj: Any, segment: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(segment)
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes)):
        try:
            index = int(segment)
        except ValueError:
            return None
        if -len(obj) <= index < len(obj):
            return obj[index]
        return None
    return getattr(obj, segment, None)


def resolve(row: Any, path: str) -> Any | None:
    """Read the value at *path* from *row*, or ``None`` when any segment is missing.

    Args:
        row: Any record.
        path: Dot-separated field path, e.g. ``"carrier.name"``.

    Returns:
        The resolved value, or ``None``.

    Example::

        >>> resolve({"pickup": {"city": "Reno"}}, "pickup.city")
        'Reno'
        >>> resolve({"pickup": None}, "pickup.city") is None
        True
    """
    current = row
    for segment in split_path(path):
        if current is None:
            return None
        current = _step(current, segment)
    return current


def humanize_path(path: str) -> str:
    """Turn the last segment of a path into a column header.

    Examples:
        ``"rate"`` -> ``"Rate"``
        ``"pickup.city_name"`` -> ``"City Name"``
        ``"__row_id__"`` -> ``"Row Id"``
    """
    last = split_path(path)[-1]
    return last.strip("_").replace("_", " ").title()
