"""Utilities for feeding polars DataFrames and LazyFrames into a grid."""

from pathlib import Path
from typing import Any

import polars as pl

from reflex_datatable.models import ColumnDescriptor
from reflex_datatable.paths import humanize_path

ROW_ID_FIELD: str = "__row_id__"

_SCANNERS: dict[str, str] = {
    ".csv": "csv",
    ".tsv": "tsv",
    ".parquet": "parquet",
    ".pq": "parquet",
    ".json": "json",
    ".ndjson": "ndjson",
    ".jsonl": "ndjson",
    ".ipc": "ipc",
    ".arrow": "ipc",
    ".feather": "ipc",
}


# ---------------------------------------------------------------------------
# File scanner
# ---------------------------------------------------------------------------

def scan_file(path: Path) -> pl.LazyFrame:
    """Scan a data file into a LazyFrame, picking the reader from the extension.

    * ``.csv`` -- ``pl.scan_csv()``.
    * ``.tsv`` -- ``pl.scan_csv(separator="\\t")``.
    * ``.parquet`` / ``.pq`` -- ``pl.scan_parquet()``.
    * ``.json`` -- ``pl.read_json().lazy()`` (no streaming scan).
    * ``.ndjson`` / ``.jsonl`` -- ``pl.scan_ndjson()``.
    * ``.ipc`` / ``.arrow`` / ``.feather`` -- ``pl.scan_ipc()``.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If the extension is not recognised.
    """
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    fmt = _SCANNERS.get(suffix)
    if fmt == "csv":
        return pl.scan_csv(path)
    if fmt == "tsv":
        return pl.scan_csv(path, separator="\t")
    if fmt == "parquet":
        return pl.scan_parquet(path)
    if fmt == "json":
        return pl.read_json(path).lazy()
    if fmt == "ndjson":
        return pl.scan_ndjson(path)
    if fmt == "ipc":
        return pl.scan_ipc(path)

    raise ValueError(
        f"Unsupported file extension: {suffix!r}. "
        f"Supported: {', '.join(sorted(_SCANNERS))}"
    )


# ---------------------------------------------------------------------------
# Rows and columns
# ---------------------------------------------------------------------------

_TEMPORAL_TYPES = (pl.Date, pl.Datetime, pl.Time, pl.Duration)


def _struct_target_dtype(dtype: pl.Struct) -> pl.Struct:
    """Return *dtype* with every temporal field (at any depth) as ``pl.String``."""
    fields = []
    for field in dtype.fields:
        inner = field.dtype
        if isinstance(inner, _TEMPORAL_TYPES):
            inner = pl.String
        elif isinstance(inner, pl.Struct):
            inner = _struct_target_dtype(inner)
        fields.append(pl.Field(field.name, inner))
    return pl.Struct(fields)


def frame_to_rows(
    frame: pl.DataFrame | pl.LazyFrame,
    *,
    limit: int | None = None,
) -> list[dict[str, Any]]:
    """Materialise *frame* as a list of JSON-safe dicts.

    Non-JSON-safe column types are converted:

    * Temporal columns (Date, Datetime, Time, Duration) -> ISO-8601 strings.
    * List / Array columns -> comma-joined strings.
    * Struct columns are kept as nested dicts, reachable with dot paths
      such as ``"origin.city"``; temporal fields inside them become
      strings too.
    """
    if isinstance(frame, pl.LazyFrame):
        if limit is not None:
            frame = frame.head(limit)
        df = frame.collect()
    else:
        df = frame.head(limit) if limit is not None else frame

    exprs: list[pl.Expr] = []
    needs_cast = False
    for name, dtype in df.schema.items():
        col = pl.col(name)
        if isinstance(dtype, _TEMPORAL_TYPES):
            exprs.append(col.cast(pl.String))
            needs_cast = True
        elif isinstance(dtype, (pl.List, pl.Array)):
            exprs.append(col.cast(pl.List(pl.String)).list.join(","))
            needs_cast = True
        elif isinstance(dtype, pl.Struct) and _struct_target_dtype(dtype) != dtype:
            exprs.append(col.cast(_struct_target_dtype(dtype)))
            needs_cast = True
        else:
            exprs.append(col)

    if not needs_cast:
        return df.to_dicts()
    return df.select(exprs).to_dicts()


def build_column_descriptors(
    schema: pl.Schema,
    *,
    id_field: str | None = None,
    show_id_field: bool = False,
    unsortable: set[str] | None = None,
    unfilterable: set[str] | None = None,
) -> list[ColumnDescriptor]:
    """Build one :class:`ColumnDescriptor` per column of *schema*.

    Struct columns are expanded into one descriptor per field
    (``"origin.city"``), since the grid reads nested values by path.

    Args:
        schema: A polars ``Schema`` (e.g. ``lf.collect_schema()``).
        id_field: Column used as the row identity.
        show_id_field: Whether to include *id_field* as a column.
        unsortable: Fields to declare ``sortable=False``.
        unfilterable: Fields to declare ``filterable=False``.
    """
    unsortable = unsortable or set()
    unfilterable = unfilterable or set()

    fields: list[str] = []
    for col_name, dtype in schema.items():
        if not show_id_field and col_name == id_field:
            continue
        if isinstance(dtype, pl.Struct):
            fields.extend(f"{col_name}.{inner.name}" for inner in dtype.fields)
        else:
            fields.append(col_name)

    return [
        ColumnDescriptor(
            field=field,
            header=humanize_path(field),
            sortable=field not in unsortable,
            filterable=field not in unfilterable,
        )
        for field in fields
    ]


def frame_to_grid(
    frame: pl.DataFrame | pl.LazyFrame,
    *,
    id_field: str | None = None,
    show_id_field: bool = False,
    limit: int | None = None,
) -> tuple[list[dict[str, Any]], list[ColumnDescriptor], str]:
    """Convert a polars frame into grid *rows*, *columns* and the id field.

    When *id_field* is ``None`` an ``"id"`` column with unique values is
    used; otherwise a zero-based ``"__row_id__"`` column is added so every
    row has an identity for selection.

    Returns:
        ``(rows, columns, id_field)``.
    """
    lf = frame.lazy() if isinstance(frame, pl.DataFrame) else frame
    if limit is not None:
        lf = lf.head(limit)
    df = lf.collect()

    effective_id_field = id_field
    if effective_id_field is None:
        if "id" in df.columns and df["id"].n_unique() == df.height:
            effective_id_field = "id"
        else:
            df = df.with_row_index(ROW_ID_FIELD)
            effective_id_field = ROW_ID_FIELD

    rows = frame_to_rows(df)
    columns = build_column_descriptors(
        df.schema,
        id_field=effective_id_field,
        show_id_field=show_id_field,
    )
    return rows, columns, effective_id_field
