"""CLI for reflex-datatable -- page through tabular files in the terminal.

Usage::

    # First page of a CSV / TSV / Parquet file
    reflex-datatable view loads.csv

    # Page 3, 25 rows per page, cheapest first, only "available" loads
    reflex-datatable view loads.parquet --page 3 --page-size 25 \\
        --sort rate --filter status=avail

    # Preview the pagination control for page 10 of 20
    reflex-datatable pages 10 20

Both commands run the same :class:`~reflex_datatable.engine.GridEngine`
pipeline the Reflex mixin uses.
"""

from pathlib import Path
from typing import Annotated, Any, Optional

import typer

from reflex_datatable.engine import GridEngine, GridView
from reflex_datatable.exceptions import DataTableError
from reflex_datatable.log import enable_debug
from reflex_datatable.models import (
    ColumnDescriptor,
    FilteringOptions,
    PaginationOptions,
    SortDirection,
    SortingOptions,
)
from reflex_datatable.page_range import compute_page_range
from reflex_datatable.paths import resolve
from reflex_datatable.polars_utils import frame_to_grid, scan_file

app = typer.Typer(
    name="reflex-datatable",
    help="Filter, sort and page through tabular data files.",
    no_args_is_help=True,
)

_MAX_CELL_WIDTH: int = 30


def _parse_filters(raw: list[str]) -> dict[str, str]:
    """Parse repeated ``field=text`` options into a filter mapping."""
    filters: dict[str, str] = {}
    for item in raw:
        field, sep, text = item.partition("=")
        if not sep or not field.strip():
            typer.echo(f"Error: filter must look like FIELD=TEXT, got {item!r}", err=True)
            raise typer.Exit(code=1)
        filters[field.strip()] = text
    return filters


def _format_cell(value: Any) -> str:
    text = "" if value is None else str(value)
    if len(text) > _MAX_CELL_WIDTH:
        return text[: _MAX_CELL_WIDTH - 3] + "..."
    return text


def _format_tokens(tokens: list[int | str], current: int) -> str:
    return " ".join(f"[{t}]" if t == current else str(t) for t in tokens)


def _render_table(snapshot: GridView, columns: list[ColumnDescriptor]) -> list[str]:
    """Render the current page as fixed-width text lines."""
    headers = [c.header or c.field for c in columns]
    if snapshot.sort.field is not None:
        marker = " ^" if snapshot.sort.direction is SortDirection.ASC else " v"
        headers = [
            h + marker if c.field == snapshot.sort.field else h
            for h, c in zip(headers, columns)
        ]
    body = [
        [_format_cell(resolve(row, c.field)) for c in columns]
        for row in snapshot.page_items
    ]
    widths = [
        max([len(headers[i])] + [len(r[i]) for r in body])
        for i in range(len(columns))
    ]

    lines = ["  ".join(h.ljust(w) for h, w in zip(headers, widths))]
    lines.append("  ".join("-" * w for w in widths))
    for r in body:
        lines.append("  ".join(cell.ljust(w) for cell, w in zip(r, widths)))
    return lines


@app.command()
def view(
    file: Annotated[Path, typer.Argument(help="Path to the data file (CSV, TSV, Parquet, JSON, NDJSON, IPC)")],
    page: Annotated[int, typer.Option("--page", "-p", help="Page to show (clamped into range)")] = 1,
    page_size: Annotated[Optional[int], typer.Option("--page-size", "-s", help="Rows per page")] = None,
    sort: Annotated[Optional[str], typer.Option("--sort", help="Field (dot path) to sort by")] = None,
    desc: Annotated[bool, typer.Option("--desc", help="Sort descending")] = False,
    filter_: Annotated[
        Optional[list[str]],
        typer.Option("--filter", "-f", help="FIELD=TEXT substring filter; repeatable"),
    ] = None,
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Maximum number of rows to load")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log pipeline timings")] = False,
) -> None:
    """Print one page of a data file after filtering and sorting it.

    Supports: CSV, TSV, Parquet, JSON, NDJSON, IPC/Arrow/Feather.
    """

    if verbose:
        enable_debug()

    filters = _parse_filters(filter_ or [])

    try:
        lf = scan_file(file)
        rows, columns, _ = frame_to_grid(lf, limit=limit)
        pagination = (
            PaginationOptions(current_page=max(page, 1), page_size=page_size)
            if page_size is not None
            else PaginationOptions(current_page=max(page, 1))
        )
        with GridEngine(
            rows,
            columns,
            pagination=pagination,
            sorting=SortingOptions(
                default_sort_field=sort,
                default_sort_direction=SortDirection.DESC if desc else SortDirection.ASC,
            ),
            filtering=FilteringOptions(default_filters=filters, debounce_ms=0),
        ) as engine:
            snapshot = engine.view()
    except (FileNotFoundError, ValueError, DataTableError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)

    for line in _render_table(snapshot, columns):
        typer.echo(line)
    typer.echo("")
    typer.echo(_format_tokens(snapshot.page_tokens, snapshot.current_page))
    typer.echo(
        f"{snapshot.range_label} | page {snapshot.current_page}/{snapshot.total_pages}"
        f" | {len(rows)} rows loaded"
    )


@app.command()
def pages(
    current: Annotated[int, typer.Argument(help="Current page (1-based)")],
    total: Annotated[int, typer.Argument(help="Total number of pages")],
    max_visible: Annotated[int, typer.Option("--max-visible", "-m", help="Slot budget, at least 5")] = 7,
) -> None:
    """Print the compressed page-number sequence a pagination control shows."""
    try:
        tokens = compute_page_range(current, total, max_visible)
    except DataTableError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    typer.echo(_format_tokens(tokens, min(max(current, 1), max(total, 1))))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
