"""Structured output formatting for CLI commands."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable
from typing import Any

import click

# Headers that title-casing gets wrong
COLUMN_TITLES = {
    "id": "ID",
    "enbid": "EnbID",
    "cell_ecgis": "Cell ECGIs",
    "kind_id": "Kind ID",
    "src_entity_id": "Source ID",
    "tgt_entity_id": "Target ID",
}


def join_values(values: Iterable[Any]) -> str:
    """Render a list as a comma-separated cell, e.g. ``[1, 2] -> "1,2"``."""
    return ",".join(str(v) for v in values)


class OutputFormatter:
    """Format command output as table, JSON, or CSV.

    Usage::

        fmt = OutputFormatter(output_format, headers=not no_headers)
        fmt.print_table(data, columns=["enbid", "status"])
        fmt.print_success("Node 144470 created")

    Streaming commands print one row at a time with fixed column widths::

        fmt.stream_header(NODE_COLUMNS)
        for node in nodes:
            fmt.stream_row(row, NODE_COLUMNS)
    """

    def __init__(
        self,
        output_format: str = "table",
        quiet: bool = False,
        headers: bool = True,
    ) -> None:
        self.format = output_format
        self.quiet = quiet
        self.headers = headers

    @staticmethod
    def _title(column: str) -> str:
        return COLUMN_TITLES.get(column, column.replace("_", " ").title())

    def print_table(
        self,
        data: list[dict[str, Any]],
        columns: list[str] | None = None,
    ) -> None:
        """Print *data* as a formatted table, JSON array, or CSV.

        Prints the header row even when *data* is empty so callers can tell
        the command succeeded, unless headers are disabled.
        """
        if columns is None:
            columns = list(data[0].keys()) if data else []

        if self.format == "json":
            click.echo(json.dumps(data, indent=2, default=str))
            return

        if self.format == "csv":
            buf = io.StringIO()
            writer = csv.DictWriter(buf, fieldnames=columns, extrasaction="ignore")
            if self.headers:
                writer.writeheader()
            writer.writerows(data)
            click.echo(buf.getvalue().rstrip())
            return

        if not columns:
            return

        # Table format: compute column widths
        headers = {c: self._title(c) for c in columns}
        widths: dict[str, int] = {c: len(headers[c]) for c in columns}
        for row in data:
            for c in columns:
                widths[c] = max(widths[c], len(str(row.get(c, ""))))
        # Cap widths at 50 chars
        widths = {c: min(w, 50) for c, w in widths.items()}

        if self.headers:
            header = "  ".join(headers[c].ljust(widths[c]) for c in columns)
            click.echo(header)
            click.echo("-" * len(header))

        for row in data:
            parts: list[str] = []
            for c in columns:
                val = str(row.get(c, ""))
                if len(val) > widths[c]:
                    val = val[: widths[c] - 3] + "..."
                parts.append(val.ljust(widths[c]))
            click.echo("  ".join(parts).rstrip())

    def stream_header(self, columns: dict[str, int]) -> None:
        """Print the header for a streamed table.

        *columns* maps column name to fixed width. JSON streams have no header.
        """
        if not self.headers or self.format == "json":
            return
        if self.format == "csv":
            click.echo(",".join(columns))
            return
        click.echo(" ".join(self._title(c).ljust(w) for c, w in columns.items()).rstrip())

    def stream_row(self, row: dict[str, Any], columns: dict[str, int]) -> None:
        """Print one streamed row (one JSON object per line in JSON mode)."""
        if self.format == "json":
            click.echo(json.dumps(row, default=str))
            return
        if self.format == "csv":
            buf = io.StringIO()
            csv.writer(buf).writerow([row.get(c, "") for c in columns])
            click.echo(buf.getvalue().rstrip("\r\n"))
            return
        click.echo(" ".join(str(row.get(c, "")).ljust(w) for c, w in columns.items()).rstrip())

    def print_single(self, data: dict[str, Any]) -> None:
        """Print a single key-value record."""
        if self.format == "json":
            click.echo(json.dumps(data, indent=2, default=str))
        else:
            for key, value in data.items():
                click.echo(f"{self._title(key)}: {value}")

    def print_success(self, message: str) -> None:
        """Print a success message (suppressed in quiet mode)."""
        if not self.quiet:
            click.echo(message)
