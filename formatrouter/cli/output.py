"""Output formatting utilities for CLI."""

import csv
import json
from io import StringIO
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()
console_err = Console(stderr=True)


def print_table(
    data: list[dict[str, Any]],
    title: str | None = None,
    columns: list[str] | None = None,
) -> None:
    """Print data as a Rich table.

    Args:
        data: List of dictionaries to display
        title: Optional table title
        columns: Optional list of column names (defaults to all keys)
    """
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if columns is None:
        columns = list(data[0].keys())

    table = Table(title=title, show_header=True, header_style="bold cyan")

    for col in columns:
        table.add_column(col, style="white", no_wrap=False)

    for row in data:
        table.add_row(*[str(row.get(col, "")) for col in columns])

    console.print(table)


def print_json(data: Any, indent: int = 2) -> None:
    """Print data as JSON."""
    console.print_json(json.dumps(data, indent=indent, default=str))


def print_csv(data: list[dict[str, Any]], columns: list[str] | None = None) -> None:
    """Print data as CSV."""
    if not data:
        return

    if columns is None:
        columns = list(data[0].keys())

    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=columns)
    writer.writeheader()
    writer.writerows(data)

    console.print(output.getvalue(), end="")


def print_rows(
    data: list[dict[str, Any]],
    output_format: str,
    title: str | None = None,
) -> None:
    """Print rows in the selected output format (table, json or csv)."""
    if output_format == "json":
        print_json(data)
    elif output_format == "csv":
        print_csv(data)
    else:
        print_table(data, title=title)


def print_success(message: str) -> None:
    """Print success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print error message with X mark."""
    console_err.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print warning message with warning symbol."""
    console.print(f"[yellow]⚠[/yellow] {message}")
