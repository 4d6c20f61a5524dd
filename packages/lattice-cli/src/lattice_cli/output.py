"""Rich console output utilities for lattice-cli.

Status lines (success/error/warning/info), JSON and table rendering for
the lattice commands. NO_COLOR and the --no-color flag both disable color.
"""

from __future__ import annotations

import json
import os
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.table import Table

# Rich respects NO_COLOR itself; --no-color is applied through set_no_color()
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a Rich Console with the requested color settings.

    Args:
        no_color: If True, disable colored output. NO_COLOR also disables it.

    Returns:
        Configured Console instance.
    """
    disabled = no_color or _force_no_color
    return Console(
        force_terminal=False if disabled else None,
        no_color=disabled,
        soft_wrap=True,
    )


console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with a green checkmark.

    Example:
        >>> success("Compiled sales-daily -> dags/sales-daily.yaml")
        ✓ Compiled sales-daily -> dags/sales-daily.yaml
    """
    console.print(f"[green]✓[/green] {escape(message)}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with a red X."""
    console.print(f"[red]✗[/red] {escape(message)}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with a yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {escape(message)}", **kwargs)


def info(message: str, **kwargs: Any) -> None:
    """Print an informational message."""
    console.print(escape(message), **kwargs)


def print_json(data: dict[str, Any], **kwargs: Any) -> None:
    """Print JSON data with syntax highlighting.

    Args:
        data: Dictionary to print as JSON.
        **kwargs: Additional arguments passed to console.print_json().
    """
    console.print_json(json.dumps(data), **kwargs)


def print_table(
    title: str,
    columns: Sequence[str],
    rows: Sequence[Sequence[str]],
) -> None:
    """Print rows as a Rich table.

    Args:
        title: Table title.
        columns: Column headers.
        rows: Cell values, one sequence per row.

    Example:
        >>> print_table("Edges", ["source", "destination"], [["a", "b"]])
    """
    table = Table(title=title)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def set_no_color(no_color: bool) -> None:
    """Replace the module console to enable/disable colors."""
    global console
    console = create_console(no_color=no_color)
