"""lattice schema command - Export JSON Schema."""

from __future__ import annotations

import click

from lattice_cli.errors import handle_permission_error
from lattice_cli.output import success


@click.group()
def schema() -> None:
    """Manage JSON Schema for IDE support.

    **Commands:**

    - `lattice schema export` - Export job.yaml and scheduler-defaults.yaml schemas
    """


@schema.command("export")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(file_okay=False),
    default="./schemas",
    help="Output directory [default: ./schemas]",
)
def export_schema(output_path: str) -> None:
    """Export the JobSpec and SchedulerDefaults JSON Schemas.

    Examples:

        lattice schema export

        lattice schema export --output docs/schemas
    """
    from lattice_core import export_all_schemas

    try:
        paths = export_all_schemas(output_path)
    except PermissionError:
        handle_permission_error(output_path, "write to")

    for path in paths:
        success(f"Schema exported to {path}")
