"""lattice validate command - Validate a job and build its graph."""

from __future__ import annotations

import click

from lattice_cli.commands.common import defaults_option, file_option, load_defaults, load_job
from lattice_cli.errors import EXIT_USER_ERROR, CLIError, format_lattice_error
from lattice_cli.output import success


@click.command()
@file_option
@defaults_option
def validate(file_path: str, defaults_path: str | None) -> None:
    """Validate job.yaml and build its graph.

    Parses the job definition, resolves it against the scheduler
    defaults and builds the ordering graph, without writing anything.

    Examples:

        lattice validate

        lattice validate --file jobs/sales-daily/job.yaml --defaults ops/defaults.yaml
    """
    from lattice_core import Compiler, LatticeError

    spec = load_job(file_path)
    defaults = load_defaults(defaults_path)

    try:
        _, graph = Compiler(defaults).resolve_and_build(spec)
    except LatticeError as e:
        raise CLIError(
            f"{file_path}: {format_lattice_error(e)}", exit_code=EXIT_USER_ERROR
        ) from None

    success(f"Job '{graph.job_name}' valid: {graph.node_count} nodes, {graph.edge_count} edges")
