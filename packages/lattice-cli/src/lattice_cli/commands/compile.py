"""lattice compile command - Write scheduler DAG definitions."""

from __future__ import annotations

from pathlib import Path

import click

from lattice_cli.commands.common import defaults_option, load_defaults
from lattice_cli.errors import (
    EXIT_USER_ERROR,
    CLIError,
    describe_job_error,
    handle_file_not_found,
    handle_permission_error,
)
from lattice_cli.output import error, success, warning

TARGETS = ("airflow", "json")


@click.command("compile")
@click.option(
    "-f",
    "--file",
    "file_paths",
    type=click.Path(exists=False),
    multiple=True,
    default=("./job.yaml",),
    help="Path to job.yaml; repeat for several jobs [default: ./job.yaml]",
)
@defaults_option
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    default="dags/",
    help="Output directory [default: dags/]",
)
@click.option(
    "-t",
    "--target",
    "target",
    type=click.Choice(TARGETS),
    default="airflow",
    help="Scheduler target format [default: airflow]",
)
def compile_cmd(
    file_paths: tuple[str, ...],
    defaults_path: str | None,
    output_path: str,
    target: str,
) -> None:
    """Compile job.yaml files into scheduler DAG definitions.

    Every job is compiled independently: a job that fails is reported and
    the others are still written. Exits 1 if any job failed.

    Examples:

        lattice compile

        lattice compile -f a/job.yaml -f b/job.yaml --output build/dags/

        lattice compile --target json
    """
    from lattice_core import Compiler

    for file_path in file_paths:
        if not Path(file_path).exists():
            handle_file_not_found(file_path)

    defaults = load_defaults(defaults_path)
    output = Path(output_path)

    outcomes = Compiler(defaults).compile_many(file_paths, target=target)

    failed = 0
    for file_path, outcome in zip(file_paths, outcomes, strict=True):
        if outcome.result is None:
            failed += 1
            error(describe_job_error(outcome.error, file_path))
            continue
        existing = output / outcome.result.artifact.filename
        if existing.exists():
            warning(f"Overwriting existing {existing}")
        try:
            written = outcome.result.artifact.write(output)
        except PermissionError:
            handle_permission_error(output_path, "write to")
        success(f"Compiled {outcome.result.job_name} -> {written}")

    if failed:
        raise CLIError(
            f"{failed} of {len(outcomes)} job(s) failed to compile",
            exit_code=EXIT_USER_ERROR,
        )
