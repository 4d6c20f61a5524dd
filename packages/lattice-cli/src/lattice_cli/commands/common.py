"""Helpers shared by the lattice subcommands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click
import yaml
from pydantic import ValidationError as PydanticValidationError

from lattice_cli.errors import (
    EXIT_USER_ERROR,
    CLIError,
    describe_job_error,
    handle_file_not_found,
)

if TYPE_CHECKING:
    from lattice_core import JobSpec, SchedulerDefaults

DEFAULT_JOB_FILE = "./job.yaml"

file_option = click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=False),
    default=DEFAULT_JOB_FILE,
    help="Path to job.yaml [default: ./job.yaml]",
)

defaults_option = click.option(
    "-d",
    "--defaults",
    "defaults_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to scheduler-defaults.yaml [default: discovered in .lattice/ or ~/.lattice/]",
)


def load_defaults(defaults_path: str | None) -> SchedulerDefaults:
    """Load scheduler defaults for this invocation.

    Raises:
        CLIError: Exit 2 if the file is missing, exit 1 if it is invalid.
    """
    from lattice_core import ConfigError, DefaultsResolver

    if defaults_path is not None and not Path(defaults_path).exists():
        handle_file_not_found(defaults_path)

    try:
        return DefaultsResolver().load(path=defaults_path)
    except ConfigError as e:
        raise CLIError(f"Invalid scheduler defaults: {e}", exit_code=EXIT_USER_ERROR) from None


def load_job(file_path: str) -> JobSpec:
    """Load and validate one job.yaml.

    Raises:
        CLIError: Exit 2 if the file is missing, exit 1 if it is invalid.
    """
    from lattice_core import JobSpec, LatticeError

    path = Path(file_path)
    if not path.exists():
        handle_file_not_found(file_path)

    try:
        return JobSpec.from_yaml(path)
    except (yaml.YAMLError, PydanticValidationError, LatticeError) as e:
        raise CLIError(describe_job_error(e, file_path), exit_code=EXIT_USER_ERROR) from None
