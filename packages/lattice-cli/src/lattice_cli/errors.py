"""CLI error handling for lattice-cli.

Maps lattice-core exceptions, YAML and pydantic errors to user-facing
messages and exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
import yaml
from pydantic import ValidationError as PydanticValidationError

from lattice_cli.output import error
from lattice_core.errors import BuildError, LatticeError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


# Exit codes
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Invalid spec (validation, build failure)
EXIT_SYSTEM_ERROR = 2  # Missing file, unwritable output


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting."""
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format a pydantic validation error as ``field.path: message`` lines.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - hooks.0.phase: Input should be 'pre', 'post' or 'fail'"
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]
    for e in errors:
        loc = ".".join(str(x) for x in e["loc"]) or "<root>"
        lines.append(f"  - {loc}: {e['msg']}")
    return "\n".join(lines)


def format_yaml_error(err: yaml.YAMLError) -> str:
    """Describe a YAML syntax error, with line and column when known."""
    mark = getattr(err, "problem_mark", None)
    if mark is not None:
        problem = getattr(err, "problem", None) or "invalid syntax"
        return f"YAML syntax error at line {mark.line + 1}, column {mark.column + 1}: {problem}"
    return f"YAML syntax error: {err}"


def format_lattice_error(err: LatticeError) -> str:
    """Render a compilation error with its offending hooks, if any."""
    message = str(err)
    if isinstance(err, BuildError) and err.hook_names:
        message += f"\n  hooks: {', '.join(err.hook_names)}"
    return message


def describe_job_error(err: Exception | None, file_path: str) -> str:
    """One message for any error that fails a single job.

    Args:
        err: LatticeError, YAML error, pydantic error or FileNotFoundError.
        file_path: Path of the job.yaml being compiled.
    """
    if isinstance(err, PydanticValidationError):
        return f"Invalid job definition in {file_path}:\n{format_pydantic_error(err)}"
    if isinstance(err, yaml.YAMLError):
        return f"Invalid YAML in {file_path}: {format_yaml_error(err)}"
    if isinstance(err, LatticeError):
        return f"{file_path}: {format_lattice_error(err)}"
    if isinstance(err, FileNotFoundError):
        return f"File not found: {file_path}"
    return f"{file_path}: {err}"


def handle_file_not_found(file_path: str) -> NoReturn:
    """Raise a system error for a missing input file."""
    raise CLIError(
        f"File not found: {file_path}\n\nUse --file to specify the path to job.yaml.",
        exit_code=EXIT_SYSTEM_ERROR,
    )


def handle_permission_error(path: str, operation: str = "access") -> NoReturn:
    """Raise a system error for a path that cannot be read or written."""
    raise CLIError(
        f"Permission denied: Cannot {operation} {path}",
        exit_code=EXIT_SYSTEM_ERROR,
    )
