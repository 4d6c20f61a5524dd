"""Unit tests for lattice_cli.errors module."""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError

from lattice_cli.errors import (
    EXIT_SYSTEM_ERROR,
    EXIT_USER_ERROR,
    CLIError,
    describe_job_error,
    format_lattice_error,
    format_pydantic_error,
    format_yaml_error,
    handle_file_not_found,
    handle_permission_error,
)
from lattice_core import BuildError, ConfigError, JobSpec


def _validation_error() -> ValidationError:
    try:
        JobSpec.model_validate({"schedule": {"start_date": "not-a-date"}})
    except ValidationError as e:
        return e
    raise AssertionError("expected a ValidationError")


def _yaml_error() -> yaml.YAMLError:
    try:
        yaml.safe_load("name: [unclosed\n")
    except yaml.YAMLError as e:
        return e
    raise AssertionError("expected a YAMLError")


class TestCLIError:
    """Tests for CLIError."""

    def test_default_exit_code(self) -> None:
        """User errors exit 1 by default."""
        assert CLIError("bad").exit_code == EXIT_USER_ERROR

    def test_custom_exit_code(self) -> None:
        """The exit code can be overridden."""
        assert CLIError("bad", exit_code=EXIT_SYSTEM_ERROR).exit_code == 2


class TestFormatters:
    """Tests for error formatting helpers."""

    def test_format_pydantic_error(self) -> None:
        """Each error is listed with its field path."""
        message = format_pydantic_error(_validation_error())
        assert message.startswith("Validation failed:")
        assert "schedule.start_date" in message

    def test_format_yaml_error(self) -> None:
        """YAML errors report line and column."""
        assert "line 2" in format_yaml_error(_yaml_error())

    def test_format_build_error_lists_hooks(self) -> None:
        """Build errors name the hooks involved."""
        err = BuildError("Hook dependencies form a cycle: a -> b -> a", hook_names=["a", "b"])
        assert format_lattice_error(err).endswith("hooks: a, b")

    def test_format_config_error(self) -> None:
        """Other errors are rendered as-is."""
        err = ConfigError("Task image is required", field_path="task.image")
        assert format_lattice_error(err) == str(err)


class TestDescribeJobError:
    """Tests for describe_job_error."""

    @pytest.mark.parametrize(
        ("err", "expected"),
        [
            (FileNotFoundError("x"), "File not found: job.yaml"),
            (ConfigError("Project name is required"), "job.yaml: Project name is required"),
        ],
    )
    def test_messages(self, err: Exception, expected: str) -> None:
        """Every job failure is prefixed with its file."""
        assert describe_job_error(err, "job.yaml") == expected

    def test_validation_error(self) -> None:
        """Schema errors include the formatted field list."""
        message = describe_job_error(_validation_error(), "job.yaml")
        assert message.startswith("Invalid job definition in job.yaml:")

    def test_yaml_error(self) -> None:
        """YAML errors name the file."""
        assert describe_job_error(_yaml_error(), "job.yaml").startswith("Invalid YAML in job.yaml")


class TestHandlers:
    """Tests for the raising helpers."""

    def test_file_not_found(self) -> None:
        """Missing files are system errors."""
        with pytest.raises(CLIError) as exc_info:
            handle_file_not_found("job.yaml")
        assert exc_info.value.exit_code == EXIT_SYSTEM_ERROR
        assert "--file" in exc_info.value.message

    def test_permission_error(self) -> None:
        """Unwritable paths are system errors."""
        with pytest.raises(CLIError, match="Cannot write to dags/") as exc_info:
            handle_permission_error("dags/", "write to")
        assert exc_info.value.exit_code == EXIT_SYSTEM_ERROR
