"""Shared test fixtures for lattice-cli tests.

Provides CliRunner fixtures and paths to the job.yaml and
scheduler-defaults.yaml fixtures.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from lattice_core import DefaultsResolver
from lattice_core.schemas import VARIABLE_FIELDS

JOB_YAML_FILENAME = "job.yaml"
DEFAULTS_YAML_FILENAME = "scheduler-defaults.yaml"


@pytest.fixture(autouse=True)
def clear_defaults_cache(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with an empty defaults cache and no LATTICE_ overrides."""
    DefaultsResolver.clear_cache()
    for variable in VARIABLE_FIELDS:
        monkeypatch.delenv(f"LATTICE_{variable.upper()}", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    Yields:
        CliRunner instance running in a temporary directory.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def defaults_yaml(fixtures_dir: Path) -> Path:
    """Return the scheduler-defaults.yaml fixture."""
    return fixtures_dir / DEFAULTS_YAML_FILENAME


@pytest.fixture
def valid_job_yaml(fixtures_dir: Path, tmp_path: Path) -> Path:
    """Copy the valid job fixture to tmp_path as job.yaml."""
    path = tmp_path / JOB_YAML_FILENAME
    path.write_text((fixtures_dir / "valid_job.yaml").read_text())
    return path


@pytest.fixture
def invalid_job_yaml(fixtures_dir: Path) -> Path:
    """Return a job.yaml failing schema validation (unknown hook phase)."""
    return fixtures_dir / "invalid_job.yaml"


@pytest.fixture
def cyclic_job_yaml(fixtures_dir: Path) -> Path:
    """Return a job.yaml whose hooks depend on each other."""
    return fixtures_dir / "cyclic_job.yaml"
