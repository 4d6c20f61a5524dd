"""Tests for lattice schema command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from lattice_cli.commands.schema import export_schema, schema


class TestSchemaGroup:
    """Tests for schema command group."""

    def test_schema_help(self, cli_runner: CliRunner) -> None:
        """schema --help shows the export subcommand."""
        result = cli_runner.invoke(schema, ["--help"])
        assert result.exit_code == 0
        assert "export" in result.output.lower()


class TestSchemaExport:
    """Tests for schema export command."""

    def test_export_creates_files(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        """Both schemas are written as JSON."""
        output_dir = tmp_path / "schemas"
        result = cli_runner.invoke(export_schema, ["--output", str(output_dir)])

        assert result.exit_code == 0, result.output
        job_schema = json.loads((output_dir / "job-spec.schema.json").read_text())
        assert "properties" in job_schema
        assert (output_dir / "scheduler-defaults.schema.json").exists()
        assert result.output.count("Schema exported to") == 2

    def test_export_default_directory(self, isolated_runner: CliRunner) -> None:
        """Without --output, schemas go to ./schemas."""
        result = isolated_runner.invoke(export_schema)
        assert result.exit_code == 0
        assert Path("schemas/job-spec.schema.json").exists()
