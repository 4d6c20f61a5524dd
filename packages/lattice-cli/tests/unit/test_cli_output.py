"""Unit tests for lattice_cli.output module."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from lattice_cli import output


@pytest.fixture
def plain_console() -> Generator[None, None, None]:
    """Swap in a colorless console for the duration of a test."""
    original_console = output.console
    output.console = output.create_console(no_color=True)
    yield
    output.console = original_console


class TestCreateConsole:
    """Tests for create_console function."""

    def test_no_color(self) -> None:
        """no_color=True disables colors."""
        assert output.create_console(no_color=True).no_color is True

    def test_soft_wrap(self) -> None:
        """Long lines are never wrapped."""
        assert output.create_console().soft_wrap is True


@pytest.mark.usefixtures("plain_console")
class TestStatusMessages:
    """Tests for success/error/warning/info."""

    def test_success(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Success messages carry a checkmark."""
        output.success("Compiled sales-daily")
        captured = capsys.readouterr()
        assert "✓" in captured.out
        assert "Compiled sales-daily" in captured.out

    def test_error(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Error messages carry an X."""
        output.error("Job failed")
        assert "✗ Job failed" in capsys.readouterr().out

    def test_warning(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Warning messages carry a triangle."""
        output.warning("Deprecated field")
        assert "⚠" in capsys.readouterr().out

    def test_markup_is_escaped(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Bracketed job names are printed literally."""
        output.info("[sales-daily] Task image is required")
        assert "[sales-daily] Task image is required" in capsys.readouterr().out


@pytest.mark.usefixtures("plain_console")
class TestStructuredOutput:
    """Tests for print_json and print_table."""

    def test_print_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON is printed indented."""
        output.print_json({"job_name": "sales-daily"})
        assert '"job_name": "sales-daily"' in capsys.readouterr().out

    def test_print_table(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Tables include the title and cells."""
        output.print_table("Edges", ["source", "destination"], [["start", "task"]])
        out = capsys.readouterr().out
        assert "Edges" in out
        assert "start" in out
        assert "task" in out


class TestSetNoColor:
    """Tests for set_no_color."""

    def test_replaces_console(self) -> None:
        """The module console is rebuilt without color."""
        original_console = output.console
        try:
            output.set_no_color(True)
            assert output.console is not original_console
            assert output.console.no_color is True
        finally:
            output.console = original_console
