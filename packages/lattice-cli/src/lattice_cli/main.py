"""CLI entry point for lattice.

Defines the ``lattice`` group. Subcommands are imported lazily so that
``lattice --help`` does not pay for pydantic, networkx or emitter imports.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from lattice_cli import __version__
from lattice_cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that imports its subcommands on first use.

    Attributes:
        lazy_subcommands: Mapping of command names to "module.attribute" paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return eager and lazy command names, sorted."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, importing it if it is lazy."""
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_name, attr_name = self.lazy_subcommands[cmd_name].rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "validate": "lattice_cli.commands.validate.validate",
    "compile": "lattice_cli.commands.compile.compile_cmd",
    "graph": "lattice_cli.commands.graph.graph",
    "schema": "lattice_cli.commands.schema.schema",
}


def _configure_logging(verbose: bool) -> None:
    from lattice_core.observability import configure_logging

    configure_logging(
        log_level="DEBUG" if verbose else "WARNING",
        json_format=False,
        add_timestamp=verbose,
    )


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="lattice")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Log compilation steps.",
)
def cli(verbose: bool) -> None:
    """Lattice - compile job definitions into scheduler DAGs.

    **Getting Started:**

    - `lattice validate -f job.yaml` - Check a job and build its graph
    - `lattice compile -f job.yaml -t airflow` - Write the scheduler DAG
    - `lattice graph -f job.yaml` - Show the ordering edges
    - `lattice schema export` - Export JSON Schemas for IDE support
    """
    _configure_logging(verbose)


if __name__ == "__main__":
    cli()
