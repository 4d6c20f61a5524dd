"""lattice graph command - Show a job's ordering edges."""

from __future__ import annotations

import click

from lattice_cli.commands.common import defaults_option, file_option, load_defaults, load_job
from lattice_cli.errors import EXIT_USER_ERROR, CLIError, format_lattice_error
from lattice_cli.output import info, print_json, print_table


@click.command()
@file_option
@defaults_option
@click.option(
    "--json",
    "as_json",
    is_flag=True,
    default=False,
    help="Print nodes and edges as JSON.",
)
@click.option(
    "--nodes",
    "show_nodes",
    is_flag=True,
    default=False,
    help="Also print a table of nodes.",
)
def graph(
    file_path: str,
    defaults_path: str | None,
    as_json: bool,
    show_nodes: bool,
) -> None:
    """Print the graph compiled from job.yaml.

    One line per edge, ``source -> destination (condition)``, in the
    order the emitters write them.

    Examples:

        lattice graph

        lattice graph --file jobs/sales-daily/job.yaml --json

        lattice graph --nodes
    """
    from lattice_core import Compiler, LatticeError

    spec = load_job(file_path)
    defaults = load_defaults(defaults_path)

    try:
        _, job_graph = Compiler(defaults).resolve_and_build(spec)
    except LatticeError as e:
        raise CLIError(
            f"{file_path}: {format_lattice_error(e)}", exit_code=EXIT_USER_ERROR
        ) from None

    if as_json:
        print_json(
            {
                "job_name": job_graph.job_name,
                "nodes": [
                    {"id": node.id, "kind": node.kind.value, "task_id": node.task_id}
                    for node in job_graph.nodes
                ],
                "edges": [
                    {
                        "source": edge.source,
                        "destination": edge.destination,
                        "condition": edge.condition.value,
                    }
                    for edge in job_graph.edges
                ],
            }
        )
        return

    info(f"{job_graph.job_name}: {job_graph.node_count} nodes, {job_graph.edge_count} edges")
    for edge in job_graph.edges:
        info(f"  {edge.source} -> {edge.destination} ({edge.condition.value})")

    if show_nodes:
        print_table(
            "Nodes",
            ["id", "kind", "task_id", "trigger_rule"],
            [
                [node.id, node.kind.value, node.task_id, node.trigger_rule.value]
                for node in job_graph.nodes
            ],
        )
