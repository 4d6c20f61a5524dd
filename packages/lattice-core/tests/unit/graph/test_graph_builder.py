"""Unit tests for DependencyGraphBuilder.

This module tests:
- Wiring of lifecycle markers, sensors and hooks
- Hook dependency edges and cycle detection
- Trigger conditions carried by edges
- Deterministic node and edge order
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from lattice_core.compiler import ResolvedConfig
from lattice_core.errors import BuildError
from lattice_core.graph import (
    END_NODE_ID,
    START_NODE_ID,
    DependencyGraphBuilder,
    Graph,
    NodeBuilder,
    NodeKind,
    TriggerRule,
)
from lattice_core.schemas import JobSpec

TASK = "transformation_bq2bq"

HOOKS = [
    {"name": "transporter", "image": "example.io/transporter:2", "phase": "pre"},
    {"name": "predator", "image": "example.io/predator:3", "phase": "post"},
    {"name": "notify-fail", "image": "example.io/notify:1", "phase": "fail"},
]


def edge_set(graph: Graph) -> set[tuple[str, str]]:
    """Return the graph's edges as (source, destination) pairs."""
    return {(edge.source, edge.destination) for edge in graph.edges}


class TestZeroDependencyJob:
    """A job without hooks or dependencies."""

    def test_three_nodes_two_edges(
        self,
        sample_job: JobSpec,
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """START -> TASK -> END."""
        graph = build_graph(sample_job)

        assert [node.id for node in graph.nodes] == [START_NODE_ID, TASK, END_NODE_ID]
        assert edge_set(graph) == {(START_NODE_ID, TASK), (TASK, END_NODE_ID)}

    def test_end_condition(
        self,
        sample_job: JobSpec,
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """The edge into END fires once the task is done, whatever its state."""
        graph = build_graph(sample_job)
        task_to_end = graph.edge(TASK, END_NODE_ID)
        start_to_task = graph.edge(START_NODE_ID, TASK)
        assert task_to_end is not None
        assert start_to_task is not None
        assert task_to_end.condition == TriggerRule.ALL_DONE
        assert start_to_task.condition == TriggerRule.ALL_SUCCESS


class TestHookOrdering:
    """Pre, post and fail hooks around the task."""

    def test_edges(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Hooks are wired by phase with POST x FAIL fan-in."""
        graph = build_graph(make_job(hooks=HOOKS))

        assert edge_set(graph) == {
            (START_NODE_ID, "hook_transporter"),
            ("hook_transporter", TASK),
            (TASK, END_NODE_ID),
            (TASK, "hook_predator"),
            ("hook_predator", END_NODE_ID),
            (TASK, "hook_notify__dash__fail"),
            ("hook_predator", "hook_notify__dash__fail"),
            ("hook_notify__dash__fail", END_NODE_ID),
        }

    def test_pre_hook_gates_task(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """With a pre hook there is no direct START -> TASK edge."""
        graph = build_graph(make_job(hooks=HOOKS))
        assert graph.edge(START_NODE_ID, TASK) is None
        assert graph.predecessors(TASK) == ["hook_transporter"]

    def test_fail_hook_conditions(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Edges into a fail hook fire on upstream failure."""
        graph = build_graph(make_job(hooks=HOOKS))
        for source in graph.predecessors("hook_notify__dash__fail"):
            edge = graph.edge(source, "hook_notify__dash__fail")
            assert edge is not None
            assert edge.condition == TriggerRule.ANY_FAILED

    def test_topological_order(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Nodes follow the lexicographic topological order."""
        graph = build_graph(make_job(hooks=HOOKS))
        assert [node.id for node in graph.nodes] == [
            START_NODE_ID,
            "hook_transporter",
            TASK,
            "hook_predator",
            "hook_notify__dash__fail",
            END_NODE_ID,
        ]

    def test_declaration_order_irrelevant(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Reordering hooks in job.yaml yields the same graph."""
        forward = build_graph(make_job(hooks=HOOKS))
        backward = build_graph(make_job(hooks=list(reversed(HOOKS))))
        assert forward.edges == backward.edges
        assert [node.id for node in forward.nodes] == [node.id for node in backward.nodes]


class TestSensors:
    """Upstream sensors gating the task."""

    def test_and_join(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Every sensor starts at START and gates the task."""
        spec = make_job(
            dependencies={"intra": [{"job_name": "orders"}, {"job_name": "customers"}]}
        )
        graph = build_graph(spec)

        assert edge_set(graph) == {
            (START_NODE_ID, "wait_orders"),
            (START_NODE_ID, "wait_customers"),
            ("wait_orders", TASK),
            ("wait_customers", TASK),
            (TASK, END_NODE_ID),
        }
        assert graph.node(TASK).trigger_rule == TriggerRule.ALL_SUCCESS

    def test_sensors_and_pre_hooks(
        self,
        sample_job_full: JobSpec,
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Sensors and pre hooks gate the task independently."""
        graph = build_graph(sample_job_full)
        assert graph.predecessors(TASK) == [
            "hook_transporter",
            "wait_inventory__dash__warehouse__dash__stock__dash__levels",
            "wait_ledger_ready",
            "wait_orders__dash__raw",
        ]
        assert len(graph.nodes_of_kind(NodeKind.SENSOR)) == 3


class TestHookDependencies:
    """Explicit hook-to-hook dependencies."""

    def test_dependency_edge(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """B -> A for "A depends on B", and A still reaches END."""
        spec = make_job(
            hooks=[
                {"name": "publish", "image": "i", "phase": "post", "depends_on": ["audit"]},
                {"name": "audit", "image": "i", "phase": "post"},
            ]
        )
        graph = build_graph(spec)

        assert ("hook_audit", "hook_publish") in edge_set(graph)
        assert ("hook_publish", END_NODE_ID) in edge_set(graph)

    def test_pre_hook_chain(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Pre hooks may depend on each other and still gate the task."""
        spec = make_job(
            hooks=[
                {"name": "extract", "image": "i", "phase": "pre"},
                {"name": "stage", "image": "i", "phase": "pre", "depends_on": ["extract"]},
            ]
        )
        graph = build_graph(spec)

        assert ("hook_extract", "hook_stage") in edge_set(graph)
        assert graph.predecessors(TASK) == ["hook_extract", "hook_stage"]

    def test_cycle(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Cyclic hook dependencies are a BuildError naming the hooks."""
        spec = make_job(
            hooks=[
                {"name": "a", "image": "i", "phase": "post", "depends_on": ["b"]},
                {"name": "b", "image": "i", "phase": "post", "depends_on": ["a"]},
            ]
        )
        with pytest.raises(BuildError, match=r"cycle: (a -> b -> a|b -> a -> b)") as exc_info:
            build_graph(spec)

        assert sorted(exc_info.value.hook_names) == ["a", "b"]
        assert sorted(exc_info.value.node_ids) == ["hook_a", "hook_b"]
        assert exc_info.value.job_name == "sales-daily"

    def test_unknown_hook(
        self,
        make_job: Callable[..., JobSpec],
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Depending on an undeclared hook is a BuildError."""
        spec = make_job(
            hooks=[{"name": "publish", "image": "i", "phase": "post", "depends_on": ["ghost"]}]
        )
        with pytest.raises(BuildError, match="undeclared hook 'ghost'") as exc_info:
            build_graph(spec)
        assert exc_info.value.hook_names == ("publish", "ghost")


class TestGraphProperties:
    """Structural properties of every built graph."""

    def test_edge_conditions_match_destination(
        self,
        sample_job_full: JobSpec,
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Each edge carries its destination's trigger rule."""
        graph = build_graph(sample_job_full)
        for edge in graph.edges:
            assert edge.condition == graph.node(edge.destination).trigger_rule

    def test_single_start_and_end(
        self,
        sample_job_full: JobSpec,
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """START has no predecessors and END no successors."""
        graph = build_graph(sample_job_full)
        assert graph.predecessors(graph.start_id) == []
        assert graph.successors(graph.end_id) == []
        assert graph.nodes[0].id == START_NODE_ID
        assert graph.nodes[-1].id == END_NODE_ID

    def test_edges_sorted(
        self,
        sample_job_full: JobSpec,
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Edges are sorted by (source, destination)."""
        graph = build_graph(sample_job_full)
        pairs = [(edge.source, edge.destination) for edge in graph.edges]
        assert pairs == sorted(pairs)

    def test_deterministic(
        self,
        sample_job_full: JobSpec,
        resolve: Callable[[JobSpec], ResolvedConfig],
    ) -> None:
        """Wiring the same node set twice yields equal graphs."""
        nodes = NodeBuilder().build(resolve(sample_job_full))
        assert DependencyGraphBuilder().wire(nodes) == DependencyGraphBuilder().wire(nodes)

    def test_unknown_node_lookup(
        self,
        sample_job: JobSpec,
        build_graph: Callable[[JobSpec], Graph],
    ) -> None:
        """Looking up a missing node raises KeyError."""
        graph = build_graph(sample_job)
        assert not graph.has_node("hook_missing")
        with pytest.raises(KeyError, match="hook_missing"):
            graph.node("hook_missing")
