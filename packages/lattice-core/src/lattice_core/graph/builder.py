"""Dependency graph builder for lattice.

Wires the ordering edges of a job graph. Rules are applied in a fixed
sequence, independent of declaration order in the job definition:

1. START -> every sensor
2. every sensor -> TASK (AND-join); START -> TASK when nothing else gates it
3. START -> PRE hook -> TASK
4. TASK -> END
5. TASK -> POST hook -> END
6. TASK -> FAIL hook -> END, the TASK -> hook edge firing on failure
7. for "hook A depends on hook B": B -> A and A -> END
8. every POST hook -> every FAIL hook

Each edge carries the trigger rule of its destination node. The wired graph
is validated (acyclic, every node reachable from START and able to reach
END) and frozen into a Graph with deterministic node and edge order.
"""

from __future__ import annotations

import networkx as nx

from lattice_core.errors import BuildError
from lattice_core.graph.models import Edge, Graph, Node, NodeKind, NodeSet
from lattice_core.schemas import HookPhase


class DependencyGraphBuilder:
    """Wire a NodeSet into a validated, immutable Graph.

    Example:
        >>> graph = DependencyGraphBuilder().wire(NodeBuilder().build(resolved))
        >>> graph.predecessors(graph.end_id)
        ['transformation_bq2bq']
    """

    def wire(self, nodes: NodeSet) -> Graph:
        """Apply the ordering rules and validate the result.

        Args:
            nodes: Vertex set produced by NodeBuilder.

        Returns:
            Graph with nodes in lexicographic topological order and edges
            sorted by (source, destination).

        Raises:
            BuildError: If a hook depends on an undeclared hook, hook
                dependencies form a cycle, or a node is unreachable.
        """
        digraph: nx.DiGraph = nx.DiGraph()
        for node in nodes:
            digraph.add_node(node.id, node=node)

        start, end, task = nodes.start, nodes.end, nodes.task
        pre_hooks = nodes.hooks_in_phase(HookPhase.PRE)
        post_hooks = nodes.hooks_in_phase(HookPhase.POST)
        fail_hooks = nodes.hooks_in_phase(HookPhase.FAIL)

        # 1-2: sensors start immediately and all gate the task
        for sensor in nodes.sensors:
            _connect(digraph, start, sensor)
            _connect(digraph, sensor, task)

        # 3: pre hooks gate the task independently
        for hook in pre_hooks:
            _connect(digraph, start, hook)
            _connect(digraph, hook, task)

        if not nodes.sensors and not pre_hooks:
            _connect(digraph, start, task)

        # 4
        _connect(digraph, task, end)

        # 5-6: the TASK -> FAIL hook edge takes the hook's failure trigger
        for hook in post_hooks + fail_hooks:
            _connect(digraph, task, hook)
            _connect(digraph, hook, end)

        # 7
        hooks_by_name = {hook.name: hook for hook in nodes.hooks}
        for hook in nodes.hooks:
            depends_on = hook.hook.depends_on if hook.hook is not None else []
            for upstream_name in depends_on:
                upstream = hooks_by_name.get(upstream_name)
                if upstream is None:
                    raise BuildError(
                        f"Hook '{hook.name}' depends on undeclared hook '{upstream_name}'",
                        job_name=nodes.job_name,
                        node_ids=[hook.id],
                        hook_names=[hook.name, upstream_name],
                    )
                _connect(digraph, upstream, hook)
                _connect(digraph, hook, end)

        # 8: full POST x FAIL fan-in
        for post_hook in post_hooks:
            for fail_hook in fail_hooks:
                _connect(digraph, post_hook, fail_hook)

        _validate(digraph, nodes)
        return _freeze(digraph, nodes)


def wire(nodes: NodeSet) -> Graph:
    """Wire a NodeSet into a Graph (see DependencyGraphBuilder.wire)."""
    return DependencyGraphBuilder().wire(nodes)


def _connect(digraph: nx.DiGraph, source: Node, destination: Node) -> None:
    digraph.add_edge(source.id, destination.id, condition=destination.trigger_rule)


def _validate(digraph: nx.DiGraph, nodes: NodeSet) -> None:
    """Check acyclicity, reachability from START and co-reachability to END.

    Raises:
        BuildError: On the first violated property.
    """
    if not nx.is_directed_acyclic_graph(digraph):
        cycle_ids = [source for source, _ in nx.find_cycle(digraph)]
        cycle_nodes = [digraph.nodes[node_id]["node"] for node_id in cycle_ids]
        hook_names = [node.name for node in cycle_nodes if node.kind == NodeKind.HOOK]
        path = " -> ".join(node.name for node in cycle_nodes + cycle_nodes[:1])
        raise BuildError(
            f"Hook dependencies form a cycle: {path}",
            job_name=nodes.job_name,
            node_ids=cycle_ids,
            hook_names=hook_names,
        )

    start_id, end_id = nodes.start.id, nodes.end.id
    reachable = nx.descendants(digraph, start_id) | {start_id}
    unreachable = sorted(set(digraph.nodes) - reachable)
    if unreachable:
        raise BuildError(
            f"Node(s) not reachable from '{start_id}': {', '.join(unreachable)}",
            job_name=nodes.job_name,
            node_ids=unreachable,
        )

    reaching_end = nx.ancestors(digraph, end_id) | {end_id}
    dead_ends = sorted(set(digraph.nodes) - reaching_end)
    if dead_ends:
        raise BuildError(
            f"Node(s) cannot reach '{end_id}': {', '.join(dead_ends)}",
            job_name=nodes.job_name,
            node_ids=dead_ends,
        )


def _freeze(digraph: nx.DiGraph, nodes: NodeSet) -> Graph:
    ordered = nx.lexicographical_topological_sort(digraph)
    edges = sorted(
        (
            Edge(source=source, destination=destination, condition=data["condition"])
            for source, destination, data in digraph.edges(data=True)
        ),
        key=lambda edge: (edge.source, edge.destination),
    )
    return Graph(
        job_name=nodes.job_name,
        nodes=tuple(digraph.nodes[node_id]["node"] for node_id in ordered),
        edges=tuple(edges),
        start_id=nodes.start.id,
        end_id=nodes.end.id,
    )
