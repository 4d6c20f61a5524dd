"""Graph types for lattice.

Leaf module of the graph package: node and edge records, the NodeSet
produced by NodeBuilder and the immutable Graph produced by
DependencyGraphBuilder.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from lattice_core.compiler.window import SensorWindowParams
from lattice_core.schemas import (
    CrossTenantDependency,
    HookPhase,
    HookSpec,
    HttpDependency,
    IntraDependency,
)

Dependency = IntraDependency | CrossTenantDependency | HttpDependency


class NodeKind(str, Enum):
    """Kind of graph vertex."""

    START = "start"
    END = "end"
    TASK = "task"
    HOOK = "hook"
    SENSOR = "sensor"


class SensorKind(str, Enum):
    """Kind of upstream dependency a sensor waits on."""

    INTRA = "intra"
    CROSS_TENANT = "cross_tenant"
    HTTP = "http"


class TriggerRule(str, Enum):
    """Condition under which a node fires, given its predecessors.

    Values are the scheduler-facing spellings.
    """

    ALL_SUCCESS = "all_success"
    ANY_FAILED = "one_failed"
    ALL_DONE = "all_done"


@dataclass(frozen=True)
class Node:
    """One vertex of a job graph.

    Attributes:
        id: Deterministic node identifier (target-safe).
        kind: Vertex kind.
        task_id: Scheduler-facing task identifier.
        name: Human-provided name the id derives from.
        trigger_rule: Condition carried by every edge entering this node.
        phase: Hook phase (HOOK nodes only).
        sensor_kind: Dependency kind (SENSOR nodes only).
        hook: Hook declaration (HOOK nodes only).
        dependency: Dependency descriptor (SENSOR nodes only).
        window: Shared window parameters (intra/cross-tenant sensors only).
    """

    id: str
    kind: NodeKind
    task_id: str
    name: str
    trigger_rule: TriggerRule = TriggerRule.ALL_SUCCESS
    phase: HookPhase | None = None
    sensor_kind: SensorKind | None = None
    hook: HookSpec | None = None
    dependency: Dependency | None = None
    window: SensorWindowParams | None = None


@dataclass(frozen=True)
class Edge:
    """Directed ordering edge with its trigger condition."""

    source: str
    destination: str
    condition: TriggerRule = TriggerRule.ALL_SUCCESS


@dataclass(frozen=True)
class NodeSet:
    """Vertex set of one job graph, before wiring.

    Hooks keep their declaration order and sensors are grouped intra,
    cross-tenant, HTTP; DependencyGraphBuilder does not depend on either
    order.
    """

    job_name: str
    start: Node
    end: Node
    task: Node
    hooks: tuple[Node, ...] = ()
    sensors: tuple[Node, ...] = ()

    def __iter__(self) -> Iterator[Node]:
        yield self.start
        yield from self.sensors
        yield from self.hooks
        yield self.task
        yield self.end

    def __len__(self) -> int:
        return 3 + len(self.hooks) + len(self.sensors)

    def hooks_in_phase(self, phase: HookPhase) -> tuple[Node, ...]:
        """Return hook nodes of the given phase, in declaration order."""
        return tuple(node for node in self.hooks if node.phase == phase)


@dataclass(frozen=True)
class Graph:
    """Immutable, validated job graph.

    ``nodes`` are in lexicographic topological order and ``edges`` are
    sorted by (source, destination), so two graphs built from the same
    resolved configuration compare and serialize identically.

    Attributes:
        job_name: Job the graph was compiled from.
        nodes: Vertices in deterministic topological order.
        edges: Ordering edges sorted by (source, destination).
        start_id: Id of the START node.
        end_id: Id of the END node.
    """

    job_name: str
    nodes: tuple[Node, ...]
    edges: tuple[Edge, ...]
    start_id: str
    end_id: str
    _index: dict[str, Node] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", {node.id: node for node in self.nodes})

    def node(self, node_id: str) -> Node:
        """Look up a node by id.

        Raises:
            KeyError: If no node has this id.
        """
        try:
            return self._index[node_id]
        except KeyError:
            raise KeyError(f"Node not found: {node_id}") from None

    def has_node(self, node_id: str) -> bool:
        """Check if a node exists."""
        return node_id in self._index

    def edge(self, source: str, destination: str) -> Edge | None:
        """Return the edge source -> destination, or None."""
        for edge in self.edges:
            if edge.source == source and edge.destination == destination:
                return edge
        return None

    def predecessors(self, node_id: str) -> list[str]:
        """Ids of nodes with an edge into node_id, sorted."""
        return sorted(edge.source for edge in self.edges if edge.destination == node_id)

    def successors(self, node_id: str) -> list[str]:
        """Ids of nodes node_id has an edge to, sorted."""
        return sorted(edge.destination for edge in self.edges if edge.source == node_id)

    def nodes_of_kind(self, kind: NodeKind) -> list[Node]:
        """Nodes of one kind, in graph order."""
        return [node for node in self.nodes if node.kind == kind]

    @property
    def task(self) -> Node:
        """The transformation node."""
        return self.nodes_of_kind(NodeKind.TASK)[0]

    @property
    def node_count(self) -> int:
        """Number of nodes in the graph."""
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        """Number of edges in the graph."""
        return len(self.edges)
