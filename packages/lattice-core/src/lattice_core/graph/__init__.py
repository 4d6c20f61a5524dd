"""Graph construction for lattice.

This module exports the vertex/edge types and the two graph stages:
- NodeBuilder: ResolvedConfig -> NodeSet
- DependencyGraphBuilder: NodeSet -> Graph (validated, immutable)
"""

from __future__ import annotations

from lattice_core.graph.builder import DependencyGraphBuilder
from lattice_core.graph.models import (
    Edge,
    Graph,
    Node,
    NodeKind,
    NodeSet,
    SensorKind,
    TriggerRule,
)
from lattice_core.graph.nodes import (
    END_NODE_ID,
    START_NODE_ID,
    NodeBuilder,
    hook_node_id,
    sensor_node_id,
    sensor_task_id,
    task_node_id,
)

__all__: list[str] = [
    # Builders
    "NodeBuilder",
    "DependencyGraphBuilder",
    # Types
    "Graph",
    "Node",
    "Edge",
    "NodeSet",
    "NodeKind",
    "SensorKind",
    "TriggerRule",
    # Identifiers
    "START_NODE_ID",
    "END_NODE_ID",
    "task_node_id",
    "hook_node_id",
    "sensor_node_id",
    "sensor_task_id",
]
