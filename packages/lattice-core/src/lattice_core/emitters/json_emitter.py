"""Canonical JSON emitter.

Serializes the graph as a target-neutral document: DAG-level metadata,
every node with its kind-specific parameters, and the explicit edge list
with trigger conditions. Keys are sorted and list order follows the Graph,
so the same resolved configuration always produces byte-identical output.
"""

from __future__ import annotations

import json
from typing import Any

from lattice_core.compiler.models import ResolvedConfig
from lattice_core.emitters.base import Emitter, node_environment
from lattice_core.graph.models import Graph, Node, NodeKind
from lattice_core.schemas import CrossTenantDependency, HttpDependency, IntraDependency

FORMAT_VERSION = 1


class JsonGraphEmitter(Emitter):
    """Emit a job graph as canonical JSON."""

    target = "json"
    media_type = "application/json"
    extension = "json"

    def _render(self, graph: Graph, resolved: ResolvedConfig) -> str:
        document = {
            "format_version": FORMAT_VERSION,
            "dag": _dag_metadata(resolved),
            "nodes": [_node(node, resolved) for node in graph.nodes],
            "edges": [
                {
                    "source": edge.source,
                    "destination": edge.destination,
                    "condition": edge.condition.value,
                }
                for edge in graph.edges
            ],
        }
        return json.dumps(document, indent=2, sort_keys=True, ensure_ascii=False) + "\n"


def _dag_metadata(resolved: ResolvedConfig) -> dict[str, Any]:
    spec = resolved.spec
    return {
        "id": spec.name,
        "project": spec.project,
        "namespace": spec.namespace,
        "owner": spec.owner,
        "description": spec.description,
        "schedule_interval": resolved.schedule_interval,
        "catchup": spec.schedule.catch_up,
        "start_date": spec.schedule.start_date.isoformat(),
        "end_date": resolved.end_date.isoformat() if resolved.end_date else None,
        "dagrun_timeout_seconds": resolved.dag_timeout_seconds,
        "sla_miss_seconds": resolved.sla_miss_seconds,
        "tags": [spec.labels[key] for key in sorted(spec.labels)],
        "pool": resolved.pool,
        "queue": resolved.queue,
    }


def _node(node: Node, resolved: ResolvedConfig) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": node.id,
        "kind": node.kind.value,
        "task_id": node.task_id,
        "trigger_rule": node.trigger_rule.value,
    }
    if node.kind == NodeKind.TASK:
        data.update(_executable(node, resolved))
        task = resolved.spec.task
        data.update(
            {
                "image": task.image,
                "command": list(task.command),
                "config": dict(task.config),
                "priority_weight": task.priority,
                "depends_on_past": resolved.spec.behavior.depends_on_past,
                "sla_miss_seconds": resolved.sla_miss_seconds,
            }
        )
    elif node.kind == NodeKind.HOOK and node.hook is not None:
        data.update(_executable(node, resolved))
        data.update(
            {
                "phase": node.hook.phase.value,
                "image": node.hook.image,
                "config": dict(node.hook.config),
                "depends_on": sorted(node.hook.depends_on),
            }
        )
    elif node.kind == NodeKind.SENSOR:
        data.update(_sensor(node, resolved))
    return data


def _executable(node: Node, resolved: ResolvedConfig) -> dict[str, Any]:
    resources = resolved.resources
    return {
        "environment": node_environment(node, resolved),
        "resources": resources.model_dump(exclude_none=True) if resources is not None else None,
        "retry": resolved.retry.model_dump(),
    }


def _sensor(node: Node, resolved: ResolvedConfig) -> dict[str, Any]:
    dependency = node.dependency
    spec = resolved.spec
    data: dict[str, Any] = {
        "sensor_kind": node.sensor_kind.value if node.sensor_kind else None,
        "poke_interval_seconds": resolved.sensor.poke_interval_seconds,
        "timeout_seconds": resolved.sensor.timeout_seconds,
    }
    if isinstance(dependency, HttpDependency):
        data.update(
            {
                "url": dependency.url,
                "headers": dict(dependency.headers),
                "request_params": dict(dependency.request_params),
            }
        )
        return data

    if isinstance(dependency, CrossTenantDependency):
        upstream = {
            "name": dependency.name,
            "host": dependency.host,
            "project": dependency.project,
            "namespace": dependency.namespace,
            "job_name": dependency.job_name,
            "task_name": dependency.task_name,
        }
    elif isinstance(dependency, IntraDependency):
        upstream = {
            "host": resolved.defaults.hostname,
            "project": dependency.project or spec.project,
            "namespace": dependency.namespace or spec.namespace,
            "job_name": dependency.job_name,
            "task_name": dependency.task_name,
        }
    else:
        upstream = {}

    data["upstream"] = upstream
    data["window"] = node.window.as_dict() if node.window is not None else None
    return data
