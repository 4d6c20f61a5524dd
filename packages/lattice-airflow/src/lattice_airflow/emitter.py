"""Airflow YAML emitter.

Converts a compiled job graph into a declarative Airflow DAG definition in
the dag-factory layout: one top-level key per DAG holding ``default_args``,
DAG-level settings and a ``tasks`` mapping keyed by task id.

- START/END markers become PythonOperators publishing lifecycle events
- TASK and HOOK nodes become KubernetesPodOperators with an init container
- Intra and cross-tenant sensors become upstream-job sensors
- HTTP sensors become HTTP readiness sensors

Airflow expresses trigger conditions per task, not per edge, so every edge
entering a node must carry that node's trigger rule.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

import yaml

from lattice_core.compiler.models import ResolvedConfig
from lattice_core.emitters import Emitter, node_environment
from lattice_core.errors import EmitError
from lattice_core.graph import Graph, Node, NodeKind, SensorKind
from lattice_core.identifiers import pod_name
from lattice_core.schemas import CrossTenantDependency, HttpDependency, IntraDependency

DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

PYTHON_OPERATOR = "airflow.operators.python.PythonOperator"
POD_OPERATOR = "airflow.providers.cncf.kubernetes.operators.pod.KubernetesPodOperator"
UPSTREAM_JOB_SENSOR = "lattice_runtime.sensors.UpstreamJobSensor"
HTTP_SENSOR = "lattice_runtime.sensors.ExternalHttpSensor"

CALLBACKS = "lattice_runtime.callbacks"
START_CALLABLE = f"{CALLBACKS}.log_job_start"
END_CALLABLE = f"{CALLBACKS}.log_job_end"
SLA_MISS_CALLBACK = f"{CALLBACKS}.sla_miss_notify"
FAILURE_CALLBACK = f"{CALLBACKS}.log_failure_event"
RETRY_CALLBACK = f"{CALLBACKS}.log_retry_event"
SUCCESS_CALLBACK = f"{CALLBACKS}.log_success_event"

INIT_CONTAINER_NAME = "init-container"

# The executor container only sees these; the init container gets the rest
EXECUTOR_ENV_KEYS = ("JOB_LABELS", "JOB_DIR")
ASSET_VOLUME = "asset-volume"


class AirflowYamlEmitter(Emitter):
    """Emit a job graph as a dag-factory Airflow DAG definition.

    Example:
        >>> artifact = AirflowYamlEmitter().emit(graph, resolved)
        >>> artifact.filename
        'sales-daily.yaml'
    """

    target = "airflow"
    media_type = "application/yaml"
    extension = "yaml"

    def _render(self, graph: Graph, resolved: ResolvedConfig) -> str:
        _check_trigger_rules(graph)
        document = {graph.job_name: self._dag(graph, resolved)}
        return yaml.safe_dump(
            document,
            sort_keys=False,
            default_flow_style=False,
            allow_unicode=True,
        )

    def _dag(self, graph: Graph, resolved: ResolvedConfig) -> dict[str, Any]:
        spec = resolved.spec
        dag: dict[str, Any] = {
            "default_args": _default_args(resolved),
            "schedule_interval": resolved.schedule_interval,
            "catchup": spec.schedule.catch_up,
            "dagrun_timeout_sec": resolved.dag_timeout_seconds,
            "sla_miss_callback": SLA_MISS_CALLBACK,
            "tags": [spec.labels[key] for key in sorted(spec.labels)],
        }
        if spec.description:
            dag["description"] = spec.description

        tasks: dict[str, Any] = {}
        for node in graph.nodes:
            task = self._task(node, resolved)
            upstream = [graph.node(node_id).task_id for node_id in graph.predecessors(node.id)]
            if upstream:
                task["dependencies"] = sorted(upstream)
            tasks[node.task_id] = task
        dag["tasks"] = tasks
        return dag

    def _task(self, node: Node, resolved: ResolvedConfig) -> dict[str, Any]:
        if node.kind == NodeKind.START:
            return {"operator": PYTHON_OPERATOR, "python_callable": START_CALLABLE}
        if node.kind == NodeKind.END:
            return {
                "operator": PYTHON_OPERATOR,
                "python_callable": END_CALLABLE,
                "trigger_rule": node.trigger_rule.value,
            }
        if node.kind == NodeKind.SENSOR:
            return _sensor_task(node, resolved)
        return _pod_task(node, resolved)


def _default_args(resolved: ResolvedConfig) -> dict[str, Any]:
    spec = resolved.spec
    defaults = resolved.defaults
    args: dict[str, Any] = {
        "params": {
            "project_name": spec.project,
            "namespace": spec.namespace,
            "job_name": spec.name,
            "scheduler_host": defaults.hostname,
        },
    }
    if resolved.pool:
        args["pool"] = resolved.pool
    if resolved.queue:
        args["queue"] = resolved.queue
    args.update(
        {
            "owner": spec.owner,
            "depends_on_past": False,
            "retries": resolved.retry.count,
            "retry_delay_sec": resolved.retry.delay_seconds,
            "retry_exponential_backoff": resolved.retry.exponential_backoff,
            "priority_weight": spec.task.priority,
            "start_date": _format_date(spec.schedule.start_date),
        }
    )
    if resolved.end_date is not None:
        args["end_date"] = _format_date(resolved.end_date)
    args.update(
        {
            "on_failure_callback": FAILURE_CALLBACK,
            "on_retry_callback": RETRY_CALLBACK,
            "on_success_callback": SUCCESS_CALLBACK,
            "weight_rule": "absolute",
        }
    )
    return args


def _pod_task(node: Node, resolved: ResolvedConfig) -> dict[str, Any]:
    defaults = resolved.defaults
    env = node_environment(node, resolved)
    executor_env = {key: env[key] for key in EXECUTOR_ENV_KEYS}
    init_env = {key: value for key, value in env.items() if key != "JOB_LABELS"}

    if node.kind == NodeKind.TASK:
        image = resolved.spec.task.image
        command = list(resolved.spec.task.command)
        name = pod_name(node.name)
    elif node.hook is not None:
        image = node.hook.image
        command = []
        name = pod_name(node.task_id)
    else:
        raise EmitError(
            f"Node '{node.id}' has no executable definition",
            target=AirflowYamlEmitter.target,
            job_name=resolved.job_name,
        )

    task: dict[str, Any] = {
        "operator": POD_OPERATOR,
        "name": name,
        "namespace": defaults.kubernetes_namespace,
        "image": image,
        "image_pull_policy": defaults.image_pull_policy,
        "cmds": command,
        "env_vars": executor_env,
        "init_containers": [
            {
                "name": INIT_CONTAINER_NAME,
                "image": defaults.init_container_image,
                "image_pull_policy": defaults.image_pull_policy,
                "env": init_env,
                "command": ["/bin/sh", defaults.init_container_entrypoint],
            }
        ],
        "volumes": [{"name": ASSET_VOLUME, "empty_dir": {}}],
        "volume_mounts": [{"name": ASSET_VOLUME, "mount_path": defaults.job_dir}],
        "get_logs": True,
        "in_cluster": True,
        "is_delete_operator_pod": True,
        "reattach_on_restart": True,
        "do_xcom_push": False,
        "trigger_rule": node.trigger_rule.value,
    }
    if resolved.resources is not None:
        task["container_resources"] = resolved.resources.model_dump(exclude_none=True)
    if node.kind == NodeKind.TASK:
        task["depends_on_past"] = resolved.spec.behavior.depends_on_past
        if resolved.sla_miss_seconds is not None:
            task["sla_secs"] = resolved.sla_miss_seconds
    return task


def _sensor_task(node: Node, resolved: ResolvedConfig) -> dict[str, Any]:
    dependency = node.dependency
    task: dict[str, Any] = {
        "poke_interval": resolved.sensor.poke_interval_seconds,
        "timeout": resolved.sensor.timeout_seconds,
        "trigger_rule": node.trigger_rule.value,
    }

    if isinstance(dependency, HttpDependency):
        task.update(
            {
                "operator": HTTP_SENSOR,
                "endpoint": dependency.url,
                "headers": dict(dependency.headers),
                "request_params": dict(dependency.request_params),
            }
        )
        return task

    spec = resolved.spec
    if node.sensor_kind == SensorKind.CROSS_TENANT and isinstance(
        dependency, CrossTenantDependency
    ):
        upstream = {
            "upstream_host": dependency.host,
            "upstream_project": dependency.project,
            "upstream_namespace": dependency.namespace,
            "upstream_job": dependency.job_name,
        }
    elif isinstance(dependency, IntraDependency):
        upstream = {
            "upstream_host": resolved.defaults.hostname,
            "upstream_project": dependency.project or spec.project,
            "upstream_namespace": dependency.namespace or spec.namespace,
            "upstream_job": dependency.job_name,
        }
    else:
        raise EmitError(
            f"Sensor '{node.id}' has no dependency descriptor",
            target=AirflowYamlEmitter.target,
            job_name=resolved.job_name,
        )

    task["operator"] = UPSTREAM_JOB_SENSOR
    task["scheduler_host"] = resolved.defaults.hostname
    task.update(upstream)
    if node.window is not None:
        task.update(node.window.as_dict())
    return task


def _check_trigger_rules(graph: Graph) -> None:
    for edge in graph.edges:
        destination = graph.node(edge.destination)
        if edge.condition != destination.trigger_rule:
            raise EmitError(
                f"Edge {edge.source} -> {edge.destination} carries "
                f"'{edge.condition.value}' but the task fires on "
                f"'{destination.trigger_rule.value}'",
                target=AirflowYamlEmitter.target,
                job_name=graph.job_name,
            )


def _format_date(value: date) -> str:
    return datetime.combine(value, time.min).strftime(DATE_FORMAT)
