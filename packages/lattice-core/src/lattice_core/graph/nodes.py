"""Node builder for lattice.

Constructs the vertex set of one job graph:
- one START and one END lifecycle marker
- one TASK node for the transformation
- one HOOK node per declared hook, tagged with its phase
- one SENSOR node per upstream dependency, tagged with its kind

Node ids are derived from (kind, dependency-or-hook identity) only, so the
same ResolvedConfig always yields the same ids. Two nodes deriving the same
node id or task id is a BuildError.
"""

from __future__ import annotations

from lattice_core.compiler.models import ResolvedConfig
from lattice_core.compiler.window import SensorWindowParams, WindowCalculator
from lattice_core.errors import BuildError
from lattice_core.graph.models import Node, NodeKind, NodeSet, SensorKind, TriggerRule
from lattice_core.identifiers import sanitize_identifier, truncate
from lattice_core.schemas import (
    CrossTenantDependency,
    HookPhase,
    HookSpec,
    HttpDependency,
    IntraDependency,
)

START_NODE_ID = "job_start_event"
END_NODE_ID = "job_end_event"
START_TASK_ID = "publish_job_start_event"
END_TASK_ID = "publish_job_end_event"

TASK_PREFIX = "transformation_"
HOOK_PREFIX = "hook_"
SENSOR_PREFIX = "wait_"

HOOK_TRIGGER_RULES: dict[HookPhase, TriggerRule] = {
    HookPhase.PRE: TriggerRule.ALL_SUCCESS,
    HookPhase.POST: TriggerRule.ALL_SUCCESS,
    HookPhase.FAIL: TriggerRule.ANY_FAILED,
}


def task_node_id(task_name: str) -> str:
    """Node id of the transformation task."""
    return TASK_PREFIX + sanitize_identifier(task_name)


def hook_node_id(hook_name: str) -> str:
    """Node id of a hook."""
    return HOOK_PREFIX + sanitize_identifier(hook_name)


def sensor_key(dependency: IntraDependency | CrossTenantDependency | HttpDependency) -> str:
    """Identity of an upstream dependency shared by its node id and task id.

    Cross-tenant upstreams are keyed by resource name, project and job so that
    same-named jobs in different tenants stay distinct.
    """
    if isinstance(dependency, CrossTenantDependency):
        return f"{dependency.name}-{dependency.project}-{dependency.job_name}"
    if isinstance(dependency, HttpDependency):
        return dependency.name
    return dependency.job_name


def sensor_node_id(dependency: IntraDependency | CrossTenantDependency | HttpDependency) -> str:
    """Node id of the sensor waiting on an upstream dependency.

    Example:
        >>> sensor_node_id(IntraDependency(job_name="orders-raw"))
        'wait_orders__dash__raw'
    """
    return SENSOR_PREFIX + sanitize_identifier(sensor_key(dependency))


def sensor_task_id(dependency: IntraDependency | CrossTenantDependency | HttpDependency) -> str:
    """Scheduler-facing task id of a sensor.

    Example:
        >>> sensor_task_id(IntraDependency(job_name="orders", task_name="bq2bq"))
        'wait_orders-bq2bq'
    """
    task_id = SENSOR_PREFIX + truncate(sensor_key(dependency))
    if isinstance(dependency, HttpDependency):
        return task_id
    if dependency.task_name:
        task_id = f"{task_id}-{dependency.task_name}"
    return task_id


class NodeBuilder:
    """Build the vertex set of a job graph from its resolved configuration.

    Example:
        >>> nodes = NodeBuilder().build(resolved)
        >>> nodes.start.id
        'job_start_event'
    """

    def build(
        self,
        resolved: ResolvedConfig,
        window: SensorWindowParams | None = None,
    ) -> NodeSet:
        """Construct every node of the job graph.

        Args:
            resolved: Fully-resolved job configuration.
            window: Sensor window parameters. Computed from the job's window
                descriptor when not given.

        Returns:
            NodeSet with START, END, TASK, hook and sensor nodes.

        Raises:
            WindowError: If the window must be computed and is malformed.
            BuildError: If two nodes derive the same node id or task id.
        """
        spec = resolved.spec
        if window is None:
            window = WindowCalculator().compute(spec.window, job_name=spec.name)

        hooks = tuple(self._hook_node(hook) for hook in spec.hooks)

        deps = spec.dependencies
        sensors = (
            tuple(self._sensor_node(dep, SensorKind.INTRA, window) for dep in deps.intra)
            + tuple(
                self._sensor_node(dep, SensorKind.CROSS_TENANT, window) for dep in deps.cross_tenant
            )
            + tuple(self._sensor_node(dep, SensorKind.HTTP, None) for dep in deps.http)
        )

        node_set = NodeSet(
            job_name=spec.name,
            start=Node(
                id=START_NODE_ID,
                kind=NodeKind.START,
                task_id=START_TASK_ID,
                name=spec.name,
            ),
            end=Node(
                id=END_NODE_ID,
                kind=NodeKind.END,
                task_id=END_TASK_ID,
                name=spec.name,
                trigger_rule=TriggerRule.ALL_DONE,
            ),
            task=Node(
                id=task_node_id(resolved.task_name),
                kind=NodeKind.TASK,
                task_id=resolved.task_name,
                name=resolved.task_name,
            ),
            hooks=hooks,
            sensors=sensors,
        )
        _check_collisions(node_set)
        return node_set

    def _hook_node(self, hook: HookSpec) -> Node:
        return Node(
            id=hook_node_id(hook.name),
            kind=NodeKind.HOOK,
            task_id=HOOK_PREFIX + hook.name,
            name=hook.name,
            trigger_rule=HOOK_TRIGGER_RULES[hook.phase],
            phase=hook.phase,
            hook=hook,
        )

    def _sensor_node(
        self,
        dependency: IntraDependency | CrossTenantDependency | HttpDependency,
        sensor_kind: SensorKind,
        window: SensorWindowParams | None,
    ) -> Node:
        name = dependency.job_name if sensor_kind == SensorKind.INTRA else dependency.name
        return Node(
            id=sensor_node_id(dependency),
            kind=NodeKind.SENSOR,
            task_id=sensor_task_id(dependency),
            name=name,
            sensor_kind=sensor_kind,
            dependency=dependency,
            window=window,
        )


def build(resolved: ResolvedConfig, window: SensorWindowParams | None = None) -> NodeSet:
    """Construct the vertex set of a job graph (see NodeBuilder.build)."""
    return NodeBuilder().build(resolved, window)


def _check_collisions(node_set: NodeSet) -> None:
    for attribute, label in (("id", "node id"), ("task_id", "task id")):
        seen: dict[str, Node] = {}
        for node in node_set:
            value = getattr(node, attribute)
            other = seen.get(value)
            if other is not None:
                raise BuildError(
                    f"{other.kind.value} '{other.name}' and {node.kind.value} '{node.name}' "
                    f"derive the same {label} '{value}'",
                    job_name=node_set.job_name,
                    node_ids=[other.id, node.id],
                    hook_names=[n.name for n in (other, node) if n.kind == NodeKind.HOOK],
                )
            seen[value] = node
