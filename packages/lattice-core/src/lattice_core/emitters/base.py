"""Base class and registry for graph emitters.

An emitter serializes a validated Graph plus its ResolvedConfig into one
target scheduler's native representation. Emitters own no ordering logic:
they translate the graph structurally and never reorder or add edges.

Emitters are registered by target name and imported lazily, so a target
whose package is not installed costs nothing until it is requested.
"""

from __future__ import annotations

import importlib
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from lattice_core.compiler.models import ResolvedConfig
from lattice_core.errors import EmitError
from lattice_core.graph.models import Graph, Node, NodeKind

SCHEDULED_AT_PLACEHOLDER = "{{ next_execution_date }}"
"""Scheduled-time placeholder, resolved by the scheduler at run time."""

INSTANCE_TYPE_TASK = "task"
INSTANCE_TYPE_HOOK = "hook"

# Target name -> "module.path.ClassName"
EMITTERS: dict[str, str] = {
    "json": "lattice_core.emitters.json_emitter.JsonGraphEmitter",
    "airflow": "lattice_airflow.emitter.AirflowYamlEmitter",
}


@dataclass(frozen=True)
class SerializedArtifact:
    """Serialized graph definition for one target backend.

    Attributes:
        target: Emitter target name.
        filename: Suggested file name for the artifact.
        media_type: MIME type of content.
        content: Serialized graph definition.
    """

    target: str
    filename: str
    media_type: str
    content: str

    def write(self, directory: Path | str) -> Path:
        """Write the artifact into a directory, creating it if needed.

        Returns:
            Path of the written file.
        """
        path = Path(directory) / self.filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.content)
        return path


class Emitter(ABC):
    """Base class for target emitters.

    Subclasses set ``target``, ``media_type`` and ``extension`` and
    implement ``_render``. ``emit`` wraps any serialization failure into
    an EmitError carrying the target and job name.

    Example:
        >>> class TextEmitter(Emitter):
        ...     target = "text"
        ...     media_type = "text/plain"
        ...     extension = "txt"
        ...     def _render(self, graph, resolved):
        ...         return "\\n".join(node.id for node in graph.nodes)
    """

    target: str
    media_type: str
    extension: str

    def emit(self, graph: Graph, resolved: ResolvedConfig) -> SerializedArtifact:
        """Serialize a graph.

        Args:
            graph: Validated job graph.
            resolved: Resolved configuration the graph was built from.

        Returns:
            SerializedArtifact for this target.

        Raises:
            EmitError: If the graph cannot be serialized.
        """
        try:
            content = self._render(graph, resolved)
        except EmitError:
            raise
        except (TypeError, ValueError) as e:
            raise EmitError(
                "Failed to serialize graph",
                target=self.target,
                job_name=graph.job_name,
                internal_details=str(e),
            ) from e

        return SerializedArtifact(
            target=self.target,
            filename=f"{graph.job_name}.{self.extension}",
            media_type=self.media_type,
            content=content,
        )

    @abstractmethod
    def _render(self, graph: Graph, resolved: ResolvedConfig) -> str:
        """Render the graph into the target format."""
        ...


def get_emitter(target: str) -> Emitter:
    """Instantiate the emitter registered for a target.

    Args:
        target: Target name (see EMITTERS).

    Returns:
        Emitter instance.

    Raises:
        EmitError: If the target is unknown or its package is not installed.
    """
    import_path = EMITTERS.get(target)
    if import_path is None:
        raise EmitError(
            f"Unknown emitter target. Available: {', '.join(available_targets())}",
            target=target,
        )

    module_name, class_name = import_path.rsplit(".", 1)
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        raise EmitError(
            f"Emitter package for target is not installed ({module_name})",
            target=target,
            internal_details=str(e),
        ) from e

    emitter_class: type[Emitter] = getattr(module, class_name)
    return emitter_class()


def available_targets() -> list[str]:
    """Registered target names, sorted."""
    return sorted(EMITTERS)


def node_environment(node: Node, resolved: ResolvedConfig) -> dict[str, str]:
    """Environment variables propagated into an executable node.

    Args:
        node: TASK or HOOK node.
        resolved: Resolved job configuration.

    Returns:
        Mapping of variable name to value, in a fixed order.
    """
    spec = resolved.spec
    instance_type = INSTANCE_TYPE_HOOK if node.kind == NodeKind.HOOK else INSTANCE_TYPE_TASK
    return {
        "JOB_NAME": spec.name,
        "PROJECT": spec.project,
        "NAMESPACE": spec.namespace,
        "JOB_LABELS": resolved.labels_string,
        "JOB_DIR": resolved.defaults.job_dir,
        "SCHEDULED_AT": SCHEDULED_AT_PLACEHOLDER,
        "INSTANCE_TYPE": instance_type,
        "INSTANCE_NAME": node.name,
        "SCHEDULER_HOST": resolved.defaults.hostname,
    }
