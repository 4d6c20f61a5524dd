"""Compiler class for lattice.

This module implements the Compiler facade that turns a JobSpec (job.yaml)
plus the injected SchedulerDefaults into a serialized scheduler graph:

    SpecResolver -> WindowCalculator -> NodeBuilder -> DependencyGraphBuilder -> Emitter

The stages are pure; this facade is the boundary that loads files, logs and
traces. Each job compiles in isolation: compile_many() records a failing
job's error and carries on with the rest.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from lattice_core.compiler.models import ResolvedConfig
from lattice_core.compiler.spec_resolver import SpecResolver
from lattice_core.compiler.window import WindowCalculator
from lattice_core.emitters import SerializedArtifact, get_emitter
from lattice_core.errors import LatticeError
from lattice_core.graph import DependencyGraphBuilder, Graph, NodeBuilder
from lattice_core.observability import get_logger, span
from lattice_core.schemas import JobSpec, SchedulerDefaults, read_job_source

DEFAULT_TARGET = "json"

# Errors that fail one job without affecting the others
JOB_ERRORS: tuple[type[Exception], ...] = (
    LatticeError,
    FileNotFoundError,
    yaml.YAMLError,
    ValidationError,
)


@dataclass(frozen=True)
class CompilationResult:
    """Output of one job's compilation.

    Attributes:
        resolved: Fully-resolved configuration.
        graph: Validated job graph.
        artifact: Serialized graph for the requested target.
        source_hash: SHA-256 of the job.yaml content (file input only).
    """

    resolved: ResolvedConfig
    graph: Graph
    artifact: SerializedArtifact
    source_hash: str | None = None

    @property
    def job_name(self) -> str:
        """Name of the compiled job."""
        return self.graph.job_name


@dataclass(frozen=True)
class JobOutcome:
    """Per-job outcome of a batch compilation.

    Exactly one of ``result`` and ``error`` is set.
    """

    source: str
    result: CompilationResult | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """True if the job compiled."""
        return self.error is None


class Compiler:
    """Compile job definitions into scheduler graphs.

    Example:
        >>> compiler = Compiler(DefaultsResolver().load())
        >>> result = compiler.compile(JobSpec.from_yaml("job.yaml"), target="airflow")
        >>> result.artifact.write("dags/")

        >>> # Batch: one failure never affects the other jobs
        >>> outcomes = compiler.compile_many(["a/job.yaml", "b/job.yaml"])
        >>> [o.ok for o in outcomes]
        [True, False]
    """

    def __init__(self, defaults: SchedulerDefaults | None = None) -> None:
        """Initialize the Compiler.

        Args:
            defaults: Process-wide scheduler defaults. Built-in fallbacks if None.
        """
        self.defaults = defaults or SchedulerDefaults()
        self._resolver = SpecResolver(self.defaults)
        self._window_calculator = WindowCalculator()
        self._node_builder = NodeBuilder()
        self._graph_builder = DependencyGraphBuilder()

    def resolve_and_build(self, spec: JobSpec) -> tuple[ResolvedConfig, Graph]:
        """Resolve a spec and build its graph without emitting.

        Raises:
            ConfigError: If a required identity field is blank.
            WindowError: If the window descriptor is malformed.
            BuildError: If the graph cannot be built.
        """
        resolved = self._resolver.resolve(spec)
        window = self._window_calculator.compute(spec.window, job_name=spec.name)
        nodes = self._node_builder.build(resolved, window)
        graph = self._graph_builder.wire(nodes)
        return resolved, graph

    def compile(
        self,
        spec: JobSpec,
        target: str = DEFAULT_TARGET,
        *,
        source_hash: str | None = None,
    ) -> CompilationResult:
        """Compile one job.

        Args:
            spec: Validated job definition.
            target: Emitter target name ("json", "airflow").
            source_hash: Hash of the source file, recorded in the result.

        Returns:
            CompilationResult with resolved config, graph and artifact.

        Raises:
            ConfigError: If a required identity field is blank.
            WindowError: If the window descriptor is malformed.
            BuildError: If the graph cannot be built.
            EmitError: If the target is unknown or serialization fails.
        """
        attributes = {"job_name": spec.name or "<unnamed>", "target": target}
        with span("compile_job", attributes=attributes) as current:
            resolved, graph = self.resolve_and_build(spec)
            current.set_attribute("node_count", graph.node_count)
            current.set_attribute("edge_count", graph.edge_count)
            artifact = get_emitter(target).emit(graph, resolved)

        return CompilationResult(
            resolved=resolved,
            graph=graph,
            artifact=artifact,
            source_hash=source_hash,
        )

    def compile_file(
        self,
        spec_path: Path | str,
        target: str = DEFAULT_TARGET,
    ) -> CompilationResult:
        """Load job.yaml and compile it.

        Raises:
            FileNotFoundError: If job.yaml not found.
            ConfigError: If job.yaml cannot be read or is not UTF-8 text.
            yaml.YAMLError: If YAML is invalid.
            pydantic.ValidationError: If spec validation fails.
            LatticeError: If compilation fails.
        """
        source_content = read_job_source(spec_path)
        raw_data: dict[str, Any] = yaml.safe_load(source_content) or {}
        spec = JobSpec.model_validate(raw_data)
        return self.compile(spec, target, source_hash=_compute_hash(source_content))

    def compile_many(
        self,
        specs: Iterable[JobSpec | Path | str],
        target: str = DEFAULT_TARGET,
    ) -> list[JobOutcome]:
        """Compile several jobs independently.

        A job that fails is recorded with its error; the remaining jobs are
        still compiled.

        Args:
            specs: JobSpec instances or paths to job.yaml files.
            target: Emitter target name.

        Returns:
            One JobOutcome per input, in input order.
        """
        logger = get_logger()
        outcomes: list[JobOutcome] = []
        for item in specs:
            source = item.name if isinstance(item, JobSpec) else str(item)
            try:
                if isinstance(item, JobSpec):
                    result = self.compile(item, target)
                else:
                    result = self.compile_file(item, target)
            except JOB_ERRORS as e:
                logger.warning("job_skipped", source=source, error=str(e))
                outcomes.append(JobOutcome(source=source, error=e))
                continue
            outcomes.append(JobOutcome(source=source, result=result))

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        logger.info("batch_compiled", total=len(outcomes), failed=failed, target=target)
        return outcomes


def _compute_hash(content: str) -> str:
    return hashlib.sha256(content.encode()).hexdigest()
