"""lattice-core: Job definition to scheduler graph compilation.

This package provides:
- JobSpec: Pydantic schema for job.yaml
- SchedulerDefaults / DefaultsResolver: Process-wide scheduling defaults
- SpecResolver, WindowCalculator, NodeBuilder, DependencyGraphBuilder: Compilation stages
- Compiler: Facade running the stages and an Emitter
- JSON Schema export utilities
"""

from __future__ import annotations

__version__ = "0.1.0"

# Compilation stages
from lattice_core.compiler import (
    DefaultsResolver,
    ResolvedConfig,
    SensorWindowParams,
    SpecResolver,
    WindowCalculator,
)

# Compiler facade
from lattice_core.compiler.compiler import CompilationResult, Compiler, JobOutcome

# Emitters
from lattice_core.emitters import (
    Emitter,
    JsonGraphEmitter,
    SerializedArtifact,
    available_targets,
    get_emitter,
)

# Error types
from lattice_core.errors import (
    BuildError,
    ConfigError,
    EmitError,
    LatticeError,
    WindowError,
)

# JSON Schema export functions
from lattice_core.export import (
    export_all_schemas,
    export_job_spec_schema,
    export_scheduler_defaults_schema,
)

# Graph
from lattice_core.graph import (
    DependencyGraphBuilder,
    Edge,
    Graph,
    Node,
    NodeBuilder,
    NodeKind,
    NodeSet,
    SensorKind,
    TriggerRule,
)
from lattice_core.identifiers import sanitize_identifier

# Schema models
from lattice_core.schemas import (
    DependencySet,
    HookPhase,
    HookSpec,
    JobSpec,
    SchedulerDefaults,
    WindowSpec,
)

__all__ = [
    "__version__",
    # Compiler
    "Compiler",
    "CompilationResult",
    "JobOutcome",
    # Stages
    "SpecResolver",
    "WindowCalculator",
    "NodeBuilder",
    "DependencyGraphBuilder",
    "DefaultsResolver",
    # Stage outputs
    "ResolvedConfig",
    "SensorWindowParams",
    "NodeSet",
    "Graph",
    "Node",
    "Edge",
    "NodeKind",
    "SensorKind",
    "TriggerRule",
    "sanitize_identifier",
    # Emitters
    "Emitter",
    "JsonGraphEmitter",
    "SerializedArtifact",
    "get_emitter",
    "available_targets",
    # Errors
    "LatticeError",
    "ConfigError",
    "WindowError",
    "BuildError",
    "EmitError",
    # JSON Schema exports
    "export_job_spec_schema",
    "export_scheduler_defaults_schema",
    "export_all_schemas",
    # Schema models
    "JobSpec",
    "HookSpec",
    "HookPhase",
    "DependencySet",
    "WindowSpec",
    "SchedulerDefaults",
]
