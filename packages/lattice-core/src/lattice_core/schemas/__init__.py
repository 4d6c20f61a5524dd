"""Schema models for lattice-core.

This module exports the pydantic models describing job.yaml and the
process-wide scheduler defaults:
- JobSpec: Root job definition
- TaskSpec, HookSpec, HookPhase: Task and hooks
- ScheduleSpec, BehaviorSpec, RetrySpec: Scheduling behavior
- ResourceSpec, ResourceQuantity: Container resources
- WindowSpec: Data window shared by upstream sensors
- SchedulerOverrides: Per-job overrides of scheduler defaults
- DependencySet and its three dependency kinds
- SchedulerDefaults: Process-wide defaults
"""

from __future__ import annotations

from lattice_core.schemas.defaults import VARIABLE_FIELDS, SchedulerDefaults
from lattice_core.schemas.dependencies import (
    CrossTenantDependency,
    DependencySet,
    HttpDependency,
    IntraDependency,
)
from lattice_core.schemas.job_spec import (
    DEFAULT_PRIORITY_WEIGHT,
    BehaviorSpec,
    HookPhase,
    HookSpec,
    JobSpec,
    ResourceQuantity,
    ResourceSpec,
    RetrySpec,
    ScheduleSpec,
    SchedulerOverrides,
    TaskSpec,
    read_job_source,
)
from lattice_core.schemas.window import WindowSpec

__all__: list[str] = [
    # Root
    "JobSpec",
    "read_job_source",
    # Job parts
    "TaskSpec",
    "HookSpec",
    "HookPhase",
    "ScheduleSpec",
    "BehaviorSpec",
    "RetrySpec",
    "ResourceSpec",
    "ResourceQuantity",
    "SchedulerOverrides",
    "WindowSpec",
    "DEFAULT_PRIORITY_WEIGHT",
    # Dependencies
    "DependencySet",
    "IntraDependency",
    "CrossTenantDependency",
    "HttpDependency",
    # Defaults
    "SchedulerDefaults",
    "VARIABLE_FIELDS",
]
