"""Resolved configuration models for lattice.

ResolvedConfig is the output of SpecResolver: a JobSpec with every scheduling
field consumed by graph construction and emission backed by a concrete value.
Optional groups (resource requests, resource limits, SLA, end date, schedule
interval, pool, queue) are explicit optional values whose presence is decided
once, in SpecResolver, and never re-derived downstream.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from lattice_core.schemas import JobSpec, SchedulerDefaults


class ResolvedRetry(BaseModel):
    """Effective retry policy of every executable node."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: int = Field(..., ge=0)
    delay_seconds: int = Field(..., ge=0)
    exponential_backoff: bool = Field(...)


class SensorPolicy(BaseModel):
    """Poke interval and timeout shared by every upstream sensor."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    poke_interval_seconds: int = Field(..., ge=1)
    timeout_seconds: int = Field(..., ge=1)


class ResolvedResources(BaseModel):
    """Container resource block.

    Only non-empty quantities are present. ``requests`` is None unless a CPU
    or memory request is set; ``limits`` likewise. A ResolvedResources is
    only produced when at least one of the four quantities is set.

    Example:
        >>> ResolvedResources(requests={"cpu": "250m"}, limits=None)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    requests: dict[str, str] | None = Field(default=None)
    limits: dict[str, str] | None = Field(default=None)


class ResolvedConfig(BaseModel):
    """Fully-resolved job configuration consumed by NodeBuilder and emitters.

    Attributes:
        spec: The validated job definition.
        task_name: Unit name of the task (job name if the task has none).
        retry: Effective retry policy.
        pool: Scheduler pool, or None for the scheduler's own default.
        queue: Scheduler queue, or None for the scheduler's own default.
        dag_timeout_seconds: DAG run timeout.
        sla_miss_seconds: Task SLA, or None when no SLA applies.
        sensor: Poke interval and timeout for upstream sensors.
        resources: Resource block, or None when no quantity is set.
        schedule_interval: Cron expression, or None for manually triggered jobs.
        end_date: Last schedulable date, or None.
        labels_string: Labels as "k=v" pairs sorted by key, comma separated.
        defaults: Injected scheduler defaults (emission context).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    spec: JobSpec
    task_name: str = Field(..., min_length=1)
    retry: ResolvedRetry
    pool: str | None = None
    queue: str | None = None
    dag_timeout_seconds: int = Field(..., ge=1)
    sla_miss_seconds: int | None = None
    sensor: SensorPolicy
    resources: ResolvedResources | None = None
    schedule_interval: str | None = None
    end_date: date | None = None
    labels_string: str = ""
    defaults: SchedulerDefaults

    @property
    def job_name(self) -> str:
        """Name of the job (DAG id)."""
        return self.spec.name
