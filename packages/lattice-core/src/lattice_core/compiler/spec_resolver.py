"""Spec resolver for lattice.

This module merges a JobSpec with the injected process-wide SchedulerDefaults:
- A positive / non-empty job override always wins
- Otherwise the scheduler default is used
- Resource requests and limits are gated independently: a block exists only
  when at least one of its quantities is set
- Blank identity fields (job name, project, task image) are a ConfigError
"""

from __future__ import annotations

from lattice_core.compiler.models import (
    ResolvedConfig,
    ResolvedResources,
    ResolvedRetry,
    SensorPolicy,
)
from lattice_core.errors import ConfigError
from lattice_core.schemas import JobSpec, ResourceQuantity, ResourceSpec, SchedulerDefaults

REQUIRED_IDENTITY_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "Job name is required"),
    ("project", "Project name is required"),
    ("task.image", "Task image is required"),
)


class SpecResolver:
    """Resolve unset scheduling fields of a JobSpec against scheduler defaults.

    Attributes:
        defaults: Process-wide scheduler defaults (read-only).

    Example:
        >>> resolver = SpecResolver(SchedulerDefaults())
        >>> resolved = resolver.resolve(spec)
        >>> resolved.retry.count
        3
    """

    def __init__(self, defaults: SchedulerDefaults) -> None:
        self.defaults = defaults

    def resolve(self, spec: JobSpec) -> ResolvedConfig:
        """Produce the fully-resolved configuration of one job.

        Args:
            spec: Validated job definition.

        Returns:
            ResolvedConfig with no unset scheduling field.

        Raises:
            ConfigError: If a required identity field is blank.
        """
        self._check_identity(spec)

        defaults = self.defaults
        overrides = spec.scheduler
        retry = spec.behavior.retry

        return ResolvedConfig(
            spec=spec,
            task_name=spec.task_name,
            retry=ResolvedRetry(
                count=_positive_or(retry.count, defaults.retry_count),
                delay_seconds=_positive_or(retry.delay_seconds, defaults.retry_delay_seconds),
                exponential_backoff=retry.exponential_backoff or defaults.retry_exponential_backoff,
            ),
            pool=_text_or_none(overrides.pool) or _text_or_none(defaults.pool),
            queue=_text_or_none(overrides.queue) or _text_or_none(defaults.queue),
            dag_timeout_seconds=_positive_or(
                overrides.dag_timeout_seconds, defaults.dag_timeout_seconds
            ),
            sla_miss_seconds=_positive_or(overrides.sla_miss_seconds, defaults.sla_miss_seconds)
            or None,
            sensor=SensorPolicy(
                poke_interval_seconds=_positive_or(
                    overrides.sensor_poke_interval_seconds,
                    defaults.sensor_poke_interval_seconds,
                ),
                timeout_seconds=_positive_or(
                    overrides.sensor_timeout_seconds,
                    defaults.sensor_timeout_seconds,
                ),
            ),
            resources=resolve_resources(spec.resources),
            schedule_interval=_text_or_none(spec.schedule.interval),
            end_date=spec.schedule.end_date,
            labels_string=labels_as_string(spec.labels),
            defaults=defaults,
        )

    def _check_identity(self, spec: JobSpec) -> None:
        values = {
            "name": spec.name,
            "project": spec.project,
            "task.image": spec.task.image,
        }
        for field_path, message in REQUIRED_IDENTITY_FIELDS:
            if not values[field_path].strip():
                raise ConfigError(
                    message,
                    job_name=spec.name or None,
                    field_path=field_path,
                )


def resolve(spec: JobSpec, defaults: SchedulerDefaults) -> ResolvedConfig:
    """Resolve a JobSpec against scheduler defaults.

    Convenience wrapper around SpecResolver.

    Args:
        spec: Validated job definition.
        defaults: Process-wide scheduler defaults.

    Returns:
        ResolvedConfig.

    Raises:
        ConfigError: If a required identity field is blank.
    """
    return SpecResolver(defaults).resolve(spec)


def resolve_resources(resources: ResourceSpec) -> ResolvedResources | None:
    """Build the resource block, or None when no quantity is set.

    Requests and limits are gated independently: ``requests`` is present
    only if a CPU or memory request is set, ``limits`` only if a CPU or
    memory limit is set.

    Args:
        resources: Resource overrides from the job definition.

    Returns:
        ResolvedResources, or None if all four quantities are empty.
    """
    requests = _quantities(resources.request)
    limits = _quantities(resources.limit)
    if requests is None and limits is None:
        return None
    return ResolvedResources(requests=requests, limits=limits)


def labels_as_string(labels: dict[str, str]) -> str:
    """Render labels as sorted ``k=v`` pairs joined by commas."""
    return ",".join(f"{key}={labels[key]}" for key in sorted(labels))


def _quantities(quantity: ResourceQuantity) -> dict[str, str] | None:
    if quantity.is_empty():
        return None
    block: dict[str, str] = {}
    if quantity.memory.strip():
        block["memory"] = quantity.memory.strip()
    if quantity.cpu.strip():
        block["cpu"] = quantity.cpu.strip()
    return block


def _positive_or(value: int, default: int) -> int:
    return value if value > 0 else default


def _text_or_none(value: str) -> str | None:
    value = value.strip()
    return value or None
