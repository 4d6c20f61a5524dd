"""Process-wide scheduler defaults for lattice.

SchedulerDefaults is the immutable, loaded-once structure that backs every
unset scheduling field of a JobSpec. It is injected into SpecResolver and is
never read from global state inside the compilation path.

The variable names accepted by from_variables() match the scheduler's
variable store (sensor_poke_interval_in_secs, dag_retries, ...).
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lattice_core.errors import ConfigError

DEFAULT_SENSOR_POKE_INTERVAL_SECONDS = 15 * 60
DEFAULT_SENSOR_TIMEOUT_SECONDS = 15 * 60 * 60
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_DELAY_SECONDS = 5 * 60
DEFAULT_DAG_TIMEOUT_SECONDS = 3 * 24 * 60 * 60

VARIABLE_FIELDS: dict[str, str] = {
    "sensor_poke_interval_in_secs": "sensor_poke_interval_seconds",
    "sensor_timeout_in_secs": "sensor_timeout_seconds",
    "dag_retries": "retry_count",
    "dag_retry_delay_in_secs": "retry_delay_seconds",
    "dagrun_timeout_in_secs": "dag_timeout_seconds",
}
"""Variable-store name -> SchedulerDefaults field."""


class SchedulerDefaults(BaseModel):
    """Scheduling defaults shared by every job compiled by this process.

    Attributes:
        retry_count: Retries when a job declares none.
        retry_delay_seconds: Delay between retries when a job declares none.
        retry_exponential_backoff: Backoff flag when a job does not enable it.
        pool: Scheduler pool ("" for the scheduler's own default).
        queue: Scheduler queue ("" for the scheduler's own default).
        dag_timeout_seconds: DAG run timeout.
        sla_miss_seconds: Task SLA (0 disables the SLA).
        sensor_poke_interval_seconds: Seconds between upstream sensor checks.
        sensor_timeout_seconds: Seconds before an upstream sensor gives up.
        hostname: Public URL of the service hosting the scheduler's jobs.
        job_dir: Working directory mounted into every executable node.
        init_container_image: Image that prepares assets before a node runs.
        init_container_entrypoint: Entrypoint script of the init container.
        image_pull_policy: Pull policy for node images.
        kubernetes_namespace: Namespace pods are launched in.

    Example:
        >>> defaults = SchedulerDefaults.from_variables({"dag_retries": "5"})
        >>> defaults.retry_count
        5
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    retry_count: int = Field(default=DEFAULT_RETRY_COUNT, ge=0)
    retry_delay_seconds: int = Field(default=DEFAULT_RETRY_DELAY_SECONDS, ge=0)
    retry_exponential_backoff: bool = Field(default=False)
    pool: str = Field(default="")
    queue: str = Field(default="")
    dag_timeout_seconds: int = Field(default=DEFAULT_DAG_TIMEOUT_SECONDS, ge=1)
    sla_miss_seconds: int = Field(default=0, ge=0)
    sensor_poke_interval_seconds: int = Field(default=DEFAULT_SENSOR_POKE_INTERVAL_SECONDS, ge=1)
    sensor_timeout_seconds: int = Field(default=DEFAULT_SENSOR_TIMEOUT_SECONDS, ge=1)

    hostname: str = Field(
        default="http://localhost:9100",
        description="Public URL of the service hosting this scheduler's jobs",
    )
    job_dir: str = Field(default="/data")
    init_container_image: str = Field(default="lattice/init:latest")
    init_container_entrypoint: str = Field(default="/opt/entrypoint_init_container.sh")
    image_pull_policy: str = Field(default="IfNotPresent")
    kubernetes_namespace: str = Field(default="default")

    @classmethod
    def from_variables(
        cls,
        variables: Mapping[str, str],
        base: SchedulerDefaults | None = None,
    ) -> SchedulerDefaults:
        """Apply variable-store values on top of a base set of defaults.

        Unknown variable names are ignored; absent names keep the base value.

        Args:
            variables: Named values (e.g., {"sensor_timeout_in_secs": "3600"}).
            base: Defaults to override. Built-in fallbacks if None.

        Returns:
            New SchedulerDefaults instance.

        Raises:
            ConfigError: If a known variable is not a positive integer.
        """
        base = base or cls()
        updates: dict[str, Any] = {}
        for variable, field_name in VARIABLE_FIELDS.items():
            raw = variables.get(variable)
            if raw is None or str(raw).strip() == "":
                continue
            try:
                value = int(str(raw).strip())
            except ValueError:
                raise ConfigError(
                    f"Scheduler variable '{variable}' must be an integer, got {raw!r}",
                    field_path=field_name,
                ) from None
            if value < 0:
                raise ConfigError(
                    f"Scheduler variable '{variable}' must not be negative, got {value}",
                    field_path=field_name,
                )
            updates[field_name] = value

        if not updates:
            return base
        try:
            return cls.model_validate({**base.model_dump(), **updates})
        except ValidationError as e:
            raise ConfigError(
                "Scheduler variables out of range",
                internal_details=str(e),
            ) from e

    @classmethod
    def from_yaml(cls, path: str | Path) -> SchedulerDefaults:
        """Load SchedulerDefaults from a YAML file.

        Args:
            path: Path to scheduler-defaults.yaml.

        Returns:
            Validated SchedulerDefaults instance.

        Raises:
            FileNotFoundError: If file doesn't exist.
            yaml.YAMLError: If YAML syntax is invalid.
            pydantic.ValidationError: If schema validation fails.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        with path.open("r") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        return cls.model_validate(data)
