"""Upstream dependency models for lattice.

Dependencies arrive already resolved by an external dependency-resolution
service; lattice only encodes the wait contract for each of them.

Covers three disjoint kinds:
- IntraDependency: another job in the same scheduler instance
- CrossTenantDependency: a job hosted by another tenant or deployment
- HttpDependency: an arbitrary endpoint polled until it signals readiness
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class IntraDependency(BaseModel):
    """Upstream job hosted by the same scheduler instance.

    Attributes:
        job_name: Upstream job name.
        project: Project owning the upstream job.
        namespace: Namespace of the upstream job.
        task_name: Unit name of the upstream job's task (used in the sensor task id).

    Example:
        >>> dep = IntraDependency(job_name="orders-raw", project="sales", task_name="bq2bq")
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    job_name: str = Field(
        ...,
        min_length=1,
        description="Upstream job name",
    )
    project: str = Field(
        default="",
        description="Project owning the upstream job (defaults to the job's own project)",
    )
    namespace: str = Field(
        default="",
        description="Namespace of the upstream job (defaults to the job's own namespace)",
    )
    task_name: str = Field(
        default="",
        description="Unit name of the upstream job's task",
    )


class CrossTenantDependency(BaseModel):
    """Upstream job hosted by a different tenant or scheduler deployment.

    Attributes:
        name: Name of the resource/dependency this upstream produces.
        host: Base URL of the deployment hosting the upstream job.
        project: Upstream project.
        namespace: Upstream namespace.
        job_name: Upstream job name.
        task_name: Unit name of the upstream job's task.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        min_length=1,
        description="Name of the upstream resource",
    )
    host: str = Field(
        ...,
        min_length=1,
        description="Base URL of the deployment hosting the upstream job",
    )
    project: str = Field(
        ...,
        min_length=1,
        description="Upstream project",
    )
    namespace: str = Field(
        default="",
        description="Upstream namespace",
    )
    job_name: str = Field(
        ...,
        min_length=1,
        description="Upstream job name",
    )
    task_name: str = Field(
        default="",
        description="Unit name of the upstream job's task",
    )


class HttpDependency(BaseModel):
    """Endpoint polled until it reports the upstream data is ready.

    Attributes:
        name: Dependency name (used in the sensor id).
        url: Endpoint URL.
        headers: Request headers.
        request_params: Query parameters.

    Example:
        >>> dep = HttpDependency(
        ...     name="vendor_feed",
        ...     url="https://vendor.example.com/ready",
        ...     request_params={"feed": "daily"},
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        min_length=1,
        description="Dependency name",
    )
    url: str = Field(
        ...,
        min_length=1,
        description="Endpoint URL",
    )
    headers: dict[str, str] = Field(
        default_factory=dict,
        description="Request headers",
    )
    request_params: dict[str, str] = Field(
        default_factory=dict,
        description="Query parameters",
    )


class DependencySet(BaseModel):
    """All resolved upstream dependencies of a job.

    Attributes:
        intra: Jobs in the same scheduler instance.
        cross_tenant: Jobs in another tenant or deployment.
        http: HTTP readiness endpoints.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    intra: list[IntraDependency] = Field(
        default_factory=list,
        description="Jobs in the same scheduler instance",
    )
    cross_tenant: list[CrossTenantDependency] = Field(
        default_factory=list,
        description="Jobs hosted by another tenant or deployment",
    )
    http: list[HttpDependency] = Field(
        default_factory=list,
        description="HTTP readiness endpoints",
    )

    def is_empty(self) -> bool:
        """Return True when the job has no upstream dependency of any kind."""
        return not (self.intra or self.cross_tenant or self.http)
