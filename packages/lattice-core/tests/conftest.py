"""Shared pytest fixtures for lattice-core tests.

Provides job definition dictionaries, scheduler defaults and a
factory that runs the compilation stages up to the graph.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any

import pytest
import structlog

from lattice_core.compiler.defaults_resolver import DefaultsResolver
from lattice_core.compiler.models import ResolvedConfig
from lattice_core.compiler.spec_resolver import SpecResolver
from lattice_core.graph import DependencyGraphBuilder, Graph, NodeBuilder
from lattice_core.schemas import JobSpec, SchedulerDefaults


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture(autouse=True)
def clear_defaults_cache() -> None:
    """Start every test with an empty defaults cache."""
    DefaultsResolver.clear_cache()


@pytest.fixture
def sample_job_dict() -> dict[str, Any]:
    """Return a minimal valid job.yaml: no hooks, no dependencies."""
    return {
        "name": "sales-daily",
        "project": "retail",
        "namespace": "finance",
        "owner": "data@example.com",
        "task": {
            "name": "bq2bq",
            "image": "example.io/bq2bq:1.4",
        },
        "schedule": {
            "start_date": "2024-01-01",
            "interval": "0 2 * * *",
        },
    }


@pytest.fixture
def sample_job_dict_full(sample_job_dict: dict[str, Any]) -> dict[str, Any]:
    """Return a job.yaml with hooks, all three dependency kinds and overrides."""
    return {
        **sample_job_dict,
        "labels": {"team": "finance", "tier": "gold"},
        "hooks": [
            {"name": "transporter", "image": "example.io/transporter:2", "phase": "pre"},
            {"name": "predator", "image": "example.io/predator:3", "phase": "post"},
            {"name": "notify-fail", "image": "example.io/notify:1", "phase": "fail"},
        ],
        "behavior": {"retry": {"count": 5, "delay_seconds": 120}},
        "resources": {"request": {"cpu": "250m", "memory": "512Mi"}},
        "window": {"size": "48h", "offset": "-24h", "truncate_to": "d"},
        "scheduler": {"pool": "bigquery", "sla_miss_seconds": 7200},
        "dependencies": {
            "intra": [{"job_name": "orders-raw", "task_name": "bq2bq"}],
            "cross_tenant": [
                {
                    "name": "inventory",
                    "host": "https://scheduler.other.example.com",
                    "project": "warehouse",
                    "namespace": "ops",
                    "job_name": "stock-levels",
                    "task_name": "bq2bq",
                }
            ],
            "http": [
                {
                    "name": "ledger_ready",
                    "url": "https://ledger.example.com/ready",
                    "headers": {"Authorization": "Bearer token"},
                    "request_params": {"date": "{{ ds }}"},
                }
            ],
        },
    }


@pytest.fixture
def sample_job(sample_job_dict: dict[str, Any]) -> JobSpec:
    """Return the minimal job as a JobSpec."""
    return JobSpec.model_validate(sample_job_dict)


@pytest.fixture
def sample_job_full(sample_job_dict_full: dict[str, Any]) -> JobSpec:
    """Return the full job as a JobSpec."""
    return JobSpec.model_validate(sample_job_dict_full)


@pytest.fixture
def defaults() -> SchedulerDefaults:
    """Return built-in scheduler defaults."""
    return SchedulerDefaults()


@pytest.fixture
def make_job(sample_job_dict: dict[str, Any]) -> Callable[..., JobSpec]:
    """Factory fixture building a JobSpec from the minimal job plus overrides.

    Example:
        >>> spec = make_job(hooks=[{"name": "p", "image": "i", "phase": "pre"}])
    """

    def _make(**overrides: Any) -> JobSpec:
        return JobSpec.model_validate({**sample_job_dict, **overrides})

    return _make


@pytest.fixture
def resolve(defaults: SchedulerDefaults) -> Callable[[JobSpec], ResolvedConfig]:
    """Factory fixture resolving a JobSpec against the built-in defaults."""

    def _resolve(spec: JobSpec) -> ResolvedConfig:
        return SpecResolver(defaults).resolve(spec)

    return _resolve


@pytest.fixture
def build_graph(resolve: Callable[[JobSpec], ResolvedConfig]) -> Callable[[JobSpec], Graph]:
    """Factory fixture running resolve -> nodes -> wire for a JobSpec."""

    def _build(spec: JobSpec) -> Graph:
        return DependencyGraphBuilder().wire(NodeBuilder().build(resolve(spec)))

    return _build
