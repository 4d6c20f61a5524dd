"""Shared pytest fixtures for lattice-airflow tests."""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import Any

import pytest
import structlog
import yaml

from lattice_airflow import AirflowYamlEmitter
from lattice_core.compiler import ResolvedConfig, SpecResolver
from lattice_core.graph import DependencyGraphBuilder, Graph, NodeBuilder
from lattice_core.schemas import JobSpec, SchedulerDefaults


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def job_dict() -> dict[str, Any]:
    """Return a job with hooks, all dependency kinds and resource overrides."""
    return {
        "name": "sales-daily",
        "project": "retail",
        "namespace": "finance",
        "owner": "data@example.com",
        "description": "Daily sales rollup",
        "labels": {"team": "finance"},
        "task": {"name": "bq2bq", "image": "example.io/bq2bq:1.4", "priority": 3000},
        "hooks": [
            {"name": "transporter", "image": "example.io/transporter:2", "phase": "pre"},
            {"name": "predator", "image": "example.io/predator:3", "phase": "post"},
            {"name": "notify-fail", "image": "example.io/notify:1", "phase": "fail"},
        ],
        "schedule": {
            "start_date": "2024-01-01",
            "end_date": "2024-12-31",
            "interval": "0 2 * * *",
        },
        "resources": {
            "request": {"cpu": "250m", "memory": "512Mi"},
            "limit": {"memory": "1Gi"},
        },
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
                }
            ],
            "http": [{"name": "ledger_ready", "url": "https://ledger.example.com/ready"}],
        },
    }


@pytest.fixture
def defaults() -> SchedulerDefaults:
    """Return scheduler defaults with a public hostname."""
    return SchedulerDefaults(hostname="https://scheduler.example.com")


@pytest.fixture
def compile_job(
    defaults: SchedulerDefaults,
) -> Callable[[dict[str, Any]], tuple[Graph, ResolvedConfig]]:
    """Factory fixture resolving and wiring a job dictionary."""

    def _compile(data: dict[str, Any]) -> tuple[Graph, ResolvedConfig]:
        resolved = SpecResolver(defaults).resolve(JobSpec.model_validate(data))
        graph = DependencyGraphBuilder().wire(NodeBuilder().build(resolved))
        return graph, resolved

    return _compile


@pytest.fixture
def emit_dag(
    compile_job: Callable[[dict[str, Any]], tuple[Graph, ResolvedConfig]],
) -> Callable[[dict[str, Any]], dict[str, Any]]:
    """Factory fixture emitting a job dictionary and parsing the DAG back."""

    def _emit(data: dict[str, Any]) -> dict[str, Any]:
        graph, resolved = compile_job(data)
        artifact = AirflowYamlEmitter().emit(graph, resolved)
        document = yaml.safe_load(artifact.content)
        return document[data["name"]]

    return _emit
