"""lattice-airflow: Airflow target for lattice.

This package provides the ``airflow`` emitter, which serializes a compiled
job graph into a declarative (dag-factory) Airflow DAG definition. It is
loaded by target name through lattice_core.emitters.get_emitter().
"""

from __future__ import annotations

__version__ = "0.1.0"

from lattice_airflow.emitter import AirflowYamlEmitter

__all__ = [
    "__version__",
    "AirflowYamlEmitter",
]
