"""JSON Schema export functions for lattice.

Exports JSON Schema Draft 2020-12 documents for job.yaml and
scheduler-defaults.yaml, for IDE autocomplete and validation of specs
before they reach the compiler.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from lattice_core.schemas import JobSpec, SchedulerDefaults

SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"
SCHEMA_BASE_URL = "https://lattice.dev/schemas"

JOB_SPEC_SCHEMA_FILE = "job-spec.schema.json"
SCHEDULER_DEFAULTS_SCHEMA_FILE = "scheduler-defaults.schema.json"


def export_job_spec_schema(
    output_path: Path | str | None = None,
) -> dict[str, Any]:
    """Export the JobSpec JSON Schema.

    Args:
        output_path: Optional path to write schema file. If provided,
            creates parent directories as needed.

    Returns:
        Dictionary containing the JSON Schema.

    Example:
        >>> schema = export_job_spec_schema()
        >>> schema["$schema"]
        'https://json-schema.org/draft/2020-12/schema'
    """
    return _export(JobSpec, JOB_SPEC_SCHEMA_FILE, output_path)


def export_scheduler_defaults_schema(
    output_path: Path | str | None = None,
) -> dict[str, Any]:
    """Export the SchedulerDefaults JSON Schema.

    Args:
        output_path: Optional path to write schema file.

    Returns:
        Dictionary containing the JSON Schema.
    """
    return _export(SchedulerDefaults, SCHEDULER_DEFAULTS_SCHEMA_FILE, output_path)


def export_all_schemas(output_dir: Path | str) -> list[Path]:
    """Write every schema into a directory.

    Returns:
        Paths of the written files.
    """
    directory = Path(output_dir)
    paths = [directory / JOB_SPEC_SCHEMA_FILE, directory / SCHEDULER_DEFAULTS_SCHEMA_FILE]
    export_job_spec_schema(paths[0])
    export_scheduler_defaults_schema(paths[1])
    return paths


def _export(
    model: type[BaseModel],
    file_name: str,
    output_path: Path | str | None,
) -> dict[str, Any]:
    schema = model.model_json_schema()

    schema["$schema"] = SCHEMA_DIALECT
    schema["$id"] = f"{SCHEMA_BASE_URL}/{file_name}"

    if "additionalProperties" not in schema:
        schema["additionalProperties"] = False

    if output_path is not None:
        _write_schema_file(schema, output_path)

    return schema


def _write_schema_file(schema: dict[str, Any], path: Path | str) -> None:
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(schema, indent=2))
