"""Compilation stages for lattice.

This module exports the resolution stages and their models:
- SpecResolver: Merge a JobSpec with scheduler defaults
- WindowCalculator: Validate a window and derive sensor window parameters
- DefaultsResolver: Load scheduler defaults from file and environment
- ResolvedConfig and its parts

The Compiler facade lives in lattice_core.compiler.compiler and is exported
from the lattice_core package.
"""

from __future__ import annotations

from lattice_core.compiler.defaults_resolver import (
    DEFAULTS_FILE_NAME,
    DEFAULTS_SEARCH_PATHS,
    ENV_PREFIX,
    DefaultsResolver,
    variables_from_env,
)
from lattice_core.compiler.models import (
    ResolvedConfig,
    ResolvedResources,
    ResolvedRetry,
    SensorPolicy,
)
from lattice_core.compiler.spec_resolver import SpecResolver, labels_as_string, resolve_resources
from lattice_core.compiler.window import (
    TRUNCATE_UNITS,
    SensorWindowParams,
    WindowCalculator,
    parse_duration,
)

__all__: list[str] = [
    # Resolution
    "SpecResolver",
    "resolve_resources",
    "labels_as_string",
    # Window
    "WindowCalculator",
    "SensorWindowParams",
    "parse_duration",
    "TRUNCATE_UNITS",
    # Defaults
    "DefaultsResolver",
    "variables_from_env",
    "DEFAULTS_FILE_NAME",
    "DEFAULTS_SEARCH_PATHS",
    "ENV_PREFIX",
    # Models
    "ResolvedConfig",
    "ResolvedRetry",
    "ResolvedResources",
    "SensorPolicy",
]
