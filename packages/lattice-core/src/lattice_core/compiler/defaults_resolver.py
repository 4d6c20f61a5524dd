"""Scheduler defaults resolver for lattice.

This module loads the process-wide SchedulerDefaults once at startup:
- DefaultsResolver: Load scheduler-defaults.yaml from file or discovery
- Variable-store overrides from LATTICE_-prefixed environment variables
- Built-in fallbacks when no file is found
- Caching for repeated access
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import ClassVar

import yaml
from pydantic import ValidationError

from lattice_core.errors import ConfigError
from lattice_core.schemas import VARIABLE_FIELDS, SchedulerDefaults

logger = logging.getLogger(__name__)

# Prefix of environment variables carrying variable-store values
ENV_PREFIX = "LATTICE_"

# Standard defaults file name
DEFAULTS_FILE_NAME = "scheduler-defaults.yaml"

# Standard locations to search for scheduler-defaults.yaml
DEFAULTS_SEARCH_PATHS = (
    Path(".lattice"),
    Path.home() / ".lattice",
)

# Cache key used when no defaults file exists
_BUILTIN_KEY = "<builtin>"


def variables_from_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Collect variable-store values from LATTICE_-prefixed environment variables.

    Args:
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        Mapping of unprefixed, lower-cased variable name to raw value.

    Example:
        >>> variables_from_env({"LATTICE_DAG_RETRIES": "5"})
        {'dag_retries': '5'}
    """
    environ = os.environ if environ is None else environ
    variables: dict[str, str] = {}
    for variable in VARIABLE_FIELDS:
        key = ENV_PREFIX + variable.upper()
        if key in environ:
            variables[variable] = environ[key]
    return variables


class DefaultsResolver:
    """Resolve scheduler defaults from file, environment and fallbacks.

    DefaultsResolver loads SchedulerDefaults with:
    - Explicit file path override
    - Standard search path discovery (./.lattice, ~/.lattice)
    - LATTICE_-prefixed variable-store overrides
    - Caching of the file layer for repeated access

    Attributes:
        search_paths: Ordered directories to search for scheduler-defaults.yaml.
        environ: Environment the variable overrides are read from.

    Example:
        >>> defaults = DefaultsResolver().load()
        >>> defaults.sensor_poke_interval_seconds
        900

        >>> # Load from explicit path
        >>> defaults = DefaultsResolver().load(path=Path("ops/scheduler-defaults.yaml"))
    """

    _cache: ClassVar[dict[str, SchedulerDefaults]] = {}

    def __init__(
        self,
        search_paths: tuple[Path, ...] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the DefaultsResolver.

        Args:
            search_paths: Custom search paths for scheduler-defaults.yaml.
                If None, uses DEFAULTS_SEARCH_PATHS.
            environ: Environment mapping for overrides. If None, os.environ.
        """
        self.search_paths = search_paths or DEFAULTS_SEARCH_PATHS
        self.environ = os.environ if environ is None else environ

    def _find_defaults_file(self) -> Path | None:
        for base_path in self.search_paths:
            candidate = base_path / DEFAULTS_FILE_NAME
            if candidate.exists():
                logger.debug("Found %s at %s", DEFAULTS_FILE_NAME, candidate)
                return candidate
        return None

    def load(self, path: Path | str | None = None, use_cache: bool = True) -> SchedulerDefaults:
        """Load scheduler defaults.

        Args:
            path: Explicit path to a defaults file. If None, discovers via
                search paths and falls back to built-in values.
            use_cache: Whether to reuse a previously loaded file.

        Returns:
            SchedulerDefaults with environment overrides applied.

        Raises:
            ConfigError: If the file is missing, unreadable or invalid, or an
                override is not a non-negative integer.
        """
        if path is not None:
            resolved_path: Path | None = Path(path).resolve()
            if not resolved_path.exists():
                raise ConfigError(
                    "Scheduler defaults file not found",
                    file_path=str(path),
                )
        else:
            found = self._find_defaults_file()
            resolved_path = found.resolve() if found is not None else None

        cache_key = str(resolved_path) if resolved_path is not None else _BUILTIN_KEY
        if use_cache and cache_key in self._cache:
            logger.debug("Using cached scheduler defaults from %s", cache_key)
            base = self._cache[cache_key]
        else:
            base = self._load_file(resolved_path)
            self._cache[cache_key] = base

        return SchedulerDefaults.from_variables(variables_from_env(self.environ), base=base)

    def _load_file(self, path: Path | None) -> SchedulerDefaults:
        if path is None:
            logger.info("No %s found, using built-in scheduler defaults", DEFAULTS_FILE_NAME)
            return SchedulerDefaults()

        logger.info("Loading scheduler defaults from %s", path)
        try:
            return SchedulerDefaults.from_yaml(path)
        except yaml.YAMLError as e:
            raise ConfigError(
                "Scheduler defaults file is not valid YAML",
                file_path=str(path),
                internal_details=str(e),
            ) from e
        except ValidationError as e:
            raise ConfigError(
                "Scheduler defaults file failed validation",
                file_path=str(path),
                internal_details=str(e),
            ) from e

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the defaults cache.

        Use when scheduler-defaults.yaml changes during runtime (e.g., in tests).
        """
        cls._cache.clear()
        logger.debug("Defaults resolver cache cleared")

    @classmethod
    def load_default(cls) -> SchedulerDefaults:
        """Load scheduler defaults using default settings."""
        return cls().load()
