"""Exception hierarchy for lattice-core.

This module defines the typed errors returned by one job's compilation:
- LatticeError: Base exception for all lattice errors
- ConfigError: Missing or invalid required spec/defaults field (SpecResolver)
- WindowError: Malformed window descriptor (WindowCalculator)
- BuildError: Id collision, cyclic hook dependency, unreachable node
- EmitError: Target-format serialization failure (Emitter boundary)

Errors are local to the job being compiled. They carry the job name and the
offending hook/sensor ids so the caller can render an actionable message.
The compilation core never logs; internal_details are recorded by the
Compiler facade when it surfaces an error.
"""

from __future__ import annotations

from collections.abc import Sequence


class LatticeError(Exception):
    """Base exception for lattice.

    User-facing messages are safe to display. Technical details travel in
    ``internal_details`` and are only logged by the compilation boundary.

    Args:
        user_message: Safe message to display to the job author.
        job_name: Name of the job whose compilation failed (if known).
        internal_details: Optional technical details for logging.

    Example:
        >>> raise LatticeError(
        ...     "Job definition invalid",
        ...     job_name="sales-daily",
        ...     internal_details="task.image is blank",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        job_name: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize LatticeError.

        Args:
            user_message: Safe message to display to the user.
            job_name: Job being compiled when the error occurred.
            internal_details: Technical details for internal logging only.
        """
        message = f"[{job_name}] {user_message}" if job_name else user_message
        super().__init__(message)
        self.user_message = user_message
        self.job_name = job_name
        self.internal_details = internal_details


class ConfigError(LatticeError):
    """Raised when a required field is missing or a configured value is invalid.

    Raised by SpecResolver (blank job name, project or task image) and by the
    defaults loader (non-integer variable values, unreadable defaults file).

    Attributes:
        field_path: Dot-separated path to the invalid field (e.g., "task.image").
        file_path: Path to the configuration file (if known).

    Example:
        >>> raise ConfigError(
        ...     "Task image is required",
        ...     job_name="sales-daily",
        ...     field_path="task.image",
        ... )
        # str(): "[sales-daily] Task image is required (field 'task.image')"
    """

    def __init__(
        self,
        user_message: str,
        *,
        job_name: str | None = None,
        field_path: str | None = None,
        file_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, job_name=job_name, internal_details=internal_details)

        self.field_path = field_path
        self.file_path = file_path


class WindowError(LatticeError):
    """Raised when a window descriptor is malformed.

    Attributes:
        field: Window field that failed validation (size, offset, truncate_to, version).
        value: The offending value, as written in job.yaml.
    """

    def __init__(
        self,
        field: str,
        value: object,
        reason: str,
        *,
        job_name: str | None = None,
    ) -> None:
        super().__init__(
            f"Invalid window {field} {value!r}: {reason}",
            job_name=job_name,
        )
        self.field = field
        self.value = value


class BuildError(LatticeError):
    """Raised when the job graph cannot be built.

    Use this exception when:
    - Two hooks or sensors derive the same node id or task id
    - Hook dependencies form a cycle
    - A hook depends on a hook that is not declared
    - A node is unreachable from the start marker or cannot reach the end marker

    Attributes:
        node_ids: Graph node ids involved in the failure.
        hook_names: Hook names involved in the failure (cycles, unknown refs).

    Example:
        >>> raise BuildError(
        ...     "Hook dependencies form a cycle: a -> b -> a",
        ...     job_name="sales-daily",
        ...     hook_names=["a", "b"],
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        job_name: str | None = None,
        node_ids: Sequence[str] = (),
        hook_names: Sequence[str] = (),
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message, job_name=job_name, internal_details=internal_details)
        self.node_ids = tuple(node_ids)
        self.hook_names = tuple(hook_names)


class EmitError(LatticeError):
    """Raised when a graph cannot be serialized for a target backend.

    Attributes:
        target: Name of the emitter target (e.g., "airflow", "json").
    """

    def __init__(
        self,
        user_message: str,
        *,
        target: str,
        job_name: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(
            f"{user_message} (target '{target}')",
            job_name=job_name,
            internal_details=internal_details,
        )
        self.target = target
