"""Window calculator for lattice.

Derives the wait-window parameters attached to every upstream sensor of a job.
All sensors of one job share the same parameters: the window describes this
job's staleness tolerance for its inputs, not each upstream's own schedule.

The descriptor is validated and passed through verbatim:
- size and offset must parse as durations (size must not be negative)
- truncate_to must be a known unit (or empty)
- version must be a non-negative integer
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta

from lattice_core.errors import WindowError
from lattice_core.schemas import WindowSpec

_UNIT_SECONDS: dict[str, float] = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1,
    "m": 60,
    "h": 60 * 60,
    "d": 24 * 60 * 60,
}

_DURATION_PATTERN = re.compile(r"^[+-]?((\d+(\.\d+)?)(ns|us|µs|ms|s|m|h|d))+$")
_COMPONENT_PATTERN = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h|d)")

TRUNCATE_UNITS = frozenset({"", "h", "d", "w", "M"})
"""Accepted truncation units: hour, day, week, month, or none."""


@dataclass(frozen=True)
class SensorWindowParams:
    """Window parameters shared by all upstream sensors of one job.

    Attributes:
        size: Window length, as written in job.yaml.
        offset: Window offset, as written in job.yaml.
        truncate_to: Truncation unit.
        version: Window semantics version.
    """

    size: str
    offset: str
    truncate_to: str
    version: int

    def as_dict(self) -> dict[str, str | int]:
        """Return the parameters keyed the way sensors receive them."""
        return {
            "window_size": self.size,
            "window_offset": self.offset,
            "window_truncate_to": self.truncate_to,
            "window_version": self.version,
        }


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as "24h", "1h30m", "-2h" or "0".

    Args:
        value: Duration string. Units: ns, us, ms, s, m, h, d.

    Returns:
        Parsed timedelta.

    Raises:
        ValueError: If the value is not a valid duration.
    """
    text = value.strip()
    if text in ("0", "+0", "-0"):
        return timedelta(0)
    if not _DURATION_PATTERN.match(text):
        raise ValueError(f"not a duration: {value!r}")

    sign = -1 if text.startswith("-") else 1
    seconds = sum(
        float(amount) * _UNIT_SECONDS[unit] for amount, unit in _COMPONENT_PATTERN.findall(text)
    )
    return timedelta(seconds=sign * seconds)


class WindowCalculator:
    """Validate a job's window and derive the sensor window parameters.

    Example:
        >>> params = WindowCalculator().compute(WindowSpec(size="24h", offset="0"))
        >>> params.size
        '24h'
    """

    def compute(self, window: WindowSpec, *, job_name: str | None = None) -> SensorWindowParams:
        """Derive sensor window parameters.

        Args:
            window: Window descriptor from the job definition.
            job_name: Job being compiled (error context).

        Returns:
            SensorWindowParams carrying the descriptor verbatim.

        Raises:
            WindowError: If size/offset are not durations, size is negative,
                truncate_to is unknown, or version is negative.
        """
        size = window.size.strip()
        offset = window.offset.strip()
        truncate_to = window.truncate_to.strip()

        try:
            size_delta = parse_duration(size)
        except ValueError:
            raise WindowError(
                "size", window.size, "expected a duration like 24h", job_name=job_name
            ) from None
        if size_delta < timedelta(0):
            raise WindowError("size", window.size, "must not be negative", job_name=job_name)

        try:
            parse_duration(offset)
        except ValueError:
            raise WindowError(
                "offset", window.offset, "expected a duration like -1h", job_name=job_name
            ) from None

        if truncate_to not in TRUNCATE_UNITS:
            allowed = ", ".join(sorted(u for u in TRUNCATE_UNITS if u))
            raise WindowError(
                "truncate_to", window.truncate_to, f"expected one of {allowed}", job_name=job_name
            )

        if window.version < 0:
            raise WindowError("version", window.version, "must be non-negative", job_name=job_name)

        return SensorWindowParams(
            size=size,
            offset=offset,
            truncate_to=truncate_to,
            version=window.version,
        )


def compute(window: WindowSpec, *, job_name: str | None = None) -> SensorWindowParams:
    """Derive sensor window parameters (see WindowCalculator.compute)."""
    return WindowCalculator().compute(window, job_name=job_name)
