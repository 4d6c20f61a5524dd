"""Window descriptor model for lattice.

The window describes how much upstream data staleness a job tolerates. It is
kept verbatim here; duration parsing and validation happen in the
WindowCalculator so that a malformed window is reported as a WindowError.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class WindowSpec(BaseModel):
    """Data window of a job's task.

    Attributes:
        size: Window length as a duration (e.g., "24h", "1h30m").
        offset: Shift applied to the window end (e.g., "0", "-1h").
        truncate_to: Unit the window end is truncated to (h, d, w, M).
        version: Window semantics version.

    Example:
        >>> window = WindowSpec(size="24h", offset="0", truncate_to="d")
    """

    model_config = ConfigDict(frozen=True, extra="forbid", coerce_numbers_to_str=True)

    size: str = Field(
        default="24h",
        description="Window length as a duration (e.g., 24h, 1h30m)",
    )
    offset: str = Field(
        default="0",
        description="Offset applied to the window end (e.g., 0, -1h)",
    )
    truncate_to: str = Field(
        default="d",
        description="Truncation unit: h (hour), d (day), w (week), M (month), or empty",
    )
    version: int = Field(
        default=1,
        description="Window semantics version (non-negative)",
    )
