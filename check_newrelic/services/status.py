from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional


class Status(IntEnum):
    """Nagios plugin states; the value is the process exit code."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass(frozen=True)
class StatusResult:
    level: Status
    message: str
    perf_data: str = ""

    @property
    def exit_code(self) -> int:
        return int(self.level)

    @property
    def line(self) -> str:
        return f"{self.level.name}: {self.message}"


def perf_data(label: str, value: Any, warning: Any, critical: Any) -> str:
    """Render Nagios perfdata: ``label=value;warn;crit;min;max``.

    min and max are always left empty.
    """
    return f"{label.replace(' ', '_')}={value};{warning};{critical};;"


def unknown(message: str) -> StatusResult:
    return StatusResult(Status.UNKNOWN, message)


def evaluate(
    measured: int,
    warning: int,
    critical: int,
    display_text: str,
    metric_label: str,
    perf_data: str,
    warning_text: Optional[str] = None,
    critical_text: Optional[str] = None,
) -> StatusResult:
    """Compare a normalized value to normalized thresholds.

    Critical is checked before warning so a value over both thresholds is
    CRITICAL even when the thresholds are given in the wrong order. A value
    equal to a threshold does not breach it.
    """
    if measured > critical:
        threshold = critical_text if critical_text is not None else critical
        return StatusResult(
            Status.CRITICAL,
            f"{display_text} returned for {metric_label} exceeds threshold of {threshold} {perf_data}",
            perf_data,
        )
    if measured > warning:
        threshold = warning_text if warning_text is not None else warning
        return StatusResult(
            Status.WARNING,
            f"{display_text} returned for {metric_label} exceeds threshold of {threshold} {perf_data}",
            perf_data,
        )
    return StatusResult(Status.OK, f"{display_text} returned for {metric_label} | {perf_data}", perf_data)
