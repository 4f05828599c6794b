from __future__ import annotations

from .frames import (
    comparison_frame,
    coverage_frame,
    segments_frame,
    shifts_frame,
    violations_frame,
    weekly_hours_frame,
)
from .reporter import Reporter

__all__ = [
    "Reporter",
    "comparison_frame",
    "coverage_frame",
    "segments_frame",
    "shifts_frame",
    "violations_frame",
    "weekly_hours_frame",
]
