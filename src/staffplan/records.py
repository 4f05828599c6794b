# staffplan/records.py
"""
Persisted records exchanged with a ScheduleStore.

Times of day are integer minutes from midnight; break and lunch windows on a
plan are minutes from the start of the shift.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class RunStatus(str, Enum):
    QUEUED = "Queued"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"


class SegmentType(str, Enum):
    WORK = "work"
    BREAK = "break"
    LUNCH = "lunch"


class ViolationType(str, Enum):
    REST = "Rest"
    WEEKLY_HOURS = "WeeklyHours"
    COVERAGE = "Coverage"


def format_minutes(minutes: int) -> str:
    """'HH:MM' for a minutes-from-midnight value."""
    safe = max(0, int(minutes))
    return f"{safe // 60:02d}:{safe % 60:02d}"


def round_half_up(x: float) -> int:
    """Nearest integer, halves rounded up (2.5 -> 3)."""
    return int(math.floor(x + 0.5))


@dataclass(slots=True)
class Campaign:
    id: int
    name: str
    channel_type: str
    sla_target_percent: float = 80.0
    sla_threshold_seconds: float = 20.0
    concurrency_allowed: int = 1
    active: bool = True


@dataclass(slots=True)
class Scenario:
    id: int
    name: str
    erlang_model: Optional[str] = "C"
    is_baseline: bool = False


@dataclass(slots=True)
class Forecast:
    id: int
    scenario_id: int
    campaign_id: int
    forecast_date: date
    forecasted_volume: float
    forecasted_aht: Optional[float] = None


@dataclass(slots=True)
class Skill:
    id: int
    name: str
    skill_type: Optional[str] = None


@dataclass(slots=True)
class Staff:
    id: int
    name: str
    active: bool = True


@dataclass(slots=True)
class StaffSkill:
    staff_id: int
    skill_id: int
    proficiency_level: int = 1


@dataclass(slots=True)
class SchedulePlan:
    id: int
    campaign_id: int
    start_date: date
    end_date: date
    scenario_id: Optional[int] = None
    name: str = ""
    interval_minutes: int = 30
    max_weekly_hours: Optional[float] = 40.0
    min_rest_hours: float = 11.0
    allow_skill_switch: bool = False
    break_window_start_min: int = 60
    break_window_end_min: int = 480
    lunch_window_start_min: int = 180
    lunch_window_end_min: int = 360


@dataclass(slots=True)
class ShiftTemplate:
    id: int
    name: str
    paid_minutes: int
    unpaid_minutes: int = 0
    break_count: int = 0
    break_minutes: int = 0

    @property
    def total_minutes(self) -> int:
        return self.paid_minutes + self.unpaid_minutes


@dataclass(slots=True)
class OptimizationMethod:
    id: int
    method_key: str
    name: str = ""


@dataclass(slots=True)
class ScheduleRun:
    id: int
    schedule_plan_id: int
    method_id: int
    run_group_id: Optional[str] = None
    label: Optional[str] = None
    status: RunStatus = RunStatus.QUEUED
    template_id: Optional[int] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass(slots=True)
class CoverageRequirement:
    schedule_plan_id: int
    requirement_date: date
    interval_start: int
    interval_end: int
    skill_id: int
    required_agents: int
    source_forecast_id: Optional[int] = None

    @property
    def interval_key(self) -> tuple[int, int]:
        return (self.interval_start, self.interval_end)


@dataclass(slots=True)
class Shift:
    schedule_run_id: int
    staff_id: int
    shift_date: date
    start_min: int
    end_min: int
    template_id: int
    id: Optional[int] = None

    @property
    def duration(self) -> int:
        return self.end_min - self.start_min


@dataclass(slots=True)
class ShiftSegment:
    shift_id: int
    start_min: int
    end_min: int
    segment_type: SegmentType
    skill_id: Optional[int] = None
    is_paid: bool = True

    @property
    def minutes(self) -> int:
        return self.end_min - self.start_min


@dataclass(slots=True)
class ScheduleMetric:
    schedule_run_id: int
    coverage_percent: float
    gap_minutes: int
    overstaff_minutes: int
    overtime_minutes: int
    violations_count: int
    cost_estimate: float
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class ScheduleViolation:
    schedule_run_id: int
    violation_date: date
    violation_type: ViolationType
    details: str
    staff_id: Optional[int] = None
