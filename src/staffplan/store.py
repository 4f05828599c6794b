from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional, Protocol, runtime_checkable

from staffplan.records import (
    Campaign,
    CoverageRequirement,
    Forecast,
    OptimizationMethod,
    RunStatus,
    Scenario,
    ScheduleMetric,
    SchedulePlan,
    ScheduleRun,
    ScheduleViolation,
    Shift,
    ShiftSegment,
    ShiftTemplate,
    Skill,
    Staff,
    StaffSkill,
)


@runtime_checkable
class ScheduleStore(Protocol):
    """
    Persistence accessors used by coverage generation, scheduling and run
    comparison. Each call is assumed atomic; nothing here is transactional
    across calls.
    """

    # --- reads ---

    def get_coverage_requirements(self, plan_id: int) -> list[CoverageRequirement]: ...

    def get_schedule_plan_by_id(self, plan_id: int) -> Optional[SchedulePlan]: ...

    def get_campaign_by_id(self, campaign_id: int) -> Optional[Campaign]: ...

    def get_scenario_by_id(self, scenario_id: int) -> Optional[Scenario]: ...

    def get_forecasts_by_scenario_and_date_range(
        self, scenario_id: int, campaign_id: int, start: date, end: date
    ) -> list[Forecast]: ...

    def get_skills(self) -> list[Skill]: ...

    def get_all_staff(self, active_only: bool = True) -> list[Staff]: ...

    def get_staff_skills(self) -> list[StaffSkill]: ...

    def get_shift_templates(self) -> list[ShiftTemplate]: ...

    def get_optimization_methods(self) -> list[OptimizationMethod]: ...

    def get_schedule_run_by_id(self, run_id: int) -> Optional[ScheduleRun]: ...

    def get_schedule_runs_by_group(self, run_group_id: str) -> list[ScheduleRun]: ...

    def get_schedule_metrics(self, run_id: int) -> Optional[ScheduleMetric]: ...

    def get_shifts(self, run_id: int) -> list[Shift]: ...

    def get_shift_segments(self, run_id: int) -> list[ShiftSegment]: ...

    def get_schedule_violations(self, run_id: int) -> list[ScheduleViolation]: ...

    # --- writes ---

    def replace_coverage_requirements(
        self, plan_id: int, rows: Iterable[CoverageRequirement]
    ) -> None: ...

    def create_shift(self, shift: Shift) -> int: ...

    def create_shift_segments(self, segments: Iterable[ShiftSegment]) -> None: ...

    def save_schedule_metrics(self, metric: ScheduleMetric) -> None: ...

    def save_schedule_violations(self, violations: Iterable[ScheduleViolation]) -> None: ...

    def update_schedule_run_status(
        self,
        run_id: int,
        status: RunStatus,
        started_at: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
    ) -> None: ...

    def clear_schedule_run_data(self, run_id: int) -> None: ...
