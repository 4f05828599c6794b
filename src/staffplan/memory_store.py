from __future__ import annotations

import itertools
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from staffplan.errors import NotFoundError
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


class InMemoryStore:
    """
    Dict-backed ScheduleStore for tests, demos and notebooks.

    Reads hand back the stored objects in insertion order; callers that mutate
    them mutate the store.
    """

    def __init__(self) -> None:
        self.campaigns: dict[int, Campaign] = {}
        self.scenarios: dict[int, Scenario] = {}
        self.forecasts: list[Forecast] = []
        self.skills: dict[int, Skill] = {}
        self.staff: dict[int, Staff] = {}
        self.staff_skills: list[StaffSkill] = []
        self.plans: dict[int, SchedulePlan] = {}
        self.templates: dict[int, ShiftTemplate] = {}
        self.methods: dict[int, OptimizationMethod] = {}
        self.runs: dict[int, ScheduleRun] = {}

        self.coverage: dict[int, list[CoverageRequirement]] = {}
        self.shifts: dict[int, list[Shift]] = {}
        self.segments: dict[int, list[ShiftSegment]] = {}
        self.metrics: dict[int, ScheduleMetric] = {}
        self.violations: dict[int, list[ScheduleViolation]] = {}

        self._shift_ids = itertools.count(1)
        self._shift_run: dict[int, int] = {}

    # --- seeding ---

    def add_campaign(self, campaign: Campaign) -> Campaign:
        self.campaigns[campaign.id] = campaign
        return campaign

    def add_scenario(self, scenario: Scenario) -> Scenario:
        self.scenarios[scenario.id] = scenario
        return scenario

    def add_forecast(self, forecast: Forecast) -> Forecast:
        self.forecasts.append(forecast)
        return forecast

    def add_skill(self, skill: Skill) -> Skill:
        self.skills[skill.id] = skill
        return skill

    def add_staff(self, staff: Staff, skill_ids: Iterable[int] = ()) -> Staff:
        self.staff[staff.id] = staff
        for skill_id in skill_ids:
            self.staff_skills.append(StaffSkill(staff.id, skill_id))
        return staff

    def add_plan(self, plan: SchedulePlan) -> SchedulePlan:
        self.plans[plan.id] = plan
        return plan

    def add_template(self, template: ShiftTemplate) -> ShiftTemplate:
        self.templates[template.id] = template
        return template

    def add_method(self, method: OptimizationMethod) -> OptimizationMethod:
        self.methods[method.id] = method
        return method

    def add_run(self, run: ScheduleRun) -> ScheduleRun:
        self.runs[run.id] = run
        return run

    # --- reads ---

    def get_coverage_requirements(self, plan_id: int) -> list[CoverageRequirement]:
        return list(self.coverage.get(plan_id, []))

    def get_schedule_plan_by_id(self, plan_id: int) -> Optional[SchedulePlan]:
        return self.plans.get(plan_id)

    def get_campaign_by_id(self, campaign_id: int) -> Optional[Campaign]:
        return self.campaigns.get(campaign_id)

    def get_scenario_by_id(self, scenario_id: int) -> Optional[Scenario]:
        return self.scenarios.get(scenario_id)

    def get_forecasts_by_scenario_and_date_range(
        self, scenario_id: int, campaign_id: int, start: date, end: date
    ) -> list[Forecast]:
        return [
            f
            for f in self.forecasts
            if f.scenario_id == scenario_id
            and f.campaign_id == campaign_id
            and start <= f.forecast_date <= end
        ]

    def get_skills(self) -> list[Skill]:
        return list(self.skills.values())

    def get_all_staff(self, active_only: bool = True) -> list[Staff]:
        return [s for s in self.staff.values() if s.active or not active_only]

    def get_staff_skills(self) -> list[StaffSkill]:
        return list(self.staff_skills)

    def get_shift_templates(self) -> list[ShiftTemplate]:
        return list(self.templates.values())

    def get_optimization_methods(self) -> list[OptimizationMethod]:
        return list(self.methods.values())

    def get_schedule_run_by_id(self, run_id: int) -> Optional[ScheduleRun]:
        return self.runs.get(run_id)

    def get_schedule_runs_by_group(self, run_group_id: str) -> list[ScheduleRun]:
        return [r for r in self.runs.values() if r.run_group_id == run_group_id]

    def get_schedule_metrics(self, run_id: int) -> Optional[ScheduleMetric]:
        return self.metrics.get(run_id)

    def get_shifts(self, run_id: int) -> list[Shift]:
        return list(self.shifts.get(run_id, []))

    def get_shift_segments(self, run_id: int) -> list[ShiftSegment]:
        return list(self.segments.get(run_id, []))

    def get_schedule_violations(self, run_id: int) -> list[ScheduleViolation]:
        return list(self.violations.get(run_id, []))

    # --- writes ---

    def replace_coverage_requirements(
        self, plan_id: int, rows: Iterable[CoverageRequirement]
    ) -> None:
        self.coverage[plan_id] = list(rows)

    def create_shift(self, shift: Shift) -> int:
        shift_id = next(self._shift_ids)
        self.shifts.setdefault(shift.schedule_run_id, []).append(replace(shift, id=shift_id))
        self._shift_run[shift_id] = shift.schedule_run_id
        return shift_id

    def create_shift_segments(self, segments: Iterable[ShiftSegment]) -> None:
        for seg in segments:
            run_id = self._shift_run.get(seg.shift_id)
            if run_id is None:
                raise NotFoundError("Shift", seg.shift_id)
            self.segments.setdefault(run_id, []).append(seg)

    def save_schedule_metrics(self, metric: ScheduleMetric) -> None:
        self.metrics[metric.schedule_run_id] = metric

    def save_schedule_violations(self, violations: Iterable[ScheduleViolation]) -> None:
        for v in violations:
            self.violations.setdefault(v.schedule_run_id, []).append(v)

    def update_schedule_run_status(
        self,
        run_id: int,
        status: RunStatus,
        started_at: Optional[datetime] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        run = self.runs.get(run_id)
        if run is None:
            raise NotFoundError("Schedule run", run_id)
        run.status = status
        if started_at is not None:
            run.started_at = started_at
        if completed_at is not None:
            run.completed_at = completed_at

    def clear_schedule_run_data(self, run_id: int) -> None:
        for shift in self.shifts.pop(run_id, []):
            self._shift_run.pop(shift.id, None)
        self.segments.pop(run_id, None)
        self.metrics.pop(run_id, None)
        self.violations.pop(run_id, None)
