# staffplan/scheduling/coverage.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from datetime import date
from typing import Callable, Iterable, Optional

import numpy as np
import pandas as pd

from staffplan.config import cfg
from staffplan.errors import NotFoundError
from staffplan.inputs import (
    DEFAULT_STAFFING_MODEL,
    CalculationInputs,
    ErlangModel,
    StaffingModel,
)
from staffplan.records import CoverageRequirement, Forecast, Scenario, Skill
from staffplan.service import StaffingCalculationService
from staffplan.store import ScheduleStore

logger = logging.getLogger(__name__)

ProductivityCalendar = Callable[[date], float]


@dataclass(frozen=True)
class CoverageGenerationResult:
    requirements: int
    dates: int
    intervals_per_day: int
    skills: int


def intraday_pattern(intervals: int) -> np.ndarray:
    """
    Share of the daily volume arriving in each interval: a flat floor plus a
    morning peak (t=0.3) and a smaller afternoon peak (t=0.7). Sums to 1.
    """
    if intervals <= 0:
        return np.zeros(0)
    if intervals == 1:
        t = np.array([0.5])
    else:
        t = np.arange(intervals) / (intervals - 1)
    morning = np.exp(-(((t - 0.3) / 0.18) ** 2))
    afternoon = np.exp(-(((t - 0.7) / 0.18) ** 2))
    weights = 0.25 + 0.55 * morning + 0.45 * afternoon
    total = weights.sum()
    if total <= 0:
        return np.full(intervals, 1.0 / intervals)
    return weights / total


def select_skills(channel_type: Optional[str], skills: list[Skill]) -> list[Skill]:
    """Skills of the campaign's channel, or every skill when none match."""
    if not channel_type:
        return list(skills)
    wanted = channel_type.lower()
    matching = [s for s in skills if (s.skill_type or "").lower() == wanted]
    return matching or list(skills)


def latest_forecast_by_date(forecasts: Iterable[Forecast]) -> dict[date, Forecast]:
    lookup: dict[date, Forecast] = {}
    for fc in forecasts:
        existing = lookup.get(fc.forecast_date)
        if existing is None or fc.id > existing.id:
            lookup[fc.forecast_date] = fc
    return lookup


def resolve_model(scenario: Optional[Scenario], base_model: ErlangModel) -> ErlangModel:
    """A scenario naming a known model overrides the base inputs."""
    if scenario is None or not scenario.erlang_model:
        return base_model
    name = scenario.erlang_model.strip().upper()
    if name in ErlangModel.__members__:
        return ErlangModel(name)
    logger.warning(
        "Scenario %s has unknown Erlang model %r; using %s.",
        scenario.id,
        scenario.erlang_model,
        base_model.value,
    )
    return base_model


def required_agents_from_fte(total_fte: float) -> int:
    if total_fte > 0:
        return max(1, math.ceil(total_fte))
    return 0


def generate_coverage_requirements(
    store: ScheduleStore,
    plan_id: int,
    base_inputs: CalculationInputs,
    productivity: Optional[ProductivityCalendar] = None,
    staffing_model: StaffingModel = DEFAULT_STAFFING_MODEL,
) -> CoverageGenerationResult:
    """
    Turn a plan's forecasts into per-interval, per-skill agent requirements
    and replace the plan's stored requirements with them.
    """
    plan = store.get_schedule_plan_by_id(plan_id)
    if plan is None:
        raise NotFoundError("Schedule plan", plan_id)
    campaign = store.get_campaign_by_id(plan.campaign_id)
    if campaign is None:
        raise NotFoundError("Campaign", plan.campaign_id)
    scenario = (
        store.get_scenario_by_id(plan.scenario_id) if plan.scenario_id is not None else None
    )

    interval_minutes = max(1, int(plan.interval_minutes or base_inputs.interval_minutes))
    intervals_per_day = max(1, cfg.DEFAULT_SHIFT_DURATION_MIN // interval_minutes)
    pattern = intraday_pattern(intervals_per_day)

    skills = select_skills(campaign.channel_type, store.get_skills())
    if not skills:
        raise NotFoundError("Skills for coverage generation")

    dates = [d.date() for d in pd.date_range(plan.start_date, plan.end_date, freq="D")]
    forecasts = (
        store.get_forecasts_by_scenario_and_date_range(
            plan.scenario_id, plan.campaign_id, plan.start_date, plan.end_date
        )
        if plan.scenario_id is not None
        else []
    )
    by_date = latest_forecast_by_date(forecasts)
    model = resolve_model(scenario, base_inputs.model)

    rows: list[CoverageRequirement] = []
    for day in dates:
        fc = by_date.get(day)
        daily_volume = fc.forecasted_volume if fc else base_inputs.volume * intervals_per_day
        aht = fc.forecasted_aht if fc and fc.forecasted_aht is not None else base_inputs.aht
        modifier = productivity(day) if productivity is not None else 1.0

        for i in range(intervals_per_day):
            start = cfg.DEFAULT_SHIFT_START_MIN + i * interval_minutes
            per_skill = daily_volume * float(pattern[i]) / len(skills)
            inputs = replace(
                base_inputs,
                volume=per_skill,
                aht=aht,
                interval_minutes=interval_minutes,
                model=model,
            )
            result = StaffingCalculationService.calculate(inputs, staffing_model, modifier)
            if result.results is None:
                logger.warning(
                    "Invalid inputs for %s interval %d; requiring 0 agents: %s",
                    day.isoformat(),
                    i,
                    "; ".join(e.message for e in result.errors),
                )
                required = 0
            else:
                required = required_agents_from_fte(result.results.total_fte)

            # One row per skill; every skill in the interval sees the same load
            for skill in skills:
                rows.append(
                    CoverageRequirement(
                        schedule_plan_id=plan.id,
                        requirement_date=day,
                        interval_start=start,
                        interval_end=start + interval_minutes,
                        skill_id=skill.id,
                        required_agents=required,
                        source_forecast_id=fc.id if fc else None,
                    )
                )

    store.replace_coverage_requirements(plan.id, rows)
    logger.info(
        "Generated %d coverage requirements for plan %s (%d dates x %d intervals x %d skills).",
        len(rows),
        plan.id,
        len(dates),
        intervals_per_day,
        len(skills),
    )
    return CoverageGenerationResult(
        requirements=len(rows),
        dates=len(dates),
        intervals_per_day=intervals_per_day,
        skills=len(skills),
    )
