from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Mapping, Optional

from staffplan.records import ScheduleMetric
from staffplan.scheduling.buckets import IntervalKey, RequirementBuckets

CoverageKey = tuple[date, IntervalKey, int]


@dataclass(frozen=True)
class CoverageTotals:
    required_minutes: int
    gap_minutes: int
    overstaff_minutes: int

    @property
    def coverage_percent(self) -> float:
        if self.required_minutes <= 0:
            return 0.0
        return (self.required_minutes - self.gap_minutes) / self.required_minutes * 100


def required_minutes_by_key(
    buckets: RequirementBuckets, fallback_interval_minutes: int
) -> dict[CoverageKey, int]:
    """Agent-minutes required per (date, interval, skill)."""
    out: dict[CoverageKey, int] = {}
    for day, bucket in buckets.days.items():
        durations = {iv.key: iv.duration for iv in bucket.intervals}
        for key, by_skill in bucket.requirements.items():
            minutes = durations.get(key) or fallback_interval_minutes
            for skill_id, agents in by_skill.items():
                out[(day, key, skill_id)] = agents * minutes
    return out


def coverage_totals(
    required: Mapping[CoverageKey, int], covered: Mapping[CoverageKey, int]
) -> CoverageTotals:
    """
    Gap and overstaff summed over every required (date, interval, skill);
    coverage of pairs with no requirement row is ignored.
    """
    total = gap = over = 0
    for key, need in required.items():
        have = covered.get(key, 0)
        total += need
        if have < need:
            gap += need - have
        elif have > need:
            over += have - need
    return CoverageTotals(total, gap, over)


def overtime_minutes(
    weekly_minutes: Mapping[int, Mapping[date, int]], max_weekly_minutes: Optional[float]
) -> int:
    """Paid minutes over the weekly cap, summed over every staff-week; 0 without a cap."""
    if max_weekly_minutes is None:
        return 0
    return int(
        sum(
            max(0, minutes - max_weekly_minutes)
            for weeks in weekly_minutes.values()
            for minutes in weeks.values()
        )
    )


def cost_estimate(shift_count: int, paid_minutes: int, hourly_rate: float) -> float:
    return round(shift_count * paid_minutes / 60 * hourly_rate, 2)


def build_metric(
    run_id: int,
    totals: CoverageTotals,
    overtime: float,
    violations: Iterable[object],
    cost: float,
) -> ScheduleMetric:
    return ScheduleMetric(
        schedule_run_id=run_id,
        coverage_percent=round(totals.coverage_percent, 2),
        gap_minutes=round(totals.gap_minutes),
        overstaff_minutes=round(totals.overstaff_minutes),
        overtime_minutes=round(overtime),
        violations_count=len(list(violations)),
        cost_estimate=cost,
        created_at=datetime.now(),
    )


def empty_metric(run_id: int, violations_count: int) -> ScheduleMetric:
    return ScheduleMetric(
        schedule_run_id=run_id,
        coverage_percent=0.0,
        gap_minutes=0,
        overstaff_minutes=0,
        overtime_minutes=0,
        violations_count=violations_count,
        cost_estimate=0.0,
        created_at=datetime.now(),
    )
