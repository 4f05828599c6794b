# staffplan/scheduling/buckets.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from staffplan.records import CoverageRequirement

IntervalKey = tuple[int, int]


@dataclass(frozen=True)
class Interval:
    start: int
    end: int

    @property
    def key(self) -> IntervalKey:
        return (self.start, self.end)

    @property
    def duration(self) -> int:
        return max(0, self.end - self.start)


@dataclass
class DayBucket:
    """Requirements of one date: intervals sorted by start, agents per interval per skill."""

    intervals: list[Interval] = field(default_factory=list)
    requirements: dict[IntervalKey, dict[int, int]] = field(default_factory=dict)

    @property
    def first_start(self) -> int | None:
        return self.intervals[0].start if self.intervals else None


@dataclass
class RequirementBuckets:
    days: dict[date, DayBucket]
    # Peak agents needed per skill on each date
    need_by_date_skill: dict[date, dict[int, int]]
    skill_ids: set[int]

    def dates(self) -> list[date]:
        return sorted(self.need_by_date_skill)


def build_requirement_buckets(requirements: Iterable[CoverageRequirement]) -> RequirementBuckets:
    days: dict[date, DayBucket] = {}
    needs: dict[date, dict[int, int]] = {}
    skill_ids: set[int] = set()

    for req in requirements:
        bucket = days.setdefault(req.requirement_date, DayBucket())
        key = req.interval_key
        if key not in bucket.requirements:
            bucket.requirements[key] = {}
            bucket.intervals.append(Interval(req.interval_start, req.interval_end))
        bucket.requirements[key][req.skill_id] = req.required_agents

        day_needs = needs.setdefault(req.requirement_date, {})
        if req.required_agents > day_needs.get(req.skill_id, 0):
            day_needs[req.skill_id] = req.required_agents
        else:
            day_needs.setdefault(req.skill_id, 0)
        skill_ids.add(req.skill_id)

    for bucket in days.values():
        bucket.intervals.sort(key=lambda iv: iv.start)

    return RequirementBuckets(days=days, need_by_date_skill=needs, skill_ids=skill_ids)
