# staffplan/scheduling/scheduler.py
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Mapping, Optional, Sequence, Type

from staffplan.config import cfg
from staffplan.errors import NotFoundError
from staffplan.records import (
    RunStatus,
    ScheduleMetric,
    SchedulePlan,
    ScheduleViolation,
    SegmentType,
    Shift,
    ShiftSegment,
    ShiftTemplate,
    Staff,
    ViolationType,
)
from staffplan.scheduling.buckets import IntervalKey, RequirementBuckets, build_requirement_buckets
from staffplan.scheduling.methods import (
    CandidateRanking,
    ConstraintPolicy,
    SchedulingMethod,
    resolve_method,
)
from staffplan.scheduling.metrics import (
    CoverageKey,
    build_metric,
    cost_estimate,
    coverage_totals,
    empty_metric,
    overtime_minutes,
    required_minutes_by_key,
)
from staffplan.scheduling.rules import CandidateContext, LaborRule, RuleSpec, build_rules
from staffplan.scheduling.segments import (
    Span,
    build_work_blocks,
    overlap_minutes,
    pick_skill,
    schedule_breaks,
    schedule_lunch,
)
from staffplan.store import ScheduleStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PoolMember:
    """An active staff member with the required skills they hold (store order)."""

    staff: Staff
    skills: tuple[int, ...]

    @property
    def id(self) -> int:
        return self.staff.id


@dataclass(frozen=True)
class Assignment:
    staff_id: int
    shift_date: date
    primary_skill_id: int
    skills: tuple[int, ...]
    start_min: int
    end_min: int


@dataclass
class AssignmentResult:
    assignments: list[Assignment] = field(default_factory=list)
    violations: list[ScheduleViolation] = field(default_factory=list)
    # staff_id -> week start -> paid minutes
    weekly_minutes: dict[int, dict[date, int]] = field(default_factory=dict)
    skipped_candidates: int = 0


@dataclass(frozen=True)
class ScheduleRunSummary:
    run_id: int
    status: RunStatus
    method: Optional[SchedulingMethod]
    shifts: int
    segments: int
    metrics: ScheduleMetric
    violations: int
    skipped_candidates: int = 0
    required_minutes: dict[CoverageKey, int] = field(default_factory=dict)
    covered_minutes: dict[CoverageKey, int] = field(default_factory=dict)


def week_start(day: date) -> date:
    """First day of the week containing `day` (Monday unless configured otherwise)."""
    return day - timedelta(days=(day.weekday() - cfg.WEEK_START_WEEKDAY) % 7)


def _at(day: date, minutes: int) -> datetime:
    return datetime.combine(day, time()) + timedelta(minutes=minutes)


def build_staff_pool(store: ScheduleStore, skill_ids: set[int]) -> list[PoolMember]:
    """Active staff holding at least one of `skill_ids`, in store order."""
    held: dict[int, list[int]] = defaultdict(list)
    for link in store.get_staff_skills():
        if link.skill_id in skill_ids and link.skill_id not in held[link.staff_id]:
            held[link.staff_id].append(link.skill_id)
    return [
        PoolMember(staff, tuple(held[staff.id]))
        for staff in store.get_all_staff(active_only=True)
        if held.get(staff.id)
    ]


def assign_staff(
    run_id: int,
    buckets: RequirementBuckets,
    pool: Sequence[PoolMember],
    plan: SchedulePlan,
    template: ShiftTemplate,
    method: SchedulingMethod,
    rules: Sequence[LaborRule],
) -> AssignmentResult:
    """
    Greedy day-by-day assignment: each skill's peak daily need is filled from
    ranked candidates, one shift per staff member per date.
    """
    ranking = CandidateRanking.for_plan(plan.allow_skill_switch)
    policy = method.policy
    result = AssignmentResult()
    last_end: dict[int, datetime] = {}

    for day in buckets.dates():
        bucket = buckets.days.get(day)
        if bucket is None:
            continue
        start = bucket.first_start
        if start is None:
            start = cfg.DEFAULT_SHIFT_START_MIN
        end = start + template.total_minutes
        shift_start_dt = _at(day, start)
        shift_end_dt = _at(day, end)
        week = week_start(day)
        assigned_today: set[int] = set()

        needs = buckets.need_by_date_skill[day]
        for skill_id, needed in sorted(needs.items(), key=lambda kv: kv[1], reverse=True):
            if needed <= 0:
                continue
            candidates = ranking.rank(
                (m for m in pool if skill_id in m.skills and m.id not in assigned_today),
                skill_count=lambda m: len(m.skills),
            )
            remaining = needed
            for member in candidates:
                if remaining <= 0:
                    break
                weeks = result.weekly_minutes.setdefault(member.id, {})
                projected = weeks.get(week, 0) + template.paid_minutes
                prev_end = last_end.get(member.id)
                rest_gap = (
                    (shift_start_dt - prev_end).total_seconds() / 3600
                    if prev_end is not None
                    else None
                )
                ctx = CandidateContext(member.id, day, plan, rest_gap, projected)
                breaches = [b for b in (r.check(ctx) for r in rules) if b is not None]

                if breaches and policy is ConstraintPolicy.ENFORCE:
                    result.skipped_candidates += 1
                    logger.debug(
                        "Run %s: skipped staff %s on %s for skill %s (%s).",
                        run_id,
                        member.id,
                        day.isoformat(),
                        skill_id,
                        "; ".join(b.details for b in breaches),
                    )
                    continue
                for breach in breaches:
                    result.violations.append(
                        ScheduleViolation(
                            schedule_run_id=run_id,
                            violation_date=day,
                            violation_type=breach.violation_type,
                            details=breach.details,
                            staff_id=member.id,
                        )
                    )

                result.assignments.append(
                    Assignment(member.id, day, skill_id, member.skills, start, end)
                )
                assigned_today.add(member.id)
                weeks[week] = projected
                last_end[member.id] = shift_end_dt
                remaining -= 1

            if remaining > 0:
                logger.debug(
                    "Run %s: %d of %d agents unfilled for skill %s on %s.",
                    run_id,
                    remaining,
                    needed,
                    skill_id,
                    day.isoformat(),
                )
    return result


def _remaining_minutes(
    required: Mapping[CoverageKey, int]
) -> dict[tuple[date, IntervalKey], dict[int, int]]:
    """Required minutes regrouped per (date, interval), to be drawn down by skill."""
    out: dict[tuple[date, IntervalKey], dict[int, int]] = {}
    for (day, key, skill_id), minutes in required.items():
        out.setdefault((day, key), {})[skill_id] = minutes
    return out


def segment_shift(
    shift_id: int,
    assignment: Assignment,
    buckets: RequirementBuckets,
    plan: SchedulePlan,
    template: ShiftTemplate,
    remaining: dict[tuple[date, IntervalKey], dict[int, int]],
    covered: dict[CoverageKey, int],
) -> list[ShiftSegment]:
    """
    Lunch, breaks and work segments for one shift, updating `covered` (and,
    with skill switching, `remaining`) in place.
    """
    a = assignment
    day = a.shift_date
    intervals = buckets.days[day].intervals

    lunch = schedule_lunch(
        a.start_min,
        a.end_min,
        template.unpaid_minutes,
        plan.lunch_window_start_min,
        plan.lunch_window_end_min,
    )
    breaks = schedule_breaks(
        a.start_min,
        a.end_min,
        template.break_count,
        template.break_minutes,
        plan.break_window_start_min,
        plan.break_window_end_min,
        lunch,
    )

    segments = [
        ShiftSegment(shift_id, b.start, b.end, SegmentType.BREAK, None, True) for b in breaks
    ]
    off: list[Span] = list(breaks)
    if lunch is not None:
        segments.append(ShiftSegment(shift_id, lunch.start, lunch.end, SegmentType.LUNCH, None, False))
        off.append(lunch)

    def work(start: int, end: int, skill_id: int) -> None:
        segments.append(ShiftSegment(shift_id, start, end, SegmentType.WORK, skill_id, True))

    for block in build_work_blocks(a.start_min, a.end_min, off):
        if not plan.allow_skill_switch:
            work(block.start, block.end, a.primary_skill_id)
            for iv in intervals:
                minutes = overlap_minutes(block.start, block.end, iv.start, iv.end)
                if minutes > 0:
                    key = (day, iv.key, a.primary_skill_id)
                    covered[key] = covered.get(key, 0) + minutes
            continue

        # Slice at interval boundaries; time outside every interval stays on the primary skill
        cursor = block.start
        for iv in intervals:
            lo, hi = max(block.start, iv.start, cursor), min(block.end, iv.end)
            if hi <= lo:
                continue
            if cursor < lo:
                work(cursor, lo, a.primary_skill_id)
            left = remaining.get((day, iv.key))
            skill_id = pick_skill(a.skills, left, a.primary_skill_id)
            work(lo, hi, skill_id)
            if left is not None:
                left[skill_id] = left.get(skill_id, 0) - (hi - lo)
            key = (day, iv.key, skill_id)
            covered[key] = covered.get(key, 0) + (hi - lo)
            cursor = hi
        if cursor < block.end:
            work(cursor, block.end, a.primary_skill_id)

    segments.sort(key=lambda s: s.start_min)
    return segments


def _fail(store: ScheduleStore, run_id: int) -> None:
    store.update_schedule_run_status(run_id, RunStatus.FAILED, completed_at=datetime.now())


def run_schedule_optimization(
    store: ScheduleStore,
    run_id: int,
    hourly_rate: Optional[float] = None,
    rules: Sequence[RuleSpec | Type[LaborRule]] | None = None,
) -> ScheduleRunSummary:
    """
    Build shifts, segments, metrics and violations for one schedule run.

    The run's previous output is cleared first, so rerunning a run id replaces
    its data. Raises NotFoundError when the run, plan or a shift template is
    missing; any error after the run starts marks it Failed before propagating.
    """
    rate = cfg.HOURLY_RATE if hourly_rate is None else hourly_rate

    run = store.get_schedule_run_by_id(run_id)
    if run is None:
        raise NotFoundError("Schedule run", run_id)
    plan = store.get_schedule_plan_by_id(run.schedule_plan_id)
    if plan is None:
        raise NotFoundError("Schedule plan", run.schedule_plan_id)

    store.update_schedule_run_status(run_id, RunStatus.RUNNING, started_at=datetime.now())
    store.clear_schedule_run_data(run_id)

    try:
        requirements = store.get_coverage_requirements(plan.id)
        if not requirements:
            logger.warning("Run %s: plan %s has no coverage requirements.", run_id, plan.id)
            metric = empty_metric(run_id, violations_count=1)
            store.save_schedule_metrics(metric)
            store.save_schedule_violations(
                [
                    ScheduleViolation(
                        schedule_run_id=run_id,
                        violation_date=plan.start_date,
                        violation_type=ViolationType.COVERAGE,
                        details="No coverage requirements found.",
                    )
                ]
            )
            _fail(store, run_id)
            return ScheduleRunSummary(
                run_id=run_id,
                status=RunStatus.FAILED,
                method=None,
                shifts=0,
                segments=0,
                metrics=metric,
                violations=1,
            )

        templates = store.get_shift_templates()
        template = next((t for t in templates if t.id == run.template_id), None)
        if template is None and templates:
            template = templates[0]
        if template is None:
            raise NotFoundError("Shift template", run.template_id)

        method = resolve_method(store.get_optimization_methods(), run.method_id)
        buckets = build_requirement_buckets(requirements)
        pool = build_staff_pool(store, buckets.skill_ids)
        logger.info(
            "Run %s: method=%s, %d dates, %d skills, %d eligible staff, template %r.",
            run_id,
            method.value,
            len(buckets.days),
            len(buckets.skill_ids),
            len(pool),
            template.name,
        )

        assigned = assign_staff(
            run_id, buckets, pool, plan, template, method, build_rules(rules)
        )

        required = required_minutes_by_key(buckets, plan.interval_minutes)
        remaining = _remaining_minutes(required)
        covered: dict[CoverageKey, int] = {}
        segment_count = 0
        for a in assigned.assignments:
            shift_id = store.create_shift(
                Shift(
                    schedule_run_id=run_id,
                    staff_id=a.staff_id,
                    shift_date=a.shift_date,
                    start_min=a.start_min,
                    end_min=a.end_min,
                    template_id=template.id,
                )
            )
            segments = segment_shift(
                shift_id, a, buckets, plan, template, remaining, covered
            )
            store.create_shift_segments(segments)
            segment_count += len(segments)

        totals = coverage_totals(required, covered)
        violations = list(assigned.violations)
        if totals.gap_minutes > 0:
            violations.append(
                ScheduleViolation(
                    schedule_run_id=run_id,
                    violation_date=plan.start_date,
                    violation_type=ViolationType.COVERAGE,
                    details="Coverage gap detected.",
                )
            )

        shift_count = len(assigned.assignments)
        cap_minutes = None if plan.max_weekly_hours is None else plan.max_weekly_hours * 60
        metric = build_metric(
            run_id,
            totals,
            overtime_minutes(assigned.weekly_minutes, cap_minutes),
            violations,
            cost_estimate(shift_count, template.paid_minutes, rate),
        )
        store.save_schedule_metrics(metric)
        if violations:
            store.save_schedule_violations(violations)
        store.update_schedule_run_status(run_id, RunStatus.COMPLETED, completed_at=datetime.now())
    except Exception:
        logger.exception("Run %s failed.", run_id)
        _fail(store, run_id)
        raise

    logger.info(
        "Run %s completed: %d shifts, coverage %.2f%%, %d violations, %d skipped candidates.",
        run_id,
        shift_count,
        metric.coverage_percent,
        len(violations),
        assigned.skipped_candidates,
    )
    return ScheduleRunSummary(
        run_id=run_id,
        status=RunStatus.COMPLETED,
        method=method,
        shifts=shift_count,
        segments=segment_count,
        metrics=metric,
        violations=len(violations),
        skipped_candidates=assigned.skipped_candidates,
        required_minutes=required,
        covered_minutes=covered,
    )
