# staffplan/reporting/frames.py
from __future__ import annotations

from typing import Iterable, Mapping

import pandas as pd

from staffplan.records import format_minutes
from staffplan.scheduling.compare import MetricComparison
from staffplan.scheduling.metrics import CoverageKey
from staffplan.scheduling.scheduler import week_start
from staffplan.store import ScheduleStore

SHIFT_COLUMNS = [
    "shift_id",
    "staff_id",
    "name",
    "date",
    "start",
    "end",
    "start_min",
    "end_min",
    "template_id",
]
SEGMENT_COLUMNS = [
    "shift_id",
    "staff_id",
    "date",
    "segment_type",
    "skill_id",
    "start_min",
    "end_min",
    "minutes",
    "is_paid",
]
COVERAGE_COLUMNS = [
    "date",
    "interval_start",
    "interval_end",
    "skill_id",
    "required_minutes",
    "covered_minutes",
    "gap_minutes",
    "overstaff_minutes",
]
VIOLATION_COLUMNS = ["date", "violation_type", "staff_id", "details"]
COMPARISON_COLUMNS = ["metric", "A", "B", "delta"]


def shifts_frame(store: ScheduleStore, run_id: int) -> pd.DataFrame:
    """One row per shift of a run."""
    staff_names = {s.id: s.name for s in store.get_all_staff(active_only=False)}
    rows = [
        {
            "shift_id": s.id,
            "staff_id": s.staff_id,
            "name": staff_names.get(s.staff_id, ""),
            "date": s.shift_date,
            "start": format_minutes(s.start_min),
            "end": format_minutes(s.end_min),
            "start_min": s.start_min,
            "end_min": s.end_min,
            "template_id": s.template_id,
        }
        for s in store.get_shifts(run_id)
    ]
    if not rows:
        return pd.DataFrame(columns=SHIFT_COLUMNS)
    return pd.DataFrame(rows).sort_values(["date", "staff_id"]).reset_index(drop=True)


def segments_frame(store: ScheduleStore, run_id: int) -> pd.DataFrame:
    """One row per shift segment, tagged with the shift's staff member and date."""
    shifts = {s.id: s for s in store.get_shifts(run_id)}
    rows = []
    for seg in store.get_shift_segments(run_id):
        shift = shifts.get(seg.shift_id)
        rows.append(
            {
                "shift_id": seg.shift_id,
                "staff_id": shift.staff_id if shift else None,
                "date": shift.shift_date if shift else None,
                "segment_type": seg.segment_type.value,
                "skill_id": seg.skill_id,
                "start_min": seg.start_min,
                "end_min": seg.end_min,
                "minutes": seg.minutes,
                "is_paid": seg.is_paid,
            }
        )
    if not rows:
        return pd.DataFrame(columns=SEGMENT_COLUMNS)
    return (
        pd.DataFrame(rows)
        .sort_values(["date", "staff_id", "start_min"])
        .reset_index(drop=True)
    )


def coverage_frame(
    required: Mapping[CoverageKey, int], covered: Mapping[CoverageKey, int]
) -> pd.DataFrame:
    """Required vs covered agent-minutes per (date, interval, skill)."""
    keys = sorted(set(required) | set(covered))
    if not keys:
        return pd.DataFrame(columns=COVERAGE_COLUMNS)
    df = pd.DataFrame(
        {
            "date": [k[0] for k in keys],
            "interval_start": [k[1][0] for k in keys],
            "interval_end": [k[1][1] for k in keys],
            "skill_id": [k[2] for k in keys],
            "required_minutes": [required.get(k, 0) for k in keys],
            "covered_minutes": [covered.get(k, 0) for k in keys],
        }
    )
    diff = df["covered_minutes"] - df["required_minutes"]
    df["gap_minutes"] = (-diff).clip(lower=0)
    df["overstaff_minutes"] = diff.clip(lower=0)
    return df


def violations_frame(store: ScheduleStore, run_id: int) -> pd.DataFrame:
    rows = [
        {
            "date": v.violation_date,
            "violation_type": v.violation_type.value,
            "staff_id": v.staff_id,
            "details": v.details,
        }
        for v in store.get_schedule_violations(run_id)
    ]
    if not rows:
        return pd.DataFrame(columns=VIOLATION_COLUMNS)
    return pd.DataFrame(rows)


def weekly_hours_frame(shifts: pd.DataFrame, paid_minutes: int) -> pd.DataFrame:
    """Paid hours per staff member per week, from a shifts frame."""
    if shifts.empty:
        return pd.DataFrame(columns=["staff_id", "name", "week", "shifts", "hours"])
    df = shifts.assign(week=[week_start(d) for d in shifts["date"]])
    out = (
        df.groupby(["staff_id", "name", "week"], sort=True)
        .size()
        .rename("shifts")
        .reset_index()
    )
    out["hours"] = out["shifts"] * paid_minutes / 60
    return out


def comparison_frame(rows: Iterable[MetricComparison]) -> pd.DataFrame:
    data = [(r.label, r.value_a, r.value_b, r.delta) for r in rows]
    return pd.DataFrame(data, columns=COMPARISON_COLUMNS)
