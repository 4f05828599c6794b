from __future__ import annotations

from datetime import date

from staffplan.memory_store import InMemoryStore
from staffplan.records import (
    ScheduleViolation,
    SegmentType,
    Shift,
    ShiftSegment,
    Staff,
    ViolationType,
)
from staffplan.reporting.frames import (
    COMPARISON_COLUMNS,
    SHIFT_COLUMNS,
    comparison_frame,
    coverage_frame,
    segments_frame,
    shifts_frame,
    violations_frame,
    weekly_hours_frame,
)
from staffplan.scheduling.compare import MetricComparison

D1 = date(2024, 1, 1)


def make_store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_staff(Staff(1, "Ada"), [1])
    store.add_staff(Staff(2, "Bea"), [1])
    for staff_id, day in ((2, D1), (1, D1), (1, date(2024, 1, 2)), (1, date(2024, 1, 8))):
        shift_id = store.create_shift(Shift(1, staff_id, day, 540, 1050, 1))
        store.create_shift_segments(
            [
                ShiftSegment(shift_id, 825, 1050, SegmentType.WORK, 1),
                ShiftSegment(shift_id, 540, 795, SegmentType.WORK, 1),
                ShiftSegment(shift_id, 795, 825, SegmentType.LUNCH, None, False),
            ]
        )
    store.save_schedule_violations(
        [ScheduleViolation(1, D1, ViolationType.REST, "Rest gap 10.0h", staff_id=1)]
    )
    return store


def test_shifts_frame_sorted_with_names():
    df = shifts_frame(make_store(), 1)
    assert list(df.columns) == SHIFT_COLUMNS
    assert len(df) == 4
    assert list(df["staff_id"][:2]) == [1, 2]
    assert df.loc[0, "name"] == "Ada"
    assert (df.loc[0, "start"], df.loc[0, "end"]) == ("09:00", "17:30")


def test_empty_frames_keep_columns():
    store = InMemoryStore()
    assert list(shifts_frame(store, 1).columns) == SHIFT_COLUMNS
    assert segments_frame(store, 1).empty
    assert violations_frame(store, 1).empty
    assert weekly_hours_frame(shifts_frame(store, 1), 480).empty


def test_segments_frame_orders_by_start():
    df = segments_frame(make_store(), 1)
    first = df[df["shift_id"] == 2]
    assert list(first["segment_type"]) == ["work", "lunch", "work"]
    assert int(first["minutes"].sum()) == 510


def test_coverage_frame_gap_and_overstaff():
    key_a = (D1, (540, 570), 1)
    key_b = (D1, (570, 600), 1)
    df = coverage_frame({key_a: 60, key_b: 30}, {key_a: 45, key_b: 40})
    assert list(df["gap_minutes"]) == [15, 0]
    assert list(df["overstaff_minutes"]) == [0, 10]
    assert coverage_frame({}, {}).empty


def test_violations_frame():
    df = violations_frame(make_store(), 1)
    assert df.loc[0, "violation_type"] == "Rest"
    assert df.loc[0, "staff_id"] == 1


def test_weekly_hours_frame_groups_by_week():
    df = weekly_hours_frame(shifts_frame(make_store(), 1), 480)
    ada = df[df["staff_id"] == 1].sort_values("week")
    assert list(ada["shifts"]) == [2, 1]
    assert list(ada["hours"]) == [16.0, 8.0]


def test_comparison_frame():
    df = comparison_frame([MetricComparison("Coverage", "80%", "90%", "+10%")])
    assert list(df.columns) == COMPARISON_COLUMNS
    assert df.iloc[0].tolist() == ["Coverage", "80%", "90%", "+10%"]
