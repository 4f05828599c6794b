from __future__ import annotations

from datetime import date

import pytest

from staffplan.records import CoverageRequirement
from staffplan.scheduling.buckets import build_requirement_buckets
from staffplan.scheduling.metrics import (
    CoverageTotals,
    build_metric,
    cost_estimate,
    coverage_totals,
    empty_metric,
    overtime_minutes,
    required_minutes_by_key,
)

D1, D2 = date(2024, 1, 1), date(2024, 1, 2)


def req(day, start, skill, agents, length=30):
    return CoverageRequirement(1, day, start, start + length, skill, agents)


def test_buckets_track_peak_need_and_sorted_intervals():
    buckets = build_requirement_buckets(
        [req(D1, 600, 1, 2), req(D1, 540, 1, 4), req(D1, 540, 2, 0), req(D2, 540, 2, 1)]
    )
    assert buckets.dates() == [D1, D2]
    assert buckets.need_by_date_skill[D1] == {1: 4, 2: 0}
    assert [iv.start for iv in buckets.days[D1].intervals] == [540, 600]
    assert buckets.days[D1].first_start == 540
    assert buckets.skill_ids == {1, 2}


def test_required_minutes_and_totals():
    buckets = build_requirement_buckets([req(D1, 540, 1, 2), req(D1, 570, 1, 1)])
    required = required_minutes_by_key(buckets, 30)
    assert required == {(D1, (540, 570), 1): 60, (D1, (570, 600), 1): 30}

    covered = {(D1, (540, 570), 1): 45, (D1, (570, 600), 1): 40, (D1, (600, 630), 1): 30}
    totals = coverage_totals(required, covered)
    assert totals == CoverageTotals(required_minutes=90, gap_minutes=15, overstaff_minutes=10)
    assert totals.coverage_percent == pytest.approx(75 / 90 * 100)
    assert CoverageTotals(0, 0, 0).coverage_percent == 0.0


def test_overtime_minutes():
    weekly = {1: {D1: 2880, D2: 1920}, 2: {D1: 2400}}
    assert overtime_minutes(weekly, 2400) == 480
    assert overtime_minutes(weekly, None) == 0


def test_cost_estimate_is_linear_in_shifts():
    assert cost_estimate(1, 480, 25) == 200.0
    assert cost_estimate(3, 480, 25) == 3 * cost_estimate(1, 480, 25)
    assert cost_estimate(1, 450, 25) == 187.5


def test_build_and_empty_metric():
    m = build_metric(7, CoverageTotals(90, 15, 10), 0, ["v1", "v2"], 400.0)
    assert m.schedule_run_id == 7
    assert m.coverage_percent == 83.33
    assert (m.gap_minutes, m.overstaff_minutes, m.violations_count) == (15, 10, 2)

    e = empty_metric(7, violations_count=1)
    assert (e.coverage_percent, e.gap_minutes, e.cost_estimate, e.violations_count) == (0.0, 0, 0.0, 1)
