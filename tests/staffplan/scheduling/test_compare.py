from __future__ import annotations

from staffplan.memory_store import InMemoryStore
from staffplan.records import ScheduleMetric, ScheduleRun
from staffplan.scheduling.compare import (
    MISSING,
    compare_metric,
    compare_run_group,
    find_comparison_group,
    format_number,
    group_runs,
)


def metric(run_id, coverage, gap, cost, violations=0) -> ScheduleMetric:
    return ScheduleMetric(run_id, coverage, gap, 0, 0, violations, cost)


def make_store() -> InMemoryStore:
    store = InMemoryStore()
    store.add_run(ScheduleRun(1, 1, 1, run_group_id="g1", label="A"))
    store.add_run(ScheduleRun(2, 1, 2, run_group_id="g1", label="B"))
    return store


def test_format_number():
    assert format_number(80.0) == "80"
    assert format_number(85.456) == "85.46"
    assert format_number(3) == "3"


def test_compare_metric_signs():
    row = compare_metric("Coverage", 80.0, 85.5, "%")
    assert (row.value_a, row.value_b, row.delta) == ("80%", "85.5%", "+5.5%")
    assert compare_metric("Cost", 100.0, 90.5).delta == "-9.5"
    assert compare_metric("Gap (min)", 30, 30).delta == "+0"


def test_missing_metrics_blank_every_cell():
    store = make_store()
    store.save_schedule_metrics(metric(1, 90.0, 10, 400.0))
    rows = compare_run_group(store, "g1")
    assert [r.label for r in rows] == [
        "Coverage",
        "Gap (min)",
        "Overstaff (min)",
        "Overtime (min)",
        "Violations",
        "Cost",
    ]
    assert all((r.value_a, r.value_b, r.delta) == (MISSING,) * 3 for r in rows)


def test_compare_run_group_deltas():
    store = make_store()
    store.save_schedule_metrics(metric(1, 90.0, 120, 400.0, violations=3))
    store.save_schedule_metrics(metric(2, 95.5, 60, 400.0, violations=1))
    rows = {r.label: r for r in compare_run_group(store, "g1")}
    assert rows["Coverage"].delta == "+5.5%"
    assert rows["Gap (min)"].delta == "-60"
    assert rows["Violations"].delta == "-2"
    assert rows["Cost"].delta == "+0"


def test_unknown_group_is_all_missing():
    rows = compare_run_group(make_store(), "nope")
    assert len(rows) == 6
    assert {r.delta for r in rows} == {MISSING}


def test_group_runs():
    runs = [
        ScheduleRun(1, 1, 1, run_group_id="g1", label="B"),
        ScheduleRun(2, 1, 1, run_group_id="g1", label="A"),
        ScheduleRun(3, 1, 1),
        ScheduleRun(4, 1, 1, run_group_id="g2", label="A"),
    ]
    groups = group_runs(runs)
    assert [g.group_id for g in groups] == ["g2", "run-3", "g1"]
    g1 = groups[-1]
    assert [r.label for r in g1.runs] == ["A", "B"]
    assert g1.is_ab_pair
    assert not groups[0].is_ab_pair

    assert find_comparison_group(groups).group_id == "g1"
    assert find_comparison_group(groups, "run-3").runs[0].id == 3
    assert find_comparison_group(groups, "missing") is None
