from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from staffplan.records import ScheduleMetric, ScheduleRun
from staffplan.store import ScheduleStore

MISSING = "---"

# (row label, ScheduleMetric attribute, unit suffix)
COMPARED_METRICS: list[tuple[str, str, str]] = [
    ("Coverage", "coverage_percent", "%"),
    ("Gap (min)", "gap_minutes", ""),
    ("Overstaff (min)", "overstaff_minutes", ""),
    ("Overtime (min)", "overtime_minutes", ""),
    ("Violations", "violations_count", ""),
    ("Cost", "cost_estimate", ""),
]


@dataclass(frozen=True)
class MetricComparison:
    label: str
    value_a: str
    value_b: str
    delta: str


@dataclass(frozen=True)
class RunGroup:
    group_id: str
    runs: list[ScheduleRun]

    def labelled(self, label: str) -> Optional[ScheduleRun]:
        return next((r for r in self.runs if r.label == label), None)

    @property
    def is_ab_pair(self) -> bool:
        return self.labelled("A") is not None and self.labelled("B") is not None


def format_number(value: float) -> str:
    """Whole numbers print without a decimal part; others to at most 2 places."""
    if isinstance(value, float):
        value = round(value, 2)
        if value.is_integer():
            return str(int(value))
    return str(value)


def compare_metric(
    label: str, value_a: Optional[float], value_b: Optional[float], suffix: str = ""
) -> MetricComparison:
    if value_a is None or value_b is None:
        return MetricComparison(label, MISSING, MISSING, MISSING)
    delta = value_b - value_a
    sign = "+" if delta >= 0 else ""
    return MetricComparison(
        label,
        f"{format_number(value_a)}{suffix}",
        f"{format_number(value_b)}{suffix}",
        f"{sign}{format_number(delta)}{suffix}",
    )


def compare_metrics(
    metric_a: Optional[ScheduleMetric], metric_b: Optional[ScheduleMetric]
) -> list[MetricComparison]:
    rows = []
    for label, attr, suffix in COMPARED_METRICS:
        a = getattr(metric_a, attr) if metric_a is not None else None
        b = getattr(metric_b, attr) if metric_b is not None else None
        rows.append(compare_metric(label, a, b, suffix))
    return rows


def group_runs(runs: Iterable[ScheduleRun]) -> list[RunGroup]:
    """
    Group runs by run-group id; a run without one forms its own group
    ``run-<id>``. Runs within a group are ordered by label, groups newest
    (highest run id) first.
    """
    grouped: dict[str, list[ScheduleRun]] = {}
    for run in runs:
        key = run.run_group_id if run.run_group_id is not None else f"run-{run.id}"
        grouped.setdefault(key, []).append(run)
    groups = [
        RunGroup(key, sorted(members, key=lambda r: r.label or ""))
        for key, members in grouped.items()
    ]
    groups.sort(key=lambda g: max(r.id for r in g.runs), reverse=True)
    return groups


def find_comparison_group(
    groups: Iterable[RunGroup], group_id: Optional[str] = None
) -> Optional[RunGroup]:
    """The requested group, else the newest group holding both an A and a B run."""
    groups = list(groups)
    if group_id is not None:
        return next((g for g in groups if g.group_id == group_id), None)
    return next((g for g in groups if g.is_ab_pair), None)


def compare_run_group(store: ScheduleStore, run_group_id: str) -> list[MetricComparison]:
    """
    Side-by-side metrics of the A and B runs in a group. Every cell of a row is
    ``---`` until both runs have metrics.
    """
    group = RunGroup(run_group_id, store.get_schedule_runs_by_group(run_group_id))
    run_a, run_b = group.labelled("A"), group.labelled("B")
    metric_a = store.get_schedule_metrics(run_a.id) if run_a is not None else None
    metric_b = store.get_schedule_metrics(run_b.id) if run_b is not None else None
    return compare_metrics(metric_a, metric_b)
