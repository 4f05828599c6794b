from __future__ import annotations

import math
from pathlib import Path
from typing import Iterable, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.backends.backend_pdf import PdfPages

from staffplan.erlang.engine import EngineResult
from staffplan.scheduling.compare import MetricComparison
from staffplan.scheduling.scheduler import ScheduleRunSummary

from .frames import comparison_frame, coverage_frame


class ReportDocument:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.lines: list[str] = []
        self.figures: list[plt.Figure] = []

    def add_text(self, text: str) -> None:
        self.lines.append(text)

    def add_figure(self, fig: plt.Figure) -> None:
        self.figures.append(fig)

    def write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with PdfPages(self.path) as pdf:
            if self.lines:
                fig, ax = plt.subplots(figsize=(8.27, 11.69))
                ax.axis("off")
                ax.text(
                    0.01,
                    0.99,
                    "\n".join(self.lines),
                    ha="left",
                    va="top",
                    fontsize=8,
                    family="monospace",
                )
                pdf.savefig(fig, bbox_inches="tight")
                plt.close(fig)
            elif not self.figures:
                fig, ax = plt.subplots(figsize=(8.27, 11.69))
                ax.axis("off")
                ax.text(
                    0.5,
                    0.5,
                    "Report contains no data.",
                    ha="center",
                    va="center",
                    fontsize=12,
                )
                pdf.savefig(fig, bbox_inches="tight")
                plt.close(fig)
            for fig in self.figures:
                pdf.savefig(fig, bbox_inches="tight")
                plt.close(fig)


_ACTIVE_REPORT: Optional[ReportDocument] = None


def set_active_report(doc: Optional[ReportDocument]) -> None:
    global _ACTIVE_REPORT
    _ACTIVE_REPORT = doc


def get_active_report() -> Optional[ReportDocument]:
    return _ACTIVE_REPORT


def _log_print(*args, **kwargs) -> None:
    from io import StringIO

    buf = StringIO()
    kwargs_copy = kwargs.copy()
    kwargs_copy["file"] = buf
    print(*args, **kwargs_copy)
    print(*args, **kwargs)
    if _ACTIVE_REPORT is not None:
        _ACTIVE_REPORT.add_text(buf.getvalue().rstrip("\n"))


def _fmt_float(x: float | None, nd: int = 2, as_pct: bool = False) -> str:
    if x is None:
        return "nan"
    if isinstance(x, float) and math.isinf(x):
        return "inf"
    try:
        if pd.isna(x):
            return "nan"
        return f"{float(100 * x):.{nd}f}%" if as_pct else f"{float(x):.{nd}f}"
    except (TypeError, ValueError):
        return "nan"


def render_staffing_result(result: EngineResult, target_sl_percent: float) -> None:
    """Print one Erlang calculation."""
    _log_print(f"Erlang {result.model.value} staffing")
    _log_print(f"  traffic intensity : {_fmt_float(result.traffic_intensity, 3)} Erlangs")
    _log_print(f"  required agents   : {result.required_agents}")
    _log_print(f"  total FTE         : {_fmt_float(result.total_fte)}")
    _log_print(
        f"  service level     : {_fmt_float(result.service_level)}% "
        f"(target {_fmt_float(target_sl_percent, 1)}%)"
    )
    _log_print(f"  ASA               : {_fmt_float(result.asa, 1)}s")
    _log_print(f"  occupancy         : {_fmt_float(result.occupancy)}%")
    if result.blocking_probability is not None:
        _log_print(f"  blocking          : {_fmt_float(result.blocking_probability, 2, as_pct=True)}")
    if result.abandonment_rate is not None:
        _log_print(
            f"  abandonment       : {_fmt_float(result.abandonment_rate, 2, as_pct=True)} "
            f"(~{_fmt_float(result.expected_abandonments, 1)} contacts)"
        )
    if result.virtual_traffic is not None:
        state = "converged" if result.converged else "NOT converged"
        _log_print(
            f"  virtual traffic   : {_fmt_float(result.virtual_traffic, 3)} Erlangs "
            f"(retrial {_fmt_float(result.retrial_probability, 1, as_pct=True)}, {state})"
        )
    if not result.can_achieve_target:
        _log_print("  ⚠️ Target not reachable within the search range; best effort shown.")


def _print_hours_histogram(df_hours: pd.DataFrame) -> None:
    if df_hours.empty or "hours" not in df_hours.columns:
        _log_print("\nWeekly hours distribution: (no data)")
        return
    hours_series = (
        pd.to_numeric(df_hours["hours"], errors="coerce").dropna().round().astype(int)
    )
    counts = hours_series.value_counts().sort_index()
    _log_print("\nWeekly hours distribution: staff-weeks at each paid total:")
    for h, n in counts.items():
        bar = "█" * min(int(n), 50)
        _log_print(f"  {h:>3}h : {n:>4} staff-weeks  {bar}")


def render_run_report(
    summary: ScheduleRunSummary,
    df_shifts: pd.DataFrame,
    df_violations: pd.DataFrame,
    df_hours: pd.DataFrame,
    max_weekly_hours: float | None = None,
    *,
    num_print_examples: int = 6,
) -> None:
    m = summary.metrics
    method = summary.method.value if summary.method is not None else "n/a"
    _log_print(f"Schedule run {summary.run_id}: {summary.status.value} (method: {method})")
    _log_print(
        f"  shifts={summary.shifts:,} | segments={summary.segments:,} | "
        f"violations={summary.violations:,} | skipped candidates={summary.skipped_candidates:,}"
    )
    _log_print(
        f"\nCoverage {_fmt_float(m.coverage_percent)}% | gap={m.gap_minutes:,} min | "
        f"overstaff={m.overstaff_minutes:,} min | overtime={m.overtime_minutes:,} min | "
        f"cost={m.cost_estimate:,.2f}"
    )

    if not df_shifts.empty:
        _log_print(f"\nFirst shifts (top {num_print_examples}):")
        cols = ["date", "staff_id", "name", "start", "end"]
        _log_print(df_shifts[cols].head(num_print_examples).to_string(index=False))

    if not df_hours.empty:
        hrs = pd.to_numeric(df_hours["hours"], errors="coerce").to_numpy(dtype=float)
        hrs = hrs[~np.isnan(hrs)]
        if hrs.size:
            std = float(np.std(hrs, ddof=1)) if hrs.size > 1 else float("nan")
            _log_print(
                "\nWeekly paid hours across staff-weeks: "
                f"mean={_fmt_float(float(np.mean(hrs)))} | std={_fmt_float(std)} | "
                f"min={_fmt_float(float(np.min(hrs)))} | max={_fmt_float(float(np.max(hrs)))}"
            )
        if max_weekly_hours is not None:
            over = df_hours[df_hours["hours"] > max_weekly_hours]
            if not over.empty:
                _log_print(f"\n⚠️ Staff-weeks over cap {max_weekly_hours:g}h:")
                _log_print(over.to_string(index=False))
            else:
                _log_print(f"\nAll staff-weeks within weekly cap ({max_weekly_hours:g}h).")

    df_cov = coverage_frame(summary.required_minutes, summary.covered_minutes)
    gaps = df_cov[df_cov["gap_minutes"] > 0]
    if gaps.empty:
        _log_print("\nPer-interval gaps: none.")
    else:
        _log_print("\nTop per-interval gaps (agent-minutes):")
        _log_print(
            gaps.sort_values("gap_minutes", ascending=False).head(5).to_string(index=False)
        )

    if not df_violations.empty:
        _log_print("\nViolations by type:")
        for vtype, n in df_violations["violation_type"].value_counts().sort_index().items():
            _log_print(f"  {vtype:<12} {n:>5}")

    _print_hours_histogram(df_hours)


def render_comparison(rows: Iterable[MetricComparison], group_id: str) -> None:
    _log_print(f"\nRun group {group_id}: A vs B")
    _log_print(comparison_frame(rows).to_string(index=False))
