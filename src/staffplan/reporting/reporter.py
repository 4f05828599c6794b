from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import matplotlib.pyplot as plt

from staffplan.erlang.engine import EngineResult
from staffplan.reporting.frames import (
    coverage_frame,
    shifts_frame,
    violations_frame,
    weekly_hours_frame,
)
from staffplan.reporting.plots import show_required_vs_covered, show_weekly_hours_histogram
from staffplan.reporting.text_report import (
    ReportDocument,
    render_comparison,
    render_run_report,
    render_staffing_result,
    set_active_report,
)
from staffplan.scheduling.compare import compare_run_group
from staffplan.scheduling.scheduler import ScheduleRunSummary
from staffplan.store import ScheduleStore


class Reporter:
    """Renders text (and optional chart/PDF) reports for calculations and schedule runs."""

    def __init__(
        self,
        cfg: Any,
        num_print_examples: int = 6,
        enable_plots: bool = True,
        output_dir: Optional[Path] = None,
    ) -> None:
        """
        When `output_dir` is set, charts are saved there and each run report is
        also written to ``<output_dir>/run_<id>.pdf``.
        """
        self.cfg = cfg
        self.num_print_examples = num_print_examples
        self.enable_plots = enable_plots
        self.output_dir = output_dir

    def staffing(self, result: EngineResult, target_sl_percent: float) -> None:
        render_staffing_result(result, target_sl_percent)

    def post_run(self, store: ScheduleStore, summary: ScheduleRunSummary) -> None:
        """Render the report of a finished schedule run."""
        run = store.get_schedule_run_by_id(summary.run_id)
        plan = store.get_schedule_plan_by_id(run.schedule_plan_id) if run else None
        templates = {t.id: t for t in store.get_shift_templates()}

        df_shifts = shifts_frame(store, summary.run_id)
        paid = 0
        if not df_shifts.empty:
            template = templates.get(int(df_shifts["template_id"].iloc[0]))
            paid = template.paid_minutes if template else 0
        df_hours = weekly_hours_frame(df_shifts, paid)
        cap = plan.max_weekly_hours if plan else None

        doc = ReportDocument(self.output_dir / f"run_{summary.run_id}.pdf") if self.output_dir else None
        set_active_report(doc)
        try:
            render_run_report(
                summary,
                df_shifts,
                violations_frame(store, summary.run_id),
                df_hours,
                cap,
                num_print_examples=self.num_print_examples,
            )
            if self.enable_plots:
                figs = [
                    show_required_vs_covered(
                        coverage_frame(summary.required_minutes, summary.covered_minutes),
                        output_dir=self.output_dir,
                    ),
                    show_weekly_hours_histogram(df_hours, cap, output_dir=self.output_dir),
                ]
                if doc is None:
                    for fig in figs:
                        if fig is not None:
                            plt.close(fig)
        finally:
            set_active_report(None)
            if doc is not None:
                doc.write()

    def comparison(self, store: ScheduleStore, run_group_id: str) -> None:
        render_comparison(compare_run_group(store, run_group_id), run_group_id)
