from __future__ import annotations

from datetime import date

import matplotlib.pyplot as plt
import pandas as pd

from staffplan.reporting.frames import coverage_frame
from staffplan.reporting.plots import show_required_vs_covered, show_weekly_hours_histogram

D1 = date(2024, 1, 1)


def sample_coverage() -> pd.DataFrame:
    required = {(D1, (540 + 30 * i, 570 + 30 * i), 1): 60 for i in range(4)}
    covered = {k: 30 * (i % 3) for i, k in enumerate(required)}
    return coverage_frame(required, covered)


def test_required_vs_covered_returns_figure_and_saves(tmp_path):
    fig = show_required_vs_covered(sample_coverage(), output_dir=tmp_path)
    try:
        assert isinstance(fig, plt.Figure)
        assert (tmp_path / "required_vs_covered.png").exists()
    finally:
        plt.close(fig)


def test_plots_skip_empty_or_disabled(tmp_path):
    assert show_required_vs_covered(coverage_frame({}, {})) is None
    assert show_required_vs_covered(sample_coverage(), enable_plot=False) is None
    assert show_weekly_hours_histogram(pd.DataFrame(columns=["hours"])) is None
    assert not any(tmp_path.iterdir())


def test_weekly_hours_histogram_with_cap(tmp_path):
    df = pd.DataFrame({"staff_id": [1, 2, 3], "hours": [32.0, 40.0, 48.0]})
    fig = show_weekly_hours_histogram(df, 40, output_dir=tmp_path)
    try:
        assert fig is not None
        assert fig.axes[0].get_legend() is not None
        assert (tmp_path / "weekly_hours.png").exists()
    finally:
        plt.close(fig)
