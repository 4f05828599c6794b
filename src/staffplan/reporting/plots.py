from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd

from staffplan.records import format_minutes

from .text_report import get_active_report


def _save_and_show(
    fig: plt.Figure, filename: str, output_dir: Path | None, show: bool
) -> None:
    """Persist the plot (when an output dir is given) and optionally show it."""
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_dir / filename, dpi=fig.dpi, bbox_inches="tight")
    if show:
        plt.show()


def show_required_vs_covered(
    df_coverage: pd.DataFrame,
    *,
    enable_plot: bool = True,
    output_dir: Path | None = None,
    show: bool = False,
) -> Optional[plt.Figure]:
    """
    Average required vs covered agents per interval of the day, one line pair
    per skill. Input is a coverage frame (agent-minutes per date/interval/skill).
    """
    if not enable_plot or df_coverage.empty:
        return None

    df = df_coverage.copy()
    duration = (df["interval_end"] - df["interval_start"]).where(lambda s: s > 0, 1)
    df["required_agents"] = df["required_minutes"] / duration
    df["covered_agents"] = df["covered_minutes"] / duration
    avg = (
        df.groupby(["skill_id", "interval_start"])[["required_agents", "covered_agents"]]
        .mean()
        .reset_index()
    )

    fig, ax = plt.subplots(figsize=(7.5, 4), dpi=150)
    ax.set_title("Required vs covered agents by interval (mean over dates)")
    cmap = plt.get_cmap("tab10")
    for i, (skill_id, grp) in enumerate(avg.groupby("skill_id")):
        color = cmap(i % cmap.N)
        x = grp["interval_start"].to_numpy()
        ax.step(x, grp["required_agents"], where="post", color=color, linestyle="--",
                linewidth=1, label=f"skill {skill_id} required")
        ax.bar(x, grp["covered_agents"], width=(x[1] - x[0]) * 0.9 if len(x) > 1 else 20,
               align="edge", color=color, alpha=0.35, label=f"skill {skill_id} covered")

    ticks = sorted(avg["interval_start"].unique())
    step = max(1, len(ticks) // 9)
    ax.set_xticks(ticks[::step])
    ax.set_xticklabels([format_minutes(t) for t in ticks[::step]], fontsize=7)
    ax.set_ylabel("agents")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.legend(fontsize=6, frameon=False, ncol=2)
    fig.tight_layout()

    report = get_active_report()
    if report is not None:
        report.add_figure(fig)
    _save_and_show(fig, "required_vs_covered.png", output_dir, show)
    return fig


def show_weekly_hours_histogram(
    df_hours: pd.DataFrame,
    max_weekly_hours: float | None = None,
    *,
    enable_plot: bool = True,
    output_dir: Path | None = None,
    show: bool = False,
) -> Optional[plt.Figure]:
    if not enable_plot or df_hours.empty:
        return None

    fig, ax = plt.subplots(figsize=(6, 3.5), dpi=150)
    ax.hist(pd.to_numeric(df_hours["hours"]), bins=10, color="#4c72b0", alpha=0.8)
    if max_weekly_hours is not None:
        ax.axvline(max_weekly_hours, color="black", linewidth=1, linestyle=":",
                   label=f"cap {max_weekly_hours:g}h")
        ax.legend(frameon=False, fontsize=7)
    ax.set_title("Paid hours per staff-week")
    ax.set_xlabel("hours")
    ax.set_ylabel("staff-weeks")
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    fig.tight_layout()

    report = get_active_report()
    if report is not None:
        report.add_figure(fig)
    _save_and_show(fig, "weekly_hours.png", output_dir, show)
    return fig
