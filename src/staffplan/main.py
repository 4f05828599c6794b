from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Sequence, Type

from staffplan.config import Config, cfg
from staffplan.erlang.engine import EngineResult, calculate_staffing
from staffplan.generate.sample import SAMPLE_PLAN_ID, SAMPLE_RUN_GROUP, build_sample_store
from staffplan.inputs import CalculationInputs
from staffplan.logging_config import configure_from_env
from staffplan.records import Forecast
from staffplan.reporting import Reporter, segments_frame, shifts_frame
from staffplan.scheduling.compare import MetricComparison, compare_run_group
from staffplan.scheduling.coverage import CoverageGenerationResult, generate_coverage_requirements
from staffplan.scheduling.rules import LaborRule, RuleSpec
from staffplan.scheduling.scheduler import ScheduleRunSummary, run_schedule_optimization
from staffplan.store import ScheduleStore

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Structured output of one coverage + A/B scheduling pass."""

    coverage: CoverageGenerationResult
    staffing: EngineResult
    summaries: list[ScheduleRunSummary] = field(default_factory=list)
    comparison: list[MetricComparison] = field(default_factory=list)


def default_base_inputs(store: ScheduleStore, plan_id: int, config: Config) -> CalculationInputs:
    """Erlang inputs for a plan, taking the service target from its campaign."""
    plan = store.get_schedule_plan_by_id(plan_id)
    campaign = store.get_campaign_by_id(plan.campaign_id) if plan else None
    inputs = CalculationInputs(
        aht=config.DEFAULT_AHT_SECONDS,
        interval_minutes=plan.interval_minutes if plan else config.DEFAULT_INTERVAL_MINUTES,
        target_sl_percent=config.DEFAULT_SERVICE_LEVEL_PERCENT,
        threshold_seconds=config.DEFAULT_THRESHOLD_SECONDS,
        shrinkage_percent=config.DEFAULT_SHRINKAGE_PERCENT,
        max_occupancy=config.DEFAULT_MAX_OCCUPANCY_PERCENT,
        average_patience=config.DEFAULT_AVERAGE_PATIENCE_SECONDS,
    )
    if campaign is not None:
        inputs = replace(
            inputs,
            target_sl_percent=campaign.sla_target_percent,
            threshold_seconds=campaign.sla_threshold_seconds,
            concurrency=max(1, campaign.concurrency_allowed),
        )
    return inputs


def _plan_forecasts(store: ScheduleStore, plan_id: int) -> list[Forecast]:
    plan = store.get_schedule_plan_by_id(plan_id)
    if plan is None or plan.scenario_id is None:
        return []
    return store.get_forecasts_by_scenario_and_date_range(
        plan.scenario_id, plan.campaign_id, plan.start_date, plan.end_date
    )


def run_pipeline(
    config: Config | None = None,
    store: ScheduleStore | None = None,
    plan_id: int = SAMPLE_PLAN_ID,
    run_group_id: str = SAMPLE_RUN_GROUP,
    base_inputs: CalculationInputs | None = None,
    reporter: Reporter | None = None,
    validate_config: bool = True,
    enable_reporting: bool = True,
    rules: Sequence[RuleSpec | Type[LaborRule]] | None = None,
) -> PipelineResult:
    """
    Generate coverage for a plan, schedule every run of a run group and
    compare runs A and B.

    Parameters
    ----------
    config:
        The configuration for the run. Defaults to `staffplan.config.cfg`.
    store:
        Store to read from and write to. When omitted a synthetic sample store
        is built with `config.SEED`.
    base_inputs:
        Erlang inputs used for every interval. Defaults to the campaign's
        service target with the config's input defaults.
    reporter:
        Custom reporter. When `enable_reporting` is True and none is given,
        a default `Reporter` is used.
    rules:
        Labor rules for the scheduler. `None` falls back to the library defaults.
    """
    cfg_obj = config or cfg
    if validate_config:
        cfg_obj.validate()

    if store is None:
        store = build_sample_store(seed=cfg_obj.SEED if cfg_obj.SEED is not None else 7)
    inputs = base_inputs or default_base_inputs(store, plan_id, cfg_obj)

    active_reporter = reporter if enable_reporting else None
    if active_reporter is None and enable_reporting:
        active_reporter = Reporter(cfg_obj)

    coverage = generate_coverage_requirements(store, plan_id, inputs)

    # Headline sizing at the mean interval load
    rows = store.get_coverage_requirements(plan_id)
    forecasts = _plan_forecasts(store, plan_id)
    mean_daily = (
        sum(f.forecasted_volume for f in forecasts) / len(forecasts) if forecasts else 0.0
    )
    per_interval = mean_daily / coverage.intervals_per_day if coverage.intervals_per_day else 0.0
    staffing = calculate_staffing(replace(inputs, volume=per_interval))
    if active_reporter is not None:
        active_reporter.staffing(staffing, inputs.target_sl_percent)
    logger.info("Plan %s: %d coverage rows stored.", plan_id, len(rows))

    result = PipelineResult(coverage=coverage, staffing=staffing)
    runs = sorted(store.get_schedule_runs_by_group(run_group_id), key=lambda r: r.label or "")
    for run in runs:
        summary = run_schedule_optimization(
            store, run.id, hourly_rate=cfg_obj.HOURLY_RATE, rules=rules
        )
        result.summaries.append(summary)
        if active_reporter is not None:
            active_reporter.post_run(store, summary)

    result.comparison = compare_run_group(store, run_group_id)
    if active_reporter is not None:
        active_reporter.comparison(store, run_group_id)
    return result


def export_run_frames(
    store: ScheduleStore, summaries: Sequence[ScheduleRunSummary], out_dir: Path
) -> None:
    """Write shifts and segments of each run as CSV."""
    out_dir.mkdir(parents=True, exist_ok=True)
    for summary in summaries:
        df_shifts = shifts_frame(store, summary.run_id)
        if df_shifts.empty:
            continue
        df_shifts.to_csv(out_dir / f"run_{summary.run_id}_shifts.csv", index=False)
        segments_frame(store, summary.run_id).to_csv(
            out_dir / f"run_{summary.run_id}_segments.csv", index=False
        )


def main() -> PipelineResult:
    """CLI entry point: run the sample pipeline and write outputs/."""
    configure_from_env()
    out_dir = Path("outputs")
    store = build_sample_store(seed=cfg.SEED if cfg.SEED is not None else 7)
    result = run_pipeline(
        config=cfg,
        store=store,
        reporter=Reporter(cfg, output_dir=out_dir),
        validate_config=True,
        enable_reporting=True,
    )
    export_run_frames(store, result.summaries, out_dir)
    return result


if __name__ == "__main__":
    main()
