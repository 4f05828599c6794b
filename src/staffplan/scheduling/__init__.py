from staffplan.scheduling.compare import (
    MetricComparison,
    RunGroup,
    compare_run_group,
    find_comparison_group,
    group_runs,
)
from staffplan.scheduling.coverage import (
    CoverageGenerationResult,
    generate_coverage_requirements,
    intraday_pattern,
)
from staffplan.scheduling.methods import CandidateRanking, ConstraintPolicy, SchedulingMethod
from staffplan.scheduling.scheduler import ScheduleRunSummary, run_schedule_optimization

__all__ = [
    "CandidateRanking",
    "ConstraintPolicy",
    "CoverageGenerationResult",
    "MetricComparison",
    "RunGroup",
    "ScheduleRunSummary",
    "SchedulingMethod",
    "compare_run_group",
    "find_comparison_group",
    "generate_coverage_requirements",
    "group_runs",
    "intraday_pattern",
    "run_schedule_optimization",
]
