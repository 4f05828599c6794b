from staffplan.scheduling.rules.base import Breach, CandidateContext, LaborRule, RuleSpec
from staffplan.scheduling.rules.registry import (
    build_rules,
    default_rule_specs,
    normalize_rule_specs,
)
from staffplan.scheduling.rules.rest import RestRule
from staffplan.scheduling.rules.weekly_cap import WeeklyCapRule

__all__ = [
    "Breach",
    "CandidateContext",
    "LaborRule",
    "RestRule",
    "RuleSpec",
    "WeeklyCapRule",
    "build_rules",
    "default_rule_specs",
    "normalize_rule_specs",
]
