from __future__ import annotations

import logging
from typing import Sequence, Tuple, Type

from staffplan.scheduling.rules.base import LaborRule, RuleSpec
from staffplan.scheduling.rules.rest import RestRule
from staffplan.scheduling.rules.weekly_cap import WeeklyCapRule

logger = logging.getLogger(__name__)

RuleTemplate = Tuple[Type[LaborRule], int, dict[str, float]]

REST_RULE_TEMPLATE: RuleTemplate = (RestRule, 50, {})
WEEKLY_CAP_RULE_TEMPLATE: RuleTemplate = (WeeklyCapRule, 70, {})

_DEFAULT_RULE_TEMPLATES: list[RuleTemplate] = [
    REST_RULE_TEMPLATE,
    WEEKLY_CAP_RULE_TEMPLATE,
]


def default_rule_specs() -> list[RuleSpec]:
    """Return fresh copies of the default rule specifications."""
    return [
        RuleSpec(cls=cls, order=order, settings=dict(settings))
        for cls, order, settings in _DEFAULT_RULE_TEMPLATES
    ]


def normalize_rule_specs(
    rules: Sequence[RuleSpec | Type[LaborRule]] | None,
) -> list[RuleSpec]:
    """Turn user-provided rules into RuleSpec objects."""
    if rules is None:
        return default_rule_specs()

    normalized: list[RuleSpec] = []
    for item in rules:
        if isinstance(item, RuleSpec):
            normalized.append(item)
        elif isinstance(item, type) and issubclass(item, LaborRule):
            normalized.append(RuleSpec(cls=item))
        else:
            raise TypeError(
                "Rules must be RuleSpec instances or LaborRule subclasses; "
                f"got {type(item)!r}"
            )
    return normalized


def build_rules(rules: Sequence[RuleSpec | Type[LaborRule]] | None = None) -> list[LaborRule]:
    """Instantiate enabled rules in evaluation order."""
    built: list[LaborRule] = []
    for spec in normalize_rule_specs(rules):
        if not spec.enabled:
            continue
        rule = spec.cls(**spec.settings)
        if spec.order is not None:
            rule.order = spec.order
        built.append(rule)
    built.sort(key=lambda r: r.order)
    logger.debug("Labor rules: %s", ", ".join(r.name for r in built))
    return built
