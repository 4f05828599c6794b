# src/staffplan/scheduling/rules/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional, Type

from staffplan.records import SchedulePlan, ViolationType


@dataclass(frozen=True)
class CandidateContext:
    """What a rule can see about one prospective shift."""

    staff_id: int
    shift_date: date
    plan: SchedulePlan
    rest_gap_hours: Optional[float]
    projected_weekly_minutes: int


@dataclass(frozen=True)
class Breach:
    rule: str
    violation_type: ViolationType
    details: str


@dataclass
class RuleSpec:
    cls: Type["LaborRule"]
    order: int | None = None
    enabled: bool = True
    settings: dict[str, Any] = field(default_factory=dict)


class LaborRule(ABC):
    order: int = 100
    enabled: bool = True
    name: str = "Rule"

    def __init__(self, **settings: Any) -> None:
        self._settings: dict[str, Any] = settings

    @abstractmethod
    def check(self, ctx: CandidateContext) -> Optional[Breach]:
        """Return a Breach when assigning the candidate would break the rule."""

    # Helper for subclasses to read optional settings
    def setting(self, key: str, default: Any) -> Any:
        return self._settings.get(key, default)
