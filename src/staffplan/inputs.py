from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from staffplan.config import cfg
from staffplan.records import round_half_up


class ErlangModel(str, Enum):
    B = "B"
    C = "C"
    A = "A"
    X = "X"

    @property
    def has_abandonment(self) -> bool:
        return self in (ErlangModel.A, ErlangModel.X)


def normalize_model(model: ErlangModel | str | None) -> ErlangModel:
    """
    Map loose model names ("erlangC", "c", "ErlangX", ...) onto ErlangModel.
    Anything unrecognised falls back to Erlang C.
    """
    if isinstance(model, ErlangModel):
        return model
    if not model:
        return ErlangModel.C
    m = str(model).strip().lower().replace("_", "").replace(" ", "")
    for variant in (ErlangModel.B, ErlangModel.A, ErlangModel.X, ErlangModel.C):
        key = variant.value.lower()
        if m == key or m == f"erlang{key}":
            return variant
    return ErlangModel.C


@dataclass(frozen=True)
class WorkloadInput:
    volume: float
    aht: float
    interval_minutes: float = 30

    @property
    def interval_seconds(self) -> float:
        return self.interval_minutes * 60


@dataclass(frozen=True)
class ServiceConstraints:
    target_sl_percent: float
    threshold_seconds: float
    max_occupancy: float = 90.0


@dataclass(frozen=True)
class BehaviorParams:
    shrinkage_percent: float = 0.0
    average_patience: Optional[float] = None
    concurrency: float = 1.0


@dataclass(frozen=True)
class CalculationInputs:
    """Flat bundle of everything one staffing calculation needs."""

    volume: float = 0.0
    aht: float = cfg.DEFAULT_AHT_SECONDS
    interval_minutes: float = cfg.DEFAULT_INTERVAL_MINUTES
    target_sl_percent: float = cfg.DEFAULT_SERVICE_LEVEL_PERCENT
    threshold_seconds: float = cfg.DEFAULT_THRESHOLD_SECONDS
    shrinkage_percent: float = cfg.DEFAULT_SHRINKAGE_PERCENT
    max_occupancy: float = cfg.DEFAULT_MAX_OCCUPANCY_PERCENT
    model: ErlangModel = ErlangModel.C
    average_patience: Optional[float] = None
    concurrency: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "model", normalize_model(self.model))

    @property
    def workload(self) -> WorkloadInput:
        return WorkloadInput(self.volume, self.aht, self.interval_minutes)

    @property
    def constraints(self) -> ServiceConstraints:
        return ServiceConstraints(
            self.target_sl_percent, self.threshold_seconds, self.max_occupancy
        )

    @property
    def behavior(self) -> BehaviorParams:
        return BehaviorParams(
            self.shrinkage_percent, self.average_patience, self.concurrency
        )


@dataclass(frozen=True)
class ShiftType:
    hours: float
    enabled: bool = True
    proportion: float = 100.0


@dataclass(frozen=True)
class StaffingModel:
    """
    Headcount description used for the "achievable" direction: how well a
    fixed roster performs against the workload.
    """

    total_headcount: int = 0
    operating_hours_per_day: float = 0.0
    days_open_per_week: int = 5
    shift_types: tuple[ShiftType, ...] = field(
        default_factory=lambda: (ShiftType(hours=8, enabled=True, proportion=100),)
    )
    use_as_constraint: bool = False

    # Typical employee works 5 days per week
    STANDARD_WORK_WEEK = 5

    def productive_agents(self, shrinkage_percent: float) -> int:
        """
        Staff on the floor per interval after shrinkage, averaging across the
        enabled shift types weighted by their proportions.
        """
        enabled = [s for s in self.shift_types if s.enabled and s.hours > 0]
        if self.total_headcount <= 0 or not enabled:
            return 0

        total_prop = sum(s.proportion for s in enabled)
        days_open = max(1, self.days_open_per_week)
        available_per_day = self.total_headcount * (self.STANDARD_WORK_WEEK / days_open)

        per_shift = 0.0
        total_staff = 0
        for s in enabled:
            share = s.proportion / total_prop if total_prop > 0 else 1 / len(enabled)
            staff_on_shift = round_half_up(available_per_day * share)
            shifts_needed = self.operating_hours_per_day / s.hours
            total_staff += staff_on_shift
            if shifts_needed > 0:
                per_shift += staff_on_shift / shifts_needed

        staff_per_shift = round_half_up(per_shift) if total_staff > 0 else 0
        return round_half_up(staff_per_shift * (1 - shrinkage_percent / 100))


DEFAULT_STAFFING_MODEL = StaffingModel()
