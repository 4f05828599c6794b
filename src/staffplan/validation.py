from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from staffplan.config import cfg
from staffplan.inputs import CalculationInputs, ErlangModel


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[FieldError] = field(default_factory=list)

    def field_error(self, name: str) -> Optional[str]:
        """First message recorded against `name`, if any."""
        for err in self.errors:
            if err.field == name:
                return err.message
        return None


def validate_calculation_inputs(inputs: CalculationInputs) -> ValidationResult:
    """
    Range-check a calculation bundle. Never raises; every problem found is
    returned as a FieldError so callers can surface them all at once.
    """
    limits = cfg.LIMITS
    errors: list[FieldError] = []

    def add(name: str, message: str) -> None:
        errors.append(FieldError(name, message))

    lo, hi = limits["volume"]
    if inputs.volume < lo:
        add("volume", "Volume cannot be negative")
    if inputs.volume > hi:
        add("volume", f"Volume cannot exceed {hi:,}")

    lo, hi = limits["aht"]
    if inputs.aht < lo:
        add("aht", f"AHT must be at least {lo} second")
    if inputs.aht > hi:
        add("aht", f"AHT cannot exceed {hi} seconds")

    lo, hi = limits["target_sl_percent"]
    if inputs.target_sl_percent < lo:
        add("target_sl_percent", "Service level cannot be negative")
    if inputs.target_sl_percent > hi:
        add("target_sl_percent", f"Service level cannot exceed {hi}%")

    lo, hi = limits["threshold_seconds"]
    if inputs.threshold_seconds < lo:
        add("threshold_seconds", f"Threshold must be at least {lo} second")
    if inputs.threshold_seconds > hi:
        add("threshold_seconds", f"Threshold cannot exceed {hi} seconds")

    if inputs.shrinkage_percent < limits["shrinkage_percent"][0]:
        add("shrinkage_percent", "Shrinkage cannot be negative")
    if inputs.shrinkage_percent >= 100:
        add("shrinkage_percent", "Shrinkage cannot be 100% (infinite FTE required)")

    lo, hi = limits["max_occupancy"]
    if inputs.max_occupancy < lo:
        add("max_occupancy", f"Max occupancy must be at least {lo}%")
    if inputs.max_occupancy > hi:
        add("max_occupancy", f"Max occupancy cannot exceed {hi}%")

    if inputs.model is not ErlangModel.C and inputs.average_patience is not None:
        lo, hi = limits["average_patience"]
        if inputs.average_patience < lo:
            add("average_patience", f"Average patience must be at least {lo} seconds")
        if inputs.average_patience > hi:
            add("average_patience", f"Average patience cannot exceed {hi} seconds")

    lo, hi = limits["interval_minutes"]
    if inputs.interval_minutes <= lo:
        add("interval_minutes", "Interval must be positive")
    if inputs.interval_minutes > hi:
        add("interval_minutes", f"Interval cannot exceed {hi} minutes")

    if inputs.concurrency < 1:
        add("concurrency", "Concurrency must be at least 1")

    return ValidationResult(valid=not errors, errors=errors)


def is_valid_input(inputs: CalculationInputs) -> bool:
    return validate_calculation_inputs(inputs).valid
