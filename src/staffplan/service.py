from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Optional

from staffplan.erlang.engine import (
    AchievableMetrics,
    EngineResult,
    calculate_achievable,
    calculate_staffing,
)
from staffplan.inputs import DEFAULT_STAFFING_MODEL, CalculationInputs, StaffingModel
from staffplan.validation import FieldError, ValidationResult, validate_calculation_inputs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AbandonmentMetrics:
    abandonment_rate: float
    expected_abandonments: float
    answered_contacts: float
    retrial_probability: Optional[float] = None
    virtual_traffic: Optional[float] = None


@dataclass(frozen=True)
class CalculationServiceResult:
    results: Optional[EngineResult]
    validation: ValidationResult
    achievable_metrics: Optional[AchievableMetrics] = None
    abandonment_metrics: Optional[AbandonmentMetrics] = None

    @property
    def errors(self) -> list[FieldError]:
        return self.validation.errors


def effective_shrinkage(shrinkage_percent: float, productivity_modifier: float) -> float:
    """
    Blend a productivity modifier (1.0 = fully productive) into shrinkage:
    the unproductive share of the remaining time counts as extra shrinkage.
    """
    return 100 - (100 - shrinkage_percent) * productivity_modifier


class StaffingCalculationService:
    """
    Pure front door to the Erlang engine: validates, applies productivity to
    shrinkage, solves for required agents and, when a staffing model is used
    as a constraint, evaluates what the fixed roster can achieve.
    """

    @staticmethod
    def calculate(
        inputs: CalculationInputs,
        staffing_model: StaffingModel = DEFAULT_STAFFING_MODEL,
        productivity_modifier: float = 1.0,
    ) -> CalculationServiceResult:
        validation = validate_calculation_inputs(inputs)
        if not 0 < productivity_modifier <= 1:
            validation = ValidationResult(
                valid=False,
                errors=validation.errors
                + [
                    FieldError(
                        "productivity_modifier",
                        "Productivity modifier must be greater than 0 and at most 1",
                    )
                ],
            )
        if not validation.valid:
            logger.debug(
                "Rejected calculation inputs: %s",
                ", ".join(f"{e.field}: {e.message}" for e in validation.errors),
            )
            return CalculationServiceResult(results=None, validation=validation)

        engine_inputs = replace(
            inputs,
            shrinkage_percent=effective_shrinkage(
                inputs.shrinkage_percent, productivity_modifier
            ),
        )
        results = calculate_staffing(engine_inputs)

        abandonment = None
        if results.abandonment_rate is not None:
            expected = results.expected_abandonments or 0.0
            abandonment = AbandonmentMetrics(
                abandonment_rate=results.abandonment_rate,
                expected_abandonments=expected,
                answered_contacts=inputs.volume - expected,
                retrial_probability=results.retrial_probability,
                virtual_traffic=results.virtual_traffic,
            )

        achievable = None
        productive = staffing_model.productive_agents(inputs.shrinkage_percent)
        if staffing_model.use_as_constraint and productive > 0 and inputs.volume > 0:
            achievable = calculate_achievable(engine_inputs, productive, productive)

        return CalculationServiceResult(
            results=results,
            validation=validation,
            achievable_metrics=achievable,
            abandonment_metrics=abandonment,
        )
