from __future__ import annotations

import pytest

from staffplan.inputs import CalculationInputs, ErlangModel, ShiftType, StaffingModel
from staffplan.service import StaffingCalculationService, effective_shrinkage


def make_inputs(**overrides) -> CalculationInputs:
    params = dict(
        volume=100,
        aht=240,
        interval_minutes=30,
        target_sl_percent=80,
        threshold_seconds=20,
        shrinkage_percent=0,
        max_occupancy=100,
    )
    params.update(overrides)
    return CalculationInputs(**params)


def test_effective_shrinkage():
    assert effective_shrinkage(25, 1.0) == 25
    assert effective_shrinkage(25, 0.8) == pytest.approx(40)
    assert effective_shrinkage(0, 0.5) == pytest.approx(50)


def test_invalid_inputs_return_errors_not_results():
    out = StaffingCalculationService.calculate(make_inputs(volume=-3))
    assert out.results is None
    assert not out.validation.valid
    assert [e.field for e in out.errors] == ["volume"]


@pytest.mark.parametrize("modifier", [0.0, -0.1, 1.5])
def test_productivity_modifier_out_of_range(modifier):
    out = StaffingCalculationService.calculate(make_inputs(), productivity_modifier=modifier)
    assert out.results is None
    assert out.validation.field_error("productivity_modifier") is not None


def test_productivity_raises_fte():
    full = StaffingCalculationService.calculate(make_inputs()).results
    half = StaffingCalculationService.calculate(make_inputs(), productivity_modifier=0.5).results
    assert half.required_agents == full.required_agents
    assert half.total_fte == pytest.approx(full.total_fte * 2)


def test_abandonment_metrics_for_erlang_a():
    out = StaffingCalculationService.calculate(make_inputs(model=ErlangModel.A, average_patience=120))
    m = out.abandonment_metrics
    assert m is not None
    assert m.expected_abandonments + m.answered_contacts == pytest.approx(100)
    assert StaffingCalculationService.calculate(make_inputs()).abandonment_metrics is None


def test_productive_agents_from_headcount():
    model = StaffingModel(
        total_headcount=50,
        operating_hours_per_day=8,
        days_open_per_week=5,
        shift_types=(ShiftType(hours=8),),
    )
    assert model.productive_agents(0) == 50
    assert model.productive_agents(20) == 40
    assert StaffingModel().productive_agents(0) == 0


def test_productive_agents_round_halves_up():
    split = StaffingModel(
        total_headcount=5,
        operating_hours_per_day=8,
        days_open_per_week=5,
        shift_types=(ShiftType(8, True, 50), ShiftType(8, True, 50)),
        use_as_constraint=True,
    )
    # 2.5 staff per shift type round to 3 each
    assert split.productive_agents(0) == 6

    single = StaffingModel(total_headcount=5, operating_hours_per_day=8)
    assert single.productive_agents(10) == 5


def test_achievable_metrics_only_as_constraint():
    roster = StaffingModel(
        total_headcount=12,
        operating_hours_per_day=8,
        shift_types=(ShiftType(hours=8),),
        use_as_constraint=True,
    )
    out = StaffingCalculationService.calculate(make_inputs(max_occupancy=90), roster)
    assert out.achievable_metrics is not None
    assert out.achievable_metrics.fixed_agents == 12
    assert out.achievable_metrics.occupancy_cap_applied is True

    unused = StaffingModel(total_headcount=12, operating_hours_per_day=8)
    assert StaffingCalculationService.calculate(make_inputs(), unused).achievable_metrics is None

    idle = StaffingCalculationService.calculate(make_inputs(volume=0), roster)
    assert idle.achievable_metrics is None
