from __future__ import annotations

from staffplan.inputs import CalculationInputs, ErlangModel
from staffplan.validation import is_valid_input, validate_calculation_inputs


def test_defaults_are_valid():
    res = validate_calculation_inputs(CalculationInputs(volume=50))
    assert res.valid
    assert res.errors == []
    assert is_valid_input(CalculationInputs())


def test_collects_every_error():
    res = validate_calculation_inputs(
        CalculationInputs(
            volume=-1,
            aht=0,
            target_sl_percent=120,
            threshold_seconds=0,
            shrinkage_percent=100,
            max_occupancy=40,
            interval_minutes=0,
        )
    )
    assert not res.valid
    fields = {e.field for e in res.errors}
    assert fields == {
        "volume",
        "aht",
        "target_sl_percent",
        "threshold_seconds",
        "shrinkage_percent",
        "max_occupancy",
        "interval_minutes",
    }
    assert res.field_error("volume") == "Volume cannot be negative"
    assert res.field_error("shrinkage_percent") == "Shrinkage cannot be 100% (infinite FTE required)"
    assert res.field_error("concurrency") is None


def test_upper_limits():
    res = validate_calculation_inputs(
        CalculationInputs(volume=200_000, aht=8000, interval_minutes=90, max_occupancy=101)
    )
    assert res.field_error("volume") == "Volume cannot exceed 100,000"
    assert res.field_error("aht") == "AHT cannot exceed 7200 seconds"
    assert res.field_error("interval_minutes") == "Interval cannot exceed 60 minutes"
    assert res.field_error("max_occupancy") == "Max occupancy cannot exceed 100%"


def test_patience_only_checked_for_abandonment_models():
    short = dict(volume=10, average_patience=5)
    assert validate_calculation_inputs(CalculationInputs(model=ErlangModel.C, **short)).valid
    res = validate_calculation_inputs(CalculationInputs(model=ErlangModel.A, **short))
    assert res.field_error("average_patience") == "Average patience must be at least 10 seconds"
    res = validate_calculation_inputs(
        CalculationInputs(model=ErlangModel.X, volume=10, average_patience=4000)
    )
    assert res.field_error("average_patience") == "Average patience cannot exceed 1800 seconds"


def test_concurrency_below_one_rejected():
    res = validate_calculation_inputs(CalculationInputs(volume=10, concurrency=0.5))
    assert res.field_error("concurrency") == "Concurrency must be at least 1"
