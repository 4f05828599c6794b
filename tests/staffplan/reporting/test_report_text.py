from __future__ import annotations

from staffplan.erlang.engine import calculate_staffing
from staffplan.inputs import CalculationInputs, ErlangModel
from staffplan.reporting.text_report import (
    ReportDocument,
    get_active_report,
    render_comparison,
    render_staffing_result,
    set_active_report,
)
from staffplan.scheduling.compare import MetricComparison

CLASSIC = CalculationInputs(
    volume=100, aht=240, interval_minutes=30, target_sl_percent=80, threshold_seconds=20
)


def test_render_staffing_result(capsys):
    render_staffing_result(calculate_staffing(CLASSIC), 80)
    out = capsys.readouterr().out
    assert "Erlang C staffing" in out
    assert "required agents   : 17" in out
    assert "target 80.0%" in out
    assert "abandonment" not in out


def test_render_erlang_a_mentions_abandonment(capsys):
    inputs = CalculationInputs(
        volume=100, aht=240, interval_minutes=30, model=ErlangModel.A, average_patience=120
    )
    render_staffing_result(calculate_staffing(inputs), 80)
    assert "abandonment" in capsys.readouterr().out


def test_render_comparison(capsys):
    rows = [
        MetricComparison("Coverage", "80%", "90%", "+10%"),
        MetricComparison("Cost", "100", "90", "-10"),
    ]
    render_comparison(rows, "g1")
    out = capsys.readouterr().out
    assert "Run group g1: A vs B" in out
    assert "+10%" in out and "-10" in out


def test_active_report_collects_lines(tmp_path, capsys):
    doc = ReportDocument(tmp_path / "report.pdf")
    set_active_report(doc)
    try:
        assert get_active_report() is doc
        render_comparison([MetricComparison("Violations", "3", "1", "-2")], "g1")
    finally:
        set_active_report(None)
    capsys.readouterr()
    assert any("Run group g1" in line for line in doc.lines)
    doc.write()
    assert (tmp_path / "report.pdf").stat().st_size > 0
