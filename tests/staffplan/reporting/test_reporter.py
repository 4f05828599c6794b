from __future__ import annotations

from staffplan.config import cfg
from staffplan.generate.sample import SampleConfig, build_sample_store
from staffplan.main import run_pipeline
from staffplan.reporting import Reporter


def small_store(seed: int):
    return build_sample_store(seed, SampleConfig(n_staff=10, days=3))


def test_post_run_writes_pdf_and_charts(tmp_path, seed, capsys):
    store = small_store(seed)
    result = run_pipeline(store=store, enable_reporting=False)
    summary = result.summaries[0]

    Reporter(cfg, output_dir=tmp_path).post_run(store, summary)

    out = capsys.readouterr().out
    assert f"Schedule run {summary.run_id}: Completed" in out
    assert (tmp_path / f"run_{summary.run_id}.pdf").exists()
    assert (tmp_path / "required_vs_covered.png").exists()
    assert (tmp_path / "weekly_hours.png").exists()


def test_reporter_without_plots_writes_nothing(tmp_path, seed, capsys):
    store = small_store(seed)
    result = run_pipeline(store=store, enable_reporting=False)
    reporter = Reporter(cfg, enable_plots=False)
    reporter.post_run(store, result.summaries[1])
    reporter.comparison(store, "sample-ab")
    out = capsys.readouterr().out
    assert "Run group sample-ab: A vs B" in out
    assert not any(tmp_path.iterdir())
