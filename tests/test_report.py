from __future__ import annotations

import os

from sortscope import build_report, run_benchmark
from sortscope.plotting import build_reference_curves, comparisons_figure


def _result():
    return run_benchmark(
        algorithms=["insertion", "merge"],
        sizes=[20, 40, 80],
        distributions=["uniform-random", "reverse-sorted"],
        repetitions=2,
        seed=8,
    )


def test_basic_report(tmp_path):
    out = tmp_path / "t.html"
    result = _result()
    report = build_report(result.records, result.failures, html_out=str(out), title="Test Report")
    assert out.exists()
    assert report.html_path == os.path.abspath(out)
    assert "Test Report" in report.html
    assert "Comparison Counts" in report.html
    assert "Growth Estimates" in report.html
    assert "Validation Failures" not in report.html


def test_report_lists_failures():
    from sortscope import TrialFailure

    failure = TrialFailure("broken", 5, "uniform-random", 0, "output is not a permutation of the input")
    report = build_report(_result().records, [failure])
    assert "Validation Failures" in report.html
    assert "output is not a permutation" in report.html
    assert report.html_path is None


def test_comparisons_figure_has_panel_per_distribution():
    fig = comparisons_figure(_result().records)
    titles = [a.text for a in fig.layout.annotations]
    assert titles == ["uniform-random", "reverse-sorted"]
    legend = {t.name for t in fig.data if t.showlegend}
    assert legend == {"insertion", "merge"}


def test_reference_curves_anchor_at_largest_n():
    curves = build_reference_curves([10, 20, 40], ("n", "n**2"), 100.0)
    assert curves["n"][-1] == 100.0
    assert curves["n**2"][0] == 100.0 * 100 / 1600
