# src/sortscope/report.py
from __future__ import annotations

import importlib.resources as pkg_resources
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import plotly.io as pio
from jinja2 import BaseLoader, Environment
from markupsafe import Markup, escape

from .algorithms import ALGORITHMS
from .analyze import TrialFailure, TrialRecord, summarize
from .complexity import estimate_growth, scaling_summary
from .errors import OutputError
from .plotting import comparisons_figure, runtime_figure
from .utils import human_count, human_time


def load_template_text() -> str:
    """Load the Jinja2 report template shipped inside the package."""
    return pkg_resources.files("sortscope").joinpath("templates").joinpath("report.html.j2").read_text(encoding="utf-8")


def fig_to_div(fig) -> str:
    # plotly.js comes from the CDN script tag in the template
    return pio.to_html(fig, include_plotlyjs=False, full_html=False, default_width="100%")


@dataclass
class Report:
    html: str
    html_path: Optional[str]
    title: str

    def _repr_html_(self) -> str:  # Jupyter-friendly
        return self.html


def build_report(
    records: Sequence[TrialRecord],
    failures: Sequence[TrialFailure] = (),
    title: str = "Sorting Benchmark Report",
    notes: Optional[str] = None,
    html_out: Optional[str] = None,
    ci_method: str = "t",
    confidence: float = 0.95,
    reference_curves: tuple = ("n", "nlogn", "n**2"),
    verbose: bool = False,
) -> Report:
    """
    Render summary tables, growth estimates and plotly figures for a set of
    trial records into a standalone HTML page.
    """
    summary_rows: List[Dict[str, Any]] = []
    for s in summarize(records, ci_method=ci_method, confidence=confidence):
        summary_rows.append({
            "algorithm": s.algorithm,
            "n": s.n,
            "distribution": s.distribution,
            "trials": s.trials,
            "comparisons": human_count(s.comparisons_mean),
            "time": s.time_ci,
        })

    growth_rows = []
    for g in estimate_growth(records):
        algo = ALGORITHMS.get(g.algorithm)
        growth_rows.append({
            "algorithm": g.algorithm,
            "distribution": g.distribution,
            "exponent": "—" if g.exponent is None else f"{g.exponent:.2f}",
            "family": g.family,
            "expected": algo.time_big_o if algo else "—",
            "stable": ("yes" if algo.stable else "no") if algo else "—",
            "summary": scaling_summary(g.doubling_ratio),
        })

    comparisons_div = fig_to_div(comparisons_figure(records, reference_curves=reference_curves)) if records else ""
    runtime_div = fig_to_div(runtime_figure(records)) if records else ""

    env = Environment(loader=BaseLoader(), autoescape=True)
    env.filters["human_time"] = human_time
    tpl = env.from_string(load_template_text())

    methods_text = (
        f"Runtime measured with time.perf_counter() around the sort call only; "
        f"input generation and validation happen outside the timed window. "
        f"Confidence intervals: {ci_method.upper()} at {int(100 * confidence)}%."
    )

    html_path = os.path.abspath(html_out) if html_out else None
    html = tpl.render(
        title=title,
        notes=escape(notes) if notes else None,
        methods_text=methods_text,
        summary_rows=summary_rows,
        growth_rows=growth_rows,
        failures=[str(f) for f in failures],
        comparisons_div=Markup(comparisons_div),
        runtime_div=Markup(runtime_div),
        total_trials=len(records),
        html_path=html_path,
    )

    if html_out:
        try:
            with open(html_out, "w", encoding="utf-8") as f:
                f.write(html)
        except OSError as e:
            raise OutputError(f"cannot write report to {html_out}: {e}") from e
        if verbose:
            print(f"✅ Report saved to: {html_path}")

    return Report(html=html, html_path=html_path, title=title)
