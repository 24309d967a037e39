# src/sortscope/plotting.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .analyze import TrialRecord, summarize

PALETTE = [
    '#4285f4',
    '#ea4335',
    '#34a853',
    '#fbbc04',
    '#9c27b0',
    '#00bcd4',
    '#ff9800',
    '#795548',
]


def _reference_funcs():
    return {
        "1": lambda n: np.ones_like(n, dtype=float),
        "logn": lambda n: np.log2(np.maximum(n, 2)),
        "n": lambda n: n.astype(float),
        "nlogn": lambda n: n.astype(float) * np.log2(np.maximum(n, 2)),
        "n**2": lambda n: n.astype(float) ** 2,
    }


def build_reference_curves(
    ns: Sequence[int],
    ref_specs: Tuple[str, ...],
    y_anchor: float,
) -> Dict[str, np.ndarray]:
    """
    name -> reference curve over ``ns``, scaled so its value at the largest n
    equals ``y_anchor``.
    """
    n_arr = np.array(ns, dtype=float)
    funcs = _reference_funcs()
    if not np.isfinite(y_anchor) or y_anchor <= 0:
        y_anchor = 1.0

    curves = {}
    for spec in ref_specs:
        if spec not in funcs:
            raise ValueError(f"unknown reference curve {spec!r}; choose from {', '.join(funcs)}")
        raw = np.maximum(funcs[spec](n_arr), 1e-12)
        curves[spec] = raw * (y_anchor / raw[-1]) if raw.size else raw
    return curves


def _colors(algorithms: Sequence[str]) -> Dict[str, str]:
    return {a: PALETTE[i % len(PALETTE)] for i, a in enumerate(algorithms)}


def _ordered(values) -> List:
    seen: Dict = {}
    for v in values:
        seen.setdefault(v, None)
    return list(seen)


def _metric_figure(
    records: Sequence[TrialRecord],
    metric: str,
    title: str,
    y_title: str,
    log_y: bool,
    reference_curves: Tuple[str, ...],
) -> go.Figure:
    algorithms = _ordered(r.algorithm for r in records)
    distributions = _ordered(r.distribution for r in records) or [""]
    colors = _colors(algorithms)
    summaries = summarize(records)

    fig = make_subplots(
        rows=1,
        cols=len(distributions),
        subplot_titles=[d or "all" for d in distributions],
        shared_yaxes=True,
    )
    for col, dist in enumerate(distributions, start=1):
        for algo in algorithms:
            points = [r for r in records if r.algorithm == algo and r.distribution == dist]
            if not points:
                continue
            cells = sorted(
                (s for s in summaries if s.algorithm == algo and s.distribution == dist),
                key=lambda s: s.n,
            )
            xs = [s.n for s in cells]
            if metric == "comparisons":
                ys = [s.comparisons_mean for s in cells]
            else:
                ys = [s.time_ci.mean for s in cells]
            fig.add_trace(go.Scatter(
                x=[r.n for r in points],
                y=[getattr(r, metric) for r in points],
                mode="markers",
                marker=dict(size=6, color=colors[algo], opacity=0.45),
                name=algo,
                legendgroup=algo,
                showlegend=False,
                hoverinfo="skip",
            ), row=1, col=col)
            fig.add_trace(go.Scatter(
                x=xs,
                y=ys,
                mode="lines+markers",
                line=dict(width=3, color=colors[algo]),
                marker=dict(size=8, color=colors[algo], line=dict(width=2, color='white')),
                name=algo,
                legendgroup=algo,
                showlegend=(col == 1),
                hovertemplate=f"<b>{algo}</b><br>n: %{{x}}<br>{y_title}: %{{y}}<extra></extra>",
            ), row=1, col=col)

        if reference_curves:
            ns = sorted({r.n for r in records if r.distribution == dist})
            if ns:
                anchor = max(
                    (getattr(r, metric) for r in records if r.distribution == dist and r.n == ns[-1]),
                    default=1.0,
                )
                for rname, ry in build_reference_curves(ns, reference_curves, float(anchor)).items():
                    fig.add_trace(go.Scatter(
                        x=ns, y=ry, mode="lines", name=f"O({rname})",
                        line=dict(dash="dot", width=2, color='#94a3b8'),
                        legendgroup=f"ref-{rname}",
                        showlegend=(col == 1),
                        opacity=0.7,
                    ), row=1, col=col)

    fig.update_layout(
        title=dict(text=title, x=0.5),
        template="plotly_white",
        hovermode="closest",
        legend=dict(orientation="h", yanchor="bottom", y=1.08, xanchor="left", x=0.01),
        height=550,
        margin=dict(l=80, r=40, t=120, b=80),
    )
    fig.update_xaxes(title_text="Input Size (n)")
    fig.update_yaxes(title_text=y_title, row=1, col=1)
    if log_y:
        fig.update_yaxes(type="log")
    return fig


def comparisons_figure(
    records: Sequence[TrialRecord],
    title: str = "Comparisons by input size",
    log_y: bool = False,
    reference_curves: Tuple[str, ...] = (),
) -> go.Figure:
    """Comparison counts against n, one colour per algorithm, one panel per distribution."""
    return _metric_figure(records, "comparisons", title, "Comparisons", log_y, reference_curves)


def runtime_figure(
    records: Sequence[TrialRecord],
    title: str = "Runtime by input size",
    log_y: bool = True,
    reference_curves: Tuple[str, ...] = (),
) -> go.Figure:
    return _metric_figure(records, "time", title, "Time (seconds)", log_y, reference_curves)


def save_figure(fig: go.Figure, out_path: str, include_plotlyjs: Optional[str] = "cdn") -> None:
    fig.write_html(out_path, include_plotlyjs=include_plotlyjs, full_html=True)
