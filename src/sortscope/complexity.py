# src/sortscope/complexity.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .analyze import TrialRecord


@dataclass
class GrowthEstimate:
    algorithm: str
    distribution: str
    ns: List[int]
    values: List[float]
    exponent: Optional[float]
    family: str
    doubling_ratio: Optional[float]


def growth_ratios(ns: Sequence[int], values: Sequence[float], per_doubling: bool = False) -> List[float]:
    """
    ``values[i+1] / values[i]`` for consecutive points with positive, finite
    values. With ``per_doubling`` each ratio is rescaled to what a doubling of
    n would give, so uneven size steps stay comparable.
    """
    ratios = []
    for i in range(len(ns) - 1):
        a, b = values[i], values[i + 1]
        if ns[i] > 0 and a > 0 and math.isfinite(a) and math.isfinite(b):
            r = b / a
            if per_doubling:
                r = r ** (math.log(2) / math.log(ns[i + 1] / ns[i]))
            ratios.append(r)
    return ratios


def empirical_exponent(ns: Sequence[int], values: Sequence[float]) -> Optional[float]:
    """Slope of log(value) against log(n); None with fewer than two usable points."""
    xs = np.asarray(ns, dtype=float)
    ys = np.asarray(values, dtype=float)
    mask = np.isfinite(ys) & (ys > 0) & (xs > 0)
    if mask.sum() < 2 or np.unique(xs[mask]).size < 2:
        return None
    slope, _ = np.polyfit(np.log(xs[mask]), np.log(ys[mask]), 1)
    return float(slope)


def classify_exponent(exponent: Optional[float]) -> str:
    if exponent is None:
        return "unknown"
    if exponent < 0.3:
        return "O(1)"
    if exponent < 0.8:
        return "O(log n)"
    if exponent < 1.05:
        return "O(n)"
    if exponent < 1.5:
        return "O(n log n)"
    if exponent < 2.5:
        return "O(n^2)"
    return "super-quadratic"


def scaling_summary(doubling_ratio: Optional[float]) -> str:
    if doubling_ratio is None:
        return "Not enough data to estimate scaling when n doubles."
    if doubling_ratio < 1.5:
        trend = "closer to O(log n)"
    elif doubling_ratio < 2.15:
        trend = "closer to O(n)"
    elif doubling_ratio < 3.0:
        trend = "closest to O(n log n)"
    else:
        trend = "quadratic or worse"
    return (
        f"When n doubles, the comparison count grows by about {doubling_ratio:.2f}x, "
        f"which is {trend}."
    )


def estimate_growth(records: Sequence[TrialRecord], metric: str = "comparisons") -> List[GrowthEstimate]:
    """
    Fit the growth of ``metric`` ("comparisons" or "time") against n for every
    (algorithm, distribution) pair, averaging repetitions first.
    """
    if metric not in ("comparisons", "time"):
        raise ValueError("metric must be 'comparisons' or 'time'")

    buckets: Dict[Tuple[str, str], Dict[int, List[float]]] = {}
    for r in records:
        buckets.setdefault((r.algorithm, r.distribution), {}).setdefault(r.n, []).append(float(getattr(r, metric)))

    out: List[GrowthEstimate] = []
    for (algorithm, distribution), by_n in buckets.items():
        ns = sorted(by_n)
        means = [float(np.mean(by_n[n])) for n in ns]
        exponent = empirical_exponent(ns, means)
        steps = growth_ratios(ns, means, per_doubling=True)
        doubling = float(np.mean(steps)) if steps else None
        out.append(GrowthEstimate(
            algorithm=algorithm,
            distribution=distribution,
            ns=ns,
            values=means,
            exponent=exponent,
            family=classify_exponent(exponent),
            doubling_ratio=doubling,
        ))
    return out
