# src/sortscope/utils.py
from __future__ import annotations

import math
from dataclasses import dataclass
from statistics import NormalDist
from typing import Iterable, List, Optional, Tuple

import numpy as np


@dataclass
class CIResult:
    """Mean of a set of timings with a two-sided interval around it."""

    mean: float
    std: float
    n: int
    lower: float
    upper: float
    method: str  # "t" or "bootstrap"


# two-sided 95% Student t critical values by degrees of freedom
_T95 = {
    1: 12.706, 2: 4.303, 3: 3.182, 4: 2.776, 5: 2.571,
    6: 2.447, 7: 2.365, 8: 2.306, 9: 2.262, 10: 2.228,
    11: 2.201, 12: 2.179, 13: 2.160, 14: 2.145, 15: 2.131,
    16: 2.120, 17: 2.110, 18: 2.101, 19: 2.093, 20: 2.086,
    21: 2.080, 22: 2.074, 23: 2.069, 24: 2.064, 25: 2.060,
    26: 2.056, 27: 2.052, 28: 2.048, 29: 2.045, 30: 2.042,
    40: 2.021, 50: 2.009, 60: 2.000,
}

# fixed resampling seed: identical timings always give an identical interval
_BOOTSTRAP_RESAMPLES = 2000
_BOOTSTRAP_SEED = 0


def _critical_value(df: int, confidence: float) -> float:
    if abs(confidence - 0.95) > 1e-9:
        return NormalDist().inv_cdf(0.5 + confidence / 2.0)
    if df in _T95:
        return _T95[df]
    for bound in (40, 50, 60):
        if df <= bound:
            return _T95[bound]
    return 1.96


def _t_bounds(xs: np.ndarray, mean: float, std: float, confidence: float) -> Tuple[float, float]:
    half = _critical_value(xs.size - 1, confidence) * std / math.sqrt(xs.size)
    return mean - half, mean + half


def _bootstrap_bounds(xs: np.ndarray, confidence: float) -> Tuple[float, float]:
    rng = np.random.default_rng(_BOOTSTRAP_SEED)
    means = xs[rng.integers(0, xs.size, size=(_BOOTSTRAP_RESAMPLES, xs.size))].mean(axis=1)
    alpha = (1.0 - confidence) / 2.0
    return float(np.quantile(means, alpha)), float(np.quantile(means, 1.0 - alpha))


def confidence_interval(samples: Iterable[float], method: str = "t", confidence: float = 0.95) -> CIResult:
    """
    Interval for the mean of ``samples``: Student t (``"t"``) or a percentile
    bootstrap (``"bootstrap"``). Fewer than two samples give a zero-width
    interval at the mean.
    """
    if method not in ("t", "bootstrap"):
        raise ValueError("ci_method must be 't' or 'bootstrap'")
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must be between 0 and 1, got {confidence!r}")
    xs = np.asarray([float(x) for x in samples], dtype=float)
    if xs.size == 0:
        nan = float("nan")
        return CIResult(nan, 0.0, 0, nan, nan, method)
    mean = float(np.mean(xs))
    if xs.size == 1:
        return CIResult(mean, 0.0, 1, mean, mean, method)
    std = float(np.std(xs, ddof=1))
    if method == "t":
        lower, upper = _t_bounds(xs, mean, std, confidence)
    else:
        lower, upper = _bootstrap_bounds(xs, confidence)
    return CIResult(mean, std, int(xs.size), lower, upper, method)


def derive_seeds(seed: Optional[int], count: int) -> List[int]:
    """
    Independent per-trial seeds from one root seed. A ``None`` root draws
    fresh OS entropy, so results are only reproducible with a fixed seed.
    """
    ss = np.random.SeedSequence(seed)
    return [int(child.generate_state(1)[0]) for child in ss.spawn(count)]


def human_time(seconds: Optional[float]) -> str:
    if seconds is None or not (isinstance(seconds, (int, float)) and math.isfinite(seconds)):
        return "—"
    if seconds < 1e-6:
        return f"{seconds*1e9:.2f} ns"
    if seconds < 1e-3:
        return f"{seconds*1e6:.2f} µs"
    if seconds < 1.0:
        return f"{seconds*1e3:.2f} ms"
    return f"{seconds:.3f} s"


def human_count(value: Optional[float]) -> str:
    if value is None or not math.isfinite(float(value)):
        return "—"
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.1f}"
