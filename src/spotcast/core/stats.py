from __future__ import annotations

from typing import Iterable

import numpy as np


def mean(values: Iterable[float]) -> float:
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.mean(arr))


def covariance_slope(xs: Iterable[float], ys: Iterable[float]) -> float:
    """
    Least-squares slope of ys against xs:
      sum((x - x_mean) * (y - y_mean)) / sum((x - x_mean) ** 2)

    Returns 0.0 for fewer than 2 paired samples or when xs has no variance.
    """
    x = np.asarray(list(xs), dtype=float)
    y = np.asarray(list(ys), dtype=float)
    n = min(x.size, y.size)
    if n < 2:
        return 0.0
    x = x[:n]
    y = y[:n]

    # identical xs can leave float residue after centering
    if np.ptp(x) == 0:
        return 0.0

    xc = x - np.mean(x)
    denom = float(np.sum(xc * xc))
    if denom == 0:
        return 0.0
    return float(np.sum(xc * (y - np.mean(y))) / denom)


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def round2(value: float) -> float:
    return float(round(float(value), 2))
