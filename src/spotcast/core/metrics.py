from __future__ import annotations

from typing import Iterable

import numpy as np

from spotcast.core.stats import round2
from spotcast.core.types import AggregateMetrics, PricePoint


def _finite_pairs(y_true: np.ndarray, y_pred: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    m = np.isfinite(y_true) & np.isfinite(y_pred)
    return y_true[m], y_pred[m]


def rmse(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    yt, yp = _finite_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    return float(np.sqrt(np.mean((yp - yt) ** 2)))


def mae(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    yt, yp = _finite_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    return float(np.mean(np.abs(yp - yt)))


def r2(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """
    Coefficient of determination against the slice's own mean.
    A constant (or single) actual series has no variance: returns 0.0.
    """
    yt, yp = _finite_pairs(y_true, y_pred)
    if yt.size == 0:
        return float("nan")
    denom = float(np.sum((yt - np.mean(yt)) ** 2))
    if denom == 0:
        return 0.0
    return float(1 - np.sum((yt - yp) ** 2) / denom)


def compute_fold_metrics(points: Iterable[PricePoint]) -> AggregateMetrics:
    """Unrounded MAE / RMSE / R2 over the points that carry an actual price."""
    scored = [p for p in points if p.actual_price is not None]
    if not scored:
        return AggregateMetrics(mae=0.0, rmse=0.0, r2=0.0)

    actual = np.asarray([p.actual_price for p in scored], dtype=float)
    predicted = np.asarray([p.predicted_price for p in scored], dtype=float)
    return AggregateMetrics(
        mae=mae(actual, predicted),
        rmse=rmse(actual, predicted),
        r2=r2(actual, predicted),
    )


def compute_aggregate_metrics(points: Iterable[PricePoint]) -> AggregateMetrics:
    historical = [p for p in points if p.actual_price is not None and not p.is_future]
    m = compute_fold_metrics(historical)
    return AggregateMetrics(mae=round2(m.mae), rmse=round2(m.rmse), r2=round2(m.r2))
