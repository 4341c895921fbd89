from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

TimeLike = Union[str, datetime]


@dataclass(frozen=True)
class WeatherPoint:
    time: TimeLike
    temperature: float
    is_forecast: bool


@dataclass(frozen=True)
class SpotPricePoint:
    timestamp: TimeLike
    price: float
    is_future: bool


@dataclass(frozen=True)
class PricePoint:
    """
    One scored hour. `actual_price` is only set for historical samples with
    a matching market price; it is never filled from a prediction.
    """
    timestamp: str
    actual_price: Optional[float]
    predicted_price: float
    temperature: float
    is_future: bool


@dataclass(frozen=True)
class FoldResult:
    fold: int
    train_size: int
    test_size: int
    mae: float
    rmse: float


@dataclass(frozen=True)
class AggregateMetrics:
    mae: float = 0.0
    rmse: float = 0.0
    r2: float = 0.0


@dataclass(frozen=True)
class ModelRun:
    name: str
    points: Tuple[PricePoint, ...]
    metrics: AggregateMetrics
    cv_results: Tuple[FoldResult, ...]
