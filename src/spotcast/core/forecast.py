from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd

from spotcast.core.features import (
    FeatureConfig,
    build_hourly_profile,
    estimate_temperature_beta,
    heating_demand,
)
from spotcast.core.hours import hour_key, hour_of_day, parse_instant, shift_hour_key, to_hour_key
from spotcast.core.models import ModelType, get_weights
from spotcast.core.stats import clamp, mean, round2
from spotcast.core.types import PricePoint, SpotPricePoint, WeatherPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForecastConfig:
    price_floor: float = -20.0
    price_cap: float = 450.0
    fallback_mean: float = 30.0  # used when no historical price matched


@dataclass
class _LagState:
    """Realized prices by hour key plus the running previous price, for one call only."""
    prev_price: float
    history: Dict[str, float] = field(default_factory=dict)

    def lookup(self, key: str, fallback: float) -> float:
        return self.history.get(key, fallback)

    def record(self, key: Optional[str], realized: float) -> None:
        if key:
            self.history[key] = realized
        self.prev_price = realized


def _safe_float(x: object) -> float:
    try:
        return float(x)
    except (TypeError, ValueError):
        return float("nan")


def build_market_price_map(spot_prices: Iterable[SpotPricePoint]) -> Dict[str, float]:
    """
    Hour key -> price. Later entries for the same hour overwrite earlier ones.
    Entries with an invalid timestamp or non-finite price are skipped.
    """
    out: Dict[str, float] = {}
    for point in spot_prices:
        key = to_hour_key(point.timestamp)
        price = _safe_float(point.price)
        if key and math.isfinite(price):
            out[key] = price
    return out


def _sort_weather(weather: Sequence[WeatherPoint]) -> List[Tuple[WeatherPoint, Optional[pd.Timestamp]]]:
    """Chronological order; samples with unparsable time go last, ordered by raw text."""
    parsed = [(obs, parse_instant(obs.time)) for obs in weather]

    def sort_key(item: Tuple[WeatherPoint, Optional[pd.Timestamp]]) -> Tuple[int, int, str]:
        obs, ts = item
        if ts is None:
            return (1, 0, str(obs.time))
        return (0, int(ts.value), "")

    return sorted(parsed, key=sort_key)


def generate_price_from_weather(
    weather: Sequence[WeatherPoint],
    spot_prices: Sequence[SpotPricePoint] = (),
    model_type: Union[str, ModelType] = ModelType.GRADIENT_BOOSTING,
    fc_cfg: ForecastConfig = ForecastConfig(),
    feat_cfg: FeatureConfig = FeatureConfig(),
) -> List[PricePoint]:
    """
    Lag-aware linear blend of short-term lag, day-over-day lag, hour-of-day
    mean, global mean and centered heating demand.

    Returns one PricePoint per weather sample, in chronological order.
    Lag state is fed with the actual price when known, else with the
    prediction, so forecast hours chain off each other.
    """
    if not weather:
        return []

    ordered = _sort_weather(weather)
    market = build_market_price_map(spot_prices)

    # Training pairs: historical samples that have a market price at their hour
    pairs: List[Tuple[pd.Timestamp, float, float]] = []
    for obs, ts in ordered:
        if obs.is_forecast or ts is None:
            continue
        price = market.get(hour_key(ts.floor("h")))
        if price is None:
            continue
        pairs.append((ts.floor("h"), float(obs.temperature), price))

    global_mean = mean(p for _, _, p in pairs) or fc_cfg.fallback_mean
    hourly_profile = build_hourly_profile((hour_of_day(ts), p) for ts, _, p in pairs)
    avg_demand = mean(heating_demand(t, feat_cfg.comfort_temp) for _, t, _ in pairs)
    temp_beta = estimate_temperature_beta(((t, p) for _, t, p in pairs), feat_cfg)

    w = get_weights(model_type)
    logger.debug(
        "generate_price_from_weather: model=%s samples=%d pairs=%d mean=%.2f beta=%.3f",
        model_type, len(ordered), len(pairs), global_mean, temp_beta,
    )

    state = _LagState(prev_price=global_mean)
    results: List[PricePoint] = []

    for obs, ts in ordered:
        temperature = float(obs.temperature)
        centered_demand = heating_demand(temperature, feat_cfg.comfort_temp) - avg_demand

        if ts is not None:
            hour_ts = ts.floor("h")
            key = hour_key(hour_ts)
            lag1 = state.lookup(shift_hour_key(key, -1), state.prev_price)
            lag24 = state.lookup(shift_hour_key(key, -24), global_mean)
            profile_value = hourly_profile.get(hour_of_day(hour_ts), 0.0)
        else:
            key = None
            lag1 = state.prev_price
            lag24 = global_mean
            profile_value = 0.0

        hour_mean = profile_value if math.isfinite(profile_value) and profile_value > 0 else global_mean

        predicted_raw = (
            w.lag1 * lag1
            + w.lag24 * lag24
            + w.hour * hour_mean
            + w.mean * global_mean
            + w.temp * temp_beta * centered_demand
        )
        predicted = round2(clamp(predicted_raw, fc_cfg.price_floor, fc_cfg.price_cap))

        market_price = market.get(key) if key else None
        actual = round2(market_price) if (not obs.is_forecast and market_price is not None) else None

        state.record(key, actual if actual is not None else predicted)

        results.append(
            PricePoint(
                timestamp=key or str(obs.time),
                actual_price=actual,
                predicted_price=predicted,
                temperature=temperature,
                is_future=bool(obs.is_forecast),
            )
        )

    return results
