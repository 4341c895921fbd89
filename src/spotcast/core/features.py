from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from spotcast.core.stats import clamp, covariance_slope, mean


@dataclass(frozen=True)
class FeatureConfig:
    """
    Weather-driven feature family for hourly spot prices.
    Heating demand is degrees below the comfort temperature.
    """
    comfort_temp: float = 15.0
    beta_bounds: Tuple[float, float] = (-2.5, 6.0)


def heating_demand(temperature: float, comfort_temp: float = 15.0) -> float:
    return max(0.0, comfort_temp - float(temperature))


def estimate_temperature_beta(
    pairs: Iterable[Tuple[float, float]],
    cfg: FeatureConfig = FeatureConfig(),
) -> float:
    """
    Price sensitivity (EUR/MWh per degree of heating demand).

    pairs: (temperature, price) observations.
    Slope is clamped to cfg.beta_bounds so thin or noisy windows
    cannot extrapolate wildly.
    """
    pairs = list(pairs)
    demand = [heating_demand(t, cfg.comfort_temp) for t, _ in pairs]
    prices = [float(p) for _, p in pairs]

    beta = covariance_slope(demand, prices)
    lower, upper = cfg.beta_bounds
    return float(clamp(beta, lower, upper))


def build_hourly_profile(pairs: Iterable[Tuple[int, float]]) -> Dict[int, float]:
    """
    Mean price per UTC hour of day from (hour, price) pairs.

    Always returns 24 slots. Empty hours are 0.0, so callers must
    substitute their own fallback instead of reading 0 as a price.
    """
    grouped: Dict[int, List[float]] = {h: [] for h in range(24)}
    for hour, price in pairs:
        grouped[int(hour) % 24].append(float(price))
    return {h: mean(values) for h, values in grouped.items()}
