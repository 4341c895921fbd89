from __future__ import annotations

from typing import Iterable, Optional

from spotcast.core.features import heating_demand
from spotcast.core.hours import parse_instant
from spotcast.core.stats import round2
from spotcast.core.types import PricePoint

HORIZON_DEMAND_SENSITIVITY = 0.35


def predict_horizon(current_price: float, current_temp: float, comfort_temp: float = 15.0) -> float:
    """
    One-step heuristic: current price plus 0.35 per degree of heating demand.
    Independent of the weighted models.
    """
    demand = heating_demand(current_temp, comfort_temp)
    return round2(float(current_price) + demand * HORIZON_DEMAND_SENSITIVITY)


def nearest_future_point(points: Iterable[PricePoint], target: object) -> Optional[PricePoint]:
    """Future point closest in time to `target`; the first one seen wins ties."""
    target_ts = parse_instant(target)
    if target_ts is None:
        return None

    best: Optional[PricePoint] = None
    best_diff = None
    for p in points:
        if not p.is_future:
            continue
        ts = parse_instant(p.timestamp)
        if ts is None:
            continue
        diff = abs((ts - target_ts).total_seconds())
        if best_diff is None or diff < best_diff:
            best, best_diff = p, diff
    return best
