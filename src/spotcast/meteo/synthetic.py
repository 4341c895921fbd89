from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import pandas as pd

from spotcast.core.types import WeatherPoint


@dataclass(frozen=True)
class SyntheticWeatherConfig:
    hours: int = 48
    history_hours: int = 24
    temp_low: float = 2.0
    temp_high: float = 10.0


def synthetic_weather_timeline(
    now: Optional[pd.Timestamp] = None,
    cfg: SyntheticWeatherConfig = SyntheticWeatherConfig(),
    seed: Optional[int] = None,
) -> List[WeatherPoint]:
    """
    Stand-in timeline when FMI is unreachable: hourly samples from
    now - history_hours, the first history_hours observed, the rest forecast.
    Temperatures are uniform in [temp_low, temp_high).
    """
    now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    if now.tzinfo is None:
        now = now.tz_localize("UTC")

    rng = np.random.default_rng(seed)
    temps = rng.uniform(cfg.temp_low, cfg.temp_high, size=cfg.hours)

    out: List[WeatherPoint] = []
    for i in range(cfg.hours):
        ts = now - pd.Timedelta(hours=cfg.history_hours - i)
        out.append(
            WeatherPoint(
                time=ts.tz_convert("UTC").isoformat(),
                temperature=float(temps[i]),
                is_forecast=i >= cfg.history_hours,
            )
        )
    return out
