from __future__ import annotations

from typing import List

import pandas as pd
import pytest

from spotcast.core.types import SpotPricePoint, WeatherPoint

BASE = pd.Timestamp("2025-01-15T00:00:00Z")


def hour(i: int) -> str:
    return (BASE + pd.Timedelta(hours=i)).strftime("%Y-%m-%dT%H:%M:%SZ")


def ramp_weather() -> List[WeatherPoint]:
    """24 observed hours warming 2 -> 10 C, then 24 forecast hours cooling 10 -> 2 C."""
    out = []
    for i in range(24):
        out.append(WeatherPoint(time=hour(i), temperature=2.0 + 8.0 * i / 23, is_forecast=False))
    for i in range(24):
        out.append(WeatherPoint(time=hour(24 + i), temperature=10.0 - 8.0 * i / 23, is_forecast=True))
    return out


def history_prices() -> List[SpotPricePoint]:
    return [
        SpotPricePoint(timestamp=hour(i), price=40.0 + 3.0 * (i % 6) - 0.5 * i, is_future=False)
        for i in range(24)
    ]


@pytest.fixture()
def weather() -> List[WeatherPoint]:
    return ramp_weather()


@pytest.fixture()
def spot_prices() -> List[SpotPricePoint]:
    return history_prices()
