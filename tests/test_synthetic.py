from __future__ import annotations

import pandas as pd

from spotcast.core.forecast import generate_price_from_weather
from spotcast.meteo.synthetic import SyntheticWeatherConfig, synthetic_weather_timeline

NOW = pd.Timestamp("2025-01-15T12:00:00Z")


def test_synthetic_timeline_shape() -> None:
    points = synthetic_weather_timeline(now=NOW, seed=3)
    assert len(points) == 48
    assert [p.is_forecast for p in points] == [False] * 24 + [True] * 24
    assert pd.Timestamp(points[0].time) == NOW - pd.Timedelta(hours=24)
    assert pd.Timestamp(points[24].time) == NOW
    assert all(2.0 <= p.temperature < 10.0 for p in points)


def test_synthetic_timeline_is_seeded() -> None:
    assert synthetic_weather_timeline(now=NOW, seed=11) == synthetic_weather_timeline(now=NOW, seed=11)
    assert synthetic_weather_timeline(now=NOW, seed=11) != synthetic_weather_timeline(now=NOW, seed=12)


def test_synthetic_timeline_feeds_the_engine() -> None:
    cfg = SyntheticWeatherConfig(hours=10, history_hours=4)
    weather = synthetic_weather_timeline(now=NOW, cfg=cfg, seed=0)
    points = generate_price_from_weather(weather, [])
    assert len(points) == 10
    assert sum(p.is_future for p in points) == 6
