from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from spotcast.core.backtest import BacktestConfig, perform_time_series_cv
from spotcast.core.features import FeatureConfig
from spotcast.core.forecast import ForecastConfig, generate_price_from_weather
from spotcast.core.horizon import nearest_future_point, predict_horizon
from spotcast.core.hours import parse_instant
from spotcast.core.metrics import compute_aggregate_metrics
from spotcast.core.models import DEFAULT_MODEL, ModelType, resolve_model
from spotcast.core.stats import mean, round2
from spotcast.core.types import ModelRun, PricePoint, SpotPricePoint, WeatherPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
    models: Tuple[ModelType, ...] = tuple(ModelType)
    active_model: ModelType = DEFAULT_MODEL

    refresh_interval_s: float = 60.0
    summary_lead_hours: int = 3

    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    features: FeatureConfig = field(default_factory=FeatureConfig)
    backtest: BacktestConfig = field(default_factory=BacktestConfig)


@dataclass(frozen=True)
class RunSummary:
    current_actual: Optional[PricePoint]
    current_temp: float
    lead_prediction: Optional[PricePoint]
    horizon_estimate: Optional[float]
    hourly_averages: Tuple[Tuple[str, float], ...]


def run_model(
    weather: Sequence[WeatherPoint],
    spot_prices: Sequence[SpotPricePoint],
    model_type: ModelType,
    cfg: PipelineConfig = PipelineConfig(),
) -> ModelRun:
    points = generate_price_from_weather(
        weather,
        spot_prices,
        model_type=model_type,
        fc_cfg=cfg.forecast,
        feat_cfg=cfg.features,
    )
    return ModelRun(
        name=model_type.value,
        points=tuple(points),
        metrics=compute_aggregate_metrics(points),
        cv_results=tuple(perform_time_series_cv(points, cfg.backtest)),
    )


def run_models(
    weather: Sequence[WeatherPoint],
    spot_prices: Sequence[SpotPricePoint],
    cfg: PipelineConfig = PipelineConfig(),
) -> List[ModelRun]:
    """Score the same inputs with every configured model."""
    runs = [run_model(weather, spot_prices, m, cfg) for m in cfg.models]
    for run in runs:
        logger.info(
            "%s: points=%d mae=%.2f rmse=%.2f r2=%.2f folds=%d",
            run.name, len(run.points), run.metrics.mae, run.metrics.rmse, run.metrics.r2, len(run.cv_results),
        )
    return runs


def select_run(runs: Sequence[ModelRun], name: object) -> Optional[ModelRun]:
    """Run for `name`; falls back to the last run when no name matches."""
    if not runs:
        return None
    wanted = resolve_model(name).value
    for run in runs:
        if run.name == wanted:
            return run
    return runs[-1]


def hourly_averages(points: Sequence[PricePoint]) -> List[Tuple[str, float]]:
    """Mean actual price per UTC hour label ("HH:00"), sorted by label."""
    grouped: Dict[str, List[float]] = {}
    for p in points:
        if p.is_future or p.actual_price is None:
            continue
        ts = parse_instant(p.timestamp)
        if ts is None:
            continue
        grouped.setdefault(f"{ts.hour:02d}:00", []).append(p.actual_price)
    return [(label, round2(mean(values))) for label, values in sorted(grouped.items())]


def summarize_run(run: ModelRun, now: object = None, cfg: PipelineConfig = PipelineConfig()) -> RunSummary:
    """Headline numbers for one model run at time `now` (default: current UTC time)."""
    now_ts = parse_instant(now) if now is not None else pd.Timestamp.now(tz="UTC")
    if now_ts is None:
        raise ValueError(f"Invalid 'now' timestamp: {now!r}")

    historical = [p for p in run.points if not p.is_future and p.actual_price is not None]
    observed = [p for p in run.points if not p.is_future]

    current_actual = historical[-1] if historical else None
    current_temp = observed[-1].temperature if observed else 0.0
    lead = nearest_future_point(run.points, now_ts + pd.Timedelta(hours=cfg.summary_lead_hours))

    horizon = None
    if current_actual is not None:
        horizon = predict_horizon(current_actual.actual_price, current_temp, cfg.features.comfort_temp)

    return RunSummary(
        current_actual=current_actual,
        current_temp=float(current_temp),
        lead_prediction=lead,
        horizon_estimate=horizon,
        hourly_averages=tuple(hourly_averages(run.points)),
    )
