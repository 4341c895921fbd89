from __future__ import annotations

import pytest

from spotcast.core.horizon import predict_horizon
from spotcast.core.models import ModelType
from spotcast.core.pipeline import PipelineConfig, hourly_averages, run_models, select_run, summarize_run
from spotcast.core.types import PricePoint


def test_run_models_scores_every_model(weather, spot_prices) -> None:
    runs = run_models(weather, spot_prices)
    assert [r.name for r in runs] == ["Linear Regression", "Random Forest", "Gradient Boosting"]
    for run in runs:
        assert len(run.points) == 48
        # 24 scored hours -> fold_size 4
        assert [f.train_size for f in run.cv_results] == [4, 8, 12, 16]
        assert run.metrics.mae >= 0.0


def test_run_models_respects_config(weather, spot_prices) -> None:
    cfg = PipelineConfig(models=(ModelType.RANDOM_FOREST,))
    runs = run_models(weather, spot_prices, cfg)
    assert [r.name for r in runs] == ["Random Forest"]


def test_select_run(weather, spot_prices) -> None:
    runs = run_models(weather, spot_prices)
    assert select_run(runs, "Random Forest").name == "Random Forest"
    assert select_run(runs, "unknown").name == "Gradient Boosting"
    only_lr = [runs[0]]
    assert select_run(only_lr, "Random Forest").name == "Linear Regression"
    assert select_run([], "Random Forest") is None


def test_hourly_averages_use_historical_actuals() -> None:
    points = [
        PricePoint("2025-01-15T10:00:00.000Z", 40.0, 0.0, 1.0, False),
        PricePoint("2025-01-16T10:00:00.000Z", 50.0, 0.0, 1.0, False),
        PricePoint("2025-01-16T02:00:00.000Z", 10.0, 0.0, 1.0, False),
        PricePoint("2025-01-16T11:00:00.000Z", None, 99.0, 1.0, True),
    ]
    assert hourly_averages(points) == [("02:00", 10.0), ("10:00", 45.0)]


def test_summarize_run(weather, spot_prices) -> None:
    run = select_run(run_models(weather, spot_prices), "Gradient Boosting")
    # first forecast hour is 2025-01-16T00:00Z
    summary = summarize_run(run, now="2025-01-16T00:10:00Z")

    assert summary.current_actual is run.points[23]
    assert summary.current_temp == pytest.approx(10.0)
    assert summary.lead_prediction.timestamp == "2025-01-16T03:00:00.000Z"
    # 10 C -> 5 degrees of demand
    assert summary.horizon_estimate == predict_horizon(run.points[23].actual_price, 10.0)
    assert len(summary.hourly_averages) == 24


def test_summarize_run_rejects_bad_now(weather, spot_prices) -> None:
    run = run_models(weather, spot_prices)[0]
    with pytest.raises(ValueError):
        summarize_run(run, now="yesterday-ish")
