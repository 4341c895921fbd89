from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd

from spotcast.core.types import ModelRun, PricePoint, SpotPricePoint, WeatherPoint

logger = logging.getLogger(__name__)

POINT_COLUMNS = ["timestamp", "actual_price", "predicted_price", "temperature", "is_future"]
FOLD_COLUMNS = ["model", "fold", "train_size", "test_size", "mae", "rmse"]
METRIC_COLUMNS = ["model", "mae", "rmse", "r2", "cv_folds"]

_TRUE = {"1", "true", "t", "yes", "y"}


def _to_bool(series: pd.Series) -> pd.Series:
    if series.dtype == bool:
        return series
    return series.astype(str).str.strip().str.lower().isin(_TRUE)


def points_to_frame(points: Iterable[PricePoint]) -> pd.DataFrame:
    rows = [asdict(p) for p in points]
    return pd.DataFrame(rows, columns=POINT_COLUMNS)


def folds_to_frame(runs: Sequence[ModelRun]) -> pd.DataFrame:
    rows = []
    for run in runs:
        for f in run.cv_results:
            rows.append({"model": run.name, **asdict(f)})
    return pd.DataFrame(rows, columns=FOLD_COLUMNS)


def metrics_to_frame(runs: Sequence[ModelRun]) -> pd.DataFrame:
    rows = [
        {
            "model": run.name,
            "mae": run.metrics.mae,
            "rmse": run.metrics.rmse,
            "r2": run.metrics.r2,
            "cv_folds": len(run.cv_results),
        }
        for run in runs
    ]
    return pd.DataFrame(rows, columns=METRIC_COLUMNS)


def validate_weather_frame(df: pd.DataFrame) -> tuple[bool, list]:
    """
    Check a weather table before conversion.
    Returns (ok, errors).
    """
    errors = []
    for col in ["time", "temperature"]:
        if col not in df.columns:
            errors.append(f"Missing column: {col}")
    if errors:
        return False, errors

    times = pd.to_datetime(df["time"], utc=True, errors="coerce")
    if times.isna().any():
        errors.append(f"{int(times.isna().sum())} rows have an unparsable time.")
    temps = pd.to_numeric(df["temperature"], errors="coerce")
    if not np.isfinite(temps.to_numpy(dtype=float)).all():
        errors.append("Some temperature values are missing or non-finite.")

    return len(errors) == 0, errors


def weather_from_frame(df: pd.DataFrame) -> List[WeatherPoint]:
    """Rows with unparsable time or non-finite temperature are dropped."""
    out = df.copy()
    out["time"] = pd.to_datetime(out["time"], utc=True, errors="coerce")
    out["temperature"] = pd.to_numeric(out["temperature"], errors="coerce")
    if "is_forecast" in out.columns:
        out["is_forecast"] = _to_bool(out["is_forecast"])
    else:
        out["is_forecast"] = False
    out = out[out["time"].notna() & np.isfinite(out["temperature"].to_numpy(dtype=float))]

    return [
        WeatherPoint(time=t.isoformat(), temperature=float(temp), is_forecast=bool(fc))
        for t, temp, fc in zip(out["time"], out["temperature"], out["is_forecast"])
    ]


def spot_prices_from_frame(df: pd.DataFrame, now: pd.Timestamp | None = None) -> List[SpotPricePoint]:
    """
    Rows need timestamp, price. Without an is_future column, rows later
    than `now` are flagged as future.
    """
    out = df.copy()
    out["timestamp"] = pd.to_datetime(out["timestamp"], utc=True, errors="coerce")
    out["price"] = pd.to_numeric(out["price"], errors="coerce")
    out = out[out["timestamp"].notna() & np.isfinite(out["price"].to_numpy(dtype=float))]
    out = out.sort_values("timestamp")

    if "is_future" in out.columns:
        future = _to_bool(out["is_future"])
    else:
        now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
        if now.tzinfo is None:
            now = now.tz_localize("UTC")
        future = out["timestamp"] > now

    return [
        SpotPricePoint(timestamp=t.isoformat(), price=float(p), is_future=bool(f))
        for t, p, f in zip(out["timestamp"], out["price"], future)
    ]


def read_weather_csv(path: str | Path) -> List[WeatherPoint]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    df = pd.read_csv(path)
    missing = {"time", "temperature"} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns in weather CSV: {sorted(missing)}")

    ok, errors = validate_weather_frame(df)
    if not ok:
        for err in errors:
            logger.warning("%s: %s Affected rows are dropped.", path.name, err)
    return weather_from_frame(df)


def read_spot_csv(path: str | Path, now: pd.Timestamp | None = None) -> List[SpotPricePoint]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)
    df = pd.read_csv(path)
    missing = {"timestamp", "price"} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns in price CSV: {sorted(missing)}")
    return spot_prices_from_frame(df, now=now)
