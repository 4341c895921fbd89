from __future__ import annotations

import argparse
import logging
import threading
from pathlib import Path

import pandas as pd

from spotcast.core.models import ModelType, is_known_model, resolve_model
from spotcast.core.pipeline import PipelineConfig, summarize_run
from spotcast.io.tables import (
    folds_to_frame,
    metrics_to_frame,
    points_to_frame,
    read_spot_csv,
    read_weather_csv,
)
from spotcast.logging_utils import configure_logging
from spotcast.refresh import RefreshResult, RefreshService

logger = logging.getLogger("spotcast.app")


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Helsinki spot price estimate from FMI weather + Finnish spot prices.")
    p.add_argument("--weather-csv", type=str, default="", help="Offline weather: time,temperature,is_forecast")
    p.add_argument("--prices-csv", type=str, default="", help="Offline prices: timestamp,price[,is_future]")
    p.add_argument(
        "--model",
        type=str,
        default=ModelType.GRADIENT_BOOSTING.value,
        help="Active model: 'Linear Regression', 'Random Forest', 'Gradient Boosting' (or lr/rf/gbr)",
    )
    p.add_argument("--outdir", type=str, default="outputs", help="Output directory")
    p.add_argument("--watch", action="store_true", help="Keep refreshing every --interval seconds")
    p.add_argument("--interval", type=float, default=60.0, help="Refresh interval in seconds (with --watch)")
    p.add_argument("--cycles", type=int, default=0, help="Stop after N cycles with --watch (0 = forever)")
    p.add_argument("--log-level", type=str, default="INFO", help="DEBUG, INFO, WARNING, ...")
    return p.parse_args()


def write_outputs(result: RefreshResult, outdir: Path) -> None:
    outdir.mkdir(parents=True, exist_ok=True)

    for run in result.runs:
        slug = run.name.lower().replace(" ", "_")
        points_to_frame(run.points).to_csv(outdir / f"forecast_{slug}.csv", index=False)
    metrics_to_frame(list(result.runs)).to_csv(outdir / "metrics.csv", index=False)
    folds_to_frame(list(result.runs)).to_csv(outdir / "cv_folds.csv", index=False)

    if result.active is None:
        print("No data to score.")
        return

    summary = summarize_run(result.active)
    print(f"Active model: {result.active.name} (generation {result.generation})")
    for w in result.warnings:
        print(f"WARNING: {w}")
    if summary.current_actual is not None:
        print(f"Current price: {summary.current_actual.actual_price:.2f} @ {summary.current_actual.timestamp}")
    print(f"Current temperature: {summary.current_temp:.1f} C")
    if summary.lead_prediction is not None:
        print(f"+3h prediction: {summary.lead_prediction.predicted_price:.2f} @ {summary.lead_prediction.timestamp}")
    if summary.horizon_estimate is not None:
        print(f"Heuristic horizon estimate: {summary.horizon_estimate:.2f}")
    print(f"Metrics: MAE={result.active.metrics.mae} RMSE={result.active.metrics.rmse} R2={result.active.metrics.r2}")
    print(f"Saved: {outdir / 'metrics.csv'}")
    print(f"Saved: {outdir / 'cv_folds.csv'}")


def main() -> None:
    args = parse_args()
    configure_logging(args.log_level)

    model = resolve_model(args.model)
    if not is_known_model(args.model):
        logger.warning("Unknown model %r, using %s", args.model, model.value)

    cfg = PipelineConfig(active_model=model, refresh_interval_s=float(args.interval))

    weather_source = None
    price_source = None
    if args.weather_csv:
        weather = read_weather_csv(Path(args.weather_csv))
        weather_source = lambda: weather  # noqa: E731
    if args.prices_csv:
        prices = read_spot_csv(Path(args.prices_csv), now=pd.Timestamp.now(tz="UTC"))
        price_source = lambda: prices  # noqa: E731

    service = RefreshService(cfg=cfg, weather_source=weather_source, price_source=price_source)
    outdir = Path(args.outdir)

    if not args.watch:
        result = service.refresh()
        if result is not None:
            write_outputs(result, outdir)
        return

    stop = threading.Event()
    max_cycles = args.cycles if args.cycles > 0 else None

    def cycle_loop() -> None:
        service.run_forever(interval_s=args.interval, stop_event=stop, max_cycles=max_cycles)

    worker = threading.Thread(target=cycle_loop, name="spotcast-refresh", daemon=True)
    worker.start()
    written = None
    try:
        while worker.is_alive():
            worker.join(timeout=1.0)
            latest = service.latest
            if latest is not None and latest is not written:
                written = latest
                write_outputs(latest, outdir)
    except KeyboardInterrupt:
        stop.set()
        worker.join()


if __name__ == "__main__":
    main()
