from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import pandas as pd

from spotcast.core.models import ModelType, resolve_model
from spotcast.core.pipeline import PipelineConfig, run_models, select_run
from spotcast.core.types import ModelRun, SpotPricePoint, WeatherPoint
from spotcast.market.spot import fetch_finland_spot_prices
from spotcast.meteo.fmi import fetch_helsinki_weather_timeline
from spotcast.meteo.synthetic import synthetic_weather_timeline

logger = logging.getLogger(__name__)

WeatherSource = Callable[[], List[WeatherPoint]]
PriceSource = Callable[[], List[SpotPricePoint]]

PRICE_FEED_WARNING = "Spot price API unavailable; showing weather-driven estimates."
WEATHER_FEED_WARNING = "FMI weather unavailable; using synthetic weather."


@dataclass(frozen=True)
class RefreshResult:
    generation: int
    inputs_generation: int
    runs: Tuple[ModelRun, ...]
    active: Optional[ModelRun]
    warnings: Tuple[str, ...]
    synthetic_weather: bool
    completed_at: pd.Timestamp


@dataclass(frozen=True)
class _Inputs:
    generation: int
    weather: Tuple[WeatherPoint, ...]
    spot_prices: Tuple[SpotPricePoint, ...]
    warnings: Tuple[str, ...]
    synthetic_weather: bool


class RefreshService:
    """
    Fetch + score cycle for all models.

    - refresh() is single-flight: while one fetch is running, further
      calls return None without fetching.
    - select_model() rescores the last fetched inputs, no fetch.
    - Every cycle takes a generation number when it starts. Results are
      ranked by (inputs_generation, generation): fresher inputs always win,
      and among results over the same inputs the latest started one wins.
    """

    def __init__(
        self,
        cfg: PipelineConfig = PipelineConfig(),
        weather_source: Optional[WeatherSource] = None,
        price_source: Optional[PriceSource] = None,
        fallback_weather: Optional[WeatherSource] = None,
    ) -> None:
        self.cfg = cfg
        self._weather_source = weather_source or fetch_helsinki_weather_timeline
        self._price_source = price_source or fetch_finland_spot_prices
        self._fallback_weather = fallback_weather or synthetic_weather_timeline

        self._flight = threading.Lock()
        self._lock = threading.Lock()
        self._generation = 0
        self._active_model: ModelType = resolve_model(cfg.active_model)
        self._inputs: Optional[_Inputs] = None
        self._published: Optional[RefreshResult] = None

    @property
    def latest(self) -> Optional[RefreshResult]:
        with self._lock:
            return self._published

    @property
    def active_model(self) -> ModelType:
        with self._lock:
            return self._active_model

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _fetch_inputs(self, generation: int) -> _Inputs:
        with ThreadPoolExecutor(max_workers=2) as pool:
            weather_future = pool.submit(self._weather_source)
            price_future = pool.submit(self._price_source)
            weather = list(weather_future.result())
            prices = list(price_future.result())

        warnings: List[str] = []
        synthetic = False
        if not weather:
            weather = list(self._fallback_weather())
            synthetic = True
            warnings.append(WEATHER_FEED_WARNING)
        if not prices:
            warnings.append(PRICE_FEED_WARNING)

        return _Inputs(
            generation=generation,
            weather=tuple(weather),
            spot_prices=tuple(prices),
            warnings=tuple(warnings),
            synthetic_weather=synthetic,
        )

    def _score(self, generation: int, inputs: _Inputs, model: ModelType) -> RefreshResult:
        runs = run_models(inputs.weather, inputs.spot_prices, self.cfg)
        return RefreshResult(
            generation=generation,
            inputs_generation=inputs.generation,
            runs=tuple(runs),
            active=select_run(runs, model),
            warnings=inputs.warnings,
            synthetic_weather=inputs.synthetic_weather,
            completed_at=pd.Timestamp.now(tz="UTC"),
        )

    def _publish(self, result: RefreshResult) -> bool:
        rank = (result.inputs_generation, result.generation)
        with self._lock:
            current = self._published
            if current is not None and rank <= (current.inputs_generation, current.generation):
                logger.info(
                    "Dropping stale result (inputs %d, generation %d)",
                    result.inputs_generation, result.generation,
                )
                return False
            self._published = result
            return True

    def _remember(self, inputs: _Inputs) -> None:
        with self._lock:
            if self._inputs is None or inputs.generation > self._inputs.generation:
                self._inputs = inputs

    def refresh(self) -> Optional[RefreshResult]:
        if not self._flight.acquire(blocking=False):
            logger.info("Refresh already in flight; skipped")
            return None
        try:
            generation = self._next_generation()
            inputs = self._fetch_inputs(generation)
            self._remember(inputs)
            for w in inputs.warnings:
                logger.warning(w)

            result = self._score(generation, inputs, self.active_model)
            self._publish(result)
            return result
        finally:
            self._flight.release()

    def select_model(self, name: object) -> Optional[RefreshResult]:
        """Switch the active model and rescore the last fetched inputs."""
        model = resolve_model(name)
        with self._lock:
            self._active_model = model
            inputs = self._inputs
        if inputs is None:
            return None

        result = self._score(self._next_generation(), inputs, model)
        self._publish(result)
        return result

    def run_forever(
        self,
        interval_s: Optional[float] = None,
        stop_event: Optional[threading.Event] = None,
        max_cycles: Optional[int] = None,
    ) -> None:
        interval = self.cfg.refresh_interval_s if interval_s is None else float(interval_s)
        stop = stop_event or threading.Event()
        cycles = 0
        while not stop.is_set():
            self.refresh()
            cycles += 1
            if max_cycles is not None and cycles >= max_cycles:
                break
            stop.wait(interval)
