from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Union

import pandas as pd
import requests

from spotcast.core.types import WeatherPoint

logger = logging.getLogger(__name__)

FMI_WFS_ENDPOINT = "https://opendata.fmi.fi/wfs"
OBSERVATION_QUERY = "fmi::observations::weather::simple"
FORECAST_QUERY = "fmi::forecast::harmonie::surface::point::simple"


@dataclass(frozen=True)
class FmiConfig:
    place: str = "helsinki"
    lookback_hours: int = 24
    lookahead_hours: int = 12
    # Harmonie forecasts do not know 't2m'
    observation_param: str = "t2m"
    forecast_param: str = "Temperature"
    timeout_s: int = 30


def format_fmi_time(ts: pd.Timestamp) -> str:
    """FMI rejects milliseconds: YYYY-MM-DDTHH:MM:SSZ."""
    ts = pd.Timestamp(ts)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert("UTC").strftime("%Y-%m-%dT%H:%M:%SZ")


def _local(tag: str) -> str:
    # "{ns}BsWfsElement" -> "BsWfsElement"
    return tag.rsplit("}", 1)[-1]


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for child in elem:
        if _local(child.tag) == name:
            return child.text
    return None


def parse_simple_features(xml_text: Union[str, bytes], is_forecast: bool) -> List[WeatherPoint]:
    """
    Parse a WFS 'simple' stored-query response into WeatherPoints.

    ExceptionReport responses and malformed XML yield an empty list.
    Values that are missing or NaN are skipped.
    """
    label = "forecast" if is_forecast else "observations"
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        logger.error("FMI %s: unparsable XML (%s)", label, e)
        return []

    if _local(root.tag) == "ExceptionReport":
        texts = [el.text for el in root.iter() if _local(el.tag) == "ExceptionText" and el.text]
        logger.error("FMI API exception (%s): %s", label, texts[0] if texts else "unknown")
        return []

    points: List[WeatherPoint] = []
    for elem in root.iter():
        if _local(elem.tag) != "BsWfsElement":
            continue
        time = _child_text(elem, "Time")
        raw = _child_text(elem, "ParameterValue")
        if not time or raw is None:
            continue
        try:
            value = float(raw.strip())
        except ValueError:
            continue
        if not math.isfinite(value):
            continue
        points.append(WeatherPoint(time=time.strip(), temperature=value, is_forecast=is_forecast))
    return points


def _fetch_query(
    query_id: str,
    parameter: str,
    start: pd.Timestamp,
    end: pd.Timestamp,
    is_forecast: bool,
    cfg: FmiConfig,
) -> List[WeatherPoint]:
    params = {
        "request": "getFeature",
        "storedquery_id": query_id,
        "place": cfg.place,
        "parameters": parameter,
        "starttime": format_fmi_time(start),
        "endtime": format_fmi_time(end),
    }
    try:
        resp = requests.get(FMI_WFS_ENDPOINT, params=params, timeout=cfg.timeout_s)
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error("FMI request failed (%s): %s", query_id, e)
        return []
    return parse_simple_features(resp.content, is_forecast=is_forecast)


def fetch_helsinki_weather_timeline(
    now: Optional[pd.Timestamp] = None,
    cfg: FmiConfig = FmiConfig(),
) -> List[WeatherPoint]:
    """
    Observed temperatures for the last `lookback_hours` followed by the
    Harmonie forecast for the next `lookahead_hours`.

    Both queries run concurrently. A failing query contributes nothing;
    the function never raises for upstream problems and returns [] when
    both are empty.
    """
    now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    start = now - pd.Timedelta(hours=cfg.lookback_hours)
    end = now + pd.Timedelta(hours=cfg.lookahead_hours)

    with ThreadPoolExecutor(max_workers=2) as pool:
        obs_future = pool.submit(_fetch_query, OBSERVATION_QUERY, cfg.observation_param, start, now, False, cfg)
        fc_future = pool.submit(_fetch_query, FORECAST_QUERY, cfg.forecast_param, now, end, True, cfg)
        observations = obs_future.result()
        forecasts = fc_future.result()

    if not observations and not forecasts:
        logger.warning("FMI API returned no data for %s", cfg.place)
        return []

    logger.info("FMI: %d observations, %d forecast points", len(observations), len(forecasts))
    return observations + forecasts
