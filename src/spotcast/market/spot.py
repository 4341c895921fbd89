from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

import pandas as pd
import requests

from spotcast.core.hours import to_hour_key, to_hour_start
from spotcast.core.types import SpotPricePoint

logger = logging.getLogger(__name__)

LATEST_PRICES_URL = "https://api.porssisahko.net/v1/latest-prices.json"


@dataclass(frozen=True)
class SpotPriceConfig:
    url: str = LATEST_PRICES_URL
    timeout_s: int = 30


def _safe_float(x) -> float:
    try:
        v = float(x)
        if math.isfinite(v):
            return v
    except (TypeError, ValueError):
        pass
    return float("nan")


def parse_latest_prices(payload: Dict, now: pd.Timestamp) -> List[SpotPricePoint]:
    """
    payload: {"prices": [{"price": .., "startDate": .., "endDate": ..}, ...]}

    Start dates are truncated to the hour. Entries with a bad date or a
    non-finite price are dropped. Output is sorted ascending by time.
    """
    entries = payload.get("prices") if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        return []

    now = pd.Timestamp(now)
    if now.tzinfo is None:
        now = now.tz_localize("UTC")

    rows = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        start = to_hour_start(entry.get("startDate"))
        price = _safe_float(entry.get("price"))
        if start is None or not math.isfinite(price):
            continue
        rows.append((start, price))

    rows.sort(key=lambda r: r[0])
    return [
        SpotPricePoint(timestamp=to_hour_key(start), price=price, is_future=bool(start > now))
        for start, price in rows
    ]


def fetch_finland_spot_prices(
    now: Optional[pd.Timestamp] = None,
    cfg: SpotPriceConfig = SpotPriceConfig(),
) -> List[SpotPricePoint]:
    """Latest Finnish spot prices; [] on any upstream failure."""
    now = pd.Timestamp.now(tz="UTC") if now is None else pd.Timestamp(now)
    try:
        resp = requests.get(cfg.url, timeout=cfg.timeout_s)
        resp.raise_for_status()
        payload = resp.json()
    except requests.RequestException as e:
        logger.error("Spot price request failed: %s", e)
        return []
    except ValueError as e:
        logger.error("Spot price payload is not JSON: %s", e)
        return []

    points = parse_latest_prices(payload, now)
    logger.info("Spot prices: %d hours (%d future)", len(points), sum(p.is_future for p in points))
    return points
