from __future__ import annotations

import math
from datetime import date, datetime
from numbers import Real
from typing import Optional

import numpy as np
import pandas as pd

# Same shape as a JS Date.toISOString() at the top of an hour.
HOUR_KEY_FORMAT = "%Y-%m-%dT%H:00:00.000Z"


def parse_instant(value: object) -> Optional[pd.Timestamp]:
    """
    Parse a timestamp-like value into a tz-aware UTC Timestamp.
    Naive inputs are read as UTC, plain numbers as epoch milliseconds.
    Returns None when unparsable.
    """
    if isinstance(value, Real) and not isinstance(value, bool):
        if not math.isfinite(float(value)):
            return None
        try:
            return pd.to_datetime(value, unit="ms", utc=True)
        except (TypeError, ValueError, OverflowError):
            return None
    if not isinstance(value, (str, datetime, date, np.datetime64)):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    try:
        ts = pd.to_datetime(value, utc=True, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts


def to_hour_start(value: object) -> Optional[pd.Timestamp]:
    ts = parse_instant(value)
    if ts is None:
        return None
    return ts.floor("h")


def hour_key(ts: pd.Timestamp) -> str:
    """Render an already floored UTC timestamp as the canonical hour key."""
    return ts.strftime(HOUR_KEY_FORMAT)


def to_hour_key(value: object) -> str:
    """
    Canonical hour-bucket key for joining independently sampled series.
    Empty string marks an invalid input.
    """
    ts = to_hour_start(value)
    if ts is None:
        return ""
    return hour_key(ts)


def shift_hour_key(key: str, hours: int) -> str:
    ts = to_hour_start(key)
    if ts is None:
        return ""
    return hour_key(ts + pd.Timedelta(hours=int(hours)))


def hour_of_day(value: object) -> Optional[int]:
    ts = to_hour_start(value)
    if ts is None:
        return None
    return int(ts.hour)
