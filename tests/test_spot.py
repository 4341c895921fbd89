from __future__ import annotations

from unittest.mock import Mock, patch

import pandas as pd
import requests

from spotcast.market.spot import LATEST_PRICES_URL, fetch_finland_spot_prices, parse_latest_prices

NOW = pd.Timestamp("2025-01-15T12:30:00Z")

PAYLOAD = {
    "prices": [
        {"price": 4.5, "startDate": "2025-01-15T13:00:00.000Z", "endDate": "2025-01-15T14:00:00.000Z"},
        {"price": 3.25, "startDate": "2025-01-15T11:15:00.000Z", "endDate": "2025-01-15T11:30:00.000Z"},
        {"price": "n/a", "startDate": "2025-01-15T10:00:00.000Z", "endDate": "2025-01-15T11:00:00.000Z"},
        {"price": 2.0, "startDate": "not a date", "endDate": ""},
        {"price": 2.75, "startDate": "2025-01-15T12:00:00.000Z", "endDate": "2025-01-15T13:00:00.000Z"},
    ]
}


def test_parse_latest_prices_filters_truncates_and_sorts() -> None:
    points = parse_latest_prices(PAYLOAD, NOW)
    assert [(p.timestamp, p.price, p.is_future) for p in points] == [
        ("2025-01-15T11:00:00.000Z", 3.25, False),
        ("2025-01-15T12:00:00.000Z", 2.75, False),
        ("2025-01-15T13:00:00.000Z", 4.5, True),
    ]


def test_parse_latest_prices_odd_payloads() -> None:
    assert parse_latest_prices({}, NOW) == []
    assert parse_latest_prices({"prices": None}, NOW) == []
    assert parse_latest_prices([], NOW) == []
    assert parse_latest_prices({"prices": ["x", {"price": float("inf"), "startDate": "2025-01-15T10:00Z"}]}, NOW) == []


def test_fetch_uses_latest_prices_endpoint() -> None:
    resp = Mock()
    resp.raise_for_status = Mock()
    resp.json = Mock(return_value=PAYLOAD)
    with patch("spotcast.market.spot.requests.get", return_value=resp) as get:
        points = fetch_finland_spot_prices(now=NOW)
    assert get.call_args.args[0] == LATEST_PRICES_URL
    assert len(points) == 3


def test_fetch_failures_return_empty() -> None:
    bad_status = Mock()
    bad_status.raise_for_status = Mock(side_effect=requests.HTTPError("500"))

    not_json = Mock()
    not_json.raise_for_status = Mock()
    not_json.json = Mock(side_effect=ValueError("Expecting value"))

    for outcome in (bad_status, not_json):
        with patch("spotcast.market.spot.requests.get", return_value=outcome):
            assert fetch_finland_spot_prices(now=NOW) == []

    with patch("spotcast.market.spot.requests.get", side_effect=requests.ConnectionError("offline")):
        assert fetch_finland_spot_prices(now=NOW) == []
