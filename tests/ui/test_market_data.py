"""Market data client: request shapes, payload parsing and error translation."""

import asyncio
import os
import sys
from datetime import datetime

import aiohttp
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from ui.services.market_data import (
    EMPTY_RESULT_MESSAGE,
    GENERIC_ERROR_MESSAGE,
    MarketChartClient,
    build_request,
    day_bounds,
    parse_prices,
)
from ui.services.price_types import (
    EmptyResultError,
    InvalidRangeError,
    PricePoint,
    RangeSelection,
    TransportError,
)

BASE = "https://example.test/api/v3"
NOW = datetime(2024, 6, 15, 15, 30, 12)


# ---------------------------------------------------------------------------
# Fake aiohttp session
# ---------------------------------------------------------------------------

class _FakeResponse:
    def __init__(self, payload=None, status=200, json_error=None):
        self.payload = payload
        self.status = status
        self.json_error = json_error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status >= 400:
            raise aiohttp.ClientResponseError(
                None, (), status=self.status, message="Too Many Requests")

    async def json(self, content_type="application/json"):
        if self.json_error:
            raise self.json_error
        return self.payload


class _FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params))
        if self.error:
            raise self.error
        return self.response


def _fetch(session, selection="7"):
    client = MarketChartClient(base_url=BASE, session=session)
    return asyncio.run(client.fetch_series(selection, now=NOW))


# ---------------------------------------------------------------------------
# Range parsing
# ---------------------------------------------------------------------------

class TestRangeSelection:
    def test_parse_value_label_and_int(self):
        assert RangeSelection.parse("7") is RangeSelection.SEVEN_DAYS
        assert RangeSelection.parse("7D") is RangeSelection.SEVEN_DAYS
        assert RangeSelection.parse("1y") is RangeSelection.ONE_YEAR
        assert RangeSelection.parse(180) is RangeSelection.HALF_YEAR
        assert RangeSelection.parse(RangeSelection.ONE_DAY) is RangeSelection.ONE_DAY

    @pytest.mark.parametrize("bad", ["2", "", "30d ago", None, 3.5, True, 0])
    def test_unknown_values_rejected(self, bad):
        with pytest.raises(InvalidRangeError):
            RangeSelection.parse(bad)

    def test_labels(self):
        assert [r.label for r in RangeSelection] == [
            "1D", "7D", "14D", "30D", "90D", "180D", "1Y"]


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

class TestBuildRequest:
    def test_day_bounds_cover_local_day(self):
        start, end = day_bounds(NOW)
        assert start == int(datetime(2024, 6, 15).timestamp())
        assert end == int(datetime(2024, 6, 15, 23, 59, 59, 999000).timestamp())
        assert end - start == 86399

    def test_intraday_uses_range_endpoint(self):
        url, params = build_request(RangeSelection.ONE_DAY, now=NOW, base_url=BASE)
        start, end = day_bounds(NOW)
        assert url == f"{BASE}/coins/bitcoin/market_chart/range"
        assert params == {"vs_currency": "usd", "from": str(start), "to": str(end)}

    @pytest.mark.parametrize("selection,days", [
        ("7", "7"), ("14", "14"), ("30", "30"), ("90", "90"),
        ("180", "180"), ("365", "365"),
    ])
    def test_trailing_window(self, selection, days):
        url, params = build_request(selection, now=NOW, base_url=BASE)
        assert url == f"{BASE}/coins/bitcoin/market_chart"
        assert params == {"vs_currency": "usd", "days": days}

    def test_invalid_selection(self):
        with pytest.raises(InvalidRangeError):
            build_request("3", base_url=BASE)


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------

class TestParsePrices:
    def test_pairs_become_points(self):
        series = parse_prices({"prices": [[1000, 100], [2000, 110.5]]})
        assert series == (PricePoint(1000, 100.0), PricePoint(2000, 110.5))

    def test_sorted_ascending(self):
        series = parse_prices({"prices": [[3000, 3], [1000, 1], [2000, 2]]})
        assert [p.timestamp_ms for p in series] == [1000, 2000, 3000]

    def test_empty_prices(self):
        with pytest.raises(EmptyResultError, match=EMPTY_RESULT_MESSAGE):
            parse_prices({"prices": []})

    def test_missing_prices(self):
        with pytest.raises(EmptyResultError):
            parse_prices({"market_caps": [[1000, 1]]})

    @pytest.mark.parametrize("payload", [
        [],
        "oops",
        {"prices": "nope"},
        {"prices": [[1000]]},
        {"prices": [["1000", 100]]},
        {"prices": [[1000, None]]},
        {"prices": [[1000, True]]},
        {"prices": [[float("inf"), 100]]},
        {"prices": [[float("nan"), 100]]},
        {"prices": [[1000, float("nan")], [2000, 5]]},
        {"prices": [[1000, float("-inf")]]},
    ])
    def test_malformed(self, payload):
        with pytest.raises(TransportError):
            parse_prices(payload)


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class TestClient:
    def test_success(self):
        session = _FakeSession(_FakeResponse({"prices": [[1000, 100], [2000, 110]]}))
        series = _fetch(session, "7")
        assert [p.price for p in series] == [100.0, 110.0]
        assert session.calls == [(f"{BASE}/coins/bitcoin/market_chart",
                                  {"vs_currency": "usd", "days": "7"})]

    def test_intraday_request(self):
        session = _FakeSession(_FakeResponse({"prices": [[1000, 100]]}))
        _fetch(session, RangeSelection.ONE_DAY)
        url, params = session.calls[0]
        assert url.endswith("/market_chart/range")
        assert set(params) == {"vs_currency", "from", "to"}

    def test_empty_payload(self):
        session = _FakeSession(_FakeResponse({"prices": []}))
        with pytest.raises(EmptyResultError):
            _fetch(session)

    def test_http_error_status(self):
        session = _FakeSession(_FakeResponse(status=429))
        with pytest.raises(TransportError, match="429"):
            _fetch(session)

    def test_network_error_message_kept(self):
        session = _FakeSession(error=aiohttp.ClientConnectionError("connection refused"))
        with pytest.raises(TransportError, match="connection refused"):
            _fetch(session)

    def test_network_error_without_message_uses_generic(self):
        session = _FakeSession(error=aiohttp.ClientConnectionError())
        with pytest.raises(TransportError) as excinfo:
            _fetch(session)
        assert str(excinfo.value) == GENERIC_ERROR_MESSAGE

    def test_overflowing_timestamp_is_transport_error(self):
        # JSON decodes 1e400 to inf
        session = _FakeSession(_FakeResponse({"prices": [[1e400, 100]]}))
        with pytest.raises(TransportError, match="bad sample"):
            _fetch(session)

    def test_undecodable_json(self):
        session = _FakeSession(_FakeResponse(json_error=ValueError("Expecting value")))
        with pytest.raises(TransportError, match="Expecting value"):
            _fetch(session)

    def test_timeout(self):
        session = _FakeSession(error=asyncio.TimeoutError())
        with pytest.raises(TransportError, match="timed out"):
            _fetch(session)
