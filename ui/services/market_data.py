"""Market data client — Bitcoin price history from the CoinGecko market-chart API.

Two request shapes:
    1D:     /coins/bitcoin/market_chart/range?vs_currency=usd&from=<s>&to=<s>
    others: /coins/bitcoin/market_chart?vs_currency=usd&days=<N>

Response: {"prices": [[epoch_millis, price], ...]}. No retries; the only
retry path is the user selecting a range again.
"""

import asyncio
import logging
import math
import os
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import aiohttp

from ui.services.price_types import (
    EmptyResultError,
    PricePoint,
    RangeSelection,
    Series,
    TransportError,
)

COINGECKO_BASE_URL = os.environ.get(
    "BTC_CHART_API_BASE", "https://api.coingecko.com/api/v3").rstrip("/")
REQUEST_TIMEOUT_SECONDS = float(os.environ.get("BTC_CHART_TIMEOUT_SECONDS", "15"))
COIN_ID = "bitcoin"
VS_CURRENCY = "usd"

EMPTY_RESULT_MESSAGE = "No price data available, please try again later"
GENERIC_ERROR_MESSAGE = "An unknown error occurred, please try again later"

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------

def day_bounds(now: Optional[datetime] = None) -> Tuple[int, int]:
    """Local-day bounds of *now* as floored epoch seconds.

    Start is 00:00:00.000 and end is 23:59:59.999 in local time.
    """
    now = now or datetime.now()
    start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end = now.replace(hour=23, minute=59, second=59, microsecond=999000)
    return int(start.timestamp()), int(end.timestamp())


def build_request(
    selection: RangeSelection,
    now: Optional[datetime] = None,
    base_url: str = COINGECKO_BASE_URL,
) -> Tuple[str, Dict[str, str]]:
    """Return (url, query params) for the given lookback window."""
    selection = RangeSelection.parse(selection)
    if selection.is_intraday:
        start, end = day_bounds(now)
        url = f"{base_url}/coins/{COIN_ID}/market_chart/range"
        params = {"vs_currency": VS_CURRENCY, "from": str(start), "to": str(end)}
    else:
        url = f"{base_url}/coins/{COIN_ID}/market_chart"
        params = {"vs_currency": VS_CURRENCY, "days": str(selection.days)}
    return url, params


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------

def _is_number(value: Any) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)


def parse_prices(payload: Any) -> Series:
    """Convert a market-chart payload into an ascending Series.

    Raises:
        TransportError: payload is not an object or samples are malformed.
        EmptyResultError: ``prices`` is missing or empty.
    """
    if not isinstance(payload, dict):
        raise TransportError(
            f"Malformed response: expected an object, got {type(payload).__name__}")

    prices = payload.get("prices")
    if prices is None or (isinstance(prices, list) and not prices):
        raise EmptyResultError(EMPTY_RESULT_MESSAGE)
    if not isinstance(prices, list):
        raise TransportError("Malformed response: 'prices' is not a list")

    points = []
    for i, item in enumerate(prices):
        if (not isinstance(item, (list, tuple)) or len(item) < 2
                or not _is_number(item[0]) or not _is_number(item[1])):
            raise TransportError(f"Malformed response: bad sample at index {i}")
        points.append(PricePoint(timestamp_ms=int(item[0]), price=float(item[1])))

    points.sort(key=lambda p: p.timestamp_ms)
    return tuple(points)


def _error_message(exc: BaseException) -> str:
    return str(exc).strip() or GENERIC_ERROR_MESSAGE


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class MarketChartClient:
    """Fetches price series over HTTP with aiohttp.

    A session may be injected (tests, shared app session); otherwise one is
    opened per request.
    """

    def __init__(
        self,
        base_url: str = COINGECKO_BASE_URL,
        timeout_seconds: float = REQUEST_TIMEOUT_SECONDS,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session

    async def fetch_series(
        self, selection: RangeSelection, now: Optional[datetime] = None
    ) -> Series:
        """Fetch the series for *selection*.

        Raises:
            InvalidRangeError: selection is not a known lookback window.
            TransportError: request failed or the payload is malformed.
            EmptyResultError: the payload has no samples.
        """
        selection = RangeSelection.parse(selection)
        url, params = build_request(selection, now=now, base_url=self.base_url)
        logger.debug("Requesting %s %s", url, params)
        payload = await self._get_json(url, params)
        series = parse_prices(payload)
        logger.debug("Received %d samples for %s", len(series), selection.label)
        return series

    async def _get_json(self, url: str, params: Dict[str, str]) -> Any:
        try:
            if self._session is not None:
                return await self._request(self._session, url, params)
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                return await self._request(session, url, params)
        except aiohttp.ClientResponseError as e:
            raise TransportError(
                f"Request failed with status code {e.status}"
                + (f": {e.message}" if e.message else "")) from e
        except (aiohttp.ClientError, ValueError) as e:
            raise TransportError(_error_message(e)) from e
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"Request timed out after {self.timeout.total:g}s") from e

    async def _request(self, session, url: str, params: Dict[str, str]) -> Any:
        async with session.get(url, params=params, timeout=self.timeout) as resp:
            resp.raise_for_status()
            return await resp.json(content_type=None)
