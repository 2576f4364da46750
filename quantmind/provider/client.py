"""Market Data Provider async client.

Fetches daily price history and the model's horizon-end forecast anchor.
Retries transient failures; anything else surfaces as
``UpstreamUnavailable``.
"""

import asyncio
import logging
from typing import Optional

import httpx

from quantmind.analytics.models import ForecastAnchor, PricePoint
from quantmind.config import Config
from quantmind.errors import UpstreamUnavailable

logger = logging.getLogger("quantmind.provider")

# Retry settings
_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 2.0  # seconds; doubles each attempt
_RETRYABLE_STATUS_CODES = {502, 503, 504, 429}


class MarketDataClient:
    """Async client for the price history / forecast endpoints."""

    def __init__(self, config: Config, retry_base_delay: float = _RETRY_BASE_DELAY) -> None:
        self._config = config
        self._base_url = config.market_data_base_url
        self._retry_base_delay = retry_base_delay
        self._headers = {"Accept": "application/json"}
        if config.market_data_token:
            self._headers["Authorization"] = f"Bearer {config.market_data_token}"

    # ── Retry helper ─────────────────────────────────────────────────────

    async def _get_with_retry(self, url: str, params: dict) -> httpx.Response:
        """GET with exponential-backoff retry.

        Retries on 429/502/503/504 and transport errors.  Other HTTP
        errors and exhausted retries raise ``UpstreamUnavailable``.
        """
        last_error = "no attempts made"

        for attempt in range(_MAX_RETRIES):
            try:
                async with httpx.AsyncClient() as client:
                    resp = await client.get(
                        url,
                        headers=self._headers,
                        params=params,
                        timeout=30.0,
                    )
            except httpx.TransportError as exc:
                last_error = f"transport error ({exc})"
            else:
                if resp.status_code not in _RETRYABLE_STATUS_CODES:
                    try:
                        resp.raise_for_status()
                    except httpx.HTTPStatusError as exc:
                        raise UpstreamUnavailable(
                            f"Market data request failed with status {resp.status_code}"
                        ) from exc
                    return resp
                last_error = f"status {resp.status_code}"

            if attempt + 1 >= _MAX_RETRIES:
                break
            delay = self._retry_base_delay * (2 ** attempt)
            logger.warning(
                "Market data GET %s failed: %s — retry %d/%d in %.1fs",
                url, last_error, attempt + 1, _MAX_RETRIES - 1, delay,
            )
            await asyncio.sleep(delay)

        raise UpstreamUnavailable(
            f"Market data unavailable after {_MAX_RETRIES} attempts: {last_error}"
        )

    @staticmethod
    def _json(resp: httpx.Response) -> dict:
        try:
            data = resp.json()
        except ValueError as exc:
            raise UpstreamUnavailable("Market data response is not valid JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamUnavailable("Market data response is not a JSON object")
        return data

    # ── Endpoints ────────────────────────────────────────────────────────

    async def fetch_history(self, ticker: str, days: Optional[int] = None) -> list[PricePoint]:
        """Fetch daily closes for *ticker*, oldest first.

        Args:
            ticker: Normalised symbol, e.g. ``"NVDA"`` or ``"BTC-USD"``.
            days: Lookback window; defaults to ``Config.history_days``.
        """
        url = f"{self._base_url}/api/price/history"
        params = {"ticker": ticker, "days": days or self._config.history_days}
        data = self._json(await self._get_with_retry(url, params))

        try:
            points = [
                PricePoint(date=str(p["date"]), price=float(p["price"]))
                for p in data["historicalPrices"]
            ]
        except (KeyError, TypeError, ValueError) as exc:
            raise UpstreamUnavailable(f"Malformed price history for {ticker}") from exc
        points.sort(key=lambda p: p.date)
        return points

    async def fetch_forecast_anchor(self, ticker: str, horizon_days: int) -> ForecastAnchor:
        """Fetch the current price and horizon-end target for *ticker*.

        Accepts ``{"currentPrice", "targetPrice"}`` or a ``points`` list,
        in which case the last point is the horizon-end target.
        """
        url = f"{self._base_url}/api/price/forecast"
        params = {"ticker": ticker, "days": horizon_days}
        data = self._json(await self._get_with_retry(url, params))

        try:
            current = float(data["currentPrice"])
            if "targetPrice" in data:
                target = float(data["targetPrice"])
            else:
                points = sorted(data["points"], key=lambda p: p.get("day", 0))
                target = float(points[-1]["price"])
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            raise UpstreamUnavailable(f"Malformed forecast for {ticker}") from exc
        return ForecastAnchor(current_price=current, target_price=target)
