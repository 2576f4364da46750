"""PredictionService — turns a ticker search into a PredictionBundle.

Each search or horizon change is tagged with the (ticker, horizon) it was
issued for plus a sequence number.  Only the most recently issued request
may publish its result; late responses for superseded requests are
discarded.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from quantmind.analytics.assets import normalize_ticker
from quantmind.analytics.bundle import build_prediction_bundle, with_horizon
from quantmind.analytics.forecast import validate_horizon
from quantmind.analytics.models import AssetClass, ForecastAnchor, PredictionBundle
from quantmind.config import Config
from quantmind.errors import InvalidParameter, UpstreamUnavailable
from quantmind.provider.client import MarketDataClient

logger = logging.getLogger("quantmind.service")


@dataclass(frozen=True)
class RequestTag:
    """Identifies one issued request."""

    ticker: str
    horizon_days: int
    sequence: int


class PredictionService:
    """Orchestrates provider fetches and bundle derivation.

    Args:
        config: Global ``Config``.
        client: A ``MarketDataClient`` (or duck-type for tests).
    """

    def __init__(self, config: Config, client: MarketDataClient) -> None:
        self._config = config
        self._client = client
        self._sequence = 0
        self._latest: Optional[RequestTag] = None
        self._current: Optional[PredictionBundle] = None

    # ── Request tagging ──────────────────────────────────────────────────

    def _issue(self, ticker: str, horizon_days: int) -> RequestTag:
        self._sequence += 1
        tag = RequestTag(ticker=ticker, horizon_days=horizon_days, sequence=self._sequence)
        self._latest = tag
        return tag

    def is_current(self, tag: RequestTag) -> bool:
        """``True`` if *tag* is the most recently issued request."""
        return tag == self._latest

    @property
    def current(self) -> Optional[PredictionBundle]:
        """The last published bundle, if any."""
        return self._current

    async def _fetch_anchor(self, ticker: str, horizon_days: int) -> Optional[ForecastAnchor]:
        try:
            return await self._client.fetch_forecast_anchor(ticker, horizon_days)
        except UpstreamUnavailable as exc:
            logger.warning("Forecast unavailable for %s (%dd): %s", ticker, horizon_days, exc)
            return None

    # ── Public API ───────────────────────────────────────────────────────

    async def search(
        self,
        ticker: str,
        horizon_days: Optional[int] = None,
        asset_class: Optional[AssetClass | str] = None,
    ) -> Optional[PredictionBundle]:
        """Fetch history and forecast for *ticker* and publish a new bundle.

        Returns ``None`` when a newer request superseded this one while it
        was in flight.

        Raises:
            InvalidParameter: empty ticker or horizon outside 1..7.
            UpstreamUnavailable: the history fetch failed.
        """
        symbol = normalize_ticker(ticker)
        if horizon_days is None:
            horizon_days = self._config.default_horizon_days
        horizon = validate_horizon(horizon_days)
        tag = self._issue(symbol, horizon)

        try:
            history, anchor = await asyncio.gather(
                self._client.fetch_history(symbol, self._config.history_days),
                self._fetch_anchor(symbol, horizon),
            )
        except UpstreamUnavailable:
            if not self.is_current(tag):
                logger.info("Ignoring failure of superseded request for %s", symbol)
                return None
            raise

        if not self.is_current(tag):
            logger.info("Discarding stale response for %s (%dd)", symbol, horizon)
            return None

        bundle = build_prediction_bundle(
            symbol,
            history,
            anchor,
            horizon,
            asset_class=asset_class,
            rsi_period=self._config.rsi_period,
            rsi_loss_floor=self._config.rsi_loss_floor,
            band_coefficient=self._config.band_coefficient,
        )
        self._current = bundle
        logger.info(
            "Published %s (%dd): signal=%s change=%s",
            symbol, horizon, bundle.signal, bundle.predicted_change_pct,
        )
        return bundle

    async def change_horizon(self, horizon_days: int) -> Optional[PredictionBundle]:
        """Re-derive the current bundle for a new horizon without refetching history.

        Raises ``InvalidParameter`` when no search has been published yet, or
        when a search for a different ticker is still unsettled.
        """
        validate_horizon(horizon_days)
        if self._current is None:
            raise InvalidParameter("No active ticker; search before changing the horizon")
        if self._latest is not None and self._latest.ticker != self._current.ticker:
            raise InvalidParameter(
                f"Search for {self._latest.ticker} has not settled; "
                "change the horizon once it completes"
            )

        base = self._current
        tag = self._issue(base.ticker, horizon_days)
        anchor = await self._fetch_anchor(base.ticker, horizon_days)

        if not self.is_current(tag):
            logger.info(
                "Discarding stale horizon response for %s (%dd)", base.ticker, horizon_days
            )
            return None

        bundle = with_horizon(
            base, anchor, horizon_days, band_coefficient=self._config.band_coefficient
        )
        self._current = bundle
        return bundle
