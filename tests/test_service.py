"""Tests for PredictionService — search, horizon change, stale responses."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from quantmind.analytics.models import ForecastAnchor
from quantmind.errors import InvalidParameter, UpstreamUnavailable
from quantmind.service import PredictionService


def _make_client(history, anchor=None):
    """Return a mock MarketDataClient with canned responses."""
    client = AsyncMock()
    client.fetch_history.return_value = history
    client.fetch_forecast_anchor.return_value = anchor or ForecastAnchor(100.0, 103.0)
    return client


class TestSearch:
    @pytest.mark.asyncio
    async def test_publishes_bundle(self, config, history):
        client = _make_client(history)
        service = PredictionService(config, client)

        bundle = await service.search("nvda")

        assert bundle is not None
        assert bundle.ticker == "NVDA"
        assert bundle.horizon_days == 3
        assert bundle.signal == "STRONG BUY"
        assert service.current is bundle
        client.fetch_history.assert_awaited_once_with("NVDA", 60)
        client.fetch_forecast_anchor.assert_awaited_once_with("NVDA", 3)

    @pytest.mark.asyncio
    async def test_forecast_failure_degrades(self, config, history):
        client = _make_client(history)
        client.fetch_forecast_anchor.side_effect = UpstreamUnavailable("down")
        service = PredictionService(config, client)

        bundle = await service.search("NVDA", 5)
        assert bundle.forecast == ()
        assert bundle.forecast_error is not None
        assert len(bundle.historical_prices) == 60

    @pytest.mark.asyncio
    async def test_history_failure_raises(self, config, history):
        client = _make_client(history)
        client.fetch_history.side_effect = UpstreamUnavailable("down")
        service = PredictionService(config, client)

        with pytest.raises(UpstreamUnavailable):
            await service.search("NVDA")
        assert service.current is None

    @pytest.mark.asyncio
    async def test_rejects_bad_horizon_before_fetch(self, config, history):
        client = _make_client(history)
        service = PredictionService(config, client)
        with pytest.raises(InvalidParameter):
            await service.search("NVDA", 8)
        client.fetch_history.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_zero_horizon_is_rejected_not_defaulted(self, config, history):
        client = _make_client(history)
        service = PredictionService(config, client)
        with pytest.raises(InvalidParameter):
            await service.search("NVDA", 0)
        client.fetch_history.assert_not_awaited()
        assert service.current is None

    @pytest.mark.asyncio
    async def test_stale_response_discarded(self, config, history):
        """A slow first search must not overwrite the newer second one."""
        release_first = asyncio.Event()

        async def _history(ticker, days):
            if ticker == "TSLA":
                await release_first.wait()
            return history

        client = _make_client(history)
        client.fetch_history.side_effect = _history
        service = PredictionService(config, client)

        first = asyncio.create_task(service.search("TSLA"))
        await asyncio.sleep(0)
        second = await service.search("NVDA")
        release_first.set()
        stale = await first

        assert stale is None
        assert second.ticker == "NVDA"
        assert service.current.ticker == "NVDA"

    @pytest.mark.asyncio
    async def test_stale_failure_ignored(self, config, history):
        release_first = asyncio.Event()

        async def _history(ticker, days):
            if ticker == "TSLA":
                await release_first.wait()
                raise UpstreamUnavailable("late failure")
            return history

        client = _make_client(history)
        client.fetch_history.side_effect = _history
        service = PredictionService(config, client)

        first = asyncio.create_task(service.search("TSLA"))
        await asyncio.sleep(0)
        await service.search("NVDA")
        release_first.set()
        assert await first is None


class TestChangeHorizon:
    @pytest.mark.asyncio
    async def test_reuses_history(self, config, history):
        client = _make_client(history)
        service = PredictionService(config, client)
        await service.search("NVDA")

        client.fetch_forecast_anchor.return_value = ForecastAnchor(100.0, 98.0)
        bundle = await service.change_horizon(7)

        assert bundle.horizon_days == 7
        assert len(bundle.forecast) == 7
        assert bundle.signal == "STRONG SELL"
        assert client.fetch_history.await_count == 1
        assert service.current is bundle

    @pytest.mark.asyncio
    async def test_requires_active_search(self, config, history):
        service = PredictionService(config, _make_client(history))
        with pytest.raises(InvalidParameter, match="search"):
            await service.change_horizon(2)

    @pytest.mark.asyncio
    async def test_superseded_by_new_search(self, config, history):
        release = asyncio.Event()
        client = _make_client(history)
        service = PredictionService(config, client)
        await service.search("NVDA")

        async def _slow_anchor(ticker, days):
            if days == 6:
                await release.wait()
            return ForecastAnchor(100.0, 101.0)

        client.fetch_forecast_anchor.side_effect = _slow_anchor
        pending = asyncio.create_task(service.change_horizon(6))
        await asyncio.sleep(0)
        await service.search("SPY", 2)
        release.set()

        assert await pending is None
        assert service.current.ticker == "SPY"
        assert service.current.horizon_days == 2

    @pytest.mark.asyncio
    async def test_rejected_while_new_ticker_search_pending(self, config, history):
        """A horizon change must not rebase on the old ticker mid-search."""
        release = asyncio.Event()

        async def _history(ticker, days):
            if ticker == "TSLA":
                await release.wait()
            return history

        client = _make_client(history)
        client.fetch_history.side_effect = _history
        service = PredictionService(config, client)
        await service.search("NVDA")

        pending = asyncio.create_task(service.search("TSLA"))
        await asyncio.sleep(0)
        with pytest.raises(InvalidParameter, match="TSLA"):
            await service.change_horizon(5)
        release.set()
        published = await pending

        assert published is not None
        assert published.ticker == "TSLA"
        assert service.current is published
