"""Shared fixtures: deterministic price history and a test config."""

from datetime import date, timedelta

import pytest

from quantmind.analytics.models import PricePoint
from quantmind.config import Config


def make_history(prices: list[float], start: str = "2025-01-01") -> list[PricePoint]:
    first = date.fromisoformat(start)
    return [
        PricePoint(date=(first + timedelta(days=i)).isoformat(), price=p)
        for i, p in enumerate(prices)
    ]


@pytest.fixture
def history() -> list[PricePoint]:
    """60 daily closes with a gentle up-trend and a repeating wiggle."""
    wiggle = [0.0, 0.8, -0.5, 1.1, -0.9, 0.4]
    prices = [100.0 + i * 0.25 + wiggle[i % len(wiggle)] for i in range(60)]
    return make_history(prices)


@pytest.fixture
def config() -> Config:
    return Config(
        market_data_url="https://data.example.test/",
        market_data_token="test-token",
        history_days=60,
        default_horizon_days=3,
        band_coefficient=0.01,
        rsi_period=14,
        rsi_loss_floor=None,
        log_level="INFO",
        api_port=8080,
    )
