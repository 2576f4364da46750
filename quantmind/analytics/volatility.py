"""Volatility classification — sample std-dev of simple returns, bucketed."""

from typing import Sequence

import numpy as np

from quantmind.analytics.models import VOLATILITY_THRESHOLDS, AssetClass
from quantmind.errors import InsufficientData, InvalidParameter


def calculate_returns(prices: Sequence[float]) -> np.ndarray:
    """Simple returns ``(p[t] - p[t-1]) / p[t-1]`` for consecutive pairs.

    Raises ``InsufficientData`` with fewer than 2 prices and
    ``InvalidParameter`` if any price is non-positive.
    """
    if len(prices) < 2:
        raise InsufficientData(
            f"Need at least 2 prices for returns, got {len(prices)}"
        )
    arr = np.asarray(prices, dtype=float)
    if np.any(arr <= 0) or not np.all(np.isfinite(arr)):
        raise InvalidParameter("prices must be positive finite numbers")
    return np.diff(arr) / arr[:-1]


def return_volatility(prices: Sequence[float]) -> float:
    """Sample standard deviation (ddof=1) of the simple returns.

    A single return has no spread, so two prices give 0.0.
    """
    returns = calculate_returns(prices)
    if returns.size < 2:
        return 0.0
    return float(np.std(returns, ddof=1))


def bucket_volatility(sigma: float, asset_class: AssetClass) -> str:
    """Map a return standard deviation to ``"Low"``, ``"Medium"`` or ``"High"``.

    Lower bounds are inclusive: ``low <= σ < high`` is Medium.
    """
    if sigma < 0 or np.isnan(sigma):
        raise InvalidParameter(f"sigma must be a non-negative number, got {sigma}")
    low, high = VOLATILITY_THRESHOLDS[asset_class]
    if sigma < low:
        return "Low"
    if sigma < high:
        return "Medium"
    return "High"


def classify_volatility(prices: Sequence[float], asset_class: AssetClass) -> str:
    """Compute return volatility of *prices* and bucket it for *asset_class*."""
    return bucket_volatility(return_volatility(prices), asset_class)
