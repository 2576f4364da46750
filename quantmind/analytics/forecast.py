"""Forecast projection — linear path between two anchors with widening bands.

Pure functions, no I/O.  The whole sequence is regenerated from the two
anchor prices whenever the horizon changes; there is no incremental state.
"""

import math
from typing import Optional, Sequence

from quantmind.analytics.models import (
    DEFAULT_BAND_COEFFICIENT,
    MAX_HORIZON_DAYS,
    MIN_HORIZON_DAYS,
    ForecastPoint,
)
from quantmind.errors import InvalidParameter


def validate_horizon(horizon_days: int) -> int:
    """Return *horizon_days* if it is an integer in 1..7."""
    if isinstance(horizon_days, bool) or not isinstance(horizon_days, int):
        raise InvalidParameter(f"horizon_days must be an integer, got {horizon_days!r}")
    if not MIN_HORIZON_DAYS <= horizon_days <= MAX_HORIZON_DAYS:
        raise InvalidParameter(
            f"horizon_days must be between {MIN_HORIZON_DAYS} and "
            f"{MAX_HORIZON_DAYS}, got {horizon_days}"
        )
    return horizon_days


def _validate_price(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameter(f"{name} must be a positive number, got {value}")


def predicted_change_pct(current_price: float, target_price: float) -> float:
    """Percentage change from *current_price* to *target_price*."""
    _validate_price("current_price", current_price)
    return (target_price - current_price) / current_price * 100.0


def project_forecast(
    current_price: float,
    target_price: float,
    horizon_days: int,
    band_coefficient: float = DEFAULT_BAND_COEFFICIENT,
) -> list[ForecastPoint]:
    """Interpolate a day-by-day forecast with a confidence band.

    For ``day = 1..horizon_days``::

        price(day)     = current + (target - current) × day / horizon
        halfWidth(day) = price(day) × band_coefficient × day

    The half-width is clamped at 0 and carried forward as a running
    maximum, so the band never inverts and never narrows further out.
    The last point's price is exactly *target_price*.

    Raises:
        InvalidParameter: non-positive anchor price, horizon outside 1..7,
            or a negative band coefficient.
    """
    _validate_price("current_price", current_price)
    _validate_price("target_price", target_price)
    validate_horizon(horizon_days)
    if not math.isfinite(band_coefficient) or band_coefficient < 0:
        raise InvalidParameter(
            f"band_coefficient must be non-negative, got {band_coefficient}"
        )

    points: list[ForecastPoint] = []
    prev_half_width = 0.0
    for day in range(1, horizon_days + 1):
        if day == horizon_days:
            price = float(target_price)
        else:
            price = current_price + (target_price - current_price) * (day / horizon_days)
        half_width = max(price * band_coefficient * day, 0.0, prev_half_width)
        prev_half_width = half_width
        points.append(
            ForecastPoint(
                day=day,
                price=price,
                lower=price - half_width,
                upper=price + half_width,
                change_pct=(price - current_price) / current_price * 100.0,
            )
        )
    return points


def forecast_price_at(
    points: Sequence[ForecastPoint],
    day: int,
    default: Optional[float] = None,
) -> Optional[float]:
    """Price of the forecast point for *day*, or *default* if absent."""
    for point in points:
        if point.day == day:
            return point.price
    return default


def confidence_level(horizon_days: int) -> str:
    """Qualitative confidence for a horizon: ≤2 High, ≤5 Medium, else Low."""
    if horizon_days <= 2:
        return "High"
    if horizon_days <= 5:
        return "Medium"
    return "Low"
