"""PredictionBundle assembly.

Runs the indicator engine and volatility classifier over the history,
projects the forecast, composes the chart rows and classifies the signal.
Forecast and volatility failures degrade the bundle instead of failing
it, so historical content still renders.
"""

import logging
import math
from dataclasses import replace
from typing import Optional, Sequence

from quantmind.analytics.assets import normalize_ticker, resolve_asset_class
from quantmind.analytics.chart import compose_chart_rows
from quantmind.analytics.forecast import (
    confidence_level,
    predicted_change_pct,
    project_forecast,
    validate_horizon,
)
from quantmind.analytics.indicators import (
    RSI_PERIOD,
    calculate_macd,
    calculate_rsi,
    latest_defined,
    macd_state,
    rsi_zone,
)
from quantmind.analytics.models import (
    DEFAULT_BAND_COEFFICIENT,
    AssetClass,
    ForecastAnchor,
    PredictionBundle,
    PricePoint,
    SimulationResult,
)
from quantmind.analytics.signals import classify_signal
from quantmind.analytics.simulator import simulate_profit
from quantmind.analytics.volatility import classify_volatility
from quantmind.errors import InsufficientData, InvalidParameter

logger = logging.getLogger("quantmind.bundle")


def prepare_history(points: Sequence[PricePoint]) -> tuple[PricePoint, ...]:
    """Sort by date and reject duplicate dates or non-positive, non-finite prices."""
    ordered = sorted(points, key=lambda p: p.date)
    seen: set[str] = set()
    for p in ordered:
        if p.date in seen:
            raise InvalidParameter(f"Duplicate date in price series: {p.date}")
        seen.add(p.date)
        if not math.isfinite(p.price):
            raise InvalidParameter(f"Non-finite price {p.price} on {p.date}")
        if p.price <= 0:
            raise InvalidParameter(f"Non-positive price {p.price} on {p.date}")
    return tuple(ordered)


def build_prediction_bundle(
    ticker: str,
    history: Sequence[PricePoint],
    anchor: Optional[ForecastAnchor],
    horizon_days: int,
    asset_class: Optional[AssetClass | str] = None,
    rsi_period: int = RSI_PERIOD,
    rsi_loss_floor: Optional[float] = None,
    band_coefficient: float = DEFAULT_BAND_COEFFICIENT,
) -> PredictionBundle:
    """Derive a full ``PredictionBundle`` for one (ticker, horizon) request.

    Args:
        ticker: Symbol as submitted; normalised to upper case.
        history: Daily closes from the Market Data Provider.
        anchor: Current and horizon-end target price, or ``None`` when the
            forecast fetch failed.
        horizon_days: Requested horizon, 1..7.
        asset_class: Explicit asset class; inferred from the ticker if
            omitted.

    Raises:
        InvalidParameter: bad ticker, horizon, or history contents.
        InsufficientData: empty history.
    """
    symbol = normalize_ticker(ticker)
    klass = resolve_asset_class(symbol, asset_class)
    validate_horizon(horizon_days)
    points = prepare_history(history)
    if not points:
        raise InsufficientData(f"No price history for {symbol}")

    prices = [p.price for p in points]
    rsi_series = calculate_rsi(prices, period=rsi_period, loss_floor=rsi_loss_floor)
    macd_series = calculate_macd(prices)
    latest_rsi = latest_defined(rsi_series)

    try:
        volatility: Optional[str] = classify_volatility(prices, klass)
    except InsufficientData as exc:
        logger.warning("Volatility undefined for %s: %s", symbol, exc)
        volatility = None

    base = PredictionBundle(
        ticker=symbol,
        asset_class=klass,
        horizon_days=horizon_days,
        current_price=prices[-1],
        target_price=None,
        predicted_change_pct=None,
        signal=None,
        rsi=latest_rsi,
        rsi_zone=rsi_zone(latest_rsi),
        macd=latest_defined(macd_series),
        macd_state=macd_state(macd_series),
        volatility=volatility,
        confidence_level=confidence_level(horizon_days),
        historical_prices=points,
        rsi_series=tuple(rsi_series),
        macd_series=tuple(macd_series),
    )
    return with_horizon(base, anchor, horizon_days, band_coefficient=band_coefficient)


def with_horizon(
    bundle: PredictionBundle,
    anchor: Optional[ForecastAnchor],
    horizon_days: int,
    band_coefficient: float = DEFAULT_BAND_COEFFICIENT,
) -> PredictionBundle:
    """Re-derive forecast, signal and chart for a new horizon.

    History and indicator series are reused as-is.  Returns a new bundle;
    *bundle* is not modified.
    """
    validate_horizon(horizon_days)
    historical_only = compose_chart_rows(
        bundle.historical_prices,
        rsi=bundle.rsi_series,
        macd=bundle.macd_series,
    )
    degraded = replace(
        bundle,
        horizon_days=horizon_days,
        target_price=None,
        predicted_change_pct=None,
        signal=None,
        confidence_level=confidence_level(horizon_days),
        forecast=(),
        chart=tuple(historical_only),
    )

    if anchor is None:
        return replace(degraded, forecast_error="Forecast unavailable")

    try:
        forecast = project_forecast(
            anchor.current_price,
            anchor.target_price,
            horizon_days,
            band_coefficient=band_coefficient,
        )
        change = predicted_change_pct(anchor.current_price, anchor.target_price)
        signal = classify_signal(change, bundle.asset_class)
    except InvalidParameter as exc:
        logger.warning(
            "Forecast segment failed for %s (%dd): %s",
            bundle.ticker, horizon_days, exc,
        )
        return replace(degraded, forecast_error=str(exc))

    chart = compose_chart_rows(
        bundle.historical_prices,
        forecast,
        rsi=bundle.rsi_series,
        macd=bundle.macd_series,
    )
    return replace(
        degraded,
        current_price=anchor.current_price,
        target_price=anchor.target_price,
        predicted_change_pct=change,
        signal=signal,
        forecast=tuple(forecast),
        chart=tuple(chart),
        forecast_error=None,
    )


def simulate_for_bundle(
    bundle: PredictionBundle, investment
) -> SimulationResult:
    """Profit simulation for the bundle's current horizon."""
    if bundle.predicted_change_pct is None:
        return simulate_profit(0, 0.0)
    return simulate_profit(investment, bundle.predicted_change_pct)
