"""CLI summary — one-line and block renderings of a PredictionBundle."""

from typing import Optional

from quantmind.analytics.forecast import forecast_price_at
from quantmind.analytics.models import PredictionBundle, SimulationResult


def format_share_line(bundle: PredictionBundle, horizon_days: Optional[int] = None) -> str:
    """Shareable one-liner for the selected horizon.

    ``NVDA: BUY | Current: $100.00 | 3D Target: $101.00 | Change: +1.00%``
    """
    days = horizon_days or bundle.horizon_days
    target = forecast_price_at(bundle.forecast, days, default=bundle.target_price)
    if target is None:
        target = bundle.current_price
    change = (target - bundle.current_price) / bundle.current_price * 100
    sign = "+" if change > 0 else ""
    return (
        f"{bundle.ticker}: {bundle.signal or 'N/A'} | "
        f"Current: ${bundle.current_price:.2f} | "
        f"{days}D Target: ${target:.2f} | "
        f"Change: {sign}{change:.2f}%"
    )


def print_summary(
    bundle: PredictionBundle,
    simulation: Optional[SimulationResult] = None,
) -> str:
    """Format and print a bundle summary.

    Returns:
        The formatted string (also printed to stdout).
    """
    rsi_str = f"{bundle.rsi:.1f} ({bundle.rsi_zone})" if bundle.rsi is not None else "N/A"
    change = bundle.predicted_change_pct
    change_str = f"{change:+.2f}%" if change is not None else "N/A"
    target_str = f"${bundle.target_price:,.2f}" if bundle.target_price is not None else "N/A"

    lines = [
        f"──────────────── QuantMind • {bundle.ticker} ────────────────",
        f"  Asset Class:     {bundle.asset_class.value}",
        f"  Signal:          {bundle.signal or 'N/A'}",
        f"  Current Price:   ${bundle.current_price:,.2f}",
        f"  Target ({bundle.horizon_days}D):     {target_str}",
        f"  Change:          {change_str}",
        f"  RSI:             {rsi_str}",
        f"  MACD:            {bundle.macd_state or 'N/A'}",
        f"  Volatility:      {bundle.volatility or 'N/A'}",
        f"  Confidence:      {bundle.confidence_level}",
    ]
    for point in bundle.forecast:
        lines.append(
            f"    Day {point.day}: ${point.price:,.2f}  "
            f"[{point.lower:,.2f} – {point.upper:,.2f}]"
        )
    if bundle.forecast_error:
        lines.append(f"  Forecast:        unavailable ({bundle.forecast_error})")
    if simulation is not None:
        lines.append(f"  Investment:      ${simulation.investment:,.2f}")
        lines.append(f"  Projected:       ${simulation.projected_value:,.2f}")
        lines.append(f"  Profit:          ${simulation.profit:+,.2f}")
    lines.append("─" * 52)

    output = "\n".join(lines)
    print(output)
    return output
