"""Technical indicators — RSI, EMA, MACD. Pure functions, no I/O.

Every series function returns a list aligned index-for-index with its
input.  Entries that are not defined yet (warm-up) are ``None``, never 0,
so a chart renderer draws no segment for them.
"""

from typing import Optional, Sequence

from quantmind.errors import InvalidParameter

RSI_PERIOD = 14
RSI_OVERBOUGHT = 70.0
RSI_OVERSOLD = 30.0


def _check_period(name: str, period: int) -> None:
    if period < 1:
        raise InvalidParameter(f"{name} must be a positive integer, got {period}")


# ── RSI ──────────────────────────────────────────────────────────────────


def calculate_rsi(
    prices: Sequence[float],
    period: int = RSI_PERIOD,
    loss_floor: Optional[float] = None,
) -> list[Optional[float]]:
    """Calculate Wilder's smoothed Relative Strength Index.

    Algorithm:
        1. delta = price[i] - price[i-1]
        2. Seed: sum gains and |losses| over deltas 1..period.
        3. First RSI at index *period*: RS = gain / loss,
           RSI = 100 - 100 / (1 + RS).
        4. Subsequent: gain = (gain × (period-1) + max(delta, 0)) / period,
           symmetric for loss.

    A zero average loss is handled one of two ways:

    * ``loss_floor=None`` (default) — strict Wilder: RSI is 100 when
      there are gains and no losses, and 50 when the window is flat.
    * ``loss_floor=x`` — substitute *x* for the zero denominator
      (``x=1.0`` reproduces the common ``gain / (loss || 1)`` shortcut).

    Fewer than ``period + 1`` prices leaves the whole output undefined.
    """
    _check_period("period", period)
    n = len(prices)
    rsi: list[Optional[float]] = [None] * n
    if n < period + 1:
        return rsi

    def _rsi(gain: float, loss: float) -> float:
        if loss == 0:
            if loss_floor is not None and loss_floor > 0:
                loss = loss_floor
            elif gain == 0:
                return 50.0
            else:
                return 100.0
        rs = gain / loss
        return 100.0 - 100.0 / (1.0 + rs)

    gain = 0.0
    loss = 0.0
    for i in range(1, period + 1):
        delta = prices[i] - prices[i - 1]
        if delta >= 0:
            gain += delta
        else:
            loss -= delta

    rsi[period] = _rsi(gain, loss)

    for i in range(period + 1, n):
        delta = prices[i] - prices[i - 1]
        gain = (gain * (period - 1) + max(delta, 0.0)) / period
        loss = (loss * (period - 1) + max(-delta, 0.0)) / period
        rsi[i] = _rsi(gain, loss)

    return rsi


def rsi_zone(value: Optional[float]) -> Optional[str]:
    """Bucket an RSI reading: >70 overbought, <30 oversold."""
    if value is None:
        return None
    if value > RSI_OVERBOUGHT:
        return "Overbought"
    if value < RSI_OVERSOLD:
        return "Oversold"
    return "Neutral"


# ── EMA / MACD ───────────────────────────────────────────────────────────


def calculate_ema(prices: Sequence[float], span: int) -> list[float]:
    """Calculate an Exponential Moving Average seeded with the first price.

    ``EMA[0] = price[0]``, then ``EMA[i] = price[i] × k + EMA[i-1] × (1 - k)``
    where ``k = 2 / (span + 1)``.  Seeding (rather than an SMA window)
    means there is no warm-up gap.
    """
    _check_period("span", span)
    if not prices:
        return []

    k = 2.0 / (span + 1)
    ema = [float(prices[0])]
    for price in prices[1:]:
        ema.append(price * k + ema[-1] * (1 - k))
    return ema


def calculate_macd(
    prices: Sequence[float],
    fast_span: int = 12,
    slow_span: int = 26,
) -> list[float]:
    """Calculate the MACD line: fast EMA minus slow EMA.

    Defined from index 0.  No signal line or histogram is produced.
    """
    if fast_span >= slow_span:
        raise InvalidParameter(
            f"fast_span ({fast_span}) must be shorter than slow_span ({slow_span})"
        )
    fast = calculate_ema(prices, fast_span)
    slow = calculate_ema(prices, slow_span)
    return [f - s for f, s in zip(fast, slow)]


def macd_state(macd: Sequence[Optional[float]]) -> Optional[str]:
    """Return ``"Bullish"`` if the latest MACD value is above 0, else ``"Bearish"``."""
    latest = latest_defined(macd)
    if latest is None:
        return None
    return "Bullish" if latest > 0 else "Bearish"


def latest_defined(series: Sequence[Optional[float]]) -> Optional[float]:
    """Return the last non-``None`` entry of *series*, or ``None``."""
    for value in reversed(series):
        if value is not None:
            return value
    return None
