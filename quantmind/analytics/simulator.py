"""Profit simulation — pure math, no I/O."""

import math
from typing import Union

from quantmind.analytics.models import SimulationResult


def _parse_amount(value: Union[str, float, int, None]) -> float:
    """Parse a user-entered amount; anything unusable becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(str(value).strip()) if isinstance(value, str) else float(value)
    except ValueError:
        return 0.0
    if not math.isfinite(amount) or amount <= 0:
        return 0.0
    return amount


def simulate_profit(
    investment: Union[str, float, int, None],
    predicted_change_pct: float,
) -> SimulationResult:
    """Apply *predicted_change_pct* to an investment amount.

    Formula::

        projected = investment × (1 + change / 100)
        profit    = projected − investment

    Invalid, zero, or negative investments (including unparseable text)
    degrade to an all-zero result rather than raising.
    """
    amount = _parse_amount(investment)
    if amount == 0.0 or not math.isfinite(predicted_change_pct):
        return SimulationResult(investment=0.0, projected_value=0.0, profit=0.0)

    projected = amount * (1 + predicted_change_pct / 100.0)
    return SimulationResult(
        investment=amount,
        projected_value=projected,
        profit=projected - amount,
    )
