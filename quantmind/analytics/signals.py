"""Trading signal classification from a predicted percentage change."""

import math

from quantmind.analytics.models import SIGNAL_THRESHOLDS, AssetClass
from quantmind.errors import InvalidParameter

SIGNAL_LABELS = ("STRONG BUY", "BUY", "HOLD", "SELL", "STRONG SELL")


def classify_signal(predicted_change_pct: float, asset_class: AssetClass) -> str:
    """Map *predicted_change_pct* (percent units) to one of five signals.

    Evaluated in order, first match wins::

        STRONG BUY   change >  strong
        BUY          change >  mild
        HOLD         -mild <= change <= mild
        SELL         change < -mild   (and >= -strong)
        STRONG SELL  change < -strong

    Stock uses (strong, mild) = (1.5, 0.3); Crypto uses (3.0, 0.8).
    """
    if not math.isfinite(predicted_change_pct):
        raise InvalidParameter(
            f"predicted_change_pct must be finite, got {predicted_change_pct}"
        )
    strong, mild = SIGNAL_THRESHOLDS[asset_class]
    if predicted_change_pct > strong:
        return "STRONG BUY"
    if predicted_change_pct > mild:
        return "BUY"
    if predicted_change_pct >= -mild:
        return "HOLD"
    if predicted_change_pct >= -strong:
        return "SELL"
    return "STRONG SELL"

