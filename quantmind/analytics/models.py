"""Analytics data models — typed representations of series and results."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional


class AssetClass(str, Enum):
    """Selects the threshold table used by the classifiers."""

    STOCK = "Stock"
    CRYPTO = "Crypto"


@dataclass(frozen=True)
class PricePoint:
    """A single daily closing price."""

    date: str  # "YYYY-MM-DD"
    price: float


@dataclass(frozen=True)
class ForecastAnchor:
    """Horizon-end estimate supplied by the Market Data Provider."""

    current_price: float
    target_price: float


@dataclass(frozen=True)
class ForecastPoint:
    """One day of an interpolated forecast with its confidence band."""

    day: int  # 1-based horizon index
    price: float
    lower: float
    upper: float
    change_pct: float = 0.0


@dataclass(frozen=True)
class ChartRow:
    """A single row of the merged chart timeline.

    Historical rows carry ``price``/``rsi``/``macd``; forecast rows carry
    ``forecast``/``lower``/``upper``.  Absent fields are ``None`` and mean
    "no line segment here".
    """

    date: str
    price: Optional[float] = None
    rsi: Optional[float] = None
    macd: Optional[float] = None
    forecast: Optional[float] = None
    lower: Optional[float] = None
    upper: Optional[float] = None
    forecast_start: bool = False

    def to_dict(self) -> dict:
        """Serialise, dropping absent fields so renderers see sparse columns."""
        out = {k: v for k, v in asdict(self).items() if v is not None}
        if not self.forecast_start:
            out.pop("forecast_start")
        return out


@dataclass(frozen=True)
class SimulationResult:
    """Hypothetical investment outcome for a predicted change."""

    investment: float
    projected_value: float
    profit: float


@dataclass(frozen=True)
class PredictionBundle:
    """Everything the Presentation Layer needs for one (ticker, horizon).

    Sequences are tuples so a bundle cannot be mutated after assembly.
    ``forecast_error`` is set when the forecast segment could not be
    derived; historical content is still present in that case.
    """

    ticker: str
    asset_class: AssetClass
    horizon_days: int
    current_price: float
    target_price: Optional[float]
    predicted_change_pct: Optional[float]
    signal: Optional[str]
    rsi: Optional[float]
    rsi_zone: Optional[str]
    macd: Optional[float]
    macd_state: Optional[str]
    volatility: Optional[str]
    confidence_level: str
    historical_prices: tuple[PricePoint, ...]
    rsi_series: tuple[Optional[float], ...]
    macd_series: tuple[Optional[float], ...]
    forecast: tuple[ForecastPoint, ...] = ()
    chart: tuple[ChartRow, ...] = ()
    forecast_error: Optional[str] = None

    @property
    def has_forecast(self) -> bool:
        return bool(self.forecast)

    def to_dict(self) -> dict:
        """Render as the JSON payload served to the dashboard."""
        return {
            "ticker": self.ticker,
            "assetClass": self.asset_class.value,
            "horizonDays": self.horizon_days,
            "currentPrice": self.current_price,
            "targetPrice": self.target_price,
            "predictedChangePct": self.predicted_change_pct,
            "signal": self.signal,
            "rsi": self.rsi,
            "rsiZone": self.rsi_zone,
            "macd": self.macd_state,
            "macdValue": self.macd,
            "volatility": self.volatility,
            "confidenceLevel": self.confidence_level,
            "historicalPrices": [
                {"date": p.date, "price": p.price} for p in self.historical_prices
            ],
            "forecastData": [
                {
                    "day": f.day,
                    "price": f.price,
                    "lower": f.lower,
                    "upper": f.upper,
                    "changePct": f.change_pct,
                }
                for f in self.forecast
            ],
            "chart": [row.to_dict() for row in self.chart],
            "forecastError": self.forecast_error,
        }


# ── Calibration tables ──────────────────────────────────────────────────
# (STRONG BUY above, BUY above) in percent; SELL / STRONG SELL mirror them.

SIGNAL_THRESHOLDS: dict[AssetClass, tuple[float, float]] = {
    AssetClass.STOCK: (1.5, 0.3),
    AssetClass.CRYPTO: (3.0, 0.8),
}

# (Low below, High at or above) on the return standard deviation.
VOLATILITY_THRESHOLDS: dict[AssetClass, tuple[float, float]] = {
    AssetClass.STOCK: (0.008, 0.02),
    AssetClass.CRYPTO: (0.02, 0.05),
}

MIN_HORIZON_DAYS = 1
MAX_HORIZON_DAYS = 7
DEFAULT_BAND_COEFFICIENT = 0.01

QUICK_TICKERS: list[str] = [
    "BTC-USD",
    "NVDA",
    "TSLA",
    "SPY",
]
