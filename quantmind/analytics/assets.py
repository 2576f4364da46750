"""Ticker normalisation and asset-class inference."""

from typing import Optional

from quantmind.analytics.models import AssetClass
from quantmind.errors import InvalidParameter

# Quote currencies that mark a "<BASE>-<QUOTE>" crypto pair, e.g. BTC-USD.
CRYPTO_QUOTE_SUFFIXES = ("USD", "USDT", "USDC", "EUR", "GBP", "JPY", "BTC", "ETH")


def normalize_ticker(ticker: str) -> str:
    """Trim and upper-case a submitted ticker.

    Raises ``InvalidParameter`` for an empty or whitespace-only ticker.
    """
    value = (ticker or "").strip().upper()
    if not value:
        raise InvalidParameter("ticker must not be empty")
    return value


def infer_asset_class(ticker: str) -> AssetClass:
    """Classify a ticker by symbol shape.

    ``BTC-USD`` and ``ETH-EUR`` are crypto; ``NVDA`` and share-class
    symbols such as ``BRK-B`` are stocks.
    """
    symbol = normalize_ticker(ticker)
    base, sep, quote = symbol.rpartition("-")
    if sep and base and quote in CRYPTO_QUOTE_SUFFIXES:
        return AssetClass.CRYPTO
    return AssetClass.STOCK


def resolve_asset_class(
    ticker: str, asset_class: Optional[AssetClass | str] = None
) -> AssetClass:
    """Return *asset_class* when supplied explicitly, else infer it."""
    if asset_class is None:
        return infer_asset_class(ticker)
    if isinstance(asset_class, AssetClass):
        return asset_class
    for member in AssetClass:
        if asset_class.strip().lower() == member.value.lower():
            return member
    raise InvalidParameter(
        f"Unknown asset class '{asset_class}'. "
        f"Available: {', '.join(m.value for m in AssetClass)}"
    )
