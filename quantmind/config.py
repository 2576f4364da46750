"""QuantMind — application configuration.

Loads .env variables into a typed config object.
Validates required variables on startup.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


_REQUIRED_VARS = [
    "MARKET_DATA_URL",
]


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    market_data_url: str
    market_data_token: str
    history_days: int
    default_horizon_days: int
    band_coefficient: float
    rsi_period: int
    rsi_loss_floor: Optional[float]  # None = strict Wilder RSI
    log_level: str
    api_port: int

    @property
    def market_data_base_url(self) -> str:
        """Provider base URL without a trailing slash."""
        return self.market_data_url.rstrip("/")


def load_config(env_path: str | None = None) -> Config:
    """Load configuration from environment variables.

    Raises ``ValueError`` with a message naming the missing variable when a
    required variable is absent.
    """
    load_dotenv(dotenv_path=env_path)

    missing = [v for v in _REQUIRED_VARS if not os.environ.get(v)]
    if missing:
        raise ValueError(
            f"Missing required environment variable(s): {', '.join(missing)}"
        )

    loss_floor = os.environ.get("RSI_LOSS_FLOOR")
    return Config(
        market_data_url=os.environ["MARKET_DATA_URL"],
        market_data_token=os.environ.get("MARKET_DATA_TOKEN", ""),
        history_days=int(os.environ.get("HISTORY_DAYS", "60")),
        default_horizon_days=int(os.environ.get("DEFAULT_HORIZON_DAYS", "3")),
        band_coefficient=float(os.environ.get("BAND_COEFFICIENT", "0.01")),
        rsi_period=int(os.environ.get("RSI_PERIOD", "14")),
        rsi_loss_floor=float(loss_floor) if loss_floor else None,
        log_level=os.environ.get("LOG_LEVEL", "INFO"),
        api_port=int(os.environ.get("API_PORT", "8080")),
    )
