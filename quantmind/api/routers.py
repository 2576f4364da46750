"""Internal API routers — /api/prediction, /api/simulate, /api/metrics endpoints.

No analytics here. Delegates to a per-session PredictionService and the pure
analytics functions; maps errors to ``{"error": ...}`` responses.

Clients identify themselves with an ``X-Session-Id`` header.  Each session
gets its own service, so one client's searches never supersede another's.
Requests without the header run on a throwaway service: the search still
works, but there is no active bundle to change the horizon of afterwards.
"""

import logging
from collections import OrderedDict
from typing import Callable, Optional

from fastapi import APIRouter, Header, Query
from fastapi.responses import JSONResponse

from quantmind.analytics.indicators import RSI_OVERBOUGHT, RSI_OVERSOLD, RSI_PERIOD
from quantmind.analytics.models import (
    DEFAULT_BAND_COEFFICIENT,
    MAX_HORIZON_DAYS,
    MIN_HORIZON_DAYS,
    QUICK_TICKERS,
    SIGNAL_THRESHOLDS,
    VOLATILITY_THRESHOLDS,
)
from quantmind.analytics.simulator import simulate_profit
from quantmind.config import Config
from quantmind.errors import InsufficientData, InvalidParameter, UpstreamUnavailable

logger = logging.getLogger("quantmind")
router = APIRouter(prefix="/api")

# ── Shared state (set during app startup) ────────────────────────────────

_MAX_SESSIONS = 256

_service_factory: Optional[Callable[[], object]] = None  # Set via configure_routers()
_config: Optional[Config] = None
_sessions: "OrderedDict[str, object]" = OrderedDict()


def configure_routers(service_factory, config: Optional[Config] = None) -> None:
    """Inject a zero-argument ``PredictionService`` factory and the config.

    Existing sessions are dropped.
    """
    global _service_factory, _config  # noqa: PLW0603
    _service_factory = service_factory
    _config = config
    _sessions.clear()


def _session_service(session_id: Optional[str]):
    """Return the service for *session_id*, creating it on first use.

    The least recently used session is evicted past ``_MAX_SESSIONS``.
    """
    if _service_factory is None:
        return None
    if not session_id:
        return _service_factory()
    service = _sessions.get(session_id)
    if service is not None:
        _sessions.move_to_end(session_id)
        return service
    service = _service_factory()
    _sessions[session_id] = service
    if len(_sessions) > _MAX_SESSIONS:
        evicted, _ = _sessions.popitem(last=False)
        logger.info("Evicted idle session %s", evicted)
    return service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _superseded() -> JSONResponse:
    return _error(409, "Request superseded by a newer search")


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/prediction")
async def get_prediction(
    ticker: str = Query(..., min_length=1),
    days: Optional[int] = Query(default=None),
    asset_class: Optional[str] = Query(default=None),
    x_session_id: Optional[str] = Header(default=None),
):
    """Run a search and return the resulting PredictionBundle."""
    service = _session_service(x_session_id)
    if service is None:
        return _error(503, "Prediction service not configured")
    try:
        bundle = await service.search(ticker, days, asset_class=asset_class)
    except (InvalidParameter, InsufficientData) as exc:
        return _error(422, str(exc))
    except UpstreamUnavailable as exc:
        logger.warning("Upstream failure for %s: %s", ticker, exc)
        return _error(502, f"Market data unavailable: {exc}")
    if bundle is None:
        return _superseded()
    return bundle.to_dict()


@router.get("/prediction/horizon")
async def change_horizon(
    days: int = Query(...),
    x_session_id: Optional[str] = Header(default=None),
):
    """Re-derive the session's active bundle for a new forecast horizon."""
    service = _session_service(x_session_id)
    if service is None:
        return _error(503, "Prediction service not configured")
    try:
        bundle = await service.change_horizon(days)
    except InvalidParameter as exc:
        return _error(422, str(exc))
    if bundle is None:
        return _superseded()
    return bundle.to_dict()


@router.get("/simulate")
async def simulate(
    investment: str = Query(default="1000"),
    change: Optional[float] = Query(default=None),
    x_session_id: Optional[str] = Header(default=None),
):
    """Project an investment using *change* or the session's prediction."""
    if change is None:
        service = _sessions.get(x_session_id) if x_session_id else None
        current = service.current if service is not None else None
        if current is None or current.predicted_change_pct is None:
            return _error(422, "No predicted change available; pass 'change'")
        change = current.predicted_change_pct
    result = simulate_profit(investment, change)
    return {
        "investment": result.investment,
        "projectedValue": round(result.projected_value, 2),
        "profit": round(result.profit, 2),
        "changePct": change,
    }


@router.get("/metrics")
async def get_metrics():
    """Return indicator parameters and classification thresholds in effect."""
    rsi_period = _config.rsi_period if _config is not None else RSI_PERIOD
    loss_floor = _config.rsi_loss_floor if _config is not None else None
    band = _config.band_coefficient if _config is not None else DEFAULT_BAND_COEFFICIENT
    return {
        "rsi": {
            "period": rsi_period,
            "lossFloor": loss_floor,
            "overbought": RSI_OVERBOUGHT,
            "oversold": RSI_OVERSOLD,
        },
        "macd": {"fastSpan": 12, "slowSpan": 26},
        "horizon": {"min": MIN_HORIZON_DAYS, "max": MAX_HORIZON_DAYS},
        "bandCoefficient": band,
        "signals": {
            klass.value: {"strong": strong, "mild": mild}
            for klass, (strong, mild) in SIGNAL_THRESHOLDS.items()
        },
        "volatility": {
            klass.value: {"low": low, "high": high}
            for klass, (low, high) in VOLATILITY_THRESHOLDS.items()
        },
    }


@router.get("/tickers/quick")
async def get_quick_tickers():
    """Suggested symbols for the search bar."""
    return {"tickers": list(QUICK_TICKERS)}
