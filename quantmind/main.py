"""QuantMind — application entry point.

Boots the FastAPI API consumed by the dashboard and provides the CLI entry
point for serving or a one-shot ticker analysis.
"""

import logging

from fastapi import FastAPI

from quantmind.api.routers import router

app = FastAPI(title="QuantMind API", version="0.1.0")
app.include_router(router)

logger = logging.getLogger("quantmind")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


# ── CLI ──────────────────────────────────────────────────────────────────


def _run_cli() -> None:
    """Parse CLI arguments and dispatch to serve or one-shot mode."""
    import argparse
    import asyncio
    from functools import partial

    from quantmind.api.routers import configure_routers
    from quantmind.config import load_config
    from quantmind.provider.client import MarketDataClient
    from quantmind.service import PredictionService

    parser = argparse.ArgumentParser(description="QuantMind market intelligence")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--serve", action="store_true", help="Run the HTTP API")
    mode.add_argument("--ticker", help="Analyse one ticker and print a summary")
    parser.add_argument("--days", type=int, help="Forecast horizon in days (1-7)")
    parser.add_argument(
        "--investment",
        default="1000",
        help="Amount for the profit simulation (default: 1000)",
    )
    parser.add_argument(
        "--asset-class",
        choices=["stock", "crypto"],
        help="Override the asset class inferred from the ticker",
    )
    args = parser.parse_args()

    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    client = MarketDataClient(config)

    if args.ticker:
        service = PredictionService(config=config, client=client)
        asyncio.run(_run_once(service, args.ticker, args.days, args.investment, args.asset_class))
        return

    configure_routers(
        service_factory=partial(PredictionService, config=config, client=client),
        config=config,
    )
    _serve(config.api_port)


async def _run_once(service, ticker: str, days, investment: str, asset_class) -> None:
    """Fetch, derive and print one bundle."""
    from quantmind.analytics.bundle import simulate_for_bundle
    from quantmind.cli.summary import format_share_line, print_summary
    from quantmind.errors import QuantMindError

    try:
        bundle = await service.search(ticker, days, asset_class=asset_class)
    except QuantMindError as exc:
        logger.error("Analysis of %s failed: %s", ticker, exc)
        raise SystemExit(1) from exc
    if bundle is None:
        return
    print_summary(bundle, simulate_for_bundle(bundle, investment))
    print(format_share_line(bundle))


def _serve(port: int) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    logger.info("QuantMind API available at http://localhost:%d", port)
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    _run_cli()
