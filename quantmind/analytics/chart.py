"""Chart series composition — one date-keyed timeline for the renderer."""

from datetime import date, timedelta
from typing import Optional, Sequence

from quantmind.analytics.models import ChartRow, ForecastPoint, PricePoint
from quantmind.errors import InvalidParameter


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameter(f"Expected a YYYY-MM-DD date, got {value!r}") from exc


def compose_chart_rows(
    history: Sequence[PricePoint],
    forecast: Sequence[ForecastPoint] = (),
    rsi: Optional[Sequence[Optional[float]]] = None,
    macd: Optional[Sequence[Optional[float]]] = None,
) -> list[ChartRow]:
    """Merge historical and forecast points into one ordered timeline.

    * Historical rows carry ``price``, ``rsi`` and ``macd``.  The indicator
      sequences must align index-for-index with *history*; ``None``
      entries stay absent on the row.
    * Forecast row for day *d* is dated *d* calendar days after the last
      historical date, so the two segments never share a date.
    * The first forecast row is tagged ``forecast_start`` for the
      renderer's boundary marker.

    With no history the forecast cannot be dated and an empty list is
    returned.
    """
    if not history:
        return []
    for name, series in (("rsi", rsi), ("macd", macd)):
        if series is not None and len(series) != len(history):
            raise InvalidParameter(
                f"{name} series has {len(series)} entries, "
                f"expected {len(history)} to match history"
            )

    rows: list[ChartRow] = []
    for i, point in enumerate(history):
        rows.append(
            ChartRow(
                date=point.date,
                price=point.price,
                rsi=rsi[i] if rsi is not None else None,
                macd=macd[i] if macd is not None else None,
            )
        )

    last = _parse_date(history[-1].date)
    ordered = sorted(forecast, key=lambda p: p.day)
    for idx, point in enumerate(ordered):
        rows.append(
            ChartRow(
                date=(last + timedelta(days=point.day)).isoformat(),
                forecast=point.price,
                lower=point.lower,
                upper=point.upper,
                forecast_start=idx == 0,
            )
        )
    return rows


def forecast_boundary(rows: Sequence[ChartRow]) -> Optional[str]:
    """Date of the row tagged as the start of the forecast, if any."""
    for row in rows:
        if row.forecast_start:
            return row.date
    return None
