"""Tests for chart series composition."""

import pytest

from quantmind.analytics.chart import compose_chart_rows, forecast_boundary
from quantmind.analytics.forecast import project_forecast
from quantmind.analytics.models import ChartRow, PricePoint
from quantmind.errors import InvalidParameter


def _history() -> list[PricePoint]:
    return [
        PricePoint("2025-01-29", 100.0),
        PricePoint("2025-01-30", 101.0),
        PricePoint("2025-01-31", 102.0),
    ]


class TestComposeChartRows:
    def test_history_then_forecast(self):
        forecast = project_forecast(102.0, 105.0, 3)
        rows = compose_chart_rows(_history(), forecast, rsi=[None, None, 55.0], macd=[0.0, 0.1, 0.2])

        assert len(rows) == 6
        assert [r.date for r in rows] == [
            "2025-01-29", "2025-01-30", "2025-01-31",
            "2025-02-01", "2025-02-02", "2025-02-03",
        ]
        assert rows[2].price == 102.0
        assert rows[2].rsi == 55.0
        assert rows[3].forecast == pytest.approx(103.0)
        assert rows[3].price is None

    def test_no_date_overlap_and_boundary_tagged(self):
        rows = compose_chart_rows(_history(), project_forecast(102.0, 99.0, 2))
        hist_dates = {r.date for r in rows if r.price is not None}
        fc_dates = {r.date for r in rows if r.forecast is not None}
        assert hist_dates.isdisjoint(fc_dates)
        assert [r.forecast_start for r in rows] == [False, False, False, True, False]
        assert forecast_boundary(rows) == "2025-02-01"

    def test_sparse_fields_are_absent_not_zero(self):
        rows = compose_chart_rows(_history(), project_forecast(102.0, 104.0, 1), rsi=[None, None, None])
        hist = rows[0].to_dict()
        assert hist == {"date": "2025-01-29", "price": 100.0}
        fc = rows[-1].to_dict()
        assert set(fc) == {"date", "forecast", "lower", "upper", "forecast_start"}
        assert "rsi" not in fc

    def test_history_only(self):
        rows = compose_chart_rows(_history())
        assert len(rows) == 3
        assert forecast_boundary(rows) is None

    def test_empty_history(self):
        assert compose_chart_rows([], project_forecast(1.0, 2.0, 2)) == []

    def test_rejects_misaligned_indicator(self):
        with pytest.raises(InvalidParameter, match="rsi"):
            compose_chart_rows(_history(), rsi=[50.0])

    def test_rejects_bad_date(self):
        with pytest.raises(InvalidParameter):
            compose_chart_rows([PricePoint("31/01/2025", 1.0)], project_forecast(1.0, 2.0, 1))


def test_chart_row_defaults():
    row = ChartRow(date="2025-01-01")
    assert row.to_dict() == {"date": "2025-01-01"}
