"""Tests for the dashboard's pure helpers (chart data and HTML fragments)."""

from __future__ import annotations

from dataclasses import replace

import pandas as pd
import pytest

from macro_brief.indicators import AnalyticsResult
from macro_brief.models import FxResult, Insight, ObservationPoint
from macro_brief.ui.dashboard import (
    build_series_figure,
    chart_frame,
    fx_row_html,
    indicator_card_html,
    insight_card_html,
)
from tests.helpers import make_indicator, make_series


def daily_points(start: str, end: str) -> tuple[ObservationPoint, ...]:
    dates = pd.bdate_range(start, end).strftime("%Y-%m-%d")
    return tuple(ObservationPoint(date=d, value=4.0 + i / 1000) for i, d in enumerate(dates))


@pytest.fixture
def result() -> AnalyticsResult:
    cpi = replace(make_indicator("CPI", label="Consumer Price Index"), series=tuple(make_series(range(24))))
    unrate = replace(make_indicator("UNRATE", label="Unemployment Rate"), series=tuple(make_series(range(24))))
    empty = make_indicator("DGS10")
    return AnalyticsResult(as_of="2024-12-01", indicators=[cpi, unrate, empty], fx=[], insights=[])


# -----------------------------------------------------------------------------
# Chart data
# -----------------------------------------------------------------------------

class TestChartFrame:
    def test_monthly_window(self) -> None:
        indicator = replace(make_indicator("CPI"), series=tuple(make_series(range(24), start="2022-01-01")))
        df = chart_frame(indicator, 12)

        assert len(df) == 12
        assert df.index[0] == pd.Timestamp("2023-01-01")
        assert df.index[-1] == pd.Timestamp("2023-12-01")

    def test_daily_window_is_calendar_based(self) -> None:
        """A year of daily data is a year of dates, not twelve rows."""
        indicator = replace(make_indicator("DGS10"), series=daily_points("2022-01-03", "2024-03-29"))
        df = chart_frame(indicator, 12)

        assert len(df) > 200
        assert df.index[-1] == pd.Timestamp("2024-03-29")
        assert df.index[0] > pd.Timestamp("2023-03-29")

    def test_unsorted_input(self) -> None:
        series = tuple(reversed(make_series([1, 2, 3], start="2024-01-01")))
        df = chart_frame(replace(make_indicator("CPI"), series=series), 12)
        assert list(df["value"]) == [1.0, 2.0, 3.0]

    def test_empty_series(self) -> None:
        assert chart_frame(make_indicator("CPI"), 12).empty


class TestSeriesFigure:
    def test_one_trace_per_selected_indicator(self, result) -> None:
        fig = build_series_figure(result, ["CPI", "UNRATE"], 12)

        assert [trace.name for trace in fig.data] == ["Consumer Price Index", "Unemployment Rate"]
        assert fig.data[0].line.color != fig.data[1].line.color
        assert len(fig.data[0].x) == 12

    def test_skips_unknown_and_empty(self, result) -> None:
        fig = build_series_figure(result, ["CPI", "NOPE", "DGS10"], 60)
        assert [trace.name for trace in fig.data] == ["Consumer Price Index"]

    def test_nothing_selected(self, result) -> None:
        assert len(build_series_figure(result, [], 12).data) == 0


# -----------------------------------------------------------------------------
# HTML fragments
# -----------------------------------------------------------------------------

class TestHtmlFragments:
    def test_insight_text_is_escaped(self) -> None:
        html = insight_card_html(Insight(title="<b>Buy</b>", rationale="rates & <script>", confidence=0.65))

        assert "<b>Buy</b>" not in html
        assert "&lt;b&gt;Buy&lt;/b&gt;" in html
        assert "rates &amp; &lt;script&gt;" in html
        assert "65%" in html

    def test_indicator_label_is_escaped(self) -> None:
        html = indicator_card_html(make_indicator("CPI", latest=3.1, label="CPI <All Items>"))
        assert "CPI &lt;All Items&gt;" in html

    def test_fx_row_with_spot(self) -> None:
        fx = FxResult(base="USD", symbol="NGN", latest=1500.0, mom=3.4, yoy=60.0)

        assert "spot 1520.5000" in fx_row_html(fx, 1520.5)
        assert "spot" not in fx_row_html(fx)
        assert "USD/NGN" in fx_row_html(fx)
