"""Tests for display formatting helpers."""

from __future__ import annotations

import math
from datetime import datetime

import pytest

from macro_brief.models import Trend, Unit
from macro_brief.ui.formatters import (
    PLACEHOLDER,
    change_color,
    format_currency,
    format_date,
    format_number,
    format_percentage,
    format_time_ago,
    trend_badge,
    trend_color,
    trend_icon,
)


class TestFormatNumber:
    def test_index_has_one_decimal(self) -> None:
        assert format_number(307.456, Unit.INDEX) == "307.5"

    def test_percent_has_two_decimals_and_sign(self) -> None:
        assert format_number(3.7, Unit.PERCENT) == "3.70%"
        assert format_number(4.256, "rate") == "4.26%"

    @pytest.mark.parametrize("value", [None, math.nan, math.inf])
    def test_unknown_is_placeholder(self, value) -> None:
        assert format_number(value, Unit.PERCENT) == PLACEHOLDER

    def test_unknown_unit_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            format_number(1.0, "bps")


class TestFormatPercentage:
    def test_signed(self) -> None:
        assert format_percentage(2.5) == "+2.5%"
        assert format_percentage(-0.34) == "-0.3%"
        assert format_percentage(0.0) == "+0.0%"

    def test_nan_is_not_zero(self) -> None:
        assert format_percentage(math.nan) == PLACEHOLDER


class TestFormatCurrency:
    def test_four_decimals_by_default(self) -> None:
        assert format_currency(0.78912345) == "0.7891"

    def test_custom_decimals(self) -> None:
        assert format_currency(1520.456, decimals=2) == "1520.46"

    def test_unknown(self) -> None:
        assert format_currency(None) == PLACEHOLDER


class TestFormatDate:
    def test_iso_date(self) -> None:
        assert format_date("2023-12-25") == "Dec 25, 2023"

    def test_datetime(self) -> None:
        assert format_date(datetime(2024, 3, 1, 9, 30)) == "Mar 01, 2024"

    def test_unparseable(self) -> None:
        assert format_date("not a date") == PLACEHOLDER
        assert format_date(None) == PLACEHOLDER


class TestFormatTimeAgo:
    NOW = datetime(2024, 3, 1, 12, 0)

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("2024-03-01 11:59:30", "just now"),
            ("2024-03-01 11:59:00", "1 min ago"),
            ("2024-03-01 11:55:00", "5 mins ago"),
            ("2024-03-01 11:00:00", "1 hour ago"),
            ("2024-03-01 09:00:00", "3 hours ago"),
            ("2024-02-29 12:00:00", "1 day ago"),
            ("2024-02-20 12:00:00", "10 days ago"),
        ],
    )
    def test_relative(self, value, expected) -> None:
        assert format_time_ago(value, now=self.NOW) == expected

    def test_unknown(self) -> None:
        assert format_time_ago(None) == PLACEHOLDER
        assert format_time_ago("garbage") == PLACEHOLDER


class TestTrendStyling:
    def test_known_trends(self) -> None:
        assert trend_color(Trend.RISING) == "#10b981"
        assert trend_icon(Trend.FALLING) == "↓"
        assert trend_badge(Trend.VOLATILE_UP) == ("#fef3c7", "#92400e")

    def test_accepts_strings(self) -> None:
        assert trend_color("VOLATILE_DOWN") == "#f97316"

    def test_unknown_trend_falls_back(self) -> None:
        assert trend_color("SIDEWAYS") == "#6b7280"
        assert trend_icon("SIDEWAYS") == "•"

    def test_every_trend_is_styled(self) -> None:
        for trend in Trend:
            assert trend_color(trend).startswith("#")
            assert trend_icon(trend) != "•"


class TestChangeColor:
    def test_sign(self) -> None:
        assert change_color(0.5) == "#059669"
        assert change_color(0.0) == "#059669"
        assert change_color(-0.5) == "#dc2626"

    def test_unknown_is_grey(self) -> None:
        assert change_color(math.nan) == "#6b7280"
