"""Builders shared by the test modules."""

from __future__ import annotations

import math

import pandas as pd

from macro_brief.models import IndicatorResult, ObservationPoint, Trend, Unit


def make_series(values: list[float], start: str = "2023-01-01") -> list[ObservationPoint]:
    """Monthly series (first of month) from a list of values."""
    dates = pd.date_range(start, periods=len(values), freq="MS").strftime("%Y-%m-%d")
    return [ObservationPoint(date=d, value=float(v)) for d, v in zip(dates, values)]


def make_indicator(
    indicator_id: str,
    latest: float = math.nan,
    mom: float = math.nan,
    yoy: float = math.nan,
    trend: Trend = Trend.STABLE,
    unit: Unit = Unit.PERCENT,
    label: str | None = None,
    updated_at: str | None = "2024-01-01",
) -> IndicatorResult:
    """IndicatorResult with only the fields a test cares about."""
    return IndicatorResult(
        id=indicator_id,
        label=label or indicator_id,
        unit=unit,
        latest=latest,
        mom=mom,
        yoy=yoy,
        trend=trend,
        updated_at=updated_at,
    )


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now
