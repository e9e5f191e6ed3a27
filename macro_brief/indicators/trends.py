"""Classify indicator trends relative to recent volatility."""

import math
from dataclasses import dataclass

import numpy as np

from macro_brief.indicators.deltas import percent_change
from macro_brief.models import Series, Trend, Unit


@dataclass(frozen=True)
class TrendThreshold:
    """Stability band (absolute MoM, in percentage points) and volatility gate."""

    stable: float
    volatility_multiplier: float = 1.25


# Every Unit must have an entry
TREND_THRESHOLDS: dict[Unit, TrendThreshold] = {
    Unit.INDEX: TrendThreshold(stable=0.1),
    Unit.PERCENT: TrendThreshold(stable=0.15),
    Unit.RATE: TrendThreshold(stable=0.15),
}

VOLATILITY_WINDOW = 7  # points, i.e. six consecutive changes


def standard_deviation(values: list[float]) -> float:
    """Population standard deviation (divides by N). Zero for no values."""
    if not values:
        return 0.0
    return float(np.std(values))


def recent_volatility(series: Series, window: int = VOLATILITY_WINDOW) -> float:
    """
    Standard deviation of the % changes across the last `window` points.

    Steps with a zero denominator are dropped rather than zero-filled.
    """
    tail = list(series)[-window:]
    changes = [
        percent_change(curr.value, prev.value)
        for prev, curr in zip(tail, tail[1:])
        if prev.value != 0
    ]
    return standard_deviation([c for c in changes if math.isfinite(c)])


def classify_trend(series: Series, mom: float, unit: Unit | str) -> Trend:
    """
    Map a MoM change to a trend label.

    Order of checks:
    1. Unknown MoM -> STABLE
    2. |MoM| within the unit's stable band -> STABLE
    3. |MoM| beyond 1.25x recent volatility (when volatility > 0) -> VOLATILE_UP/DOWN
    4. Otherwise RISING/FALLING by sign
    """
    threshold = TREND_THRESHOLDS[Unit(unit)]

    if not math.isfinite(mom):
        return Trend.STABLE

    if abs(mom) <= threshold.stable:
        return Trend.STABLE

    volatility = recent_volatility(series)
    if volatility > 0 and abs(mom) > threshold.volatility_multiplier * volatility:
        return Trend.VOLATILE_UP if mom > 0 else Trend.VOLATILE_DOWN

    return Trend.RISING if mom > 0 else Trend.FALLING
