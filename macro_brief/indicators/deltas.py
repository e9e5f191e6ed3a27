"""Period-over-period changes for monthly series."""

import math

from macro_brief.models import DeltaResult, Series


MOM_MIN_POINTS = 2
YOY_MIN_POINTS = 13  # 12 observations back approximates one year of monthly data


def percent_change(current: float, previous: float | None) -> float:
    """
    Percentage change from previous to current, on a 0-100 scale.

    Returns NaN when previous is missing, zero or non-finite.
    """
    if previous is None or previous == 0 or not math.isfinite(previous):
        return math.nan
    if not math.isfinite(current):
        return math.nan
    return (current / previous - 1) * 100


def calculate_mom(series: Series) -> float:
    """Month-over-month change in %, NaN with fewer than two points."""
    if len(series) < MOM_MIN_POINTS:
        return math.nan
    return percent_change(series[-1].value, series[-2].value)


def calculate_yoy(series: Series) -> float:
    """Year-over-year change in %, NaN with fewer than thirteen points."""
    if len(series) < YOY_MIN_POINTS:
        return math.nan
    return percent_change(series[-1].value, series[-YOY_MIN_POINTS].value)


def compute_deltas(series: Series) -> DeltaResult:
    """
    Derive latest, MoM and YoY from a series.

    A series too short for YoY yields an all-NaN result; partial results
    are never returned.
    """
    if len(series) < YOY_MIN_POINTS:
        return DeltaResult()

    return DeltaResult(
        latest=series[-1].value,
        mom=calculate_mom(series),
        yoy=calculate_yoy(series),
    )
