"""Indicator analytics: deltas, trends and insights."""

from macro_brief.indicators.calculator import (
    AnalyticsResult,
    IndicatorCalculator,
    InsufficientDataError,
    InsufficientDataPolicy,
)
from macro_brief.indicators.deltas import calculate_mom, calculate_yoy, compute_deltas
from macro_brief.indicators.insights import MAX_INSIGHTS, RULES, evaluate
from macro_brief.indicators.trends import classify_trend, standard_deviation

__all__ = [
    "AnalyticsResult",
    "IndicatorCalculator",
    "InsufficientDataError",
    "InsufficientDataPolicy",
    "MAX_INSIGHTS",
    "RULES",
    "calculate_mom",
    "calculate_yoy",
    "classify_trend",
    "compute_deltas",
    "evaluate",
    "standard_deviation",
]
