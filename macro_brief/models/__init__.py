"""Shared data models."""

from macro_brief.models.market_data import (
    DeltaResult,
    FxResult,
    FxSlots,
    IndicatorResult,
    IndicatorSlots,
    IndicatorSpec,
    Insight,
    ObservationPoint,
    Series,
    Trend,
    Unit,
)

__all__ = [
    "DeltaResult",
    "FxResult",
    "FxSlots",
    "IndicatorResult",
    "IndicatorSlots",
    "IndicatorSpec",
    "Insight",
    "ObservationPoint",
    "Series",
    "Trend",
    "Unit",
]
