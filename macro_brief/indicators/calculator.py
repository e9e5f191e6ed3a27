"""Compose per-series analytics into one snapshot with insights."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from macro_brief.config import FX_BASE, INDICATOR_SERIES
from macro_brief.indicators.deltas import YOY_MIN_POINTS, compute_deltas
from macro_brief.indicators.insights import evaluate
from macro_brief.indicators.trends import classify_trend
from macro_brief.models import (
    FxResult,
    FxSlots,
    IndicatorResult,
    IndicatorSlots,
    IndicatorSpec,
    Insight,
    Series,
)


class InsufficientDataPolicy(str, Enum):
    """What to do with a series too short for YoY."""

    RAISE = "raise"  # fail the indicator with InsufficientDataError
    NAN = "nan"  # keep it with NaN deltas and a STABLE trend


class InsufficientDataError(ValueError):
    """A series has fewer observations than the analytics require."""

    def __init__(self, series_name: str, count: int, required: int = YOY_MIN_POINTS) -> None:
        self.series_name = series_name
        self.count = count
        self.required = required
        super().__init__(
            f"Insufficient data for {series_name}: {count} observations, need {required}"
        )


@dataclass
class AnalyticsResult:
    """Complete analytics snapshot for one run."""

    as_of: str | None
    indicators: list[IndicatorResult]
    fx: list[FxResult]
    insights: list[Insight]
    policy: InsufficientDataPolicy = field(default=InsufficientDataPolicy.RAISE)

    def indicator(self, indicator_id: str) -> IndicatorResult | None:
        """Look up an indicator by id."""
        for result in self.indicators:
            if result.id == indicator_id:
                return result
        return None

    def to_slots(self) -> tuple[IndicatorSlots, FxSlots]:
        """Slot records consumed by the insight rules."""
        return (
            IndicatorSlots.from_mapping({r.id: r for r in self.indicators}),
            FxSlots.from_mapping({r.key: r for r in self.fx}),
        )


class IndicatorCalculator:
    """Turns raw indicator and FX series into results and insights."""

    def __init__(
        self, policy: InsufficientDataPolicy | str = InsufficientDataPolicy.RAISE
    ) -> None:
        self.policy = InsufficientDataPolicy(policy)

    def _check_length(self, name: str, series: Series) -> None:
        if self.policy is InsufficientDataPolicy.RAISE and len(series) < YOY_MIN_POINTS:
            raise InsufficientDataError(name, len(series))

    def build_indicator(self, spec: IndicatorSpec, series: Series) -> IndicatorResult:
        """
        Calculate deltas and trend for one indicator.

        Raises:
            InsufficientDataError: Under the RAISE policy, for fewer than 13 points
        """
        self._check_length(spec.id, series)

        deltas = compute_deltas(series)
        trend = classify_trend(series, deltas.mom, spec.unit)

        return IndicatorResult(
            id=spec.id,
            label=spec.label,
            unit=spec.unit,
            latest=deltas.latest,
            mom=deltas.mom,
            yoy=deltas.yoy,
            trend=trend,
            updated_at=series[-1].date if series else None,
            series=tuple(series),
        )

    def build_fx(self, symbol: str, series: Series, base: str = FX_BASE) -> FxResult:
        """Calculate deltas for one FX pair (base per unit of quote)."""
        self._check_length(f"{base}/{symbol}", series)

        deltas = compute_deltas(series)
        return FxResult(
            base=base,
            symbol=symbol,
            latest=deltas.latest,
            mom=deltas.mom,
            yoy=deltas.yoy,
            series=tuple(series),
        )

    def calculate(
        self,
        indicator_series: Mapping[str, Series],
        fx_series: Mapping[str, Series] | None = None,
        specs: Mapping[str, IndicatorSpec] = INDICATOR_SERIES,
    ) -> AnalyticsResult:
        """
        Calculate every indicator and FX pair, then evaluate insights.

        Args:
            indicator_series: Series keyed by indicator id (CPI, DGS10...)
            fx_series: Series keyed by quote currency (NGN, GBP...)
            specs: Indicator metadata; ids without a spec are skipped

        Raises:
            InsufficientDataError: Under the RAISE policy, for the first short series
        """
        indicators = [
            self.build_indicator(specs[indicator_id], series)
            for indicator_id, series in indicator_series.items()
            if indicator_id in specs
        ]
        fx = [
            self.build_fx(symbol, series)
            for symbol, series in (fx_series or {}).items()
        ]

        dates = [r.updated_at for r in indicators if r.updated_at]
        result = AnalyticsResult(
            as_of=max(dates) if dates else None,
            indicators=indicators,
            fx=fx,
            insights=[],
            policy=self.policy,
        )
        result.insights = evaluate(*result.to_slots())
        return result
