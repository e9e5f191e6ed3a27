"""Data models for indicator and FX series."""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum


class Unit(str, Enum):
    """Display and threshold family of a series."""

    INDEX = "index"
    PERCENT = "percent"
    RATE = "rate"


class Trend(str, Enum):
    """Trend label derived from MoM change and recent volatility."""

    RISING = "RISING"
    FALLING = "FALLING"
    VOLATILE_UP = "VOLATILE_UP"
    VOLATILE_DOWN = "VOLATILE_DOWN"
    STABLE = "STABLE"


@dataclass(frozen=True)
class ObservationPoint:
    """Single observation of a series."""

    date: str
    value: float


# Ascending by date, unique dates, finite values.
Series = Sequence[ObservationPoint]


@dataclass(frozen=True)
class DeltaResult:
    """Latest value with month-over-month and year-over-year changes (in %)."""

    latest: float = math.nan
    mom: float = math.nan
    yoy: float = math.nan


@dataclass(frozen=True)
class IndicatorSpec:
    """Static metadata for a tracked FRED indicator."""

    id: str
    series_id: str
    label: str
    unit: Unit


@dataclass(frozen=True)
class IndicatorResult:
    """Computed state of one economic indicator."""

    id: str
    label: str
    unit: Unit
    latest: float
    mom: float
    yoy: float
    trend: Trend
    updated_at: str | None
    series: tuple[ObservationPoint, ...] = field(default=(), repr=False)


@dataclass(frozen=True)
class FxResult:
    """Computed state of one USD-based FX pair."""

    base: str
    symbol: str
    latest: float
    mom: float
    yoy: float
    series: tuple[ObservationPoint, ...] = field(default=(), repr=False)

    @property
    def pair(self) -> str:
        """Display name, e.g. ``USD/NGN``."""
        return f"{self.base}/{self.symbol}"

    @property
    def key(self) -> str:
        """Slot key, e.g. ``USDNGN``."""
        return f"{self.base}{self.symbol}"


@dataclass(frozen=True)
class Insight:
    """Rule-generated recommendation with a fixed confidence."""

    title: str
    rationale: str
    confidence: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1], got {self.confidence}")


@dataclass(frozen=True)
class IndicatorSlots:
    """
    Indicators addressable by the insight rules. Absent slots are None.

    A slot may hold a bare DeltaResult; rules reading `trend` then treat it as
    unknown.
    """

    dgs3mo: IndicatorResult | DeltaResult | None = None
    dgs10: IndicatorResult | DeltaResult | None = None
    cpi: IndicatorResult | DeltaResult | None = None
    unrate: IndicatorResult | DeltaResult | None = None
    mortgage30us: IndicatorResult | DeltaResult | None = None

    @classmethod
    def from_mapping(
        cls, indicators: Mapping[str, IndicatorResult | DeltaResult]
    ) -> "IndicatorSlots":
        """Build from a mapping keyed by indicator id (``DGS3MO``, ``CPI``...)."""
        return cls(
            dgs3mo=indicators.get("DGS3MO"),
            dgs10=indicators.get("DGS10"),
            cpi=indicators.get("CPI"),
            unrate=indicators.get("UNRATE"),
            mortgage30us=indicators.get("MORTGAGE30US"),
        )


@dataclass(frozen=True)
class FxSlots:
    """FX pairs addressable by the insight rules. Absent slots are None."""

    usdngn: FxResult | DeltaResult | None = None
    usdgbp: FxResult | DeltaResult | None = None
    usdeur: FxResult | DeltaResult | None = None

    @classmethod
    def from_mapping(cls, fx: Mapping[str, FxResult | DeltaResult]) -> "FxSlots":
        """Build from a mapping keyed by pair (``USDNGN``...)."""
        return cls(
            usdngn=fx.get("USDNGN"),
            usdgbp=fx.get("USDGBP"),
            usdeur=fx.get("USDEUR"),
        )
