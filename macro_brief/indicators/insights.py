"""Rule-based insights over the current indicator and FX snapshot.

Rules are evaluated in declaration order and the first ``MAX_INSIGHTS`` that
fire are returned as-is, without re-ranking by confidence. Each rule reads only
the slots it needs; a missing slot (or an unknown NaN field) means the rule
simply does not fire.
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from macro_brief.models import FxSlots, IndicatorSlots, Insight, Trend


MAX_INSIGHTS = 5

Predicate = Callable[[IndicatorSlots, FxSlots], bool]
Builder = Callable[[IndicatorSlots, FxSlots], Insight]


@dataclass(frozen=True)
class InsightRule:
    """A named predicate paired with the insight it produces."""

    name: str
    predicate: Predicate
    build: Builder

    def apply(self, indicators: IndicatorSlots, fx: FxSlots) -> Insight | None:
        if not self.predicate(indicators, fx):
            return None
        return self.build(indicators, fx)


def _fixed(title: str, rationale: str, confidence: float) -> Builder:
    insight = Insight(title=title, rationale=rationale, confidence=confidence)
    return lambda indicators, fx: insight


# =============================================================================
# Predicates
# =============================================================================

def _idle_cash(ind: IndicatorSlots, fx: FxSlots) -> bool:
    return ind.dgs3mo is not None and ind.dgs3mo.latest >= 4.5


def _short_duration(ind: IndicatorSlots, fx: FxSlots) -> bool:
    # Inverted curve with non-falling inflation
    if ind.dgs3mo is None or ind.dgs10 is None or ind.cpi is None:
        return False
    return ind.dgs3mo.latest >= ind.dgs10.latest and ind.cpi.yoy >= 0


def _intermediate_bonds(ind: IndicatorSlots, fx: FxSlots) -> bool:
    if ind.dgs10 is None or ind.unrate is None:
        return False
    return ind.dgs10.mom < 0 and ind.unrate.latest <= 4


def _risk_on(ind: IndicatorSlots, fx: FxSlots) -> bool:
    if ind.unrate is None or ind.cpi is None:
        return False
    return ind.unrate.yoy <= -0.2 and ind.cpi.mom <= 0


def _de_risk(ind: IndicatorSlots, fx: FxSlots) -> bool:
    if ind.cpi is None:
        return False
    return ind.cpi.mom > 0.3 or getattr(ind.cpi, "trend", None) == Trend.VOLATILE_UP


def _refi(ind: IndicatorSlots, fx: FxSlots) -> bool:
    return ind.mortgage30us is not None and ind.mortgage30us.mom <= -0.25


def _fx_move(ind: IndicatorSlots, fx: FxSlots) -> bool:
    return fx.usdngn is not None and abs(fx.usdngn.mom) >= 3


def _fx_insight(ind: IndicatorSlots, fx: FxSlots) -> Insight:
    # A rising USD-per-unit rate means the quote currency is weakening
    direction = "weakening" if fx.usdngn.mom > 0 else "strengthening"
    return Insight(
        title="Optimize USD↔NGN conversions",
        rationale=(
            f"NGN {direction} >3% MoM. Use big monthly moves to batch or stagger "
            "transfers depending on direction."
        ),
        confidence=0.8,
    )


# =============================================================================
# Canonical rule table (declaration order is significant)
# =============================================================================

RULES: tuple[InsightRule, ...] = (
    InsightRule(
        "idle_cash",
        _idle_cash,
        _fixed(
            "Earn yield on idle cash",
            "Short T-Bills/HYSA may offer attractive yields versus checking accounts.",
            0.9,
        ),
    ),
    InsightRule(
        "short_duration",
        _short_duration,
        _fixed(
            "Stay short duration",
            "Yield curve inversion with non-falling inflation favors short-duration "
            "over long bonds.",
            0.7,
        ),
    ),
    InsightRule(
        "intermediate_bonds",
        _intermediate_bonds,
        _fixed(
            "Consider intermediate bonds",
            "Falling 10-year yields with low unemployment suggests duration exposure "
            "may be favorable.",
            0.6,
        ),
    ),
    InsightRule(
        "risk_on_dca",
        _risk_on,
        _fixed(
            "Risk-on DCA",
            "Improving labor + non-accelerating inflation supports steady DCA into "
            "broad equities.",
            0.6,
        ),
    ),
    InsightRule(
        "de_risk",
        _de_risk,
        _fixed(
            "De-risk portfolio",
            "Rising/volatile inflation suggests increasing cash buffer and defensive "
            "positioning.",
            0.65,
        ),
    ),
    InsightRule(
        "refi_check",
        _refi,
        _fixed(
            "Refi check",
            "Mortgage rates dropped ≥25bp MoM; consider a refinance quote.",
            0.65,
        ),
    ),
    InsightRule("fx_conversions", _fx_move, _fx_insight),
)


def evaluate(
    indicators: IndicatorSlots | Mapping,
    fx: FxSlots | Mapping | None = None,
    rules: Sequence[InsightRule] = RULES,
) -> list[Insight]:
    """
    Evaluate rules in order and return at most MAX_INSIGHTS insights.

    Args:
        indicators: Slot record, or a mapping keyed by indicator id (DGS3MO, CPI...)
        fx: Slot record, or a mapping keyed by pair (USDNGN...)
        rules: Ordered rule table
    """
    if not isinstance(indicators, IndicatorSlots):
        indicators = IndicatorSlots.from_mapping(indicators)
    if fx is None:
        fx = FxSlots()
    elif not isinstance(fx, FxSlots):
        fx = FxSlots.from_mapping(fx)

    insights = []
    for rule in rules:
        insight = rule.apply(indicators, fx)
        if insight is not None:
            insights.append(insight)
        if len(insights) == MAX_INSIGHTS:
            break

    return insights
