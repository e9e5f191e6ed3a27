"""Display formatting shared by the dashboard, digest and exports.

Unknown values (None, NaN, unparseable dates) always render as an em dash so
they can never be mistaken for zero.
"""

import math
from datetime import datetime

import pandas as pd

from macro_brief.models import Trend, Unit


PLACEHOLDER = "—"

TREND_COLORS = {
    Trend.RISING: "#10b981",
    Trend.FALLING: "#ef4444",
    Trend.VOLATILE_UP: "#f59e0b",
    Trend.VOLATILE_DOWN: "#f97316",
    Trend.STABLE: "#6b7280",
}

TREND_ICONS = {
    Trend.RISING: "↑",
    Trend.FALLING: "↓",
    Trend.VOLATILE_UP: "⚡↑",
    Trend.VOLATILE_DOWN: "⚡↓",
    Trend.STABLE: "→",
}

# Badge colours (background, text) for the email digest
TREND_BADGES = {
    Trend.RISING: ("#d1fae5", "#065f46"),
    Trend.FALLING: ("#fee2e2", "#991b1b"),
    Trend.VOLATILE_UP: ("#fef3c7", "#92400e"),
    Trend.VOLATILE_DOWN: ("#fed7aa", "#9a3412"),
    Trend.STABLE: ("#f3f4f6", "#374151"),
}


def is_known(value: float | None) -> bool:
    """True for a finite number."""
    return value is not None and math.isfinite(value)


def format_number(value: float | None, unit: Unit | str) -> str:
    """Format a level: index values with 1 decimal, percent/rate with 2 and a % sign."""
    if not is_known(value):
        return PLACEHOLDER
    if Unit(unit) is Unit.INDEX:
        return f"{value:.1f}"
    return f"{value:.2f}%"


def format_percentage(value: float | None) -> str:
    """Format a change as a signed percentage, e.g. +2.5%."""
    if not is_known(value):
        return PLACEHOLDER
    return f"{value:+.1f}%"


def format_currency(value: float | None, decimals: int = 4) -> str:
    """Format an FX rate."""
    if not is_known(value):
        return PLACEHOLDER
    return f"{value:.{decimals}f}"


def format_date(value: str | datetime | None) -> str:
    """Format as 'Dec 25, 2023'."""
    if value is None:
        return PLACEHOLDER
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return PLACEHOLDER
    return parsed.strftime("%b %d, %Y")


def format_time_ago(value: str | datetime | None, now: datetime | None = None) -> str:
    """Relative time, e.g. '5 mins ago'."""
    if value is None:
        return PLACEHOLDER
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return PLACEHOLDER

    now = pd.Timestamp(now or datetime.now())
    if parsed.tzinfo is not None and now.tzinfo is None:
        now = now.tz_localize(parsed.tzinfo)
    elif parsed.tzinfo is None and now.tzinfo is not None:
        parsed = parsed.tz_localize(now.tzinfo)

    minutes = int((now - parsed).total_seconds() // 60)
    if minutes < 1:
        return "just now"
    if minutes < 60:
        return f"{minutes} min{'s' if minutes > 1 else ''} ago"

    hours = minutes // 60
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"

    days = hours // 24
    return f"{days} day{'s' if days > 1 else ''} ago"


def _as_trend(trend: Trend | str) -> Trend | None:
    try:
        return Trend(trend)
    except ValueError:
        return None


def trend_color(trend: Trend | str) -> str:
    """Hex colour for a trend label (grey for anything unknown)."""
    return TREND_COLORS.get(_as_trend(trend), "#6b7280")


def trend_icon(trend: Trend | str) -> str:
    """Arrow icon for a trend label."""
    return TREND_ICONS.get(_as_trend(trend), "•")


def trend_badge(trend: Trend | str) -> tuple[str, str]:
    """(background, text) colours for a trend badge."""
    return TREND_BADGES.get(_as_trend(trend), ("#f3f4f6", "#374151"))


def change_color(value: float | None) -> str:
    """Green for non-negative changes, red for negative, grey when unknown."""
    if not is_known(value):
        return "#6b7280"
    return "#059669" if value >= 0 else "#dc2626"
