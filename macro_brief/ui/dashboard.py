"""Streamlit dashboard for macro indicators, FX rates and insights.

Run with:  streamlit run macro_brief/ui/dashboard.py
"""

from datetime import date, datetime
from html import escape

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from macro_brief.config import Settings
from macro_brief.data import TTLCache, load_snapshot
from macro_brief.indicators import AnalyticsResult, InsufficientDataError
from macro_brief.models import FxResult, IndicatorResult, Insight
from macro_brief.ui.csv_export import (
    current_indicators_csv,
    fx_series_csv,
    historical_series_csv,
)
from macro_brief.ui.formatters import (
    change_color,
    format_currency,
    format_date,
    format_number,
    format_percentage,
    format_time_ago,
    trend_color,
    trend_icon,
)


RANGE_OPTIONS = {
    "1 Year": 12,
    "2 Years": 24,
    "5 Years": 60,
}

DEFAULT_CHART_INDICATORS = ("CPI", "UNRATE")

CHART_COLORS = [
    "rgb(59, 130, 246)",
    "rgb(34, 197, 94)",
    "rgb(168, 85, 247)",
    "rgb(251, 146, 60)",
    "rgb(236, 72, 153)",
]


@st.cache_resource
def get_caches() -> tuple[TTLCache, TTLCache]:
    """Response caches shared by every session of this process."""
    settings = Settings()
    return TTLCache(settings.fred_cache_ttl), TTLCache(settings.fx_cache_ttl)


def chart_frame(indicator: IndicatorResult, months: int) -> pd.DataFrame:
    """Observations from the last `months` calendar months as a date-indexed frame."""
    df = pd.DataFrame(
        {"date": [p.date for p in indicator.series], "value": [p.value for p in indicator.series]}
    )
    if df.empty:
        return df
    df["date"] = pd.to_datetime(df["date"])
    df = df.set_index("date").sort_index()
    cutoff = df.index[-1] - pd.DateOffset(months=months)
    return df[df.index > cutoff]


# =============================================================================
# HTML FRAGMENTS
# =============================================================================

def indicator_card_html(ind: IndicatorResult) -> str:
    color = trend_color(ind.trend)
    return f"""<div style="background: #1e293b; border: 1px solid #334155; border-left: 4px solid {color}; border-radius: 8px; padding: 1rem;">
        <div style="color: #94a3b8; font-size: 0.7rem; text-transform: uppercase; letter-spacing: 0.1em;">{escape(ind.label)}</div>
        <div style="font-size: 1.8rem; font-weight: 700; color: #f1f5f9; font-family: 'SF Mono', monospace;">{format_number(ind.latest, ind.unit)}</div>
        <div style="font-size: 0.8rem; margin-top: 0.25rem;">
            <span style="color: {change_color(ind.mom)};">MoM {format_percentage(ind.mom)}</span>
            &nbsp;|&nbsp;
            <span style="color: {change_color(ind.yoy)};">YoY {format_percentage(ind.yoy)}</span>
        </div>
        <div style="color: {color}; font-size: 0.8rem; font-weight: 600; margin-top: 0.5rem;">{trend_icon(ind.trend)} {ind.trend.value}</div>
        <div style="color: #64748b; font-size: 0.7rem; margin-top: 0.25rem;">Updated {format_date(ind.updated_at)}</div>
    </div>"""


def fx_row_html(fx: FxResult, spot: float | None = None) -> str:
    spot_html = ""
    if spot is not None:
        spot_html = f'<span style="color: #64748b; margin-left: 0.5rem;">spot {format_currency(spot)}</span>'
    return f"""<div style="display: flex; justify-content: space-between; padding: 0.4rem 0; border-bottom: 1px solid #334155;">
        <span style="color: #94a3b8; font-size: 0.85rem;">{escape(fx.pair)}</span>
        <span style="color: #e2e8f0; font-family: 'SF Mono', monospace; font-size: 0.85rem;">
            {format_currency(fx.latest)}
            <span style="color: {change_color(fx.mom)}; margin-left: 0.5rem;">MoM {format_percentage(fx.mom)}</span>
            <span style="color: {change_color(fx.yoy)}; margin-left: 0.5rem;">YoY {format_percentage(fx.yoy)}</span>
            {spot_html}
        </span>
    </div>"""


def insight_card_html(insight: Insight) -> str:
    return f"""<div style="background: #1e293b; border-left: 4px solid #3b82f6; border-radius: 4px; padding: 0.75rem 1rem; margin-bottom: 0.5rem;">
        <div style="display: flex; justify-content: space-between;">
            <span style="color: #f1f5f9; font-weight: 600;">{escape(insight.title)}</span>
            <span style="color: #93c5fd; font-size: 0.75rem;">{insight.confidence * 100:.0f}%</span>
        </div>
        <div style="color: #94a3b8; font-size: 0.8rem; margin-top: 0.25rem;">{escape(insight.rationale)}</div>
    </div>"""


# =============================================================================
# PANELS
# =============================================================================

def render_indicator_cards(result: AnalyticsResult) -> None:
    """Render one card per indicator."""
    columns = st.columns(len(result.indicators) or 1)
    for col, ind in zip(columns, result.indicators):
        with col:
            st.markdown(indicator_card_html(ind), unsafe_allow_html=True)


def build_series_figure(
    result: AnalyticsResult, indicator_ids: list[str], months: int
) -> go.Figure:
    """One line per selected indicator over the chosen range."""
    fig = go.Figure()
    for index, indicator_id in enumerate(indicator_ids):
        indicator = result.indicator(indicator_id)
        if indicator is None:
            continue
        df = chart_frame(indicator, months)
        if df.empty:
            continue
        fig.add_trace(go.Scatter(
            x=df.index, y=df["value"],
            mode="lines", line=dict(color=CHART_COLORS[index % len(CHART_COLORS)], width=2),
            name=indicator.label,
            hovertemplate=f"{indicator.label}<br>%{{x|%b %Y}}<br>%{{y:.2f}}<extra></extra>",
        ))

    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        margin=dict(t=10, r=10, b=40, l=40),
        height=360,
        showlegend=True,
        legend=dict(orientation="h", y=1.08, font=dict(color="#94a3b8")),
        xaxis=dict(showgrid=True, gridcolor="#1e293b", color="#64748b"),
        yaxis=dict(showgrid=True, gridcolor="#1e293b", color="#64748b"),
        hovermode="x unified",
    )
    return fig


def render_series_chart(result: AnalyticsResult, indicator_ids: list[str], months: int) -> None:
    """Render the selected indicators' history on one chart."""
    fig = build_series_figure(result, indicator_ids, months)
    if not fig.data:
        st.info("Select at least one indicator with history to chart")
        return
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})


def render_fx_panel(result: AnalyticsResult, spot: dict[str, float]) -> None:
    """Render FX rates against USD."""
    st.markdown("#### Exchange Rates")
    if not result.fx:
        st.info("FX rates not available")
        return

    for fx in result.fx:
        st.markdown(fx_row_html(fx, spot.get(fx.symbol)), unsafe_allow_html=True)


def render_ideas_panel(insights: list[Insight]) -> None:
    """Render rule-generated ideas in evaluation order."""
    st.markdown("#### Ideas")
    if not insights:
        st.markdown(
            """<div style="background: #10b98122; border: 1px solid #10b981; border-radius: 4px; padding: 0.75rem 1rem; color: #6ee7b7; font-size: 0.85rem;">
                No rules triggered
            </div>""",
            unsafe_allow_html=True,
        )
        return

    for insight in insights:
        st.markdown(insight_card_html(insight), unsafe_allow_html=True)
    st.caption("Heuristic ideas, not financial advice.")


def render_downloads(result: AnalyticsResult) -> None:
    """CSV download buttons."""
    stamp = date.today().isoformat()
    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            "Current indicators (CSV)",
            current_indicators_csv(result.indicators),
            file_name=f"indicators_current_{stamp}.csv",
            mime="text/csv",
        )
    with col2:
        st.download_button(
            "Indicator history (CSV)",
            historical_series_csv(result.indicators),
            file_name=f"indicators_historical_{stamp}.csv",
            mime="text/csv",
        )
    with col3:
        st.download_button(
            "FX history (CSV)",
            fx_series_csv(result.fx),
            file_name=f"fx_rates_{stamp}.csv",
            mime="text/csv",
        )


def main() -> None:
    """Main dashboard entry point."""
    st.set_page_config(
        page_title="Macro Brief",
        page_icon="",
        layout="wide",
        initial_sidebar_state="collapsed",
    )

    st.markdown(
        """
        <style>
            .stApp { background-color: #0f172a; }
            .stMarkdown, .stText, p, span, label { color: #e2e8f0; }
            h1, h2, h3, h4 { color: #f1f5f9 !important; font-weight: 600 !important; }
            #MainMenu, footer { visibility: hidden; }
        </style>
        """,
        unsafe_allow_html=True,
    )

    st.markdown(
        """<div style="padding: 0.5rem 0 1rem 0; border-bottom: 1px solid #334155; margin-bottom: 1rem;">
            <h1 style="margin: 0; font-size: 1.5rem;">Macro Brief</h1>
            <div style="color: #64748b; font-size: 0.75rem;">Data: FRED + exchangerate.host</div>
        </div>""",
        unsafe_allow_html=True,
    )

    fred_cache, fx_cache = get_caches()

    col_refresh, col_spacer = st.columns([1, 5])
    with col_refresh:
        if st.button("Refresh"):
            fred_cache.clear()
            fx_cache.clear()

    try:
        with st.spinner("Loading..."):
            result, market_data = load_snapshot(Settings(), fred_cache, fx_cache)
    except InsufficientDataError as e:
        st.error(str(e))
        return
    except ValueError as e:
        st.error(f"Configuration error: {e}")
        return

    if market_data.errors:
        st.warning(f"Unavailable: {', '.join(sorted(market_data.errors))}")

    if result.as_of:
        st.caption(
            f"As of {format_date(result.as_of)} ({format_time_ago(result.as_of)}) "
            f"| Loaded {datetime.now().strftime('%H:%M')}"
        )

    render_indicator_cards(result)
    st.markdown("<div style='height: 1rem;'></div>", unsafe_allow_html=True)

    col_select, col_range = st.columns([3, 1])
    with col_select:
        labels = {ind.id: ind.label for ind in result.indicators}
        selected = st.multiselect(
            "Indicators",
            options=list(labels.keys()),
            default=[key for key in DEFAULT_CHART_INDICATORS if key in labels],
            format_func=lambda key: labels[key],
        )
    with col_range:
        selected_range = st.selectbox("Range", options=list(RANGE_OPTIONS.keys()), index=2)

    render_series_chart(result, selected, RANGE_OPTIONS[selected_range])

    col1, col2 = st.columns(2)
    with col1:
        render_fx_panel(result, market_data.spot)
    with col2:
        render_ideas_panel(result.insights)

    st.markdown("---")
    render_downloads(result)


if __name__ == "__main__":
    main()
