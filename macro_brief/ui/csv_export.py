"""Export indicator and FX data as CSV."""

import logging
from collections.abc import Iterable
from datetime import date
from pathlib import Path

import pandas as pd

from macro_brief.indicators import AnalyticsResult
from macro_brief.models import FxResult, IndicatorResult


logger = logging.getLogger(__name__)

CURRENT_COLUMNS = ["indicator", "label", "latest", "yoy", "mom", "trend", "updatedAt", "unit"]
HISTORICAL_COLUMNS = ["indicator", "date", "value", "unit"]
FX_COLUMNS = ["pair", "date", "rate"]


def current_indicators_frame(indicators: Iterable[IndicatorResult]) -> pd.DataFrame:
    """One row per indicator with its latest value, changes and trend."""
    rows = [
        {
            "indicator": ind.id,
            "label": ind.label,
            "latest": ind.latest,
            "yoy": ind.yoy,
            "mom": ind.mom,
            "trend": ind.trend.value,
            "updatedAt": ind.updated_at,
            "unit": ind.unit.value,
        }
        for ind in indicators
    ]
    return pd.DataFrame(rows, columns=CURRENT_COLUMNS)


def historical_series_frame(indicators: Iterable[IndicatorResult]) -> pd.DataFrame:
    """Long-format history: one row per indicator observation."""
    rows = [
        {"indicator": ind.id, "date": point.date, "value": point.value, "unit": ind.unit.value}
        for ind in indicators
        for point in ind.series
    ]
    return pd.DataFrame(rows, columns=HISTORICAL_COLUMNS)


def fx_series_frame(fx_rates: Iterable[FxResult]) -> pd.DataFrame:
    """Long-format FX history: one row per pair observation."""
    rows = [
        {"pair": fx.pair, "date": point.date, "rate": point.value}
        for fx in fx_rates
        for point in fx.series
    ]
    return pd.DataFrame(rows, columns=FX_COLUMNS)


def _to_csv(df: pd.DataFrame, decimals: int) -> str:
    # Unknown values stay empty rather than becoming 0
    return df.to_csv(
        index=False, float_format=f"%.{decimals}f", na_rep="", lineterminator="\n"
    )


def current_indicators_csv(indicators: Iterable[IndicatorResult]) -> str:
    return _to_csv(current_indicators_frame(indicators), 2)


def historical_series_csv(indicators: Iterable[IndicatorResult]) -> str:
    return _to_csv(historical_series_frame(indicators), 2)


def fx_series_csv(fx_rates: Iterable[FxResult]) -> str:
    return _to_csv(fx_series_frame(fx_rates), 4)


def export_all(
    result: AnalyticsResult, output_dir: Path | str, stamp: date | None = None
) -> list[Path]:
    """
    Write current indicators, indicator history and FX history to CSV files.

    Args:
        result: Analytics snapshot
        output_dir: Target directory (created if missing)
        stamp: Date used in the file names (default today)

    Returns:
        Paths of the written files
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    stamp_str = (stamp or date.today()).isoformat()

    files = {
        f"indicators_current_{stamp_str}.csv": current_indicators_csv(result.indicators),
        f"indicators_historical_{stamp_str}.csv": historical_series_csv(result.indicators),
        f"fx_rates_{stamp_str}.csv": fx_series_csv(result.fx),
    }

    paths = []
    for name, content in files.items():
        path = output_dir / name
        path.write_text(content, encoding="utf-8")
        logger.info(f"Wrote {path}")
        paths.append(path)
    return paths


def main() -> None:
    """CLI entry point."""
    import argparse

    from macro_brief.config import Settings
    from macro_brief.data import load_snapshot
    from macro_brief.indicators import InsufficientDataError

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Export indicators and FX rates as CSV")
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output directory (default: exports/)",
    )
    args = parser.parse_args()

    settings = Settings()
    try:
        result, _ = load_snapshot(settings)
        paths = export_all(result, args.output or settings.output_dir)
    except InsufficientDataError as e:
        print(f"Error: {e}")
        raise SystemExit(1)
    except ValueError as e:
        print(f"Configuration error: {e}")
        raise SystemExit(1)

    for path in paths:
        print(f"Exported: {path}")


if __name__ == "__main__":
    main()
