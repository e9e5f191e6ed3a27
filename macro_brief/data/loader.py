"""Fetch every indicator and FX series for one analytics run."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import httpx

from macro_brief.config import INDICATOR_SERIES, Settings
from macro_brief.data.cache import TTLCache
from macro_brief.data.fred_fetcher import FredFetcher
from macro_brief.data.fx_fetcher import FxFetcher
from macro_brief.indicators import AnalyticsResult, IndicatorCalculator
from macro_brief.models import ObservationPoint


logger = logging.getLogger(__name__)


@dataclass
class MarketData:
    """Raw series for one run, spot FX rates, and per-series fetch errors."""

    indicators: dict[str, list[ObservationPoint]] = field(default_factory=dict)
    fx: dict[str, list[ObservationPoint]] = field(default_factory=dict)
    spot: dict[str, float] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)


class MarketDataLoader:
    """Runs FRED and FX fetches concurrently."""

    def __init__(self, fred: FredFetcher, fx: FxFetcher, max_workers: int = 6) -> None:
        self.fred = fred
        self.fx = fx
        self.max_workers = max_workers

    def load(self) -> MarketData:
        """
        Fetch all series. Series are complete and sorted once returned.

        Failures are logged and collected in `errors`; the affected series
        are simply absent from the result.
        """
        data = MarketData()

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            indicator_futures = {
                indicator_id: pool.submit(self.fred.fetch_series, spec.series_id)
                for indicator_id, spec in INDICATOR_SERIES.items()
            }
            fx_future = pool.submit(self.fx.fetch_timeseries)
            spot_future = pool.submit(self.fx.fetch_latest)

            for indicator_id, future in indicator_futures.items():
                try:
                    data.indicators[indicator_id] = future.result()
                except (httpx.HTTPError, ValueError) as e:
                    logger.error(f"Error fetching {indicator_id}: {e}")
                    data.errors[indicator_id] = str(e)

            try:
                data.fx = fx_future.result()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Error fetching FX rates: {e}")
                data.errors["FX"] = str(e)

            try:
                data.spot = spot_future.result()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Error fetching spot FX rates: {e}")
                data.errors["FX_SPOT"] = str(e)

        if data.errors:
            logger.warning(f"Failed to fetch {len(data.errors)} series: {list(data.errors.keys())}")

        return data


def load_snapshot(
    settings: Settings | None = None,
    fred_cache: TTLCache | None = None,
    fx_cache: TTLCache | None = None,
) -> tuple[AnalyticsResult, MarketData]:
    """
    Fetch everything and run the analytics once.

    Caches are passed in by the caller so they can outlive a single run
    (e.g. a long-running dashboard process).

    Raises:
        ValueError: Missing FRED key
        InsufficientDataError: A short series under the RAISE policy
    """
    settings = settings or Settings()
    with FredFetcher(settings, cache=fred_cache) as fred, FxFetcher(settings, cache=fx_cache) as fx:
        data = MarketDataLoader(fred, fx).load()

    calculator = IndicatorCalculator(settings.insufficient_data_policy)
    return calculator.calculate(data.indicators, data.fx), data
