"""FRED API data fetcher with response caching."""

import logging
import threading
from datetime import date

import httpx
import numpy as np
import pandas as pd

from macro_brief.config import INDICATOR_SERIES, Settings
from macro_brief.data.cache import TTLCache
from macro_brief.models import ObservationPoint


logger = logging.getLogger(__name__)


def clean_frame(df: pd.DataFrame) -> pd.DataFrame:
    """
    Coerce a raw date/value frame to ascending, unique, finite rows.

    Non-numeric values ("." for missing in FRED) are dropped, duplicate dates
    keep their last observation.
    """
    if df.empty:
        return pd.DataFrame(columns=["date", "value"])

    df = df[["date", "value"]].copy()
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    df = df.dropna()
    df = df[np.isfinite(df["value"])]
    return df.drop_duplicates(subset="date", keep="last").sort_values("date")


def month_end_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Keep the last observation of each calendar month."""
    if df.empty:
        return df
    df = df.sort_values("date")
    months = pd.to_datetime(df["date"]).dt.to_period("M")
    return df.groupby(months, sort=True).tail(1)


def frame_to_series(df: pd.DataFrame) -> list[ObservationPoint]:
    """Convert a raw date/value frame into an ascending, finite series."""
    df = clean_frame(df)
    return [
        ObservationPoint(date=str(d), value=float(v))
        for d, v in zip(df["date"], df["value"])
    ]


class FredFetcher:
    """Fetches observations from the FRED API."""

    BASE_URL = "https://api.stlouisfed.org/fred"

    def __init__(
        self,
        settings: Settings | None = None,
        cache: TTLCache | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.settings.validate()
        self.cache = cache if cache is not None else TTLCache(self.settings.fred_cache_ttl)
        self._client = client
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialize HTTP client (shared by the loader threads)."""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(timeout=30.0)
            return self._client

    def close(self) -> None:
        """Close HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> "FredFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _fetch_observations(self, series_id: str, start: date, end: date) -> pd.DataFrame:
        """
        Fetch raw observations from FRED.

        Raises:
            httpx.HTTPStatusError: Non-2xx response
            ValueError: Payload without an observations list
        """
        response = self.client.get(
            f"{self.BASE_URL}/series/observations",
            params={
                "series_id": series_id,
                "api_key": self.settings.fred_api_key,
                "file_type": "json",
                "observation_start": start.isoformat(),
                "observation_end": end.isoformat(),
            },
        )
        response.raise_for_status()
        data = response.json()

        observations = data.get("observations") if isinstance(data, dict) else None
        if not isinstance(observations, list):
            raise ValueError(f"Malformed FRED response for {series_id}: no observations")
        if not observations:
            return pd.DataFrame(columns=["date", "value"])

        df = pd.DataFrame(observations)
        if not {"date", "value"} <= set(df.columns):
            raise ValueError(f"Malformed FRED response for {series_id}: missing date/value")
        return df

    def fetch_series(
        self, series_id: str, months: int | None = None, end: date | None = None
    ) -> list[ObservationPoint]:
        """
        Fetch a series covering the last `months` months.

        Args:
            series_id: FRED series ID
            months: Lookback in months (default from settings)
            end: Last observation date to request (default today)

        Returns:
            Ascending list of finite observations, one per calendar month.
            Daily and weekly series keep the last observation of each month.
        """
        months = months or self.settings.fred_months
        cache_key = f"fred:{series_id}:{months}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {series_id}")
            return cached

        end = end or date.today()
        start = (pd.Timestamp(end) - pd.DateOffset(months=months + 1)).date()

        logger.info(f"Fetching {series_id} from {start} to {end}...")
        raw = clean_frame(self._fetch_observations(series_id, start, end))
        series = frame_to_series(month_end_frame(raw))
        logger.info(f"  {series_id}: {len(raw)} observations, {len(series)} months")

        self.cache.set(cache_key, series)
        return series

    def fetch_indicators(
        self, months: int | None = None
    ) -> tuple[dict[str, list[ObservationPoint]], dict[str, str]]:
        """
        Fetch every tracked indicator.

        Returns:
            (series keyed by indicator id, error messages keyed by indicator id)
        """
        results = {}
        errors = {}

        for indicator_id, spec in INDICATOR_SERIES.items():
            try:
                results[indicator_id] = self.fetch_series(spec.series_id, months)
            except httpx.HTTPStatusError as e:
                logger.error(f"HTTP error fetching {spec.series_id}: {e.response.status_code}")
                errors[indicator_id] = str(e)
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"Error fetching {spec.series_id}: {e}")
                errors[indicator_id] = str(e)

        if errors:
            logger.warning(f"Failed to fetch {len(errors)} series: {list(errors.keys())}")

        return results, errors


def main() -> None:
    """CLI entry point for fetching FRED data."""
    import argparse
    import sys

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Fetch FRED indicator data")
    parser.add_argument(
        "--series",
        type=str,
        help="Fetch one indicator only (e.g. CPI, DGS10)",
    )
    parser.add_argument(
        "--months",
        type=int,
        default=None,
        help="Lookback in months",
    )
    args = parser.parse_args()

    try:
        with FredFetcher() as fetcher:
            if args.series:
                if args.series not in INDICATOR_SERIES:
                    print(f"Unknown indicator: {args.series}")
                    print(f"Available: {', '.join(INDICATOR_SERIES.keys())}")
                    sys.exit(1)
                spec = INDICATOR_SERIES[args.series]
                results = {args.series: fetcher.fetch_series(spec.series_id, args.months)}
            else:
                results, _ = fetcher.fetch_indicators(args.months)

            print("\nFetched:")
            print("-" * 60)
            for indicator_id, series in results.items():
                last = series[-1].date if series else "N/A"
                print(f"  {indicator_id:14} | {len(series):4} obs | Last: {last}")

    except ValueError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)
    except httpx.HTTPStatusError as e:
        print(f"API error: {e.response.status_code} - {e.response.text}")
        sys.exit(1)


if __name__ == "__main__":
    main()
