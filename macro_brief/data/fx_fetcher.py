"""FX rate fetcher for USD-based currency pairs (exchangerate.host)."""

import logging
import threading
from collections.abc import Sequence
from datetime import date

import httpx
import pandas as pd

from macro_brief.config import FX_BASE, FX_SYMBOLS, Settings
from macro_brief.data.cache import TTLCache
from macro_brief.data.fred_fetcher import frame_to_series, month_end_frame
from macro_brief.models import ObservationPoint


logger = logging.getLogger(__name__)


class FxFetcher:
    """Fetches FX timeseries and spot rates with local caching."""

    BASE_URL = "https://api.exchangerate.host"

    def __init__(
        self,
        settings: Settings | None = None,
        cache: TTLCache | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.cache = cache if cache is not None else TTLCache(self.settings.fx_cache_ttl)
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

    def __enter__(self) -> "FxFetcher":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _get(self, path: str, params: dict) -> dict:
        """GET an endpoint and return the validated JSON body."""
        if self.settings.fx_api_key:
            params = {**params, "access_key": self.settings.fx_api_key}

        response = self.client.get(f"{self.BASE_URL}/{path}", params=params)
        response.raise_for_status()
        data = response.json()

        if not isinstance(data, dict):
            raise ValueError(f"Malformed FX response from /{path}")
        if data.get("success") is False:
            raise ValueError(f"FX API error from /{path}: {data.get('error')}")
        if not isinstance(data.get("rates"), dict):
            raise ValueError(f"Malformed FX response from /{path}: no rates")
        return data

    def fetch_timeseries(
        self,
        base: str = FX_BASE,
        symbols: Sequence[str] = FX_SYMBOLS,
        months: int | None = None,
        end: date | None = None,
    ) -> dict[str, list[ObservationPoint]]:
        """
        Fetch rate history and collapse it to one point per calendar month.

        Returns:
            Dict mapping quote currency to its monthly series (base per unit quote)
        """
        months = months or self.settings.fx_months
        cache_key = f"fx:{base}:{','.join(symbols)}:{months}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.debug(f"Cache hit for {cache_key}")
            return cached

        end = end or date.today()
        start = (pd.Timestamp(end) - pd.DateOffset(months=months)).date()

        logger.info(f"Fetching {base} rates for {', '.join(symbols)} from {start} to {end}...")
        data = self._get(
            "timeseries",
            {
                "base": base,
                "symbols": ",".join(symbols),
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
            },
        )

        rows = {symbol: [] for symbol in symbols}
        for day, quotes in data["rates"].items():
            if not isinstance(quotes, dict):
                continue
            for symbol in symbols:
                value = quotes.get(symbol)
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    rows[symbol].append({"date": day, "value": value})

        result = {
            symbol: frame_to_series(month_end_frame(pd.DataFrame(points, columns=["date", "value"])))
            for symbol, points in rows.items()
        }
        for symbol, series in result.items():
            logger.info(f"  {base}/{symbol}: {len(series)} monthly points")

        self.cache.set(cache_key, result)
        return result

    def fetch_latest(
        self, base: str = FX_BASE, symbols: Sequence[str] = FX_SYMBOLS
    ) -> dict[str, float]:
        """Fetch spot rates keyed by quote currency."""
        cache_key = f"fx:latest:{base}:{','.join(symbols)}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        data = self._get("latest", {"base": base, "symbols": ",".join(symbols)})
        rates = {
            symbol: float(value)
            for symbol, value in data["rates"].items()
            if isinstance(value, (int, float)) and not isinstance(value, bool)
        }

        self.cache.set(cache_key, rates)
        return rates
