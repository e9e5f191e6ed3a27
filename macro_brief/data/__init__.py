"""Data fetching and caching."""

from .cache import TTLCache
from .fred_fetcher import FredFetcher
from .fx_fetcher import FxFetcher
from .loader import MarketData, MarketDataLoader, load_snapshot

__all__ = ["FredFetcher", "FxFetcher", "MarketData", "MarketDataLoader", "TTLCache", "load_snapshot"]
