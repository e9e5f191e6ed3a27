"""In-memory response cache with time-based expiry."""

import threading
import time
from collections.abc import Callable
from typing import Any


class TTLCache:
    """
    Expiring key/value cache for raw API responses.

    Owned by whoever builds the fetchers and passed to them explicitly. The
    clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(
        self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        """Store a value stamped with the current clock reading."""
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(
                1
                for stored_at, _ in self._entries.values()
                if now - stored_at < self.ttl_seconds
            )
