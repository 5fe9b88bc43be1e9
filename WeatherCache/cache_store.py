"""Persistent weather cache keyed by location, with freshness eviction."""
import logging
import time
from typing import Any, Callable, Dict, Optional

from blob_store import BlobStore
from list_store import JsonListStore
from weather_data import CacheEntry, LocationKey

CACHE_BLOB_KEY = "cached-weather-data"
DEFAULT_EXPIRATION_SECONDS = 24 * 60 * 60


class WeatherCacheStore(JsonListStore[CacheEntry]):
    """
    Stores at most one CacheEntry per LocationKey.

    Expired entries are only dropped when a new entry is put; there is no
    background sweep, so use is_fresh() to decide whether cached data can
    be trusted without a failure having occurred.
    """

    blob_key = CACHE_BLOB_KEY

    def __init__(
        self,
        blob_store: BlobStore,
        expiration_window: float = DEFAULT_EXPIRATION_SECONDS,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize the cache store.

        Args:
            blob_store: Persistence backend
            expiration_window: Seconds an entry stays fresh
            clock: Returns the current UNIX time (injectable for tests)
        """
        super().__init__(blob_store)
        self.expiration_window = expiration_window
        self.clock = clock

    @property
    def expiration_window(self) -> float:
        return self._expiration_window

    @expiration_window.setter
    def expiration_window(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError("expiration_window must be positive")
        self._expiration_window = float(seconds)

    def _encode_item(self, item: CacheEntry) -> Dict[str, Any]:
        return item.to_dict()

    def _decode_item(self, data: Dict[str, Any]) -> CacheEntry:
        return CacheEntry.from_dict(data)

    def put(self, entry: CacheEntry) -> bool:
        """
        Add or replace the entry for entry.key, then evict expired entries.

        Eviction uses the expiration window in effect now, so entries stored
        under a longer window can be dropped here.

        Returns:
            bool: False if persisting failed
        """
        entries = [cached for cached in self.load() if cached.key != entry.key]
        entries.append(entry)

        cutoff = self.clock() - self.expiration_window
        kept = [cached for cached in entries if cached.stored_at >= cutoff]
        evicted = len(entries) - len(kept)
        if evicted:
            logging.info(f"Evicted {evicted} expired cache entries (window {self.expiration_window:.0f}s)")

        logging.debug(f"Caching weather for {entry.key.name} ({entry.key.latitude}, {entry.key.longitude})")
        return self.save(kept)

    def get(self, key: LocationKey) -> Optional[CacheEntry]:
        for cached in self.load():
            if cached.key == key:
                return cached
        return None

    def is_fresh(self, key: LocationKey) -> bool:
        cached = self.get(key)
        if cached is None:
            return False
        return not cached.is_stale(self.expiration_window, now=self.clock())

    def remove(self, key: LocationKey) -> bool:
        """Drop the entry for key. Returns False if there was none."""
        entries = self.load()
        kept = [cached for cached in entries if cached.key != key]
        if len(kept) == len(entries):
            return False
        return self.save(kept)

    def clear(self) -> bool:
        logging.info("Clearing weather cache")
        return self.save([])
