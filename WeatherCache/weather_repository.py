"""Weather repository: remote fetches with write-through caching and stale fallback."""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple, TypeVar
from weather_provider import WeatherProviderBase, WeatherProviderError
from weather_data import CacheEntry, ForecastEntry, LocationKey, WeatherSnapshot
from cache_store import WeatherCacheStore

T = TypeVar("T")


class WeatherRepository:
    """
    Failure-tolerant access to weather and forecast data.

    Every successful fetch is written to the cache. When the provider fails,
    the last cached value for the same location is returned instead, however
    old it is. The original error only reaches the caller when nothing is
    cached for that location.

    Cache writes are serialized with a lock; the repository keeps no other
    state of its own.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        cache: WeatherCacheStore,
        max_retries: int = 1,
        retry_delay_seconds: float = 1.0
    ):
        """
        Initialize weather repository.

        Args:
            provider: Weather provider to use
            cache: Cache store used for write-through and fallback
            max_retries: Attempts per remote call; only transient errors are retried
            retry_delay_seconds: Delay between retries (grows linearly per attempt)
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.provider = provider
        self.cache = cache
        self.max_retries = max_retries
        self.retry_delay_seconds = retry_delay_seconds
        self._write_lock = threading.Lock()

    def get_current_weather(self, latitude: float, longitude: float) -> WeatherSnapshot:
        """
        Get current weather for raw coordinates.

        The result is cached under the key synthesized for the coordinates,
        with an empty forecast.

        Raises:
            WeatherProviderError: If the fetch fails and nothing is cached
        """
        key = LocationKey.for_coordinates(latitude, longitude)
        try:
            weather = self._fetch(self.provider.fetch_current, latitude, longitude)
        except WeatherProviderError as e:
            cached = self._fallback(key, e)
            return cached.weather

        self._store(CacheEntry(key=key, weather=weather, forecast=[], stored_at=self.cache.clock()))
        return weather

    def get_forecast(self, latitude: float, longitude: float) -> List[ForecastEntry]:
        """
        Get the forecast for raw coordinates.

        On success the forecast replaces the one cached for the coordinates,
        keeping the cached weather snapshot. Without a cached snapshot there
        is nothing to attach the forecast to, so nothing is written.

        Raises:
            WeatherProviderError: If the fetch fails and nothing is cached
        """
        key = LocationKey.for_coordinates(latitude, longitude)
        try:
            forecast = self._fetch(self.provider.fetch_forecast, latitude, longitude)
        except WeatherProviderError as e:
            cached = self._fallback(key, e)
            return cached.forecast

        with self._write_lock:
            existing = self.cache.get(key)
            if existing is None:
                logging.debug(f"No cached weather for {key.name}, forecast not cached")
            else:
                self.cache.put(CacheEntry(
                    key=key,
                    weather=existing.weather,
                    forecast=forecast,
                    stored_at=self.cache.clock(),
                ))
        return forecast

    def get_weather_for_favourite(self, key: LocationKey) -> Tuple[WeatherSnapshot, List[ForecastEntry]]:
        """
        Get current weather and forecast for a saved location.

        Both remote calls run concurrently. The pair is cached only when both
        succeed; if either fails the cached pair is returned instead.

        Raises:
            WeatherProviderError: If a fetch fails and nothing is cached. The
                current-weather error wins when both calls failed.
        """
        with ThreadPoolExecutor(max_workers=2) as executor:
            weather_future = executor.submit(
                self._fetch, self.provider.fetch_current, key.latitude, key.longitude
            )
            forecast_future = executor.submit(
                self._fetch, self.provider.fetch_forecast, key.latitude, key.longitude
            )
            weather_error = weather_future.exception()
            forecast_error = forecast_future.exception()

        error = weather_error or forecast_error
        if error is not None:
            if not isinstance(error, WeatherProviderError):
                raise error
            cached = self._fallback(key, error)
            return cached.weather, cached.forecast

        weather = weather_future.result()
        forecast = forecast_future.result()
        self._store(CacheEntry(key=key, weather=weather, forecast=forecast, stored_at=self.cache.clock()))
        return weather, forecast

    def get_cached_weather(self, key: LocationKey) -> Optional[CacheEntry]:
        """Last known data for key, without touching the network."""
        return self.cache.get(key)

    def _store(self, entry: CacheEntry) -> None:
        with self._write_lock:
            self.cache.put(entry)

    def _fallback(self, key: LocationKey, error: WeatherProviderError) -> CacheEntry:
        cached = self.cache.get(key)
        if cached is None:
            logging.error(f"Weather fetch for {key.name} failed and no cache available: {error}")
            raise error

        cache_age = cached.age(self.cache.clock())
        if self.cache.is_fresh(key):
            logging.info(f"Weather fetch failed, using cached data (age: {cache_age:.1f}s)")
        else:
            logging.warning(f"Weather fetch failed, using stale cache (age: {cache_age:.1f}s)")
        return cached

    def _fetch(self, fetch: Callable[[float, float], T], latitude: float, longitude: float) -> T:
        last_error = None
        for attempt in range(self.max_retries):
            try:
                logging.debug(f"Weather fetch attempt {attempt + 1}/{self.max_retries}")
                return fetch(latitude, longitude)
            except WeatherProviderError as e:
                last_error = e
                logging.warning(f"Weather fetch attempt {attempt + 1} failed: {e}")
                # Credential, request and HTTP errors fail the same way on retry
                if not e.transient:
                    break
                if attempt < self.max_retries - 1:
                    retry_delay = self.retry_delay_seconds * (attempt + 1)
                    logging.info(f"Retrying in {retry_delay}s...")
                    time.sleep(retry_delay)
        raise last_error
