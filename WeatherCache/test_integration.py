"""Integration tests - can optionally hit real API (disabled by default)."""
import os
import pytest
from blob_store import FileBlobStore
from cache_store import WeatherCacheStore
from openweather_provider import OpenWeatherProvider
from weather_data import LocationKey
from weather_repository import WeatherRepository


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_openweather_integration():
    """
    Integration test that hits the real OpenWeather API.

    Set OPENWEATHER_API_KEY environment variable to run this test.
    """
    provider = OpenWeatherProvider(api_key=os.environ.get("OPENWEATHER_API_KEY"))

    weather = provider.fetch_current(33.44, -94.04)
    forecast = provider.fetch_forecast(33.44, -94.04)

    assert weather.temperature is not None
    assert weather.conditions
    assert len(forecast) > 0
    assert forecast[0].timestamp > 0


@pytest.mark.skipif(
    not os.environ.get("OPENWEATHER_API_KEY"),
    reason="OPENWEATHER_API_KEY not set - skipping integration test"
)
def test_weather_repository_integration(tmp_path):
    """Integration test for WeatherRepository with real API and file cache."""
    provider = OpenWeatherProvider(api_key=os.environ.get("OPENWEATHER_API_KEY"))
    cache = WeatherCacheStore(FileBlobStore(str(tmp_path)))
    repository = WeatherRepository(provider, cache)
    favourite = LocationKey.new("Texarkana", 33.44, -94.04)

    weather, forecast = repository.get_weather_for_favourite(favourite)

    reopened = WeatherCacheStore(FileBlobStore(str(tmp_path)))
    cached = reopened.get(favourite)
    assert cached.weather == weather
    assert cached.forecast == forecast
    assert reopened.is_fresh(favourite)
