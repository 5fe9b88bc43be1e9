"""Command-line weather client with offline fallback to cached data."""
import argparse
import logging
import sys
import time
from typing import List, Optional

from blob_store import BlobStoreError, FileBlobStore
from cache_store import WeatherCacheStore
from config import ConfigError, Settings, load_settings
from favourites_store import FavouritesStore
from location_repository import LocationRepository
from openweather_provider import OpenWeatherProvider
from places_provider import GooglePlacesProvider, PlacesProviderError
from temperature_utils import TemperatureUnit, format_temperature, parse_unit
from weather_data import CacheEntry, ForecastEntry, WeatherSnapshot, daily_forecast
from weather_provider import WeatherProviderError
from weather_repository import WeatherRepository


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("weathercache", description="Weather client with offline cache")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--cache-dir", default=None, help="Directory for cached data and favourites")
    parser.add_argument("--expiration-hours", type=float, default=None, help="Cache freshness window")
    parser.add_argument("--unit", choices=[u.value for u in TemperatureUnit], default=None)
    parser.add_argument("--max-retries", type=int, default=1)
    parser.add_argument("--retry-delay", type=float, default=1.0)
    parser.add_argument("--verbose", action="store_true")

    commands = parser.add_subparsers(dest="command", required=True)

    current = commands.add_parser("current", help="Current weather for coordinates")
    current.add_argument("lat", type=float)
    current.add_argument("lon", type=float)

    forecast = commands.add_parser("forecast", help="Forecast for coordinates")
    forecast.add_argument("lat", type=float)
    forecast.add_argument("lon", type=float)
    forecast.add_argument("--daily", action="store_true", help="One entry per day, closest to noon")

    search = commands.add_parser("search", help="Search for places")
    search.add_argument("query")

    favourites = commands.add_parser("favourites", help="Manage favourite locations")
    favourite_actions = favourites.add_subparsers(dest="action", required=True)
    favourite_actions.add_parser("list")
    add = favourite_actions.add_parser("add", help="Add the first search result for a query")
    add.add_argument("query")
    remove = favourite_actions.add_parser("remove")
    remove.add_argument("name")

    favourite_weather = commands.add_parser("favourite-weather", help="Weather and forecast for a favourite")
    favourite_weather.add_argument("name")
    favourite_weather.add_argument("--daily", action="store_true")

    cached = commands.add_parser("cached", help="Last cached data for a favourite, without network")
    cached.add_argument("name")

    commands.add_parser("clear-cache", help="Delete all cached weather")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    if args.cache_dir:
        settings.cache_dir = args.cache_dir
    if args.expiration_hours is not None:
        if args.expiration_hours <= 0:
            raise ConfigError("--expiration-hours must be positive")
        settings.cache_expiration_hours = args.expiration_hours
    if args.max_retries < 1:
        raise ConfigError("--max-retries must be at least 1")
    if args.retry_delay < 0:
        raise ConfigError("--retry-delay must not be negative")
    if args.unit:
        settings.temperature_unit = parse_unit(args.unit)
    return settings


class App:
    """Wires providers, stores and repositories together."""

    def __init__(self, settings: Settings, max_retries: int = 1, retry_delay: float = 1.0):
        self.settings = settings
        blob_store = FileBlobStore(settings.cache_dir)
        self.cache = WeatherCacheStore(blob_store, expiration_window=settings.cache_expiration_seconds)
        self.favourites = FavouritesStore(blob_store)
        self.weather = WeatherRepository(
            provider=OpenWeatherProvider(
                api_key=settings.openweather_api_key,
                lang=settings.lang,
                timeout=settings.timeout,
            ),
            cache=self.cache,
            max_retries=max_retries,
            retry_delay_seconds=retry_delay,
        )
        self.locations = LocationRepository(
            GooglePlacesProvider(api_key=settings.places_api_key, timeout=settings.timeout),
            self.favourites,
        )
        logging.info("Weather client ready (cache dir=%s)", settings.cache_dir)


def format_weather(weather: WeatherSnapshot, unit: TemperatureUnit) -> str:
    condition = weather.primary_condition
    text = f"{weather.city_label or 'Unknown'}: {format_temperature(weather.temperature, unit)}"
    if condition is not None:
        text += f", {condition.description or condition.category}"
    if weather.min_temp is not None and weather.max_temp is not None:
        text += (
            f" (min {format_temperature(weather.min_temp, unit)}"
            f" / max {format_temperature(weather.max_temp, unit)})"
        )
    return text


def format_forecast_entry(entry: ForecastEntry, unit: TemperatureUnit) -> str:
    when = time.strftime("%a %d %b %H:%M", time.localtime(entry.timestamp))
    condition = entry.conditions[0].description if entry.conditions else ""
    line = f"{when}  {format_temperature(entry.temperature, unit):>6}  {condition}"
    if entry.precipitation_probability is not None:
        line += f"  ({round(entry.precipitation_probability * 100)}% precip)"
    return line


def print_forecast(forecast: List[ForecastEntry], unit: TemperatureUnit, daily: bool) -> None:
    entries = daily_forecast(forecast) if daily else forecast
    if not entries:
        print("No forecast data")
    for entry in entries:
        print(format_forecast_entry(entry, unit))


def describe_cache_entry(app: App, cached: CacheEntry) -> str:
    state = "fresh" if app.cache.is_fresh(cached.key) else "stale"
    updated = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(cached.stored_at))
    return f"Cached {updated} ({state})"


def run_command(app: App, args: argparse.Namespace) -> int:
    unit = app.settings.temperature_unit

    if args.command == "current":
        print(format_weather(app.weather.get_current_weather(args.lat, args.lon), unit))
    elif args.command == "forecast":
        print_forecast(app.weather.get_forecast(args.lat, args.lon), unit, args.daily)
    elif args.command == "search":
        for place in app.locations.search_locations(args.query):
            print(f"{place.name}  ({place.latitude:.4f}, {place.longitude:.4f})")
    elif args.command == "favourites":
        return run_favourites(app, args)
    elif args.command == "favourite-weather":
        key = app.locations.find_favourite(args.name)
        weather, forecast = app.weather.get_weather_for_favourite(key)
        print(format_weather(weather, unit))
        print_forecast(forecast, unit, args.daily)
    elif args.command == "cached":
        key = app.locations.find_favourite(args.name)
        cached = app.weather.get_cached_weather(key)
        if cached is None:
            print(f"Nothing cached for {key.name}")
            return 1
        print(describe_cache_entry(app, cached))
        print(format_weather(cached.weather, unit))
    elif args.command == "clear-cache":
        app.cache.clear()
        print("Cache cleared")
    return 0


def run_favourites(app: App, args: argparse.Namespace) -> int:
    if args.action == "list":
        favourites = app.locations.favourites()
        if not favourites:
            print("No favourites saved")
        for favourite in favourites:
            print(f"{favourite.name}  ({favourite.latitude:.4f}, {favourite.longitude:.4f})")
    elif args.action == "add":
        place = app.locations.search_locations(args.query)[0]
        key = app.locations.favourite_from_place(place)
        if app.locations.add_favourite(key):
            print(f"Added {key.name}")
        else:
            print(f"{key.name} is already a favourite")
    elif args.action == "remove":
        key = app.locations.find_favourite(args.name)
        app.locations.remove_favourite(key)
        print(f"Removed {key.name}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)

    try:
        settings = apply_overrides(load_settings(), args)
        app = App(settings, max_retries=args.max_retries, retry_delay=args.retry_delay)
    except (ConfigError, BlobStoreError) as err:
        logging.error("Startup failed: %s", err)
        print(f"Error: {err}", file=sys.stderr)
        return 2

    try:
        return run_command(app, args)
    except WeatherProviderError as err:
        logging.error("Weather fetch failed: %s", err)
        print(f"Weather unavailable: {err}", file=sys.stderr)
    except PlacesProviderError as err:
        logging.error("Place search failed: %s", err)
        print(f"Search failed: {err}", file=sys.stderr)
    except KeyError as err:
        print(f"No favourite named {err}", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
