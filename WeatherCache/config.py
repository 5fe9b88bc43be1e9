"""Runtime configuration from the environment (and a .env file if present)."""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from temperature_utils import TemperatureUnit, parse_unit

DEFAULT_CACHE_DIR = os.path.join("~", ".weathercache")
DEFAULT_EXPIRATION_HOURS = 24.0


class ConfigError(ValueError):
    """Raised when an environment value cannot be used."""


@dataclass
class Settings:
    openweather_api_key: str = ""
    places_api_key: str = ""
    cache_dir: str = DEFAULT_CACHE_DIR
    cache_expiration_hours: float = DEFAULT_EXPIRATION_HOURS
    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
    lang: str = "en"
    timeout: int = 10

    @property
    def cache_expiration_seconds(self) -> float:
        return self.cache_expiration_hours * 3600


def _number(name: str, default: float, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw)
    except ValueError as exc:
        raise ConfigError(f"Invalid {name}: {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from environment variables.

    Missing API keys are allowed here; the providers raise a missing
    credential error when they are actually used.

    Raises:
        ConfigError: If a numeric value or the unit is invalid
    """
    load_dotenv(env_file)

    try:
        unit = parse_unit(os.getenv("WEATHER_TEMPERATURE_UNIT", TemperatureUnit.CELSIUS.value))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    settings = Settings(
        openweather_api_key=os.getenv("OPENWEATHER_API_KEY", ""),
        places_api_key=os.getenv("GOOGLE_PLACES_API_KEY", ""),
        cache_dir=os.getenv("WEATHER_CACHE_DIR", DEFAULT_CACHE_DIR),
        cache_expiration_hours=_number("WEATHER_CACHE_EXPIRATION_HOURS", DEFAULT_EXPIRATION_HOURS),
        temperature_unit=unit,
        lang=os.getenv("WEATHER_LANG", "en"),
        timeout=_number("WEATHER_TIMEOUT", 10, cast=int),
    )

    logging.info(
        "Configuration loaded: cache_dir=%s expiration=%sh unit=%s",
        settings.cache_dir,
        settings.cache_expiration_hours,
        settings.temperature_unit.value,
    )
    return settings
