"""Weather domain model - pure data structures independent of any API."""
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

CURRENT_LOCATION_NAME = "Current"

# Namespace for ids derived from coordinates or place ids.
_KEY_NAMESPACE = uuid.UUID("6f1c2a4e-9d1b-4c55-8a9e-0b6f3e7d2c11")


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


@dataclass(frozen=True)
class WeatherCondition:
    """A single condition reported by the provider."""
    category: str  # e.g., "Clouds", "Rain", "Clear"
    description: str  # e.g., "broken clouds", "light rain"

    def to_dict(self) -> Dict[str, Any]:
        return {"main": self.category, "description": self.description}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherCondition":
        return cls(category=str(data["main"]), description=str(data["description"]))


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current conditions for a place. Temperatures are in Celsius."""
    conditions: List[WeatherCondition]
    temperature: float
    city_label: str
    min_temp: Optional[float] = None
    max_temp: Optional[float] = None

    @property
    def primary_condition(self) -> Optional[WeatherCondition]:
        return self.conditions[0] if self.conditions else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weather": [c.to_dict() for c in self.conditions],
            "main": {
                "temp": self.temperature,
                "temp_min": self.min_temp,
                "temp_max": self.max_temp,
            },
            "name": self.city_label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeatherSnapshot":
        main = data["main"]
        return cls(
            conditions=[WeatherCondition.from_dict(c) for c in data["weather"]],
            temperature=float(main["temp"]),
            city_label=str(data["name"]),
            min_temp=_optional_float(main.get("temp_min")),
            max_temp=_optional_float(main.get("temp_max")),
        )


@dataclass(frozen=True)
class ForecastEntry:
    """One forecast step (3-hour granularity on OpenWeather)."""
    timestamp: int  # UNIX timestamp (UTC)
    temperature: float
    conditions: List[WeatherCondition]
    min_temp: Optional[float] = None
    max_temp: Optional[float] = None
    precipitation_probability: Optional[float] = None  # 0.0 to 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dt": self.timestamp,
            "main": {
                "temp": self.temperature,
                "temp_min": self.min_temp,
                "temp_max": self.max_temp,
            },
            "weather": [c.to_dict() for c in self.conditions],
            "pop": self.precipitation_probability,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ForecastEntry":
        main = data["main"]
        return cls(
            timestamp=int(data["dt"]),
            temperature=float(main["temp"]),
            conditions=[WeatherCondition.from_dict(c) for c in data["weather"]],
            min_temp=_optional_float(main.get("temp_min")),
            max_temp=_optional_float(main.get("temp_max")),
            precipitation_probability=_optional_float(data.get("pop")),
        )


@dataclass(frozen=True)
class LocationKey:
    """
    Identifies where a weather reading applies.

    Equality covers every field, not just ``id``: two keys name the same
    cache subject only if all of them match.
    """
    id: str
    name: str
    latitude: float
    longitude: float
    place_id: Optional[str] = None

    @classmethod
    def new(
        cls,
        name: str,
        latitude: float,
        longitude: float,
        place_id: Optional[str] = None
    ) -> "LocationKey":
        """Create a key with a fresh random id."""
        return cls(
            id=str(uuid.uuid4()),
            name=name,
            latitude=float(latitude),
            longitude=float(longitude),
            place_id=place_id,
        )

    @classmethod
    def for_coordinates(
        cls,
        latitude: float,
        longitude: float,
        name: str = CURRENT_LOCATION_NAME
    ) -> "LocationKey":
        """
        Synthesize the key used for raw coordinates.

        The id is derived from name and coordinates so that deriving the key
        twice for the same point yields equal keys.
        """
        latitude = float(latitude)
        longitude = float(longitude)
        seed = f"{name}:{latitude!r}:{longitude!r}"
        return cls(
            id=str(uuid.uuid5(_KEY_NAMESPACE, seed)),
            name=name,
            latitude=latitude,
            longitude=longitude,
        )

    @classmethod
    def for_place(
        cls,
        name: str,
        latitude: float,
        longitude: float,
        place_id: str
    ) -> "LocationKey":
        """Key for a search result; the same place always maps to the same key."""
        return cls(
            id=str(uuid.uuid5(_KEY_NAMESPACE, f"place:{place_id}")),
            name=name,
            latitude=float(latitude),
            longitude=float(longitude),
            place_id=place_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "placeId": self.place_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LocationKey":
        place_id = data.get("placeId")
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            place_id=None if place_id is None else str(place_id),
        )


@dataclass(frozen=True)
class CacheEntry:
    """Weather and forecast stored for one location at a point in time."""
    key: LocationKey
    weather: WeatherSnapshot
    forecast: List[ForecastEntry] = field(default_factory=list)
    stored_at: float = field(default_factory=time.time)  # UNIX timestamp

    def age(self, now: Optional[float] = None) -> float:
        """Seconds elapsed since the entry was stored."""
        current_time = time.time() if now is None else now
        return current_time - self.stored_at

    def is_stale(self, max_age_seconds: float, now: Optional[float] = None) -> bool:
        """Check if this entry is older than max_age_seconds."""
        return self.age(now) >= max_age_seconds

    def to_dict(self) -> Dict[str, Any]:
        return {
            "location": self.key.to_dict(),
            "weatherData": self.weather.to_dict(),
            "forecastData": [f.to_dict() for f in self.forecast],
            "lastUpdated": self.stored_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        return cls(
            key=LocationKey.from_dict(data["location"]),
            weather=WeatherSnapshot.from_dict(data["weatherData"]),
            forecast=[ForecastEntry.from_dict(f) for f in data["forecastData"]],
            stored_at=float(data["lastUpdated"]),
        )


def daily_forecast(entries: List[ForecastEntry]) -> List[ForecastEntry]:
    """
    Reduce a 3-hourly forecast to one entry per day.

    For every local calendar day the entry closest to noon is kept.

    Args:
        entries: Forecast entries in any order

    Returns:
        List[ForecastEntry]: One entry per day, sorted by timestamp
    """
    by_day: Dict[Any, List[ForecastEntry]] = {}
    for entry in entries:
        day = datetime.fromtimestamp(entry.timestamp).date()
        by_day.setdefault(day, []).append(entry)

    result = []
    for day, items in by_day.items():
        noon = datetime(day.year, day.month, day.day, 12).timestamp()
        result.append(min(items, key=lambda item: abs(item.timestamp - noon)))
    return sorted(result, key=lambda item: item.timestamp)
