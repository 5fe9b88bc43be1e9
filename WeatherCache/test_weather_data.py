"""Tests for weather_data module."""
import json
import pytest
from datetime import datetime
from weather_data import (
    CacheEntry,
    ForecastEntry,
    LocationKey,
    WeatherCondition,
    WeatherSnapshot,
    daily_forecast,
)


@pytest.fixture
def sample_weather():
    return WeatherSnapshot(
        conditions=[WeatherCondition("Clouds", "broken clouds")],
        temperature=21.5,
        city_label="Cape Town",
        min_temp=18.0,
        max_temp=24.0,
    )


def test_location_key_equality_covers_all_fields():
    """Keys are equal only when every field matches."""
    key = LocationKey(id="a", name="Cape Town", latitude=-33.9, longitude=18.4)

    assert key == LocationKey(id="a", name="Cape Town", latitude=-33.9, longitude=18.4)
    assert key != LocationKey(id="b", name="Cape Town", latitude=-33.9, longitude=18.4)
    assert key != LocationKey(id="a", name="Cape Town", latitude=-33.9, longitude=18.4, place_id="x")
    assert key != LocationKey(id="a", name="Current", latitude=-33.9, longitude=18.4)


def test_location_key_new_mints_distinct_ids():
    first = LocationKey.new("Paris", 48.85, 2.35)
    second = LocationKey.new("Paris", 48.85, 2.35)

    assert first.id != second.id
    assert first != second


def test_location_key_for_coordinates_is_deterministic():
    """Deriving the key twice for the same point gives equal keys."""
    first = LocationKey.for_coordinates(-33.9, 18.4)
    second = LocationKey.for_coordinates(-33.9, 18.4)

    assert first == second
    assert first.name == "Current"
    assert first.place_id is None
    assert LocationKey.for_coordinates(-33.9, 18.5) != first


def test_location_key_is_immutable():
    key = LocationKey.new("Paris", 48.85, 2.35)

    with pytest.raises(AttributeError):
        key.name = "Lyon"


def test_location_key_dict_uses_place_id_wire_name():
    key = LocationKey(id="a", name="Cape Town", latitude=-33.9, longitude=18.4, place_id="ChIJ1")

    data = key.to_dict()

    assert data["placeId"] == "ChIJ1"
    assert LocationKey.from_dict(data) == key


def test_weather_snapshot_from_openweather_shape():
    snapshot = WeatherSnapshot.from_dict({
        "weather": [{"main": "Rain", "description": "light rain"}],
        "main": {"temp": 12.3},
        "name": "Bergen",
    })

    assert snapshot.temperature == 12.3
    assert snapshot.min_temp is None
    assert snapshot.primary_condition == WeatherCondition("Rain", "light rain")


def test_forecast_entry_optional_fields():
    entry = ForecastEntry.from_dict({
        "dt": 1700000000,
        "main": {"temp": 10.0, "temp_min": 8.0, "temp_max": 11.0},
        "weather": [{"main": "Clear", "description": "clear sky"}],
    })

    assert entry.precipitation_probability is None
    assert entry.min_temp == 8.0
    assert entry.max_temp == 11.0


def test_cache_entry_survives_json(sample_weather):
    """An entry written as JSON reads back equal."""
    entry = CacheEntry(
        key=LocationKey.new("Cape Town", -33.9, 18.4),
        weather=sample_weather,
        forecast=[
            ForecastEntry(1700000000, 20.0, [WeatherCondition("Clear", "clear sky")], precipitation_probability=0.2),
        ],
        stored_at=1700000123.5,
    )

    restored = CacheEntry.from_dict(json.loads(json.dumps(entry.to_dict())))

    assert restored == entry


def test_cache_entry_from_malformed_dict():
    with pytest.raises(KeyError):
        CacheEntry.from_dict({"location": {"id": "a"}})


def test_cache_entry_is_stale(sample_weather):
    entry = CacheEntry(key=LocationKey.new("x", 0, 0), weather=sample_weather, stored_at=1000.0)

    assert entry.age(now=1600.0) == 600.0
    assert entry.is_stale(max_age_seconds=600, now=1600.0) is True
    assert entry.is_stale(max_age_seconds=601, now=1600.0) is False


def test_daily_forecast_picks_entry_closest_to_noon():
    clear = [WeatherCondition("Clear", "clear sky")]
    day_one = [datetime(2024, 3, 1, hour).timestamp() for hour in (0, 9, 12, 21)]
    day_two = [datetime(2024, 3, 2, hour).timestamp() for hour in (3, 15)]
    entries = [ForecastEntry(int(ts), float(i), clear) for i, ts in enumerate(day_two + day_one)]

    result = daily_forecast(entries)

    assert [datetime.fromtimestamp(e.timestamp).hour for e in result] == [12, 15]
    assert result[0].timestamp < result[1].timestamp


def test_daily_forecast_empty():
    assert daily_forecast([]) == []


def test_location_key_for_place_is_stable():
    """The same search result always yields the same key."""
    first = LocationKey.for_place("Cape Town", -33.92, 18.42, "ChIJ1")
    second = LocationKey.for_place("Cape Town", -33.92, 18.42, "ChIJ1")

    assert first == second
    assert first.place_id == "ChIJ1"
    assert first != LocationKey.for_place("Cape Town", -33.92, 18.42, "ChIJ2")
