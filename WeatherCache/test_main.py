"""Tests for the command-line entry point."""
import pytest
from unittest.mock import patch
from main import format_weather, main, parse_args
from places_provider import PlaceResult
from temperature_utils import TemperatureUnit
from weather_data import WeatherCondition, WeatherSnapshot
from weather_provider import NetworkError

SNAPSHOT = WeatherSnapshot(
    conditions=[WeatherCondition("Clear", "clear sky")],
    temperature=21.5,
    city_label="Cape Town",
    min_temp=18.0,
    max_temp=24.0,
)


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setenv("OPENWEATHER_API_KEY", "test")
    monkeypatch.setenv("GOOGLE_PLACES_API_KEY", "test")
    monkeypatch.delenv("WEATHER_TEMPERATURE_UNIT", raising=False)
    with patch("config.load_dotenv"), patch("main.setup_logging"):
        yield


def test_parse_negative_coordinates():
    args = parse_args(["current", "-33.9", "18.4"])

    assert args.command == "current"
    assert args.lat == -33.9
    assert args.lon == 18.4


def test_format_weather():
    assert format_weather(SNAPSHOT, TemperatureUnit.CELSIUS) == "Cape Town: 22°C, clear sky (min 18°C / max 24°C)"


def test_current_then_offline_fallback(tmp_path, capsys):
    """Second run fails upstream and prints the cached reading."""
    argv = ["--cache-dir", str(tmp_path), "current", "-33.9", "18.4"]

    with patch("main.OpenWeatherProvider") as provider_cls:
        provider_cls.return_value.fetch_current.return_value = SNAPSHOT
        assert main(argv) == 0

    with patch("main.OpenWeatherProvider") as provider_cls:
        provider_cls.return_value.fetch_current.side_effect = NetworkError("offline")
        assert main(argv) == 0

    output = capsys.readouterr().out.splitlines()
    assert output == [format_weather(SNAPSHOT, TemperatureUnit.CELSIUS)] * 2


def test_current_offline_without_cache(tmp_path, capsys):
    with patch("main.OpenWeatherProvider") as provider_cls:
        provider_cls.return_value.fetch_current.side_effect = NetworkError("offline")
        assert main(["--cache-dir", str(tmp_path), "current", "1", "2"]) == 1

    assert "Weather unavailable" in capsys.readouterr().err


def test_favourites_add_list_remove(tmp_path, capsys):
    place = PlaceResult("Cape Town", -33.92, 18.42, "ChIJ1")
    base = ["--cache-dir", str(tmp_path)]

    with patch("main.GooglePlacesProvider") as places_cls:
        places_cls.return_value.search.return_value = [place]
        assert main(base + ["favourites", "add", "cape town"]) == 0
        assert main(base + ["favourites", "add", "cape town"]) == 0

    assert main(base + ["favourites", "list"]) == 0
    assert main(base + ["favourites", "remove", "Cape Town"]) == 0
    assert main(base + ["favourites", "remove", "Cape Town"]) == 1

    out = capsys.readouterr().out
    assert "Added Cape Town" in out
    assert "already a favourite" in out
    assert out.count("Cape Town  (-33.9200, 18.4200)") == 1


def test_cached_without_data(tmp_path, capsys):
    place = PlaceResult("Oslo", 59.91, 10.75, "ChIJOslo")
    base = ["--cache-dir", str(tmp_path)]
    with patch("main.GooglePlacesProvider") as places_cls:
        places_cls.return_value.search.return_value = [place]
        main(base + ["favourites", "add", "oslo"])

    assert main(base + ["cached", "oslo"]) == 1
    assert "Nothing cached for Oslo" in capsys.readouterr().out


@pytest.mark.parametrize("option", [
    ["--max-retries", "0"],
    ["--max-retries", "-2"],
    ["--retry-delay", "-1"],
    ["--expiration-hours", "0"],
])
def test_invalid_options_fail_startup(tmp_path, capsys, option):
    with patch("main.OpenWeatherProvider") as provider_cls:
        assert main(["--cache-dir", str(tmp_path)] + option + ["current", "1", "2"]) == 2

    provider_cls.return_value.fetch_current.assert_not_called()
    assert "Error:" in capsys.readouterr().err
