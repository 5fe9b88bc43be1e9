"""OpenWeather Current Weather and 5 day / 3 hour Forecast API provider implementation."""
import logging
import requests
from typing import Any, Dict, List
from weather_provider import (
    DecodeError,
    HTTPStatusError,
    MalformedRequestError,
    MalformedResponseError,
    MissingCredentialError,
    NetworkError,
    RateLimitedError,
    RequestTimeoutError,
    UnauthorizedError,
    WeatherProviderBase,
    WeatherProviderError,
)
from weather_data import ForecastEntry, WeatherCondition, WeatherSnapshot


class OpenWeatherProvider(WeatherProviderBase):
    """
    Weather provider using the free OpenWeather APIs.

    Current conditions: https://openweathermap.org/current
    Forecast: https://openweathermap.org/forecast5
    Temperatures are always requested in metric units so the domain model
    stays in Celsius; conversion for display happens in temperature_utils.
    """

    CURRENT_URL = "https://api.openweathermap.org/data/2.5/weather"
    FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"

    def __init__(
        self,
        api_key: str,
        lang: str = "en",
        timeout: int = 10,
        session: requests.Session = None
    ):
        """
        Initialize OpenWeather provider.

        Args:
            api_key: OpenWeather API key
            lang: Language code for descriptions (e.g., "en", "de")
            timeout: HTTP request timeout in seconds
            session: Optional requests session (defaults to module-level requests)
        """
        self.api_key = api_key
        self.lang = lang
        self.timeout = timeout
        self.session = session

    def fetch_current(self, lat: float, lon: float) -> WeatherSnapshot:
        """
        Fetch current weather from OpenWeather Current Weather API.

        Raises:
            WeatherProviderError: If the API request fails
        """
        data = self._get_json(self.CURRENT_URL, lat, lon)

        try:
            weather_array = data.get("weather", [])
            if not weather_array:
                logging.error("Response missing 'weather' array")
                raise DecodeError("response missing 'weather' array")

            main_data = data.get("main", {})
            if not main_data:
                raise DecodeError("response missing 'main' block")

            snapshot = WeatherSnapshot(
                conditions=self._parse_conditions(weather_array),
                temperature=float(main_data["temp"]),
                city_label=data.get("name", ""),
                min_temp=main_data.get("temp_min"),
                max_temp=main_data.get("temp_max"),
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise DecodeError(str(e)) from e

        logging.info(f"Successfully parsed weather data: {snapshot.temperature}°C, {snapshot.city_label}")
        return snapshot

    def fetch_forecast(self, lat: float, lon: float) -> List[ForecastEntry]:
        """
        Fetch the 5 day / 3 hour forecast.

        Raises:
            WeatherProviderError: If the API request fails
        """
        data = self._get_json(self.FORECAST_URL, lat, lon)

        try:
            items = data["list"]
            forecast = []
            for item in items:
                main_data = item["main"]
                pop = item.get("pop")
                forecast.append(ForecastEntry(
                    timestamp=int(item["dt"]),
                    temperature=float(main_data["temp"]),
                    conditions=self._parse_conditions(item.get("weather", [])),
                    min_temp=main_data.get("temp_min"),
                    max_temp=main_data.get("temp_max"),
                    precipitation_probability=None if pop is None else float(pop),
                ))
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse forecast response: {e}", exc_info=True)
            raise DecodeError(str(e)) from e

        logging.info(f"Successfully parsed forecast: {len(forecast)} entries")
        return forecast

    def _get_json(self, url: str, lat: float, lon: float) -> Dict[str, Any]:
        if not self.api_key:
            raise MissingCredentialError("OpenWeather API key is missing")
        if not (-90.0 <= lat <= 90.0) or not (-180.0 <= lon <= 180.0):
            raise MalformedRequestError(f"Invalid coordinates: lat={lat} lon={lon}")

        params = {
            "lat": lat,
            "lon": lon,
            "appid": self.api_key,
            "units": "metric",
            "lang": self.lang,
        }
        http = self.session or requests

        try:
            logging.info(f"Making OpenWeather API request: {url}")
            logging.debug(f"Request parameters: lat={lat}, lon={lon}, lang={self.lang}")

            response = http.get(url, params=params, timeout=self.timeout)

            logging.info(f"API response status: {response.status_code}")
        except requests.exceptions.Timeout as e:
            logging.error(f"Request timed out: {e}")
            raise RequestTimeoutError() from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise NetworkError(str(e)) from e

        if not response.ok:
            logging.error(f"API request failed with status {response.status_code}")
            self._handle_error_response(response)

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(f"response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise MalformedResponseError("Invalid response from weather service")
        return data

    @staticmethod
    def _parse_conditions(weather_array: List[Dict[str, Any]]) -> List[WeatherCondition]:
        return [
            WeatherCondition(
                category=weather.get("main", "Unknown"),
                description=weather.get("description", ""),
            )
            for weather in weather_array
        ]

    def _handle_error_response(self, response: requests.Response) -> None:
        """Classify and raise an error from an OpenWeather error response."""
        status = response.status_code
        try:
            error_data = response.json()
            message = error_data.get("message", "Unknown error")
            logging.error(f"OpenWeather API error response: {error_data}")
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {status}, body: {response.text[:500]}")
            message = response.text[:200]

        error_msg = f"OpenWeather API error {status}: {message}"
        if status == 401:
            raise UnauthorizedError(error_msg)
        if status == 429:
            raise RateLimitedError(error_msg)
        if status == 408:
            raise RequestTimeoutError(error_msg)
        raise HTTPStatusError(status, error_msg)
