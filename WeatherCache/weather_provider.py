"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from typing import List, Optional

from weather_data import ForecastEntry, WeatherSnapshot


class WeatherProviderError(Exception):
    """Exception raised when a weather provider fails."""

    # Transient failures are worth retrying; the rest will fail the same way again.
    transient = False


class MissingCredentialError(WeatherProviderError):
    """No API key configured."""

    def __init__(self, message: str = "API key is missing"):
        super().__init__(message)


class MalformedRequestError(WeatherProviderError):
    """The request could not be built (bad coordinates, bad URL)."""


class MalformedResponseError(WeatherProviderError):
    """The response was not a usable HTTP response."""


class HTTPStatusError(WeatherProviderError):
    """Provider answered with an unexpected HTTP status."""

    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"HTTP error: {status_code}")


class DecodeError(WeatherProviderError):
    """Response body could not be decoded into domain objects."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Failed to decode weather data: {detail}")


class NetworkError(WeatherProviderError):
    """Connection-level failure."""

    transient = True

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Network error: {detail}")


class RequestTimeoutError(WeatherProviderError):
    transient = True

    def __init__(self, message: str = "Request timed out"):
        super().__init__(message)


class RateLimitedError(WeatherProviderError):
    transient = True

    def __init__(self, message: str = "API rate limit exceeded"):
        super().__init__(message)


class UnauthorizedError(WeatherProviderError):
    def __init__(self, message: str = "Unauthorized access, check the API key"):
        super().__init__(message)


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def fetch_current(self, lat: float, lon: float) -> WeatherSnapshot:
        """
        Fetch current weather data.

        Args:
            lat: Latitude (-90 to 90)
            lon: Longitude (-180 to 180)

        Returns:
            WeatherSnapshot: Current weather information

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass

    @abstractmethod
    def fetch_forecast(self, lat: float, lon: float) -> List[ForecastEntry]:
        """
        Fetch the multi-day forecast.

        Returns:
            List[ForecastEntry]: Forecast steps ordered by timestamp

        Raises:
            WeatherProviderError: If the provider fails to fetch data
        """
        pass
