"""Place search provider abstraction and Google Places Text Search implementation."""
import logging
import requests
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class PlaceResult:
    """A single place returned by a search."""
    name: str
    latitude: float
    longitude: float
    place_id: str


class PlacesProviderError(Exception):
    """Exception raised when a places provider fails."""

    transient = False


class PlacesMissingCredentialError(PlacesProviderError):
    def __init__(self, message: str = "Places API key is missing"):
        super().__init__(message)


class PlacesMalformedResponseError(PlacesProviderError):
    """The response was not a usable HTTP response."""


class PlacesHTTPStatusError(PlacesProviderError):
    def __init__(self, status_code: int, message: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message or f"HTTP error: {status_code}")


class PlacesDecodeError(PlacesProviderError):
    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Failed to decode places data: {detail}")


class PlacesNetworkError(PlacesProviderError):
    transient = True

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Network error: {detail}")


class PlacesTimeoutError(PlacesProviderError):
    transient = True

    def __init__(self, message: str = "Request timed out"):
        super().__init__(message)


class PlacesRateLimitedError(PlacesProviderError):
    transient = True

    def __init__(self, message: str = "API rate limit exceeded"):
        super().__init__(message)


class PlacesUnauthorizedError(PlacesProviderError):
    def __init__(self, message: str = "Unauthorized access, check the API key"):
        super().__init__(message)


class EmptyQueryError(PlacesProviderError):
    def __init__(self, message: str = "Invalid search query provided"):
        super().__init__(message)


class NoResultsError(PlacesProviderError):
    def __init__(self, message: str = "No places found for the given query"):
        super().__init__(message)


class PlacesProviderBase(ABC):
    """Abstract base class for place search providers."""

    @abstractmethod
    def search(self, query: str) -> List[PlaceResult]:
        """
        Search for places matching a free-text query.

        Returns:
            List[PlaceResult]: At least one result

        Raises:
            PlacesProviderError: If the search fails or finds nothing
        """
        pass


class GooglePlacesProvider(PlacesProviderBase):
    """
    Place search using the Google Places Text Search API.

    https://developers.google.com/maps/documentation/places/web-service/search-text
    """

    BASE_URL = "https://maps.googleapis.com/maps/api/place/textsearch/json"

    def __init__(self, api_key: str, timeout: int = 10, session: requests.Session = None):
        self.api_key = api_key
        self.timeout = timeout
        self.session = session

    def search(self, query: str) -> List[PlaceResult]:
        if not query or not query.strip():
            raise EmptyQueryError()
        if not self.api_key:
            raise PlacesMissingCredentialError()

        params = {"query": query.strip(), "key": self.api_key}
        http = self.session or requests

        try:
            logging.info(f"Searching places for '{query}'")
            response = http.get(self.BASE_URL, params=params, timeout=self.timeout)
            logging.debug(f"Places response status: {response.status_code}")
        except requests.exceptions.Timeout as e:
            logging.error(f"Places request timed out: {e}")
            raise PlacesTimeoutError() from e
        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during places request: {e}")
            raise PlacesNetworkError(str(e)) from e

        status = response.status_code
        if status == 401:
            raise PlacesUnauthorizedError()
        if status == 429:
            raise PlacesRateLimitedError()
        if status == 408:
            raise PlacesTimeoutError()
        if not response.ok:
            raise PlacesHTTPStatusError(status)

        try:
            data = response.json()
        except ValueError as e:
            raise PlacesDecodeError(str(e)) from e
        if not isinstance(data, dict):
            raise PlacesMalformedResponseError("Invalid response from places service")

        try:
            results = [
                PlaceResult(
                    name=item["name"],
                    latitude=float(item["geometry"]["location"]["lat"]),
                    longitude=float(item["geometry"]["location"]["lng"]),
                    place_id=item["place_id"],
                )
                for item in data["results"]
            ]
        except (KeyError, ValueError, TypeError) as e:
            logging.error(f"Failed to parse places response: {e}", exc_info=True)
            raise PlacesDecodeError(str(e)) from e

        if not results:
            raise NoResultsError()

        logging.info(f"Places search returned {len(results)} results")
        return results
