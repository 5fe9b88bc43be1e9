"""Place search and favourite management."""
from typing import List

from favourites_store import FavouritesStore
from places_provider import PlaceResult, PlacesProviderBase
from weather_data import LocationKey


class LocationRepository:
    """Searches places and keeps the user's favourites."""

    def __init__(self, places_provider: PlacesProviderBase, favourites: FavouritesStore):
        self.places_provider = places_provider
        self.favourites_store = favourites

    def search_locations(self, query: str) -> List[PlaceResult]:
        """
        Raises:
            PlacesProviderError: If the search fails or finds nothing
        """
        return self.places_provider.search(query)

    @staticmethod
    def favourite_from_place(place: PlaceResult) -> LocationKey:
        return LocationKey.for_place(place.name, place.latitude, place.longitude, place.place_id)

    def favourites(self) -> List[LocationKey]:
        return self.favourites_store.load()

    def find_favourite(self, name: str) -> LocationKey:
        """
        Look up a favourite by name, case-insensitively.

        Raises:
            KeyError: If no favourite has that name
        """
        wanted = name.strip().lower()
        for favourite in self.favourites():
            if favourite.name.lower() == wanted:
                return favourite
        raise KeyError(name)

    def add_favourite(self, key: LocationKey) -> bool:
        return self.favourites_store.add(key)

    def remove_favourite(self, key: LocationKey) -> bool:
        return self.favourites_store.remove(key)

    def is_favourite(self, key: LocationKey) -> bool:
        return self.favourites_store.contains(key)

    def toggle_favourite(self, key: LocationKey) -> bool:
        """Add key if missing, remove it otherwise. Returns the new membership."""
        if self.is_favourite(key):
            self.remove_favourite(key)
            return False
        self.add_favourite(key)
        return True
