"""Tests for the location repository."""
import pytest
from blob_store import MemoryBlobStore
from favourites_store import FavouritesStore
from location_repository import LocationRepository
from places_provider import NoResultsError, PlaceResult, PlacesProviderBase

CAPE_TOWN = PlaceResult("Cape Town", -33.9249, 18.4241, "ChIJ1-4miA9MzB0Rh6ooDKiO68o")


class MockPlacesProvider(PlacesProviderBase):
    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.queries = []

    def search(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.results


@pytest.fixture
def repository():
    return LocationRepository(MockPlacesProvider([CAPE_TOWN]), FavouritesStore(MemoryBlobStore()))


def test_search_passes_through(repository):
    assert repository.search_locations("cape town") == [CAPE_TOWN]
    assert repository.places_provider.queries == ["cape town"]


def test_search_error_propagates():
    repository = LocationRepository(MockPlacesProvider(error=NoResultsError()), FavouritesStore(MemoryBlobStore()))

    with pytest.raises(NoResultsError):
        repository.search_locations("atlantis")


def test_favourite_from_place_keeps_place_id():
    key = LocationRepository.favourite_from_place(CAPE_TOWN)

    assert key.name == "Cape Town"
    assert key.latitude == -33.9249
    assert key.place_id == CAPE_TOWN.place_id


def test_toggle_favourite(repository):
    key = repository.favourite_from_place(CAPE_TOWN)

    assert repository.toggle_favourite(key) is True
    assert repository.is_favourite(key) is True
    assert repository.toggle_favourite(key) is False
    assert repository.favourites() == []


def test_find_favourite_by_name(repository):
    key = repository.favourite_from_place(CAPE_TOWN)
    repository.add_favourite(key)

    assert repository.find_favourite("cape town") == key
    with pytest.raises(KeyError):
        repository.find_favourite("Oslo")
