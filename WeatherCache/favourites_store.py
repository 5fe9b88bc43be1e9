"""Persistent list of the user's saved locations."""
import logging
from typing import Any, Dict

from list_store import JsonListStore
from weather_data import LocationKey

FAVOURITES_BLOB_KEY = "favourite-locations"


class FavouritesStore(JsonListStore[LocationKey]):
    """Ordered favourites with set semantics on LocationKey equality."""

    blob_key = FAVOURITES_BLOB_KEY

    def _encode_item(self, item: LocationKey) -> Dict[str, Any]:
        return item.to_dict()

    def _decode_item(self, data: Dict[str, Any]) -> LocationKey:
        return LocationKey.from_dict(data)

    def contains(self, key: LocationKey) -> bool:
        return key in self.load()

    def add(self, key: LocationKey) -> bool:
        """Append key unless an equal key is already saved. Returns True if added."""
        favourites = self.load()
        if key in favourites:
            return False
        favourites.append(key)
        logging.info(f"Adding favourite {key.name}")
        return self.save(favourites)

    def remove(self, key: LocationKey) -> bool:
        """Remove every equal key. Returns True if anything was removed."""
        favourites = self.load()
        kept = [fav for fav in favourites if fav != key]
        if len(kept) == len(favourites):
            return False
        logging.info(f"Removing favourite {key.name}")
        return self.save(kept)
