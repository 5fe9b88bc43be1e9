"""Shared plumbing for stores that persist a JSON list under one blob key."""
import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from blob_store import BlobStore, BlobStoreError

T = TypeVar("T")

Listener = Callable[[List[Any]], None]


class LoadStatus(enum.Enum):
    OK = "ok"
    MISSING = "missing"  # nothing stored yet
    CORRUPT = "corrupt"  # stored bytes could not be decoded
    UNAVAILABLE = "unavailable"  # the blob store itself failed


@dataclass
class LoadResult(Generic[T]):
    """
    Outcome of reading a persisted list.

    ``items`` is always usable: it is empty whenever ``status`` is not OK,
    so callers that only want best-effort data can ignore the status.
    """
    items: List[T] = field(default_factory=list)
    status: LoadStatus = LoadStatus.OK
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status in (LoadStatus.OK, LoadStatus.MISSING)


class ChangeNotifier:
    """Fan-out of change callbacks, kept separate from persistence."""

    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new list after each save.

        Returns:
            A callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, items: List[Any]) -> None:
        for listener in list(self._listeners):
            try:
                listener(list(items))
            except Exception:
                logging.exception("Store change listener failed")


class JsonListStore(Generic[T]):
    """
    Persists an ordered list of records as one JSON document.

    Storage failures never propagate: reads degrade to an empty list and
    writes are dropped, both with a log line. Subclasses provide the
    record conversion.
    """

    blob_key = ""

    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store
        self._notifier = ChangeNotifier()

    def _encode_item(self, item: T) -> Dict[str, Any]:
        raise NotImplementedError

    def _decode_item(self, data: Dict[str, Any]) -> T:
        raise NotImplementedError

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        return self._notifier.subscribe(listener)

    def try_load(self) -> LoadResult[T]:
        """Read the persisted list, reporting why it is empty if it is."""
        try:
            raw = self.blob_store.read_blob(self.blob_key)
        except BlobStoreError as e:
            logging.warning(f"Could not read '{self.blob_key}': {e}")
            return LoadResult(status=LoadStatus.UNAVAILABLE, error=e)

        if raw is None:
            return LoadResult(status=LoadStatus.MISSING)

        try:
            payload = json.loads(raw.decode("utf-8"))
            if not isinstance(payload, list):
                raise ValueError(f"expected a JSON list, got {type(payload).__name__}")
            items = [self._decode_item(item) for item in payload]
        except (ValueError, KeyError, TypeError, AttributeError, RecursionError) as e:
            logging.warning(f"Discarding corrupt data in '{self.blob_key}': {e}")
            return LoadResult(status=LoadStatus.CORRUPT, error=e)

        return LoadResult(items=items)

    def load(self) -> List[T]:
        return self.try_load().items

    def save(self, items: List[T]) -> bool:
        """
        Persist the whole list in a single write, replacing prior contents.

        Returns:
            bool: False if the write failed (the failure is logged, not raised)
        """
        items = list(items)
        data = json.dumps([self._encode_item(item) for item in items]).encode("utf-8")
        try:
            self.blob_store.write_blob(self.blob_key, data)
        except BlobStoreError as e:
            logging.error(f"Could not save '{self.blob_key}': {e}")
            return False

        self._notifier.notify(items)
        return True
