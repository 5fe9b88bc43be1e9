"""Key-value blob persistence used by the cache and favourites stores."""
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional


class BlobStoreError(Exception):
    """Raised when the underlying storage cannot be read or written."""


class BlobStore(ABC):
    """
    Opaque byte blobs addressed by a string key.

    Writes must be all-or-nothing: a reader never sees a partial blob.
    """

    @abstractmethod
    def read_blob(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored under key.

        Returns:
            The stored bytes, or None if nothing is stored

        Raises:
            BlobStoreError: If the read fails (not for missing keys)
        """
        pass

    @abstractmethod
    def write_blob(self, key: str, data: bytes) -> None:
        """
        Store data under key, replacing any previous blob.

        Raises:
            BlobStoreError: If the write fails
        """
        pass

    @abstractmethod
    def delete_blob(self, key: str) -> bool:
        """Delete the blob for key. Returns False if it did not exist."""
        pass


class MemoryBlobStore(BlobStore):
    """In-process blob store. Nothing survives a restart."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._blobs: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def read_blob(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._blobs.get(key)

    def write_blob(self, key: str, data: bytes) -> None:
        with self._lock:
            self._blobs[key] = bytes(data)

    def delete_blob(self, key: str) -> bool:
        with self._lock:
            return self._blobs.pop(key, None) is not None


class FileBlobStore(BlobStore):
    """
    Stores each blob as a file in a directory.

    Writes go to a temporary file that is renamed over the target, so a
    crash mid-write leaves the previous blob intact.
    """

    def __init__(self, base_dir: str):
        self.base_dir = Path(base_dir).expanduser()
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise BlobStoreError(f"Failed to create storage directory '{base_dir}': {e}") from e
        if not self.base_dir.is_dir():
            raise BlobStoreError(f"Storage path '{base_dir}' exists but is not a directory")

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise BlobStoreError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    def read_blob(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            with open(path, "rb") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise BlobStoreError(f"Failed to read '{key}': {e}") from e

    def write_blob(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with open(temp_path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            temp_path.replace(path)
        except OSError as e:
            if temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    logging.warning(f"Could not remove temporary file {temp_path}")
            raise BlobStoreError(f"Failed to write '{key}': {e}") from e
        logging.debug(f"Wrote {len(data)} bytes to {path}")

    def delete_blob(self, key: str) -> bool:
        path = self._path_for(key)
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise BlobStoreError(f"Failed to delete '{key}': {e}") from e
