"""Key-value storage backends holding one JSON collection per key."""

from __future__ import annotations

import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from ..errors import PersistenceError

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Persists whole collections as opaque strings.

    A ``write`` replaces the entire value of a key as one unit; readers
    never observe a partially written collection.
    """

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the stored payload, or None if the key was never written."""
        ...

    @abstractmethod
    def write(self, key: str, payload: str) -> None:
        ...

    def close(self) -> None:
        pass


class MemoryBackend(StorageBackend):
    """In-process storage, lost when the process exits."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, payload: str) -> None:
        self._data[key] = payload


class JsonFileBackend(StorageBackend):
    """Stores each collection in ``<directory>/<key>.json``.

    Writes go to a temporary file in the same directory which is then
    renamed over the target.
    """

    def __init__(self, directory: str | Path = "~/.config/snapcatalog") -> None:
        self._dir = Path(directory).expanduser()

    def _path(self, key: str) -> Path:
        return self._dir / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def write(self, key: str, payload: str) -> None:
        path = self._path(key)
        tmp_name: str | None = None
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._dir, prefix=f".{key}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write %s: %s", path, e)
            raise PersistenceError(f"Failed to write {path}: {e}") from e
