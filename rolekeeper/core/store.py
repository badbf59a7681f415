"""Flat-file record store: one JSON array of objects per named collection."""

import json
import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from threading import Lock, RLock
from typing import Any

from rolekeeper.core.config import settings
from rolekeeper.core.errors import CorruptData, StorageUnavailable

logger = logging.getLogger(__name__)

Record = dict[str, Any]


class RecordStore:
    """
    Load and save whole collections under a data directory.

    Each collection lives in ``<data_dir>/<name>.json``. A save writes a temp file
    next to the target and swaps it in with ``os.replace``, so readers see either
    the previous or the new collection. ``locked(name)`` serializes
    read-modify-write cycles on one collection within the process.
    """

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)
        self._locks: dict[str, RLock] = {}
        self._locks_guard = Lock()

    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def _lock_for(self, name: str) -> RLock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = RLock()
                self._locks[name] = lock
            return lock

    @contextmanager
    def locked(self, name: str) -> Iterator[None]:
        """Hold the collection lock for a full read-modify-write cycle."""
        with self._lock_for(name):
            yield

    def load(self, name: str) -> list[Record]:
        """Return all records of a collection; a missing or empty file is an empty collection."""
        path = self._path(name)
        with self._lock_for(name):
            try:
                raw = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return []
            except OSError as e:
                logger.exception("Failed to read collection %s from %s", name, path)
                raise StorageUnavailable(f"Cannot read collection '{name}'") from e

        if not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CorruptData(f"Collection '{name}' is not valid JSON: {e.msg}") from e
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise CorruptData(f"Collection '{name}' must be a JSON array of objects")
        return data

    def save(self, name: str, records: list[Record]) -> None:
        """Overwrite a collection with ``records`` atomically."""
        path = self._path(name)
        payload = json.dumps(records, indent=2, ensure_ascii=False)
        with self._lock_for(name):
            tmp_name = None
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    prefix=f".{name}.", suffix=".tmp", dir=self.data_dir
                )
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, path)
            except OSError as e:
                if tmp_name is not None and os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                logger.exception("Failed to write collection %s to %s", name, path)
                raise StorageUnavailable(f"Cannot write collection '{name}'") from e
        logger.debug("Saved collection %s (%d records)", name, len(records))

    def ping(self) -> bool:
        """True if the data directory exists (or can be created) and is writable."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
        return os.access(self.data_dir, os.W_OK)


@lru_cache
def _store_for(data_dir: str) -> RecordStore:
    return RecordStore(data_dir)


def get_record_store(data_dir: str | None = None) -> RecordStore:
    """Return the shared store for a data directory (defaults to settings.DATA_DIR)."""
    return _store_for(str(Path(data_dir or settings.DATA_DIR).resolve()))
