"""Flat-file JSON persistence.

Every collection is a single JSON array on disk, read and rewritten as a whole.
Mutations go through ``transaction`` which serialises writers of the same
collection within this process.
"""

import json
import logging
import os
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class CorruptCollectionError(ValueError):
    """Raised when a collection file holds valid JSON that is not an array."""


class JsonStore:
    """Loads and saves whole collections as pretty-printed JSON arrays."""

    def __init__(self, data_dir: str | Path, indent: int = 2) -> None:
        """Initialize the store.

        Args:
            data_dir: Directory containing the ``<collection>.json`` files
            indent: Indentation used when writing documents
        """
        self.data_dir = Path(data_dir)
        self.indent = indent
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def path_for(self, collection: str) -> Path:
        """Return the file backing a collection."""
        return self.data_dir / f"{collection}.json"

    def load(self, collection: str) -> list[dict[str, Any]]:
        """Read every record of a collection.

        Args:
            collection: Collection name

        Returns:
            list: Records in file order, empty list if the file does not exist

        Raises:
            json.JSONDecodeError: If the file is not valid JSON
            CorruptCollectionError: If the document is not a JSON array
        """
        path = self.path_for(collection)
        if not path.exists():
            return []

        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, list):
            raise CorruptCollectionError(f"Collection {collection} is not a JSON array")

        return data

    def save(self, collection: str, records: list[dict[str, Any]]) -> None:
        """Overwrite a collection with the given records.

        The document is written to a temporary file first and moved into place,
        so readers see either the old or the new content.

        Args:
            collection: Collection name
            records: Complete list of records to persist
        """
        path = self.path_for(collection)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{collection}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=self.indent, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.debug(f"Saved {len(records)} records to {path}")

    @contextmanager
    def transaction(self, collection: str) -> Iterator[list[dict[str, Any]]]:
        """Read-modify-write a collection under its lock.

        Yields the loaded records for in-place mutation and saves them when the
        block exits normally. Nothing is written if the block raises.

        Args:
            collection: Collection name

        Yields:
            list: Mutable list of records
        """
        with self._lock_for(collection):
            records = self.load(collection)
            yield records
            self.save(collection, records)

    def _lock_for(self, collection: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(collection)
            if lock is None:
                lock = threading.RLock()
                self._locks[collection] = lock
            return lock
