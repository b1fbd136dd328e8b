# content_cost_model/state/persistence.py
"""
Key-value blob storage for project snapshots.

Stores hold decoded JSON documents under string keys. There is a single
writer and writes are whole-document replacements.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a snapshot cannot be read from or written to storage."""

    pass


class BlobStore(ABC):
    """Interface of a snapshot store."""

    @abstractmethod
    def read(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the document stored under ``key``, or ``None`` when there is none."""

    @abstractmethod
    def write(self, key: str, document: Dict[str, Any]) -> None:
        """Replace the document stored under ``key``."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``; a missing key is not an error."""


class InMemoryStore(BlobStore):
    """Keeps serialised documents in a dict. Useful for tests and one-off runs."""

    def __init__(self) -> None:
        self._documents: Dict[str, str] = {}
        self.write_count = 0

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self._documents.get(key)
        return json.loads(raw) if raw is not None else None

    def write(self, key: str, document: Dict[str, Any]) -> None:
        self._documents[key] = json.dumps(document)
        self.write_count += 1

    def delete(self, key: str) -> None:
        self._documents.pop(key, None)


class JsonFileStore(BlobStore):
    """One ``<key>.json`` file per key inside ``directory``."""

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        path = self.path_for(key)
        if not path.exists():
            logger.info(f"No stored snapshot at {path}")
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Stored snapshot {path} is not valid JSON ({e}); ignoring it")
            return None
        except OSError as e:
            raise StorageError(f"Could not read snapshot {path}") from e

        if not isinstance(document, dict):
            logger.error(f"Stored snapshot {path} is not a JSON object; ignoring it")
            return None
        logger.info(f"Read snapshot from {path}")
        return document

    def write(self, key: str, document: Dict[str, Any]) -> None:
        path = self.path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        except OSError as e:
            raise StorageError(f"Could not write snapshot {path}") from e

        # Write to a temp file first so a crash never leaves a half-written snapshot
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StorageError(f"Could not write snapshot {path}") from e
        logger.debug(f"Wrote snapshot to {path}")

    def delete(self, key: str) -> None:
        path = self.path_for(key)
        if path.exists():
            path.unlink()
