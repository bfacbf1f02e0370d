import copy
import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, List

from loguru import logger

from scribe.storage.base import KeyValueStore


class LocalKeyValueStore(KeyValueStore):
    """Local key-value store that keeps every record in one JSON file."""

    def __init__(self, filepath: str | Path | None = None) -> None:
        """Initialize LocalKeyValueStore.

        Args:
            filepath: Path to the store file. If provided and exists, will auto-load.
                     If provided and doesn't exist, it is created on the first write.
                     If not provided, keeps everything in memory only.
        """
        self._filepath = str(filepath) if filepath else None
        self._lock = threading.RLock()

        if self._filepath and Path(self._filepath).exists():
            with open(self._filepath, "r") as f:
                data = json.load(f)
            self._records: dict[str, Any] = data["records"]
            logger.debug(f"Loaded {len(self._records)} records from {self._filepath}")
        else:
            self._records = {}

    def get(self, key: str) -> Any | None:
        """Get a copy of the value stored under a key."""
        with self._lock:
            if key not in self._records:
                return None
            return copy.deepcopy(self._records[key])

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._records[key] = copy.deepcopy(value)
            self._save()

    def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self._records:
                return False
            del self._records[key]
            self._save()
            return True

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._records.keys())

    def _save(self) -> None:
        """Write all records to disk, replacing the file atomically."""
        if not self._filepath:
            return

        target = Path(self._filepath)
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump({"records": self._records}, f)
            os.replace(tmp_path, target)
        except BaseException:
            os.unlink(tmp_path)
            raise
