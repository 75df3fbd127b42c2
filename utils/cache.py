"""File-backed key/value cache for settings snapshots."""
import json
import logging
import threading
from pathlib import Path

logger = logging.getLogger("nocconfig.cache")


class JSONFileCache:
    """Thread-safe string key/value store persisted as one JSON object.

    A missing or corrupt file reads as empty. Values are stored as strings,
    callers serialize their own payloads.
    """

    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self):
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable cache file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key):
        with self._lock:
            value = self._read().get(key)
            return value if isinstance(value, str) else None

    def _write(self, data):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, indent=2))
        tmp.replace(self.path)

    def set(self, key, value):
        with self._lock:
            data = self._read()
            data[key] = value
            self._write(data)

    def invalidate(self, key):
        with self._lock:
            data = self._read()
            if data.pop(key, None) is not None:
                self._write(data)

    def clear(self):
        with self._lock:
            self.path.unlink(missing_ok=True)
