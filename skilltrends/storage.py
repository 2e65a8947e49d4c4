"""
Key-value buckets the aggregator persists into.

Each store is one named bucket holding JSON-serializable values. Reading a
key that was never written returns the caller's default, so a bucket comes
into existence on first use.
"""

import copy
import json
import threading
from pathlib import Path
from typing import Any, Dict, Optional


class KeyValueStore:
    """Interface shared by all bucket backends."""

    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    """In-process bucket. Values are deep-copied in and out like a real backend."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            if key not in self._data:
                return default
            return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


def load_bucket(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return {}
            data = json.loads(content)
    except (ValueError, OSError):  # bad JSON or undecodable bytes
        return {}
    return data if isinstance(data, dict) else {}


def save_bucket(path: Path, bucket: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(bucket, f, indent=2, ensure_ascii=False)
    tmp_path.replace(path)


class JsonFileStore(KeyValueStore):
    """Bucket persisted as a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return load_bucket(self.path).get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            bucket = load_bucket(self.path)
            bucket[key] = value
            save_bucket(self.path, bucket)

    def remove(self, key: str) -> None:
        with self._lock:
            bucket = load_bucket(self.path)
            if key in bucket:
                del bucket[key]
                save_bucket(self.path, bucket)
