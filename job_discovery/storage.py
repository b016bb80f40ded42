"""Small key-value stores backing the fingerprint set."""
from __future__ import annotations

import fcntl
import json
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from job_discovery.log import get_logger

log = get_logger(__name__)


class KeyValueStore(ABC):
    """String keys to small opaque string values."""

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def load(self, key: str) -> str | None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def add_if_absent(self, key: str, value: str) -> bool:
        """Store *value* only if *key* is unset; True when this call stored it."""

    def exists(self, key: str) -> bool:
        return self.load(key) is not None


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def save(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def load(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def add_if_absent(self, key: str, value: str) -> bool:
        with self._lock:
            if key in self._data:
                return False
            self._data[key] = value
            return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


def lock_file(f, exclusive: bool = True) -> None:
    """Advisory file lock (Unix fcntl)."""
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
    except (OSError, AttributeError):
        pass


def unlock_file(f) -> None:
    try:
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
    except (OSError, AttributeError):
        pass


class JsonFileKeyValueStore(KeyValueStore):
    """A single JSON object on disk, rewritten on every mutation.

    Each mutation re-reads the file under an exclusive lock, so separate
    processes sharing the path see each other's keys.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            lock_file(f, exclusive=False)
            try:
                raw = f.read()
            finally:
                unlock_file(f)
        if not raw.strip():
            return {}
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _mutate(self, fn) -> bool:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock, open(self.path, "a+", encoding="utf-8") as f:
            lock_file(f)
            try:
                f.seek(0)
                raw = f.read()
                data = json.loads(raw) if raw.strip() else {}
                changed = fn(data)
                if changed:
                    f.seek(0)
                    f.truncate()
                    json.dump(data, f, indent=0, sort_keys=True)
                    f.flush()
                    os.fsync(f.fileno())
                return changed
            finally:
                unlock_file(f)

    def save(self, key: str, value: str) -> None:
        def _set(data: dict) -> bool:
            data[key] = value
            return True

        self._mutate(_set)

    def load(self, key: str) -> str | None:
        with self._lock:
            return self._read().get(key)

    def delete(self, key: str) -> None:
        def _pop(data: dict) -> bool:
            return data.pop(key, None) is not None

        self._mutate(_pop)

    def add_if_absent(self, key: str, value: str) -> bool:
        def _add(data: dict) -> bool:
            if key in data:
                return False
            data[key] = value
            return True

        added = self._mutate(_add)
        if added:
            log.debug("Stored new key %s in %s", key, self.path.name)
        return added
