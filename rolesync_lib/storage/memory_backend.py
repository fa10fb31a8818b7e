"""Memory-backed storage backend for development servers and tests."""
from threading import RLock
from typing import Dict, Iterable

from .base import StorageBackend, StoredValue


class MemoryStorage(StorageBackend):
    def __init__(self):
        self._lock = RLock()
        self._store: Dict[str, Dict[str, StoredValue]] = {}

    def save(self, namespace: str, key: str, value: StoredValue) -> None:
        with self._lock:
            self._store.setdefault(namespace, {})[key] = value

    def load(self, namespace: str, key: str) -> StoredValue:
        with self._lock:
            try:
                return self._store[namespace][key]
            except KeyError:
                raise KeyError(key)

    def delete(self, namespace: str, key: str) -> None:
        with self._lock:
            try:
                del self._store[namespace][key]
            except KeyError:
                raise KeyError(key)

    def list_keys(self, namespace: str) -> Iterable[str]:
        with self._lock:
            return list(self._store.get(namespace, {}).keys())

    def exists(self, namespace: str, key: str) -> bool:
        with self._lock:
            return key in self._store.get(namespace, {})
