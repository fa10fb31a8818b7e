"""Storage backend interface definitions.

Defines the StorageBackend abstract class used to persist the server
configuration. Values are stored as text; callers own the serialization
format (see `rolesync_lib.setup.YamlConfigStore`).
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, Union

StoredValue = Union[str, bytes]


class StorageBackend(ABC):
    """Abstract storage backend keyed by `namespace`/`key`."""

    @abstractmethod
    def save(self, namespace: str, key: str, value: StoredValue) -> None:
        """Save `value` under `namespace` and `key`.

        Implementations should create directories as needed and ensure
        atomic writes when possible.
        """

    @abstractmethod
    def load(self, namespace: str, key: str) -> StoredValue:
        """Load and return the value stored under `namespace`/`key`.

        Should raise `KeyError` if the key does not exist.
        """

    @abstractmethod
    def delete(self, namespace: str, key: str) -> None:
        """Delete the stored value. Raise `KeyError` if not found."""

    @abstractmethod
    def list_keys(self, namespace: str) -> Iterable[str]:
        """Return an iterable of keys stored in `namespace`."""

    @abstractmethod
    def exists(self, namespace: str, key: str) -> bool:
        """Return True if `key` exists under `namespace`."""
