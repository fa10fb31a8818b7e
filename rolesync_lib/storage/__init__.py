"""Storage abstraction package for the role sync server."""

from .base import StorageBackend
from .file_backend import FileStorageBackend
from .memory_backend import MemoryStorage


def create_storage(backend: str = "file", data_dir: str = "data") -> StorageBackend:
    """Return a storage backend by name ('file' or 'memory')."""
    if backend == "file":
        return FileStorageBackend(data_dir=data_dir)
    if backend == "memory":
        return MemoryStorage()
    raise ValueError(f"Unknown storage backend: {backend}")


__all__ = ["StorageBackend", "FileStorageBackend", "MemoryStorage", "create_storage"]
