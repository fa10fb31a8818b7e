"""File-backed storage for text documents.

Values are written to `<data_dir>/<namespace>/<key>.yml` with an atomic
write (temporary file, fsync, rename).
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable

from .base import StorageBackend, StoredValue

SUFFIX = ".yml"


class FileStorageBackend(StorageBackend):
    def __init__(self, data_dir: str | Path = "./data") -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _ns_dir(self, namespace: str) -> Path:
        ns = self.data_dir / namespace
        ns.mkdir(parents=True, exist_ok=True)
        return ns

    def _path_for(self, namespace: str, key: str) -> Path:
        safe_key = key.replace("/", "_")
        if safe_key.endswith(SUFFIX):
            safe_key = safe_key[: -len(SUFFIX)]
        return self._ns_dir(namespace) / f"{safe_key}{SUFFIX}"

    def save(self, namespace: str, key: str, value: StoredValue) -> None:
        path = self._path_for(namespace, key)
        data = value.encode("utf-8") if isinstance(value, str) else value
        tmp = path.with_suffix(path.suffix + ".tmp")
        with open(tmp, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(path)

    def load(self, namespace: str, key: str) -> str:
        path = self._path_for(namespace, key)
        if not path.exists():
            raise KeyError(key)
        return path.read_text(encoding="utf-8")

    def delete(self, namespace: str, key: str) -> None:
        path = self._path_for(namespace, key)
        if not path.exists():
            raise KeyError(key)
        path.unlink()

    def list_keys(self, namespace: str) -> Iterable[str]:
        ns = self._ns_dir(namespace)
        for p in sorted(ns.iterdir()):
            if p.is_file() and p.suffix == SUFFIX:
                yield p.stem

    def exists(self, namespace: str, key: str) -> bool:
        return self._path_for(namespace, key).exists()
