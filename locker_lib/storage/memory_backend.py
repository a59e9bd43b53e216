"""Simple memory-backed storage backend

This backend keeps every value in a process-local dict and is the default
``session`` driver: its contents live exactly as long as the object does.
"""
from threading import RLock
from typing import Dict, List, Optional

from .base import StorageBackend, QuotaExceededError


class MemoryStorage(StorageBackend):
    def __init__(self, quota_bytes: Optional[int] = None):
        self._lock = RLock()
        self._store: Dict[str, str] = {}
        self.quota_bytes = quota_bytes

    def _size_with(self, key: str, value: str) -> int:
        total = len(key.encode("utf-8")) + len(str(value).encode("utf-8"))
        for k, v in self._store.items():
            if k != key:
                total += len(k.encode("utf-8")) + len(str(v).encode("utf-8"))
        return total

    def get_item(self, key: str) -> Optional[str]:
        with self._lock:
            return self._store.get(key)

    def set_item(self, key: str, value: str) -> None:
        with self._lock:
            if self.quota_bytes is not None and self._size_with(key, value) > self.quota_bytes:
                raise QuotaExceededError(f"quota of {self.quota_bytes} bytes exceeded writing {key!r}")
            self._store[key] = value

    def remove_item(self, key: str) -> None:
        with self._lock:
            self._store.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._store.keys())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._store

    def configure(self, **options) -> None:
        if "quota_bytes" in options:
            self.quota_bytes = options["quota_bytes"]
