"""Driver registry mapping driver ids to storage backends and back.

The registry is explicit and bidirectional: a locker can both resolve the
backend for a driver id and recover the id of the backend it is bound to
(used to tag change events and to keep the backend when deriving a
namespaced instance).
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, List, Optional

from locker_lib.exceptions import DriverNotFound
from locker_lib.storage.file_backend import FileStorage
from locker_lib.storage.interfaces import StorageProtocol
from locker_lib.storage.memory_backend import MemoryStorage

LOCAL = "local"
SESSION = "session"


class BackendRegistry:
    def __init__(self, backends: Optional[Dict[str, StorageProtocol]] = None) -> None:
        self._by_id: Dict[str, StorageProtocol] = {}
        self._by_backend: Dict[int, str] = {}
        for driver_id, backend in (backends or {}).items():
            self.register(driver_id, backend)

    def register(self, driver_id: str, backend: StorageProtocol) -> None:
        previous = self._by_id.get(driver_id)
        self._by_id[driver_id] = backend
        if previous is not None and self._by_backend.get(id(previous)) == driver_id:
            del self._by_backend[id(previous)]
            for other_id, other in self._by_id.items():
                if other is previous:
                    self._by_backend[id(previous)] = other_id
                    break
        # first registration wins the reverse mapping
        self._by_backend.setdefault(id(backend), driver_id)

    def resolve(self, driver_id: str) -> StorageProtocol:
        try:
            return self._by_id[driver_id]
        except (KeyError, TypeError):
            raise DriverNotFound(driver_id) from None

    def identify(self, backend: Any) -> Optional[str]:
        driver_id = self._by_backend.get(id(backend))
        if driver_id is not None and self._by_id.get(driver_id) is backend:
            return driver_id
        return None

    def ids(self) -> List[str]:
        return list(self._by_id.keys())

    def __contains__(self, driver_id: object) -> bool:
        return driver_id in self._by_id


def default_registry(data_dir: str | Path = "./data/locker", quota_bytes: Optional[int] = None) -> BackendRegistry:
    """Build the standard persistent (``local``) and session drivers."""
    return BackendRegistry({
        LOCAL: FileStorage(data_dir, quota_bytes=quota_bytes),
        SESSION: MemoryStorage(quota_bytes=quota_bytes),
    })
