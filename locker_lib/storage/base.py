"""Storage backend interface definitions.

Defines the StorageBackend abstract class the locker engine writes through.
A backend is a flat string-to-string map; namespacing, serialization and
encryption all happen above it, so implementations only move strings around.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterable, Optional


class QuotaExceededError(Exception):
    """Raised by a backend when a write would exceed its capacity.

    The engine classifies write errors by exception name, so third-party
    backends can raise their own class with this name.
    """


class StorageBackend(ABC):
    """Abstract key-value storage backend.

    Missing keys are reported with ``None`` from `get_item`; `remove_item`
    on a missing key is a no-op.
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the value stored under `key` or None."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store `value` under `key`.

        Implementations raise `QuotaExceededError` when the write would not
        fit into the backend.
        """

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete `key` if present."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every key held by the backend."""

    @abstractmethod
    def keys(self) -> Iterable[str]:
        """Return the backend's own keys."""

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key in set(self.keys())

    def __len__(self) -> int:
        return len(list(self.keys()))

    def configure(self, **options) -> None:
        # Backends accept runtime options; the default ignores them.
        return
