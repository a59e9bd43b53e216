"""Namespaced, optionally encrypted key-value storage with two-way bindings."""

from .binding import Scope
from .config import LockerConfig, load_config
from .crypto import FernetCipher
from .events import EventBus, ITEM_ADDED, ITEM_UPDATED, ITEM_FORGOTTEN
from .exceptions import LockerError, DriverNotFound, UnsupportedBackend, QuotaExceeded, WriteFailed
from .locker import Locker, Updater
from .provider import LockerProvider, create_locker
from .storage import BackendRegistry, FileStorage, MemoryStorage, default_registry

__all__ = [
    "Scope",
    "LockerConfig",
    "load_config",
    "FernetCipher",
    "EventBus",
    "ITEM_ADDED",
    "ITEM_UPDATED",
    "ITEM_FORGOTTEN",
    "LockerError",
    "DriverNotFound",
    "UnsupportedBackend",
    "QuotaExceeded",
    "WriteFailed",
    "Locker",
    "Updater",
    "LockerProvider",
    "create_locker",
    "BackendRegistry",
    "FileStorage",
    "MemoryStorage",
    "default_registry",
]
