"""Storage abstraction package for locker."""

from .base import StorageBackend, QuotaExceededError
from .file_backend import FileStorage
from .memory_backend import MemoryStorage
from .registry import BackendRegistry, default_registry, LOCAL, SESSION
from .serializer import JSONSerializer

__all__ = [
    "StorageBackend",
    "QuotaExceededError",
    "FileStorage",
    "MemoryStorage",
    "BackendRegistry",
    "default_registry",
    "LOCAL",
    "SESSION",
    "JSONSerializer",
]
