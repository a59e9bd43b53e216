"""Two-way binding between scope properties and stored values."""

from .scope import Scope, DigestError
from .watchers import WatcherRegistry, watcher_id

__all__ = ["Scope", "DigestError", "WatcherRegistry", "watcher_id"]
