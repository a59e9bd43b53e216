"""Registry of live bindings owned by a locker instance."""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Hashable, Tuple

logger = logging.getLogger(__name__)

WatcherId = Tuple[str, Hashable]


def watcher_id(path: str, scope: Any) -> WatcherId:
    return (path, scope.scope_id)


class WatcherRegistry:
    """Tracks at most one disposer per watcher id.

    Tracking a second watcher under an id that is still live disposes the
    first one, so a scope property never ends up with two subscriptions
    writing to storage.
    """

    def __init__(self) -> None:
        self._watchers: Dict[WatcherId, Callable[[], None]] = {}

    def track(self, wid: WatcherId, disposer: Callable[[], None]) -> None:
        if wid in self._watchers:
            logger.debug("Replacing watcher %s", wid)
            self.dispose(wid)
        self._watchers[wid] = disposer

    def dispose(self, wid: WatcherId) -> bool:
        disposer = self._watchers.pop(wid, None)
        if disposer is None:
            return False
        disposer()
        return True

    def clear(self) -> None:
        for wid in list(self._watchers):
            self.dispose(wid)

    def __contains__(self, wid: object) -> bool:
        return wid in self._watchers

    def __len__(self) -> int:
        return len(self._watchers)
