"""Change notification for locker writes and removals.

`EventBus` is a small synchronous publish/subscribe dispatcher shared by
every locker built from the same provider. `ChangeNotifier` is the
per-locker front that tags payloads with the driver and namespace and can be
switched off.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

ITEM_ADDED = "item.added"
ITEM_UPDATED = "item.updated"
ITEM_FORGOTTEN = "item.forgotten"

Handler = Callable[[str, Dict[str, Any]], None]


class EventBus:
    """Synchronous event dispatcher.

    Handlers run in subscription order inside `publish`; an exception in a
    handler propagates to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[Handler]] = {}

    def subscribe(self, event_name: str, handler: Handler) -> Callable[[], None]:
        self._handlers.setdefault(event_name, []).append(handler)

        def dispose() -> None:
            handlers = self._handlers.get(event_name, [])
            if handler in handlers:
                handlers.remove(handler)

        return dispose

    def publish(self, event_name: str, payload: Dict[str, Any]) -> None:
        handlers = list(self._handlers.get(event_name, ()))
        logger.debug("Publishing %s to %d handler(s)", event_name, len(handlers))
        for handler in handlers:
            handler(event_name, payload)

    def handler_count(self, event_name: Optional[str] = None) -> int:
        if event_name is not None:
            return len(self._handlers.get(event_name, ()))
        return sum(len(h) for h in self._handlers.values())


class ChangeNotifier:
    def __init__(self, bus: EventBus, enabled: bool, driver_id: Callable[[], Optional[str]], namespace: str) -> None:
        self.bus = bus
        self.enabled = enabled
        self._driver_id = driver_id
        self.namespace = namespace

    def emit(self, event_name: str, payload: Dict[str, Any]) -> None:
        if not self.enabled:
            return
        payload = dict(payload, driver=self._driver_id(), namespace=self.namespace)
        self.bus.publish(event_name, payload)
