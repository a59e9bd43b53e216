"""Watchable property container used as the host for locker bindings.

A `Scope` holds plain data (dicts, lists, objects) and lets callers watch
dotted property paths such as ``"user.name"``. Watchers are checked by
`digest`, which `assign` runs automatically; code that mutates nested values
in place calls `digest` itself so deep watchers can notice the change.

Listeners receive ``(new_value, old_value)`` and run synchronously inside the
digest that detected the change.
"""
from __future__ import annotations
import copy
import itertools
import logging
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

MAX_DIGEST_PASSES = 10

Listener = Callable[[Any, Any], None]

_UNSET = object()
_scope_ids = itertools.count(1)


class DigestError(RuntimeError):
    """Raised when watchers keep changing values past `MAX_DIGEST_PASSES`."""


class _Watch:
    def __init__(self, path: str, listener: Listener, deep: bool, last: Any) -> None:
        self.path = path
        self.listener = listener
        self.deep = deep
        self.last = copy.deepcopy(last) if deep else last
        self.active = True

    def changed(self, current: Any) -> bool:
        if self.deep:
            return current != self.last
        return not (current is self.last or current == self.last)


def _split(path: str) -> List[str]:
    parts = [p for p in path.split(".") if p]
    if not parts:
        raise ValueError(f"invalid property path {path!r}")
    return parts


def _step(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name, _UNSET)
    if obj is None:
        return _UNSET
    return getattr(obj, name, _UNSET)


class Scope:
    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self.scope_id = next(_scope_ids)
        self.data: Dict[str, Any] = data if data is not None else {}
        self._watches: List[_Watch] = []

    def evaluate(self, path: str) -> Any:
        """Resolve `path`; None when any segment is missing."""
        cur: Any = self.data
        for name in _split(path):
            cur = _step(cur, name)
            if cur is _UNSET:
                return None
        return cur

    def assign(self, path: str, value: Any) -> None:
        parts = _split(path)
        cur: Any = self.data
        for name in parts[:-1]:
            nxt = _step(cur, name)
            if nxt is _UNSET or nxt is None:
                nxt = {}
                if isinstance(cur, MutableMapping):
                    cur[name] = nxt
                else:
                    setattr(cur, name, nxt)
            cur = nxt
        if isinstance(cur, MutableMapping):
            cur[parts[-1]] = value
        else:
            setattr(cur, parts[-1], value)
        self.digest()

    def watch(self, path: str, listener: Listener, deep: bool = False) -> Callable[[], None]:
        w = _Watch(path, listener, deep, self.evaluate(path))
        self._watches.append(w)
        logger.debug("Scope %s watching %s (deep=%s)", self.scope_id, path, deep)

        def dispose() -> None:
            w.active = False
            if w in self._watches:
                self._watches.remove(w)

        return dispose

    def digest(self) -> int:
        """Run watchers until no value changes. Returns listener calls."""
        calls = 0
        for _ in range(MAX_DIGEST_PASSES):
            dirty = False
            for w in list(self._watches):
                if not w.active:
                    continue
                current = self.evaluate(w.path)
                if not w.changed(current):
                    continue
                old, w.last = w.last, copy.deepcopy(current) if w.deep else current
                dirty = True
                calls += 1
                w.listener(current, old)
            if not dirty:
                return calls
        raise DigestError(f"{MAX_DIGEST_PASSES} digest iterations reached on scope {self.scope_id}")

    def watcher_count(self) -> int:
        return len(self._watches)

    def __getitem__(self, path: str) -> Any:
        return self.evaluate(path)

    def __setitem__(self, path: str, value: Any) -> None:
        self.assign(path, value)
