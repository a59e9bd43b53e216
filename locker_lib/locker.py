"""The locker: namespaced, optionally encrypted key-value storage.

A `Locker` is bound to one storage driver, one namespace and one crypto key.
Values are JSON-encoded before they reach the backend and decoded on the way
out; when a crypto key is set, callers can ask for individual entries to be
encrypted. Writes and removals are announced on the provider's event bus.

Lockers are cheap. Switching driver or namespace never mutates an existing
locker; `driver()`, `namespace()` and `instance()` return a new one that
starts with a copy of the current crypto key.

    locker = create_locker(LockerConfig(namespace="app"))
    locker.put("user", {"name": "ada"})
    locker.get("user")                       # {'name': 'ada'}
    locker.put("visits", Updater(lambda n: (n or 0) + 1))
    locker.namespace("other").all()          # {}
"""
from __future__ import annotations
import errno
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterable, Optional

from locker_lib.binding.watchers import WatcherRegistry, watcher_id
from locker_lib.crypto import Cipher
from locker_lib.events import ChangeNotifier, EventBus, ITEM_ADDED, ITEM_FORGOTTEN, ITEM_UPDATED
from locker_lib.exceptions import QuotaExceeded, UnsupportedBackend, WriteFailed
from locker_lib.storage import keys as key_codec
from locker_lib.storage.registry import BackendRegistry
from locker_lib.storage.serializer import JSONSerializer, Serializer

logger = logging.getLogger(__name__)

QUOTA_ERROR_NAMES = frozenset({"QUOTA_EXCEEDED_ERR", "NS_ERROR_DOM_QUOTA_REACHED", "QuotaExceededError"})
_QUOTA_ERRNOS = frozenset(e for e in (errno.ENOSPC, getattr(errno, "EDQUOT", None)) if e is not None)

PROBE_KEY = "__locker_support_probe__"

# Distinguishes "argument not given" from an explicit None.
_MISSING: Any = object()


class Updater:
    """Produce a new value from the currently stored one.

    Passing an `Updater` to `Locker.put` calls it with the stored value
    (None when absent) and stores whatever it returns.
    """

    def __init__(self, fn: Callable[[Any], Any]) -> None:
        self.fn = fn

    def __call__(self, previous: Any) -> Any:
        return self.fn(previous)


def is_quota_error(exc: BaseException) -> bool:
    if type(exc).__name__ in QUOTA_ERROR_NAMES or getattr(exc, "name", None) in QUOTA_ERROR_NAMES:
        return True
    return isinstance(exc, OSError) and exc.errno in _QUOTA_ERRNOS


class Locker:
    def __init__(
        self,
        driver: str,
        namespace: str,
        *,
        registry: BackendRegistry,
        separator: str = ".",
        events_enabled: bool = True,
        bus: Optional[EventBus] = None,
        cipher: Optional[Cipher] = None,
        serializer: Optional[Serializer] = None,
    ) -> None:
        namespace = namespace or ""
        if not separator:
            raise ValueError("separator must be a non-empty string")
        if separator in namespace:
            raise ValueError(f"namespace {namespace!r} must not contain the separator {separator!r}")
        self._registry = registry
        self._driver_id = driver
        self._driver = registry.resolve(driver)
        self._namespace = namespace
        self._separator = separator
        self._cipher = cipher
        self._serializer = serializer or JSONSerializer()
        self._crypto_key: Optional[str] = None
        self._watchers = WatcherRegistry()
        self._supported: Optional[bool] = None
        self._events = ChangeNotifier(
            bus if bus is not None else EventBus(),
            events_enabled,
            lambda: self._registry.identify(self._driver),
            namespace,
        )

    def __repr__(self) -> str:
        return f"Locker(driver={self._driver_id!r}, namespace={self._namespace!r})"

    # -- internals -------------------------------------------------------

    def _prefix(self, key: str) -> str:
        return key_codec.encode(self._namespace, self._separator, key)

    def _crypto_active(self, encrypted: bool, value: Any) -> bool:
        return bool(encrypted) and self._cipher is not None and self._crypto_key is not None and bool(value)

    def _check_support(self) -> None:
        if not self.supported():
            raise UnsupportedBackend(self._driver_id)

    def _decrypt(self, raw: Any, encrypted: bool) -> Any:
        if self._crypto_active(encrypted, raw):
            return self._cipher.decrypt(self._crypto_key, raw)
        return raw

    def _get_item(self, key: str, encrypted: bool = False) -> Any:
        self._check_support()
        raw = self._driver.get_item(self._prefix(key))
        return self._serializer.load(self._decrypt(raw, encrypted))

    def _previous_plain(self, raw: Any, encrypted: bool) -> Any:
        # Only used to decide between "updated" and "no change".
        try:
            return self._decrypt(raw, encrypted)
        except Exception:
            logger.debug("Previous value could not be decrypted; treating it as changed")
            return _MISSING

    def _set_item(self, key: str, value: Any, encrypted: bool = False) -> None:
        self._check_support()
        physical = self._prefix(key)
        existed = physical in self._driver
        old_raw = self._driver.get_item(physical) if existed else None

        serialized = self._serializer.dump(value)
        final = serialized
        try:
            if self._crypto_active(encrypted, final):
                final = self._cipher.encrypt(self._crypto_key, serialized)
            self._driver.set_item(physical, final)
        except Exception as e:
            if is_quota_error(e):
                logger.warning("Storage quota exceeded writing %s", physical)
                raise QuotaExceeded(key) from e
            logger.warning("Could not write %s: %s", physical, e)
            raise WriteFailed(key) from e
        logger.debug("Stored %s (encrypted=%s)", physical, final is not serialized)

        if not existed:
            self._events.emit(ITEM_ADDED, {"key": key, "value": value})
            return
        old_plain = self._previous_plain(old_raw, encrypted)
        if old_plain is _MISSING or old_plain != serialized:
            old_value = None if old_plain is _MISSING else self._serializer.load(old_plain)
            self._events.emit(ITEM_UPDATED, {"key": key, "old_value": old_value, "new_value": value})

    def _remove_item(self, key: str) -> bool:
        if not self.has(key):
            return False
        self._driver.remove_item(self._prefix(key))
        logger.debug("Removed %s", self._prefix(key))
        self._events.emit(ITEM_FORGOTTEN, {"key": key})
        return True

    # -- public api ------------------------------------------------------

    def put(self, key: Any, value: Any = _MISSING, encrypted: bool = False) -> bool:
        """Store `value` under `key`, overwriting any existing entry.

        `key` may be a mapping, in which case every pair is stored with the
        same `encrypted` flag. Returns False when nothing was written
        (no key, or no value given).
        """
        if isinstance(key, Mapping):
            for k, v in key.items():
                self.put(k, v, encrypted)
            return True
        if key is None or key == "" or value is _MISSING:
            return False
        if isinstance(value, Updater):
            value = value(self._get_item(key, encrypted))
        self._set_item(key, value, encrypted)
        return True

    def add(self, key: str, value: Any = _MISSING, encrypted: bool = False) -> bool:
        """Store `value` only if `key` is not present yet."""
        if self.has(key):
            return False
        return self.put(key, value, encrypted)

    def get(self, key: Any, default: Any = _MISSING, encrypted: bool = False) -> Any:
        """Return the stored value for `key`.

        With a list or tuple of keys, returns a dict of the keys that exist.
        A missing key returns `default` when one was given, otherwise None.
        """
        if isinstance(key, (list, tuple)):
            return {k: self._get_item(k, encrypted) for k in key if self.has(k)}
        if not self.has(key):
            return None if default is _MISSING else default
        return self._get_item(key, encrypted)

    def has(self, key: str) -> bool:
        self._check_support()
        return self._prefix(key) in self._driver

    def forget(self, key: Any) -> "Locker":
        """Remove one key or a sequence of keys. Missing keys are skipped."""
        if isinstance(key, (list, tuple, set, frozenset)):
            for k in key:
                self._remove_item(k)
        else:
            self._remove_item(key)
        return self

    def pull(self, key: Any, default: Any = _MISSING, encrypted: bool = False) -> Any:
        value = self.get(key, default, encrypted)
        self.forget(key)
        return value

    def all(self) -> Dict[str, Any]:
        """Return every item in the current namespace.

        Walks the whole backend and keeps the keys owned by this namespace.
        Values are decoded but not decrypted.
        """
        self._check_support()
        items: Dict[str, Any] = {}
        for physical in list(self._driver.keys()):
            key = key_codec.decode(physical, self._namespace, self._separator)
            if key is not None:
                items[key] = self._get_item(key)
        return items

    def keys(self) -> Iterable[str]:
        return list(self.all().keys())

    def clean(self) -> "Locker":
        """Remove every item in the current namespace."""
        self.forget(list(self.all()))
        return self

    def empty(self) -> "Locker":
        """Clear the whole backend, across all namespaces."""
        self._check_support()
        self._driver.clear()
        logger.debug("Emptied driver %s", self._driver_id)
        return self

    def count(self) -> int:
        return len(self.all())

    def supported(self, driver: Optional[str] = None) -> bool:
        """Check once whether the backend is usable and cache the answer.

        The first check decides for the lifetime of the instance, whatever
        driver is asked about afterwards. An unknown driver id counts as
        unsupported.
        """
        if self._supported is not None:
            return self._supported
        try:
            backend = self._registry.resolve(driver) if driver is not None else self._driver
            backend.set_item(PROBE_KEY, PROBE_KEY)
            backend.remove_item(PROBE_KEY)
            self._supported = True
        except Exception as e:
            logger.warning("Storage driver %s is not usable: %s", driver or self._driver_id, e)
            self._supported = False
        return self._supported

    def set_crypto_key(self, key: Any) -> None:
        """Set the passphrase for encrypted entries; blank values are ignored."""
        if not isinstance(key, str) or not key.strip():
            return
        self._crypto_key = key

    @property
    def crypto_key(self) -> Optional[str]:
        return self._crypto_key

    # -- derived instances -----------------------------------------------

    def instance(self, driver: str, namespace: str) -> "Locker":
        locker = Locker(
            driver,
            namespace,
            registry=self._registry,
            separator=self._separator,
            events_enabled=self._events.enabled,
            bus=self._events.bus,
            cipher=self._cipher,
            serializer=self._serializer,
        )
        locker.set_crypto_key(self._crypto_key)
        return locker

    def driver(self, driver: str) -> "Locker":
        return self.instance(driver, self._namespace)

    def namespace(self, namespace: str) -> "Locker":
        return self.instance(self._driver_id, namespace)

    def get_driver(self):
        return self._driver

    def get_driver_id(self) -> str:
        return self._driver_id

    def get_namespace(self) -> str:
        return self._namespace

    # -- bindings --------------------------------------------------------

    def _bind(self, scope, key: str, default: Any, attr: Optional[str], encrypted: bool) -> "Locker":
        path = attr or key

        def on_change(new_value: Any, old_value: Any) -> None:
            if new_value is not None:
                self.put(key, new_value, encrypted)

        current = scope.evaluate(path)
        seed = self.get(key, default, encrypted) if current is None else current
        deep = isinstance(seed, (Mapping, list, set))
        self._watchers.track(watcher_id(path, scope), scope.watch(path, on_change, deep))
        logger.debug("Bound %s to scope %s path %s", key, scope.scope_id, path)

        if current is None:
            scope.assign(path, seed)
        else:
            self.put(key, current, encrypted)
        return self

    def bind(self, scope, key: str, default: Any = _MISSING, attr: Optional[str] = None) -> "Locker":
        """Keep `scope`'s property (`attr`, or `key`) in sync with `key`.

        An unset property is seeded from storage (or `default`), a set one is
        written to storage. From then on every change to the property is
        written back with `put`.
        """
        return self._bind(scope, key, default, attr, encrypted=False)

    def bind_encrypted(self, scope, key: str, default: Any = _MISSING, attr: Optional[str] = None) -> "Locker":
        return self._bind(scope, key, default, attr, encrypted=True)

    def unbind(self, scope, key: str, attr: Optional[str] = None, keep_stored: bool = False) -> "Locker":
        path = attr or key
        self._watchers.dispose(watcher_id(path, scope))
        scope.assign(path, None)
        if not keep_stored:
            self.forget(key)
        return self

    def clear_watchers(self) -> "Locker":
        """Dispose every binding without touching scopes or storage."""
        self._watchers.clear()
        return self

    def watcher_count(self) -> int:
        return len(self._watchers)
