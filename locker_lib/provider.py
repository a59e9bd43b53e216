"""Provider holding the default locker configuration.

The provider owns what lockers share: the driver registry, the event bus and
the cipher. Its setters change the defaults used by lockers built
afterwards; lockers already handed out keep the settings they were built
with.

    provider = LockerProvider(load_config())
    provider.set_default_namespace('myApp').set_events_enabled(False)
    locker = provider.get()
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Optional, Union

from locker_lib.config.config import LockerConfig
from locker_lib.crypto import Cipher, FernetCipher
from locker_lib.events import EventBus
from locker_lib.locker import Locker
from locker_lib.storage.registry import BackendRegistry, default_registry

logger = logging.getLogger(__name__)

_DEFAULT_CIPHER: Any = object()


def _value(value: Union[Any, Callable[[], Any]]) -> Any:
    return value() if callable(value) else value


class LockerProvider:
    def __init__(
        self,
        config: Optional[LockerConfig] = None,
        registry: Optional[BackendRegistry] = None,
        bus: Optional[EventBus] = None,
        cipher: Optional[Cipher] = _DEFAULT_CIPHER,
    ) -> None:
        # copy so setters never leak into the caller's config object
        self.config = (config or LockerConfig()).model_copy()
        self.registry = registry or default_registry(self.config.data_dir, self.config.quota_bytes)
        self.bus = bus or EventBus()
        self.cipher = FernetCipher() if cipher is _DEFAULT_CIPHER else cipher

    def set_default_driver(self, driver) -> "LockerProvider":
        self.config.driver = _value(driver)
        return self

    def get_default_driver(self) -> str:
        return self.config.driver

    def set_default_namespace(self, namespace) -> "LockerProvider":
        self.config.namespace = _value(namespace)
        return self

    def get_default_namespace(self) -> str:
        return self.config.namespace

    def set_events_enabled(self, enabled) -> "LockerProvider":
        self.config.events_enabled = bool(_value(enabled))
        return self

    def get_events_enabled(self) -> bool:
        return self.config.events_enabled

    def set_separator(self, separator) -> "LockerProvider":
        separator = _value(separator)
        if not isinstance(separator, str) or not separator:
            raise ValueError('separator must be a non-empty string')
        self.config.separator = separator
        return self

    def get_separator(self) -> str:
        return self.config.separator

    def get(self) -> Locker:
        """Build a locker from the current defaults."""
        logger.debug('Creating locker driver=%s namespace=%s', self.config.driver, self.config.namespace)
        return Locker(
            self.config.driver,
            self.config.namespace,
            registry=self.registry,
            separator=self.config.separator,
            events_enabled=self.config.events_enabled,
            bus=self.bus,
            cipher=self.cipher,
        )


def create_locker(config: Optional[LockerConfig] = None, **kwargs) -> Locker:
    """Shortcut for `LockerProvider(config, ...).get()`."""
    return LockerProvider(config, **kwargs).get()
