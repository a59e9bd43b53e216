"""Error taxonomy for the locker engine.

Every error raised by the engine itself derives from `LockerError` so callers
can catch the whole family at once. Decryption and decode failures are not
wrapped; they surface in whatever shape the cipher produced them.
"""
from __future__ import annotations


class LockerError(Exception):
    """Base class for locker errors."""


class DriverNotFound(LockerError):
    def __init__(self, driver: str) -> None:
        super().__init__(f'The driver "{driver}" was not found.')
        self.driver = driver


class UnsupportedBackend(LockerError):
    def __init__(self, driver: str | None = None) -> None:
        super().__init__(f'The storage driver "{driver}" is not supported in this environment')
        self.driver = driver


class QuotaExceeded(LockerError):
    def __init__(self, key: str) -> None:
        super().__init__('The storage quota has been exceeded')
        self.key = key


class WriteFailed(LockerError):
    def __init__(self, key: str) -> None:
        super().__init__(f'Could not add item with key "{key}"')
        self.key = key
