from typing import Protocol, Iterable, Optional, runtime_checkable


@runtime_checkable
class StorageProtocol(Protocol):
    """Storage backend protocol mirroring `locker_lib.storage.StorageBackend`.

    Any object with these methods can be registered as a driver, which lets
    callers plug in their own stores without subclassing the base class.
    """

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def clear(self) -> None: ...

    def keys(self) -> Iterable[str]: ...

    def __contains__(self, key: object) -> bool: ...
