from typing import Any, Protocol
import json


class Serializer(Protocol):
    """Serialize/deserialize Python values for backends that store text.

    Implementations must never fail: a value that cannot be encoded (or a
    payload that cannot be decoded) is handed back unchanged.
    """

    def dump(self, value: Any) -> Any: ...

    def load(self, data: Any) -> Any: ...


class JSONSerializer:
    """Serializer using JSON (text).

    Values that JSON cannot represent (circular structures, arbitrary
    objects) are returned as-is and it is up to the backend whether it can
    hold them. Loading is lenient in the same way: a plain string that is
    not a JSON document comes back untouched, which also means a string
    that happens to look like JSON is decoded.
    """

    def dump(self, value: Any) -> Any:
        try:
            return json.dumps(value)
        except (TypeError, ValueError, RecursionError):
            return value

    def load(self, data: Any) -> Any:
        try:
            return json.loads(data)
        except (TypeError, ValueError):
            return data
