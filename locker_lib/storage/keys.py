"""Physical key derivation for namespaced storage.

A namespace partitions a shared backend by prefixing every logical key with
``namespace + separator``. The separator is not escaped inside logical keys;
ownership is decided by prefix so a logical key may itself contain the
separator as long as the namespace does not.
"""
from typing import Optional


def encode(namespace: str, separator: str, key: str) -> str:
    if not namespace:
        return key
    return f"{namespace}{separator}{key}"


def decode(physical_key: str, namespace: str, separator: str) -> Optional[str]:
    """Return the logical key for `physical_key`, or None when the key
    belongs to another namespace. An empty namespace owns every key."""
    if not namespace:
        return physical_key
    prefix = f"{namespace}{separator}"
    if physical_key.startswith(prefix):
        return physical_key[len(prefix):]
    return None
