"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally, and provide lockers
wired to in-memory drivers.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def registry():
    from locker_lib.storage import BackendRegistry, MemoryStorage
    return BackendRegistry({'local': MemoryStorage(), 'session': MemoryStorage()})


@pytest.fixture
def bus():
    from locker_lib.events import EventBus
    return EventBus()


@pytest.fixture
def cipher():
    from locker_lib.crypto import FernetCipher
    # low iteration count keeps key derivation fast in tests
    return FernetCipher(iterations=1000)


@pytest.fixture
def locker(registry, bus, cipher):
    from locker_lib.locker import Locker
    return Locker('local', 'ns', registry=registry, bus=bus, cipher=cipher)


@pytest.fixture
def events(bus):
    """Collect every change event published on the bus as (name, payload)."""
    from locker_lib.events import ITEM_ADDED, ITEM_UPDATED, ITEM_FORGOTTEN
    seen = []
    for name in (ITEM_ADDED, ITEM_UPDATED, ITEM_FORGOTTEN):
        bus.subscribe(name, lambda n, p: seen.append((n, p)))
    return seen
