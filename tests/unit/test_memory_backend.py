import pytest

from locker_lib.storage.base import QuotaExceededError
from locker_lib.storage.memory_backend import MemoryStorage


def test_memory_basic_operations():
    m = MemoryStorage()

    # set/get
    m.set_item('k', 'v')
    assert m.get_item('k') == 'v'
    assert 'k' in m
    assert list(m.keys()) == ['k']

    # remove, including a missing key
    m.remove_item('k')
    m.remove_item('k')
    assert m.get_item('k') is None
    assert 'k' not in m

    # clear
    m.set_item('a', '1')
    m.set_item('b', '2')
    m.clear()
    assert len(m) == 0


def test_memory_quota():
    m = MemoryStorage(quota_bytes=10)
    m.set_item('a', '1234')
    with pytest.raises(QuotaExceededError):
        m.set_item('b', '123456789')
    # overwriting an existing key only counts the new value
    m.set_item('a', '12345678')
    assert m.get_item('a') == '12345678'


def test_quota_error_name_is_recognised():
    assert QuotaExceededError.__name__ == 'QuotaExceededError'


def test_configure_sets_quota():
    m = MemoryStorage()
    m.configure(quota_bytes=3)
    with pytest.raises(QuotaExceededError):
        m.set_item('key', 'value')


def test_memory_quota_counts_utf8_bytes():
    m = MemoryStorage(quota_bytes=4)
    # three characters, five bytes
    with pytest.raises(QuotaExceededError):
        m.set_item('k', 'üü')
    m.set_item('k', 'ü')
    assert m.get_item('k') == 'ü'
