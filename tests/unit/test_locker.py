import pytest

from locker_lib.events import ITEM_ADDED, ITEM_FORGOTTEN, ITEM_UPDATED
from locker_lib.exceptions import DriverNotFound, QuotaExceeded, UnsupportedBackend, WriteFailed
from locker_lib.locker import Locker, Updater
from locker_lib.storage import BackendRegistry, MemoryStorage


@pytest.mark.parametrize('value', ['text', 42, 1.5, True, None, [1, 'a'], {'a': {'b': [1, 2]}}])
def test_put_then_get_roundtrip(locker, value):
    assert locker.put('k', value) is True
    assert locker.get('k') == value


def test_values_are_namespaced_in_backend(locker, registry):
    locker.put('a', {'x': 1})
    assert registry.resolve('local').get_item('ns.a') == '{"x": 1}'


def test_put_without_value_is_noop(locker):
    assert locker.put('k') is False
    assert locker.put('', 1) is False
    assert locker.has('k') is False


def test_put_none_is_stored(locker):
    locker.put('k', None)
    assert locker.has('k') is True
    assert locker.get('k', 'default') is None


def test_batch_put(locker):
    assert locker.put({'a': 1, 'b': [2]}) is True
    assert locker.get(['a', 'b', 'missing']) == {'a': 1, 'b': [2]}


def test_put_with_updater(locker):
    locker.put('visits', Updater(lambda n: (n or 0) + 1))
    locker.put('visits', Updater(lambda n: (n or 0) + 1))
    assert locker.get('visits') == 2


def test_callables_are_not_treated_as_updaters(locker, registry):
    fn = len
    locker.put('f', fn)
    # not JSON-encodable, so the object itself reaches the backend
    assert registry.resolve('local').get_item('ns.f') is fn


def test_add_only_when_missing(locker):
    assert locker.add('k', 1) is True
    assert locker.add('k', 2) is False
    assert locker.get('k') == 1


def test_get_default_handling(locker):
    assert locker.get('missing') is None
    assert locker.get('missing', 'fallback') == 'fallback'
    assert locker.get('missing', None) is None


def test_forget(locker):
    locker.put({'a': 1, 'b': 2, 'c': 3})
    locker.forget('a')
    assert locker.has('a') is False
    locker.forget(['b', 'absent'])
    assert locker.has('b') is False
    assert locker.has('c') is True
    # forgetting an absent key does not raise
    locker.forget('absent')


def test_pull(locker, registry):
    locker.put('k', {'v': 1})
    assert locker.pull('k', 'def') == {'v': 1}
    assert locker.has('k') is False
    before = registry.resolve('local').keys()
    assert locker.pull('k', 'def') == 'def'
    assert locker.pull('k') is None
    assert registry.resolve('local').keys() == before


def test_all_filters_other_namespaces(locker, registry):
    locker.put('a', 1)
    registry.resolve('local').set_item('other.x', 'y')
    assert locker.all() == {'a': 1}
    assert locker.count() == len(locker.all()) == 1
    assert locker.keys() == ['a']


def test_all_with_separator_in_logical_key(locker):
    locker.put('a.b', 1)
    assert locker.all() == {'a.b': 1}


def test_empty_namespace_sees_everything(registry):
    backend = registry.resolve('local')
    backend.set_item('other.x', '"y"')
    root = Locker('local', '', registry=registry)
    root.put('a', 1)
    assert backend.get_item('a') == '1'
    assert root.all() == {'other.x': 'y', 'a': 1}


def test_clean_only_touches_current_namespace(locker, registry):
    backend = registry.resolve('local')
    locker.put({'a': 1, 'b': 2})
    backend.set_item('other.x', 'y')
    locker.clean()
    assert locker.count() == 0
    assert backend.keys() == ['other.x']


def test_empty_clears_whole_backend(locker, registry):
    backend = registry.resolve('local')
    locker.put('a', 1)
    backend.set_item('other.x', 'y')
    locker.empty()
    assert backend.keys() == []


def test_change_events(locker, events):
    locker.put('k', 1)
    locker.put('k', 1)
    locker.put('k', 2)
    locker.forget('k')
    locker.forget('k')
    assert [name for name, _ in events] == [ITEM_ADDED, ITEM_UPDATED, ITEM_FORGOTTEN]
    assert events[0][1] == {'key': 'k', 'value': 1, 'driver': 'local', 'namespace': 'ns'}
    assert events[1][1] == {'key': 'k', 'old_value': 1, 'new_value': 2, 'driver': 'local', 'namespace': 'ns'}
    assert events[2][1] == {'key': 'k', 'driver': 'local', 'namespace': 'ns'}


def test_events_can_be_disabled(registry, bus, events):
    quiet = Locker('local', 'ns', registry=registry, bus=bus, events_enabled=False)
    quiet.put('k', 1)
    quiet.forget('k')
    assert events == []


def test_quota_exceeded():
    registry = BackendRegistry({'local': MemoryStorage(quota_bytes=64)})
    locker = Locker('local', 'ns', registry=registry)
    with pytest.raises(QuotaExceeded) as exc:
        locker.put('big', 'x' * 100)
    assert exc.value.key == 'big'


class BrokenStorage(MemoryStorage):
    def set_item(self, key, value):
        if key.endswith('bad'):
            raise RuntimeError('disk on fire')
        super().set_item(key, value)


def test_other_write_errors_become_write_failed():
    locker = Locker('local', 'ns', registry=BackendRegistry({'local': BrokenStorage()}))
    locker.put('good', 1)
    with pytest.raises(WriteFailed) as exc:
        locker.put('bad', 1)
    assert exc.value.key == 'bad'


class NamedQuotaError(Exception):
    name = 'NS_ERROR_DOM_QUOTA_REACHED'


class NamedQuotaStorage(MemoryStorage):
    def set_item(self, key, value):
        if key != '__locker_support_probe__':
            raise NamedQuotaError()
        super().set_item(key, value)


def test_quota_error_recognised_by_name_attribute():
    locker = Locker('local', 'ns', registry=BackendRegistry({'local': NamedQuotaStorage()}))
    with pytest.raises(QuotaExceeded):
        locker.put('k', 1)


class ReadOnlyStorage(MemoryStorage):
    def set_item(self, key, value):
        raise PermissionError('read only')


def test_unsupported_backend():
    locker = Locker('local', 'ns', registry=BackendRegistry({'local': ReadOnlyStorage()}))
    assert locker.supported() is False
    with pytest.raises(UnsupportedBackend):
        locker.get('k')
    with pytest.raises(UnsupportedBackend):
        locker.put('k', 1)


def test_support_check_is_cached_per_instance():
    registry = BackendRegistry({'local': MemoryStorage(), 'broken': ReadOnlyStorage()})
    locker = Locker('local', 'ns', registry=registry)
    assert locker.supported() is True
    assert locker.supported('broken') is True
    fresh = locker.driver('broken')
    assert fresh.supported() is False


def test_support_check_leaves_no_trace(locker, registry):
    locker.supported()
    assert registry.resolve('local').keys() == []


def test_unknown_driver(locker):
    with pytest.raises(DriverNotFound):
        locker.driver('cloud')


def test_unknown_driver_is_unsupported(locker):
    assert locker.supported('cloud') is False
    assert locker.supported() is False
    with pytest.raises(UnsupportedBackend):
        locker.get('a')


def test_cached_support_ignores_unknown_driver(locker):
    assert locker.supported() is True
    assert locker.supported('cloud') is True


def test_derived_instances(locker, registry):
    session = locker.driver('session')
    assert session.get_driver() is registry.resolve('session')
    assert session.get_namespace() == 'ns'
    other = locker.namespace('other')
    assert other.get_driver() is locker.get_driver()
    assert other.get_namespace() == 'other'
    other.put('a', 1)
    assert locker.has('a') is False
    assert locker.instance('session', 'x').get_driver_id() == 'session'


def test_namespace_must_not_contain_separator(locker):
    with pytest.raises(ValueError):
        locker.namespace('a.b')


def test_set_crypto_key_rejects_blank(locker):
    locker.set_crypto_key('secret')
    for bad in ('', '   ', '\n\t', None, 42):
        locker.set_crypto_key(bad)
    assert locker.crypto_key == 'secret'
