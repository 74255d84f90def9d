"""
Tests for hiveconf.settings, against an in-memory store.
"""

import pytest

from hiveconf.base import Root, AccessMode, StoredValue
from hiveconf.errors import TypeMismatch, UnknownSelector
from hiveconf.settings import HiveSettings, split_key_path, join_key_path
from hiveconf.stores import MemoryStore
from hiveconf.stores.tree import TreeContainer

TEST_KEY_PATH = 'Software\\Acme\\UnitTest\\hiveconf.settings'


def _populate(store, path, *, keys=(), values=None, root=Root.CURRENT_USER):
    segments = split_key_path(path)
    with store.open_root(root, AccessMode.DEFAULT) as handle:
        handle.delete_container_tree(segments)
        with handle.open_container(segments, create=True) as container:
            for key in keys:
                handle.open_container([*segments, key], create=True).close()
            for name, value in (values or {}).items():
                container.set_leaf(name, StoredValue.from_native(value))


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def settings(store):
    return HiveSettings.for_application(TEST_KEY_PATH, per_user=True, store=store)


def test_split_and_join_key_paths():
    assert split_key_path('Software\\Acme/App\\') == ('Software', 'Acme', 'App')
    assert split_key_path('') == ()
    assert join_key_path('Software\\Acme', 'App') == 'Software\\Acme\\App'
    assert join_key_path('Software\\Acme\\', None) == 'Software\\Acme\\'
    assert join_key_path('', 'App') == 'App'


def test_for_application_selects_root_and_access_mode(store):
    assert HiveSettings.for_application(store=store).root is Root.LOCAL_MACHINE
    per_user = HiveSettings.for_application('x', per_user=True, force_32bit=True, store=store)
    assert per_user.root is Root.CURRENT_USER
    assert per_user.access_mode is AccessMode.REGISTRY32
    assert per_user.base_path == 'x'


def test_unknown_selectors_fail_at_construction(store):
    with pytest.raises(UnknownSelector):
        HiveSettings('HKEY_CURRENT_USER', store=store)


def test_it_can_list_child_keys(store, settings):
    _populate(store, TEST_KEY_PATH, keys=['Key1', 'Key2', 'Key3'])
    assert settings.get_sub_key_names() == ['Key1', 'Key2', 'Key3']


def test_it_can_list_child_values(store, settings):
    _populate(store, TEST_KEY_PATH, values={'Value1': 1, 'Value2': 2, 'Value3': 3})
    assert settings.get_value_names() == ['Value1', 'Value2', 'Value3']


def test_it_can_list_child_keys_in_subkey(store, settings):
    _populate(store, TEST_KEY_PATH + '\\subkey', keys=['Key1', 'Key2', 'Key3'])
    assert settings.get_sub_key_names('subkey') == ['Key1', 'Key2', 'Key3']


def test_it_can_list_child_values_in_subkey(store, settings):
    _populate(store, TEST_KEY_PATH + '\\subkey', values={'Value1': 1, 'Value2': 2})
    assert settings.get_value_names('subkey') == ['Value1', 'Value2']


def test_listing_a_missing_key_is_empty(settings):
    assert settings.get_sub_key_names('nope') == []
    assert settings.get_value_names('nope') == []
    assert settings.get_sub_key_names() == []


def test_it_can_get_a_value(store, settings):
    _populate(store, TEST_KEY_PATH, values={'Value1': 1, 'Value2': 2, 'Value3': 3})
    assert settings.get_value('Value1', value_type=int) == 1


def test_it_can_get_a_value_in_a_subkey(store, settings):
    _populate(store, TEST_KEY_PATH + '\\subkey', values={'Value1': 1})
    assert settings.get_value('Value1', sub_path='subkey', value_type=int) == 1


def test_it_returns_a_default_value_if_none_exists(store, settings):
    _populate(store, TEST_KEY_PATH, values={'Value1': 1})
    assert settings.get_value('Value4', default=400) == 400
    assert settings.get_value('Value1', sub_path='missing', default=9) == 9


def test_null_values_read_as_default(store, settings):
    _populate(store, TEST_KEY_PATH)
    with store.open_root(Root.CURRENT_USER, AccessMode.DEFAULT) as root:
        container = root.open_container(split_key_path(TEST_KEY_PATH))
        # a value entry with no data
        container._node['values']['Empty'] = None
    assert 'Empty' in settings.get_value_names()
    assert settings.get_value('Empty', default='dflt') == 'dflt'


def test_type_mismatch(store, settings):
    _populate(store, TEST_KEY_PATH, values={'Value1': 'one'})
    with pytest.raises(TypeMismatch):
        settings.get_value('Value1', default=0)


def test_it_can_open_a_subkey(store, settings):
    _populate(store, TEST_KEY_PATH + '\\subkey', values={'Value1': 1})
    sub_settings = settings.open_key('subkey')
    assert sub_settings.base_path == TEST_KEY_PATH + '\\subkey'
    assert sub_settings.get_value('Value1', value_type=int) == 1


def test_open_key_is_pure(settings):
    settings.open_key('never\\created')
    assert not settings.has_key('never')


def test_opened_key_sees_scoped_writes(settings):
    settings.set_value('Value1', 'x', sub_path='subkey')
    assert settings.open_key('subkey').get_value('Value1') == 'x'
    settings.open_key('subkey').set_value('Value2', 2)
    assert settings.get_value('Value2', sub_path='subkey') == 2


def test_it_can_set_a_value(store, settings):
    settings.set_value('Value1', 1)
    with store.open_root(Root.CURRENT_USER, AccessMode.DEFAULT) as root:
        with root.open_container(split_key_path(TEST_KEY_PATH)) as container:
            assert container.get_leaf('Value1').native == 1


def test_it_can_set_a_value_in_a_subkey(store, settings):
    settings.set_value('Value1', 1, sub_path='subkey')
    with store.open_root(Root.CURRENT_USER, AccessMode.DEFAULT) as root:
        with root.open_container(split_key_path(TEST_KEY_PATH + '\\subkey')) as container:
            assert container.get_leaf('Value1').native == 1


def test_set_value_overwrites(settings):
    settings.set_value('Value1', 1)
    settings.set_value('Value1', ['a', 'b'])
    assert settings.get_value('Value1') == ['a', 'b']
    assert settings.get_value_names() == ['Value1']


def test_it_can_confirm_existence_of_key(store, settings):
    _populate(store, TEST_KEY_PATH, keys=['Key1', 'Key2', 'Key3'])
    assert settings.has_key('Key1')
    assert not settings.has_key('Key4')


def test_has_key_closes_the_key_it_opens(store, settings, monkeypatch):
    _populate(store, TEST_KEY_PATH, keys=['Key1'])
    closed = []
    monkeypatch.setattr(TreeContainer, 'close', lambda self: closed.append(self))
    assert settings.has_key('Key1')
    assert len(closed) == 1


def test_roots_and_access_modes_are_separate(store, settings):
    settings.set_value('Value1', 1)
    machine = HiveSettings(Root.LOCAL_MACHINE, AccessMode.DEFAULT, TEST_KEY_PATH, store=store)
    assert machine.get_value('Value1') is None
    wow = HiveSettings(Root.CURRENT_USER, AccessMode.REGISTRY32, TEST_KEY_PATH, store=store)
    assert not wow.has_key('')
