"""
Minimal unit tests for hiveconf.base
"""

import pytest
from pydantic import ValidationError

from hiveconf.base import (
    StoredValue,
    ValueKind,
    StoreRegistry,
    get_store_registry,
)
from hiveconf.errors import TypeMismatch
from hiveconf.stores import MemoryStore


def test_stored_value_from_native():
    assert StoredValue.from_native(1).kind is ValueKind.INTEGER
    assert StoredValue.from_native('a').kind is ValueKind.STRING
    assert StoredValue.from_native(b'\x00\x01').kind is ValueKind.BINARY
    assert StoredValue.from_native(bytearray(b'x')).data == b'x'
    multi = StoredValue.from_native(('a', 'b'))
    assert multi.kind is ValueKind.MULTI_STRING
    assert multi.native == ['a', 'b']


@pytest.mark.parametrize('value', [True, 1.5, None, {'a': 1}, ['a', 2]])
def test_stored_value_rejects_unstorable_values(value):
    with pytest.raises(TypeMismatch):
        StoredValue.from_native(value)


def test_stored_value_kind_must_match_data():
    with pytest.raises(ValidationError):
        StoredValue(kind=ValueKind.INTEGER, data='1')
    with pytest.raises(ValidationError):
        StoredValue(kind=ValueKind.BINARY, data='abc')


def test_store_registry():
    registry = StoreRegistry()
    registry.register('mem', MemoryStore)
    assert registry.is_registered('mem')
    assert registry.list_stores() == ['mem']
    # Every call makes a fresh store
    assert registry.mk_store('mem') is not registry.mk_store('mem')
    with pytest.raises(ValueError):
        registry.mk_store('nope')


def test_builtin_stores_registered():
    registry = get_store_registry()
    for name in ('memory', 'yaml', 'winreg'):
        assert registry.is_registered(name)
