"""
Minimal unit tests for hiveconf.util
"""

import tempfile
import os

import pytest

from hiveconf.errors import TypeMismatch
from hiveconf.util import (
    _merge_dicts,
    _load_json_file,
    load_mapping_file,
    coerce_value,
    schema_errors,
)


def test_merge_dicts():
    a = {'x': 1, 'y': 2}
    b = {'y': 3, 'z': 4}
    merged = _merge_dicts(a, b)
    assert merged['x'] == 1
    assert merged['y'] == 3
    assert merged['z'] == 4


def test_load_json_file():
    d = {'foo': 'bar'}
    with tempfile.NamedTemporaryFile('w+', delete=False) as f:
        import json

        json.dump(d, f)
        f.close()
        loaded = _load_json_file(f.name)
    os.unlink(f.name)
    assert loaded == d


def test_load_mapping_file_rejects_unknown_extensions(tmp_path):
    path = tmp_path / 'config.ini'
    path.write_text('[x]')
    with pytest.raises(ValueError):
        load_mapping_file(str(path))


def test_load_empty_yaml_file(tmp_path):
    path = tmp_path / 'empty.yml'
    path.write_text('')
    assert load_mapping_file(str(path)) == {}


def test_coerce_value():
    assert coerce_value(1) == 1
    assert coerce_value(1, int) == 1
    assert coerce_value('a', str) == 'a'
    assert coerce_value(b'a', bytes) == b'a'
    assert coerce_value(['a'], list[str]) == ['a']


@pytest.mark.parametrize(
    'value, value_type',
    [(1, str), ('1', int), ('a', bytes), (b'a', str), (['a'], str), (1, bool)],
)
def test_coerce_value_is_strict(value, value_type):
    with pytest.raises(TypeMismatch):
        coerce_value(value, value_type)


def test_coerce_value_with_arbitrary_classes():
    class Opaque:
        pass

    with pytest.raises(TypeMismatch):
        coerce_value(1, Opaque)


def test_schema_errors():
    schema = {'type': 'object', 'properties': {'a': {'type': 'integer'}}}
    assert schema_errors({'a': 1}, schema) == []
    assert schema_errors({'a': 'x'}, schema) == ["a: 'x' is not of type 'integer'"]
