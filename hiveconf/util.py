"""
Utilities for external dependencies and general helpers.
"""

import json
from functools import lru_cache
from typing import Any, Optional

import yaml  # pip install PyYAML
import jsonschema
from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from hiveconf.errors import TypeMismatch


def _load_json_file(path: str) -> dict:
    """Load a JSON file from the given path."""
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def load_yaml(yaml_path: str):
    """
    Loads a YAML file using PyYAML.
    This works in Python 3.7+ because dicts preserve insertion order.
    """
    with open(yaml_path, 'r', encoding='utf-8') as file:
        # Use safe_load for security reasons.
        return yaml.safe_load(file)


def dump_yaml(d: dict, yaml_path: str):
    """
    Dumps a dictionary to a YAML file using PyYAML,
    preserving key order and using a readable block style.
    """
    with open(yaml_path, 'w', encoding='utf-8') as file:
        # sort_keys=False keeps store enumeration order intact
        yaml.safe_dump(d, file, sort_keys=False, default_flow_style=False)


def load_mapping_file(path: str) -> dict:
    """Load a JSON or YAML file, choosing the parser by extension."""
    path = str(path)
    if path.endswith('.json'):
        return _load_json_file(path)
    elif path.endswith('.yaml') or path.endswith('.yml'):
        return load_yaml(path) or {}
    else:
        raise ValueError(f'Unsupported file type: {path}')


def _merge_dicts(base: dict, override: dict) -> dict:
    """Merge two dicts shallowly, with override taking precedence."""
    result = base.copy()
    result.update(override)
    return result


def schema_errors(instance: Any, schema: dict) -> list[str]:
    """Return the messages of every jsonschema violation of ``instance``."""
    validator = jsonschema.Draft7Validator(schema)
    return [
        f"{'/'.join(map(str, e.absolute_path)) or '<root>'}: {e.message}"
        for e in validator.iter_errors(instance)
    ]


# --------------------------------------------------------------------------------------
# Value coercion


@lru_cache
def _type_adapter(value_type) -> TypeAdapter:
    return TypeAdapter(value_type)


def _type_name(value_type) -> str:
    return getattr(value_type, '__name__', None) or str(value_type)


def coerce_value(value: Any, value_type: Optional[type] = None) -> Any:
    """Convert a stored value to ``value_type``, strictly.

    No implicit casts: an int is not turned into a str, nor a str into an int.
    With no ``value_type`` the value is returned as is.

    >>> coerce_value(1, int)
    1
    >>> coerce_value(['a'], list[str])
    ['a']
    >>> coerce_value('1', int)
    Traceback (most recent call last):
      ...
    hiveconf.errors.TypeMismatch: Stored str value cannot be read as int
    """
    if value_type is None:
        return value
    try:
        adapter = _type_adapter(value_type)
    except (PydanticSchemaGenerationError, TypeError):
        if isinstance(value_type, type) and isinstance(value, value_type):
            return value
        raise TypeMismatch(
            f'Stored {type(value).__name__} value cannot be read as {_type_name(value_type)}'
        ) from None
    try:
        return adapter.validate_python(value, strict=True)
    except ValidationError:
        raise TypeMismatch(
            f'Stored {type(value).__name__} value cannot be read as {_type_name(value_type)}'
        ) from None
