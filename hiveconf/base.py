"""
Core data models and protocols for the hiveconf package.

Define:
- Root, AccessMode: the store-selection identifiers
- StoreCoordinate: a (root, access mode) pair
- StoredValue: the tagged value union exchanged with stores
- HierarchicalStore, RootHandle, ContainerHandle: protocols for store backends
- StoreRegistry: registry of store backends by name
"""

from typing import Protocol, Any, Optional, Union
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from pydantic import BaseModel, ConfigDict, model_validator
from hiveconf.errors import TypeMismatch


class Root(str, Enum):
    """Top-level namespace partitions of the store."""

    CLASSES_ROOT = 'classes_root'
    CURRENT_CONFIG = 'current_config'
    CURRENT_USER = 'current_user'
    DYN_DATA = 'dyn_data'
    LOCAL_MACHINE = 'local_machine'
    PERFORMANCE_DATA = 'performance_data'
    USERS = 'users'


class AccessMode(str, Enum):
    """Store-access variants, each selecting a physical view of a root."""

    DEFAULT = 'default'
    REGISTRY32 = 'registry32'
    REGISTRY64 = 'registry64'


@dataclass(frozen=True)
class StoreCoordinate:
    """Which root, seen through which access mode."""

    root: Root
    access_mode: AccessMode = AccessMode.DEFAULT


class ValueKind(str, Enum):
    """Native representations a store can hold for a leaf."""

    INTEGER = 'integer'
    STRING = 'string'
    BINARY = 'binary'
    MULTI_STRING = 'multi_string'


_KIND_TYPES = {
    ValueKind.INTEGER: int,
    ValueKind.STRING: str,
    ValueKind.BINARY: bytes,
    ValueKind.MULTI_STRING: list,
}


class StoredValue(BaseModel):
    """A leaf value as a store holds it: a kind tag plus the matching data.

    >>> StoredValue.from_native(42)
    StoredValue(kind=<ValueKind.INTEGER: 'integer'>, data=42)
    >>> StoredValue.from_native(['a', 'b']).kind
    <ValueKind.MULTI_STRING: 'multi_string'>
    """

    model_config = ConfigDict(frozen=True)

    kind: ValueKind
    data: Union[int, str, bytes, list[str]]

    @model_validator(mode='after')
    def check_data_matches_kind(self):
        expected = _KIND_TYPES[self.kind]
        if isinstance(self.data, bool) or not isinstance(self.data, expected):
            raise ValueError(
                f'{self.kind.value} value cannot hold {type(self.data).__name__} data'
            )
        return self

    @classmethod
    def from_native(cls, value: Any) -> 'StoredValue':
        """Tag a Python value with its store kind.

        Raises TypeMismatch for values no store kind can represent.
        """
        if isinstance(value, bool):
            raise TypeMismatch('bool values cannot be stored; store an int instead')
        if isinstance(value, int):
            return cls(kind=ValueKind.INTEGER, data=value)
        if isinstance(value, str):
            return cls(kind=ValueKind.STRING, data=value)
        if isinstance(value, (bytes, bytearray)):
            return cls(kind=ValueKind.BINARY, data=bytes(value))
        if isinstance(value, (list, tuple)) and all(isinstance(x, str) for x in value):
            return cls(kind=ValueKind.MULTI_STRING, data=list(value))
        raise TypeMismatch(f'Cannot store a value of type {type(value).__name__}')

    @property
    def native(self) -> Any:
        """The plain Python value (a fresh list for multi-string values)."""
        if self.kind is ValueKind.MULTI_STRING:
            return list(self.data)
        return self.data


class ContainerHandle(Protocol):
    """An open container (registry key). Usable as a context manager."""

    def list_containers(self) -> list[str]: ...

    def list_leaves(self) -> list[str]: ...

    def get_leaf(self, name: str) -> Optional[StoredValue]: ...

    def set_leaf(self, name: str, value: StoredValue) -> None: ...

    def close(self) -> None: ...

    def __enter__(self) -> 'ContainerHandle': ...

    def __exit__(self, *exc_info) -> None: ...


class RootHandle(Protocol):
    """An open root of a store. Usable as a context manager."""

    def open_container(
        self, segments: Sequence[str], *, create: bool = False
    ) -> Optional[ContainerHandle]: ...

    def delete_container_tree(self, segments: Sequence[str]) -> None: ...

    def close(self) -> None: ...

    def __enter__(self) -> 'RootHandle': ...

    def __exit__(self, *exc_info) -> None: ...


class HierarchicalStore(Protocol):
    """Protocol for tree-structured key-value stores."""

    def open_root(self, root: Root, access_mode: AccessMode) -> RootHandle: ...


class StoreRegistry:
    """Registry for managing multiple store backends."""

    def __init__(self):
        self._stores: dict[str, type] = {}

    def register(self, name: str, store_class: type) -> None:
        """Register a store class under a name."""
        self._stores[name] = store_class

    def mk_store(self, name: str, **kwargs) -> HierarchicalStore:
        """Make a new store instance of the named backend."""
        if name not in self._stores:
            raise ValueError(f'No store registered under the name: {name}')
        return self._stores[name](**kwargs)

    def list_stores(self) -> list[str]:
        """List all registered store names."""
        return list(self._stores.keys())

    def is_registered(self, name: str) -> bool:
        """Check if a store name is registered."""
        return name in self._stores


# Global store registry instance
_store_registry = StoreRegistry()


def register_store(name: str):
    """Decorator for registering store classes."""

    def decorator(store_class: type):
        _store_registry.register(name, store_class)
        return store_class

    return decorator


def get_store_registry() -> StoreRegistry:
    """Get the global store registry."""
    return _store_registry
