"""
Config providers: read and write values of a hierarchical store by address.

A provider is fixed on a base address, the container every relative address
is resolved against:

>>> from hiveconf.stores import MemoryStore
>>> config = HiveConfigProvider(
...     'registry://HKEY_CURRENT_USER/Software/Acme/', store=MemoryStore()
... )
>>> config.set_value('Window/Width', 800)
>>> config.get_value('Window/Width')
800
>>> config.get_value('Window/Height', 600)
600
>>> [a.relative_to(config.base_address) for a in config.get_children()]
['Window/']
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from hiveconf.address import Address, AddressLike, quote_name
from hiveconf.base import Root, AccessMode, StoredValue, HierarchicalStore
from hiveconf.config import default_store
from hiveconf.errors import InvalidBaseAddress, InvalidPath, ContainerNotFound
from hiveconf.util import coerce_value

logger = logging.getLogger(__name__)


class ConfigProvider(ABC):
    """
    Abstract base class for config providers.

    Implementations work on parsed addresses; this class adds the public,
    string-friendly surface: paths may be given as strings or Address
    instances, relative (to ``base_address``) or absolute.
    """

    @property
    @abstractmethod
    def base_address(self) -> Address:
        """The container that relative addresses are resolved against."""
        pass

    @abstractmethod
    def _get_children(self, path: Address) -> list[Address]:
        pass

    @abstractmethod
    def _get_value(self, path: Address, default: Any, value_type: Optional[type]) -> Any:
        pass

    @abstractmethod
    def _set_value(self, path: Address, value: Any) -> None:
        pass

    def resolve(self, path: AddressLike) -> Address:
        """Return the absolute address ``path`` denotes."""
        return self.base_address.join(path)

    def get_children(self, path: AddressLike = '.') -> list[Address]:
        """
        List the children of a container.

        Sub-containers come first (their addresses end with '/'), then leaves,
        each group in the order the store enumerates them.

        Raises:
            InvalidPath: If ``path`` denotes a leaf
            ContainerNotFound: If the container does not exist
        """
        return self._get_children(Address.parse(path))

    def get_value(
        self,
        path: AddressLike,
        default: Any = None,
        *,
        value_type: Optional[type] = None,
    ) -> Any:
        """
        Read a leaf value, or ``default`` if the leaf (or its container) is missing.

        The value is converted to ``value_type``; when that is not given, to the
        type of ``default``; when neither is given it is returned as stored.

        Raises:
            InvalidPath: If ``path`` denotes a container
            TypeMismatch: If the stored value cannot be read as the requested type
        """
        if value_type is None and default is not None:
            value_type = type(default)
        return self._get_value(Address.parse(path), default, value_type)

    def set_value(self, path: AddressLike, value: Any) -> None:
        """
        Write a leaf value, creating its container if needed.

        Raises:
            InvalidPath: If ``path`` denotes a container
            TypeMismatch: If no store kind can hold ``value``
        """
        self._set_value(Address.parse(path), value)

    def get_str(self, path: AddressLike, default: Optional[str] = None) -> Optional[str]:
        return self.get_value(path, default, value_type=str)

    def get_int(self, path: AddressLike, default: Optional[int] = None) -> Optional[int]:
        return self.get_value(path, default, value_type=int)


class HiveConfigProvider(ConfigProvider):
    """Config provider over a hierarchical store, addressed by URI.

    Args:
        base_address: Absolute container address,
            e.g. ``'registry://HKEY_CURRENT_USER/Software/Acme/'``
        store: The store to read and write (the configured default if None)

    Raises:
        InvalidBaseAddress: If ``base_address`` is relative or denotes a leaf
        UnknownSelector: If its scheme or authority is not a known token
    """

    def __init__(self, base_address: AddressLike, store: Optional[HierarchicalStore] = None):
        base = Address.parse(base_address)
        if not base.is_absolute or not base.is_container:
            raise InvalidBaseAddress(
                f'The base address must be an absolute container address '
                f"(ending with '/'), not {str(base)!r}"
            )
        base.coordinate  # decodes, so unknown scheme or authority tokens raise here
        self._base_address = base
        self._store = store if store is not None else default_store()

    @classmethod
    def from_coordinate(
        cls,
        root: Root,
        access_mode: AccessMode = AccessMode.DEFAULT,
        base_path: str = '/',
        store: Optional[HierarchicalStore] = None,
    ) -> 'HiveConfigProvider':
        return cls(Address.for_coordinate(root, access_mode, base_path), store=store)

    @property
    def base_address(self) -> Address:
        return self._base_address

    def __repr__(self) -> str:
        return f'{type(self).__name__}({str(self._base_address)!r})'

    def _open_root(self, address: Address):
        coordinate = address.coordinate
        logger.debug('Opening %s for %r', coordinate, str(address))
        return self._store.open_root(coordinate.root, coordinate.access_mode)

    def _resolve_leaf(self, path: Address) -> Address:
        address = self.resolve(path)
        if address.is_container or not address.leaf_name:
            raise InvalidPath(f'{str(address)!r} denotes a container, not a value')
        return address

    def _get_children(self, path: Address) -> list[Address]:
        address = self.resolve(path)
        if not address.is_container:
            raise InvalidPath(f"{str(address)!r} denotes a value, not a container (add a '/')")
        with self._open_root(address) as root:
            container = root.open_container(address.segments)
            if container is None:
                raise ContainerNotFound(f'No container at {str(address)!r}')
            with container:
                names = [quote_name(n) + '/' for n in container.list_containers()]
                names += [quote_name(n) for n in container.list_leaves()]
        return [address.join(name) for name in names]

    def _get_value(self, path: Address, default: Any, value_type: Optional[type]) -> Any:
        address = self._resolve_leaf(path)
        with self._open_root(address) as root:
            container = root.open_container(address.segments)
            if container is None:
                return default
            with container:
                stored = container.get_leaf(address.leaf_name)
        if stored is None:
            return default
        return coerce_value(stored.native, value_type)

    def _set_value(self, path: Address, value: Any) -> None:
        address = self._resolve_leaf(path)
        stored = StoredValue.from_native(value)
        with self._open_root(address) as root:
            with root.open_container(address.segments, create=True) as container:
                container.set_leaf(address.leaf_name, stored)
        logger.debug('Wrote %s value to %r', stored.kind.value, str(address))
