"""
Settings: plain-path access to a hierarchical store.

Unlike config providers, settings accessors take no addresses: a HiveSettings
is bound to one root and access mode, and paths are key paths such as
``Software\\Acme\\App`` (``/`` is accepted as a separator too).

Reads are forgiving: a missing key gives empty listings and default values.
"""

import logging
import re
from typing import Any, Optional

from hiveconf.base import Root, AccessMode, StoredValue, HierarchicalStore
from hiveconf.config import default_store
from hiveconf.selectors import root_to_token, access_mode_to_token
from hiveconf.util import coerce_value

logger = logging.getLogger(__name__)

SEPARATOR = '\\'
_SEPARATORS = re.compile(r'[\\/]')


def split_key_path(path: Optional[str]) -> tuple[str, ...]:
    """Split a key path into key names, ignoring empty segments.

    >>> split_key_path('Software\\\\Acme/App')
    ('Software', 'Acme', 'App')
    >>> split_key_path(None)
    ()
    """
    if not path:
        return ()
    return tuple(s for s in _SEPARATORS.split(path) if s)


def join_key_path(base_path: str, sub_path: Optional[str]) -> str:
    """Join two key paths; an empty ``sub_path`` leaves ``base_path`` unchanged."""
    if not sub_path:
        return base_path
    if not base_path:
        return sub_path
    return base_path.rstrip('\\/') + SEPARATOR + sub_path.lstrip('\\/')


class HiveSettings:
    """Settings under a key of a hierarchical store.

    Args:
        root: The root to work in
        access_mode: The view of the root to use
        base_path: Key path all operations are relative to
        store: The store to read and write (the configured default if None)
    """

    def __init__(
        self,
        root: Root,
        access_mode: AccessMode = AccessMode.DEFAULT,
        base_path: str = '',
        store: Optional[HierarchicalStore] = None,
    ):
        # Fail early on unknown selectors
        root_to_token(root)
        access_mode_to_token(access_mode)
        self._root = Root(root)
        self._access_mode = AccessMode(access_mode)
        self._base_path = base_path or ''
        self._store = store if store is not None else default_store()

    @classmethod
    def for_application(
        cls,
        base_path: str = '',
        *,
        per_user: bool = False,
        force_32bit: bool = False,
        store: Optional[HierarchicalStore] = None,
    ) -> 'HiveSettings':
        """Settings of an application: machine-wide, or per user with ``per_user``."""
        return cls(
            Root.CURRENT_USER if per_user else Root.LOCAL_MACHINE,
            AccessMode.REGISTRY32 if force_32bit else AccessMode.DEFAULT,
            base_path,
            store=store,
        )

    @property
    def root(self) -> Root:
        return self._root

    @property
    def access_mode(self) -> AccessMode:
        return self._access_mode

    @property
    def base_path(self) -> str:
        return self._base_path

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}({self._root.name}, {self._access_mode.name}, '
            f'{self._base_path!r})'
        )

    def _segments(self, sub_path: Optional[str] = None) -> tuple[str, ...]:
        return split_key_path(join_key_path(self._base_path, sub_path))

    def _open_root(self):
        return self._store.open_root(self._root, self._access_mode)

    def open_key(self, name: str) -> 'HiveSettings':
        """Settings under the sub-key ``name``. Nothing is read or created."""
        return HiveSettings(
            self._root,
            self._access_mode,
            join_key_path(self._base_path, name),
            store=self._store,
        )

    def has_key(self, path: str) -> bool:
        """Whether the key at ``path`` exists."""
        with self._open_root() as root:
            container = root.open_container(self._segments(path))
            if container is None:
                return False
            with container:
                return True

    def get_sub_key_names(self, sub_path: Optional[str] = None) -> list[str]:
        """Names of the sub-keys of a key, empty if the key is missing."""
        with self._open_root() as root:
            container = root.open_container(self._segments(sub_path))
            if container is None:
                return []
            with container:
                return container.list_containers()

    def get_value_names(self, sub_path: Optional[str] = None) -> list[str]:
        """Names of the values of a key, empty if the key is missing."""
        with self._open_root() as root:
            container = root.open_container(self._segments(sub_path))
            if container is None:
                return []
            with container:
                return container.list_leaves()

    def get_value(
        self,
        name: str,
        sub_path: Optional[str] = None,
        default: Any = None,
        *,
        value_type: Optional[type] = None,
    ) -> Any:
        """Read a value, or ``default`` if the key or value is missing or holds no data.

        The conversion rules are those of ConfigProvider.get_value.
        """
        if value_type is None and default is not None:
            value_type = type(default)
        with self._open_root() as root:
            container = root.open_container(self._segments(sub_path))
            if container is None:
                return default
            with container:
                stored = container.get_leaf(name)
        if stored is None:
            return default
        return coerce_value(stored.native, value_type)

    def set_value(self, name: str, value: Any, sub_path: Optional[str] = None) -> None:
        """Write a value, creating the key if needed."""
        stored = StoredValue.from_native(value)
        segments = self._segments(sub_path)
        with self._open_root() as root:
            with root.open_container(segments, create=True) as container:
                container.set_leaf(name, stored)
        logger.debug('Wrote %s value %r under %r', stored.kind.value, name, SEPARATOR.join(segments))
