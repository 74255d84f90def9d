"""
The Windows registry as a hierarchical store, through the ``winreg`` module.

Only usable on Windows; making a WindowsRegistryStore anywhere else raises
StoreUnavailable.
"""

import logging
from collections.abc import Sequence
from typing import Optional

from hiveconf.base import Root, AccessMode, StoredValue, ValueKind, register_store
from hiveconf.errors import UnknownRoot, StoreUnavailable, TypeMismatch
from hiveconf.selectors import root_to_token

logger = logging.getLogger(__name__)

_DWORD_MAX = 0xFFFFFFFF
_QWORD_MAX = 0xFFFFFFFFFFFFFFFF

_VIEW_FLAG_NAMES = {
    AccessMode.DEFAULT: None,
    AccessMode.REGISTRY32: 'KEY_WOW64_32KEY',
    AccessMode.REGISTRY64: 'KEY_WOW64_64KEY',
}


def _import_winreg():
    try:
        import winreg
    except ImportError:
        raise StoreUnavailable('The Windows registry is only available on Windows') from None
    return winreg


def _to_stored_value(winreg, data, reg_type) -> Optional[StoredValue]:
    if reg_type == winreg.REG_DWORD_BIG_ENDIAN:
        # winreg hands these back as raw bytes
        return StoredValue(kind=ValueKind.INTEGER, data=int.from_bytes(data, 'big'))
    if reg_type in (winreg.REG_DWORD, winreg.REG_QWORD):
        return StoredValue(kind=ValueKind.INTEGER, data=data)
    if reg_type in (winreg.REG_SZ, winreg.REG_EXPAND_SZ):
        return StoredValue(kind=ValueKind.STRING, data=data)
    if reg_type == winreg.REG_MULTI_SZ:
        return StoredValue(kind=ValueKind.MULTI_STRING, data=list(data))
    if reg_type == winreg.REG_NONE or data is None:
        return None
    if isinstance(data, bytes):
        return StoredValue(kind=ValueKind.BINARY, data=data)
    return None


def _to_registry_value(winreg, value: StoredValue):
    if value.kind is ValueKind.INTEGER:
        if 0 <= value.data <= _DWORD_MAX:
            return value.data, winreg.REG_DWORD
        if 0 <= value.data <= _QWORD_MAX:
            return value.data, winreg.REG_QWORD
        raise TypeMismatch(f'The registry holds unsigned 64-bit integers, not {value.data}')
    if value.kind is ValueKind.STRING:
        return value.data, winreg.REG_SZ
    if value.kind is ValueKind.MULTI_STRING:
        return list(value.data), winreg.REG_MULTI_SZ
    return value.data, winreg.REG_BINARY


class RegistryContainer:
    """An open registry key."""

    def __init__(self, winreg, hkey):
        self._winreg = winreg
        self._hkey = hkey

    def list_containers(self) -> list[str]:
        num_sub_keys, _, _ = self._winreg.QueryInfoKey(self._hkey)
        return [self._winreg.EnumKey(self._hkey, i) for i in range(num_sub_keys)]

    def list_leaves(self) -> list[str]:
        _, num_values, _ = self._winreg.QueryInfoKey(self._hkey)
        return [self._winreg.EnumValue(self._hkey, i)[0] for i in range(num_values)]

    def get_leaf(self, name: str) -> Optional[StoredValue]:
        try:
            data, reg_type = self._winreg.QueryValueEx(self._hkey, name)
        except FileNotFoundError:
            return None
        return _to_stored_value(self._winreg, data, reg_type)

    def set_leaf(self, name: str, value: StoredValue) -> None:
        data, reg_type = _to_registry_value(self._winreg, value)
        self._winreg.SetValueEx(self._hkey, name, 0, reg_type, data)

    def close(self) -> None:
        self._hkey.Close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class RegistryRoot:
    """An open registry hive, seen through one registry view."""

    def __init__(self, winreg, hkey, view_flag: int):
        self._winreg = winreg
        self._hkey = hkey
        self._view_flag = view_flag

    def open_container(
        self, segments: Sequence[str], *, create: bool = False
    ) -> Optional[RegistryContainer]:
        winreg = self._winreg
        sub_key = '\\'.join(segments)
        if create:
            access = winreg.KEY_READ | winreg.KEY_WRITE | self._view_flag
            hkey = winreg.CreateKeyEx(self._hkey, sub_key, 0, access)
        else:
            try:
                hkey = winreg.OpenKeyEx(
                    self._hkey, sub_key, 0, winreg.KEY_READ | self._view_flag
                )
            except FileNotFoundError:
                return None
        return RegistryContainer(winreg, hkey)

    def delete_container_tree(self, segments: Sequence[str]) -> None:
        """Delete a key and all its sub-keys. Missing keys are ignored."""
        if not segments:
            raise ValueError('Refusing to delete a whole registry hive')
        winreg = self._winreg
        sub_key = '\\'.join(segments)
        try:
            hkey = winreg.OpenKeyEx(
                self._hkey, sub_key, 0, winreg.KEY_ALL_ACCESS | self._view_flag
            )
        except FileNotFoundError:
            return
        with hkey:
            # Deleting shifts indices, so always take the first remaining sub-key
            while winreg.QueryInfoKey(hkey)[0]:
                child = winreg.EnumKey(hkey, 0)
                self.delete_container_tree([*segments, child])
        winreg.DeleteKeyEx(self._hkey, sub_key, self._view_flag, 0)
        logger.debug('Deleted registry key %s', sub_key)

    def close(self) -> None:
        self._hkey.Close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


@register_store('winreg')
class WindowsRegistryStore:
    """The local machine's registry."""

    def __init__(self):
        self._winreg = _import_winreg()

    def open_root(self, root: Root, access_mode: AccessMode) -> RegistryRoot:
        winreg = self._winreg
        hive = getattr(winreg, root_to_token(root), None)
        if hive is None:
            raise UnknownRoot(f'winreg has no hive {root_to_token(root)}')
        try:
            hkey = winreg.ConnectRegistry(None, hive)
        except OSError as e:
            raise UnknownRoot(f'Cannot open registry hive {root_to_token(root)}: {e}') from e
        flag_name = _VIEW_FLAG_NAMES[access_mode]
        view_flag = getattr(winreg, flag_name) if flag_name else 0
        return RegistryRoot(winreg, hkey, view_flag)
