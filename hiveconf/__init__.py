"""
Public API for the hiveconf package.
Import the main user-facing functions and classes.
"""

from hiveconf.base import (
    Root,
    AccessMode,
    StoreCoordinate,
    StoredValue,
    ValueKind,
    HierarchicalStore,
    register_store,
    get_store_registry,
)
from hiveconf.errors import (
    HiveconfError,
    InvalidBaseAddress,
    InvalidPath,
    UnknownSelector,
    UnknownRoot,
    ContainerNotFound,
    TypeMismatch,
    StoreUnavailable,
    StoreFormatError,
    ConfigError,
)
from hiveconf.selectors import (
    root_to_token,
    root_from_token,
    access_mode_to_token,
    access_mode_from_token,
)
from hiveconf.address import Address
from hiveconf.stores import MemoryStore, YamlFileStore, WindowsRegistryStore
from hiveconf.config import (
    ConfigStore,
    get_default_config,
    load_config,
    apply_env_overrides,
    default_store,
    mk_provider,
    mk_settings,
)
from hiveconf.provider import ConfigProvider, HiveConfigProvider
from hiveconf.settings import HiveSettings

__all__ = [
    # Addressing
    'Address',
    'Root',
    'AccessMode',
    'StoreCoordinate',
    'root_to_token',
    'root_from_token',
    'access_mode_to_token',
    'access_mode_from_token',
    # Providers and settings
    'ConfigProvider',
    'HiveConfigProvider',
    'HiveSettings',
    # Stores
    'HierarchicalStore',
    'StoredValue',
    'ValueKind',
    'MemoryStore',
    'YamlFileStore',
    'WindowsRegistryStore',
    'register_store',
    'get_store_registry',
    # Configuration
    'ConfigStore',
    'get_default_config',
    'load_config',
    'apply_env_overrides',
    'default_store',
    'mk_provider',
    'mk_settings',
    # Errors
    'HiveconfError',
    'InvalidBaseAddress',
    'InvalidPath',
    'UnknownSelector',
    'UnknownRoot',
    'ContainerNotFound',
    'TypeMismatch',
    'StoreUnavailable',
    'StoreFormatError',
    'ConfigError',
]
