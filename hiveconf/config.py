"""
Configuration management using Mapping interfaces.

Implement:
- ConfigStore: MutableMapping for configuration, with cascading defaults
- Default configuration, loading from JSON/YAML files, environment overrides
- Factories for the store, provider and settings a configuration describes
"""

import logging
import os
import sys
from typing import Any, Optional
from collections.abc import Mapping, MutableMapping

import hiveconf.stores  # registers the built-in store backends
from hiveconf.base import HierarchicalStore, StoreCoordinate, get_store_registry
from hiveconf.errors import ConfigError
from hiveconf.selectors import root_from_token, access_mode_from_token
from hiveconf.util import load_mapping_file, schema_errors, _merge_dicts

logger = logging.getLogger(__name__)

DFLT_ENV_PREFIX = 'HIVECONF_'
DFLT_STORE_PATH = os.path.join('~', '.hiveconf', 'store.yaml')

CONFIG_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    'type': 'object',
    'properties': {
        'store': {'type': 'string'},
        'store_path': {'type': 'string'},
        'root': {'type': 'string'},
        'access_mode': {'type': 'string'},
        'base_path': {'type': 'string'},
    },
    'additionalProperties': False,
}


class ConfigStore(MutableMapping):
    """Configuration store with cascading defaults.

    Keys that were never set (or were deleted) fall back to ``defaults``.
    """

    def __init__(self, base_config: dict | None = None, *, defaults: dict | None = None):
        self._config = dict(base_config or {})
        self._defaults = dict(defaults or {})

    def __getitem__(self, key: str) -> Any:
        if key in self._config:
            return self._config[key]
        return self._defaults[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._config[key] = value

    def __delitem__(self, key: str) -> None:
        del self._config[key]

    def __iter__(self):
        return iter(_merge_dicts(self._defaults, self._config))

    def __len__(self) -> int:
        return len(_merge_dicts(self._defaults, self._config))

    def __repr__(self) -> str:
        return f'{type(self).__name__}({dict(self)!r})'

    def copy(self) -> 'ConfigStore':
        return ConfigStore(self._config, defaults=self._defaults)


def _default_settings() -> dict:
    return {
        'store': 'winreg' if sys.platform == 'win32' else 'yaml',
        'store_path': DFLT_STORE_PATH,
        'root': 'HKEY_CURRENT_USER',
        'access_mode': 'registry',
        'base_path': '/',
    }


def get_default_config() -> ConfigStore:
    return ConfigStore(defaults=_default_settings())


def validate_config(config: Mapping) -> None:
    """Check a configuration, raising ConfigError (or UnknownSelector) if invalid."""
    errors = schema_errors(dict(config), CONFIG_SCHEMA)
    if errors:
        raise ConfigError('Invalid configuration:\n' + '\n'.join(errors))
    if 'store' in config and not get_store_registry().is_registered(config['store']):
        available = ', '.join(get_store_registry().list_stores())
        raise ConfigError(f"Unknown store {config['store']!r}. Available stores: {available}")
    if 'root' in config:
        root_from_token(config['root'])
    if 'access_mode' in config:
        access_mode_from_token(config['access_mode'])


def load_config(path: str) -> ConfigStore:
    """Load a configuration from a JSON or YAML file, over the defaults."""
    data = load_mapping_file(path)
    if not isinstance(data, Mapping):
        raise ConfigError(f'{path} does not hold a mapping')
    validate_config(data)
    return ConfigStore(data, defaults=_default_settings())


def apply_env_overrides(
    config: Mapping[str, Any], prefix: str = DFLT_ENV_PREFIX
) -> ConfigStore:
    """Override configuration keys with ``<prefix><KEY>`` environment variables."""
    if isinstance(config, ConfigStore):
        updated = config.copy()
    else:
        updated = ConfigStore(config, defaults=_default_settings())
    for key in CONFIG_SCHEMA['properties']:
        env_key = prefix + key.upper()
        if env_key in os.environ:
            updated[key] = os.environ[env_key]
    return updated


def _resolved(config: Optional[Mapping]) -> Mapping:
    if config is None:
        config = apply_env_overrides(get_default_config())
    elif not isinstance(config, ConfigStore):
        config = ConfigStore(config, defaults=_default_settings())
    validate_config(config)
    return config


def store_coordinate(config: Optional[Mapping] = None) -> StoreCoordinate:
    """The root and access mode a configuration selects."""
    config = _resolved(config)
    return StoreCoordinate(
        root=root_from_token(config['root']),
        access_mode=access_mode_from_token(config['access_mode']),
    )


def default_store(config: Optional[Mapping] = None) -> HierarchicalStore:
    """Make the store a configuration names (the environment's default if none given)."""
    config = _resolved(config)
    name = config['store']
    kwargs = {'path': config['store_path']} if name == 'yaml' else {}
    logger.debug('Making %r store with %r', name, kwargs)
    return get_store_registry().mk_store(name, **kwargs)


def mk_provider(config: Optional[Mapping] = None):
    """Make a HiveConfigProvider rooted where a configuration says."""
    from hiveconf.address import Address, quote_name
    from hiveconf.provider import HiveConfigProvider
    from hiveconf.settings import split_key_path

    config = _resolved(config)
    coordinate = store_coordinate(config)
    # base_path is a key path, like the one mk_settings gets ('\' or '/' separated)
    base_path = '/' + ''.join(quote_name(s) + '/' for s in split_key_path(config['base_path']))
    return HiveConfigProvider(
        Address.for_coordinate(coordinate.root, coordinate.access_mode, base_path),
        store=default_store(config),
    )


def mk_settings(config: Optional[Mapping] = None):
    """Make a HiveSettings accessor rooted where a configuration says."""
    from hiveconf.settings import HiveSettings

    config = _resolved(config)
    coordinate = store_coordinate(config)
    return HiveSettings(
        coordinate.root,
        coordinate.access_mode,
        base_path=config['base_path'].strip('/\\'),
        store=default_store(config),
    )
