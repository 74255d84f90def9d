"""
Bidirectional mapping between store selectors and the tokens used in addresses.

An address such as ``registry32://HKEY_LOCAL_MACHINE/Software/Acme/`` carries
its access mode in the scheme and its root in the authority.
"""

from hiveconf.base import Root, AccessMode, StoreCoordinate
from hiveconf.errors import UnknownSelector

_ROOT_TOKENS = {
    Root.CLASSES_ROOT: 'HKEY_CLASSES_ROOT',
    Root.CURRENT_CONFIG: 'HKEY_CURRENT_CONFIG',
    Root.CURRENT_USER: 'HKEY_CURRENT_USER',
    Root.DYN_DATA: 'HKEY_DYN_DATA',
    Root.LOCAL_MACHINE: 'HKEY_LOCAL_MACHINE',
    Root.PERFORMANCE_DATA: 'HKEY_PERFORMANCE_DATA',
    Root.USERS: 'HKEY_USERS',
}

_ACCESS_MODE_TOKENS = {
    AccessMode.DEFAULT: 'registry',
    AccessMode.REGISTRY32: 'registry32',
    AccessMode.REGISTRY64: 'registry64',
}

# Decoding is case-insensitive, so the reverse tables are keyed by lowercase token
_ROOTS_BY_TOKEN = {token.lower(): root for root, token in _ROOT_TOKENS.items()}
_ACCESS_MODES_BY_TOKEN = {
    token.lower(): mode for mode, token in _ACCESS_MODE_TOKENS.items()
}


def root_to_token(root: Root) -> str:
    """Return the address authority for a root.

    >>> root_to_token(Root.CURRENT_USER)
    'HKEY_CURRENT_USER'
    """
    try:
        return _ROOT_TOKENS[root]
    except (KeyError, TypeError):
        raise UnknownSelector(f'Unknown root {root!r}') from None


def root_from_token(token: str) -> Root:
    """Return the root an address authority names.

    >>> root_from_token('hkey_local_machine')
    <Root.LOCAL_MACHINE: 'local_machine'>
    """
    try:
        return _ROOTS_BY_TOKEN[token.lower()]
    except (KeyError, AttributeError):
        raise UnknownSelector(f'Unknown root {token!r}') from None


def access_mode_to_token(access_mode: AccessMode) -> str:
    """Return the address scheme for an access mode.

    >>> access_mode_to_token(AccessMode.REGISTRY64)
    'registry64'
    """
    try:
        return _ACCESS_MODE_TOKENS[access_mode]
    except (KeyError, TypeError):
        raise UnknownSelector(f'Unknown access mode {access_mode!r}') from None


def access_mode_from_token(token: str) -> AccessMode:
    """Return the access mode an address scheme names."""
    try:
        return _ACCESS_MODES_BY_TOKEN[token.lower()]
    except (KeyError, AttributeError):
        raise UnknownSelector(f'Unknown access mode {token!r}') from None


def coordinate_from_tokens(scheme: str, authority: str) -> StoreCoordinate:
    """Decode the scheme and authority of an absolute address."""
    return StoreCoordinate(
        root=root_from_token(authority),
        access_mode=access_mode_from_token(scheme),
    )


def address_prefix(root: Root, access_mode: AccessMode = AccessMode.DEFAULT) -> str:
    """Return the address of the top container of a root.

    >>> address_prefix(Root.CURRENT_USER)
    'registry://HKEY_CURRENT_USER/'
    """
    return f'{access_mode_to_token(access_mode)}://{root_to_token(root)}/'
