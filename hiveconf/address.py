"""
Addresses: URI-form identifiers of containers and leaves.

An address is ``<access-mode>://<root>/<segment>/.../[<leaf>]``. A path that
ends with ``/`` (or an empty path) denotes a container; otherwise its last
segment is the name of a leaf held by the container before it.

Relative addresses are resolved against a base the way RFC 3986 section 5.2
resolves relative references, whatever the scheme (``urllib.parse.urljoin``
only does that for the schemes it knows about).

>>> base = Address.parse('registry://HKEY_CURRENT_USER/Software/Acme/')
>>> str(base.join('./Value1'))
'registry://HKEY_CURRENT_USER/Software/Acme/Value1'
>>> str(base.join('../Other/'))
'registry://HKEY_CURRENT_USER/Software/Other/'
>>> base.join('sub/Value1').leaf_name
'Value1'
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote, unquote

from hiveconf.base import Root, AccessMode, StoreCoordinate
from hiveconf.errors import InvalidPath
from hiveconf.selectors import address_prefix, coordinate_from_tokens

logger = logging.getLogger(__name__)

AddressLike = Union[str, 'Address']

# RFC 3986, appendix B, without fragments. Whitespace and control characters
# are part of key and value names and are kept as they are.
_ADDRESS_PATTERN = re.compile(
    r'(?:([A-Za-z][A-Za-z0-9+.\-]*):)?(?://([^/?]*))?([^?]*)(?:\?(.*))?\Z', re.DOTALL
)


def _remove_dot_segments(path: str) -> str:
    absolute = path.startswith('/')
    segments = path.split('/')
    if absolute:
        segments = segments[1:]
    output: list[str] = []
    for segment in segments:
        if segment == '.':
            continue
        if segment == '..':
            if output:
                output.pop()
            continue
        output.append(segment)
    # "a/." and "a/.." still denote containers
    if segments and segments[-1] in ('.', '..'):
        output.append('')
    resolved = '/'.join(output)
    return '/' + resolved if absolute else resolved


def quote_name(name: str) -> str:
    """Percent-encode a container or leaf name for use as one path segment.

    >>> quote_name('My Key')
    'My%20Key'
    >>> quote_name('..')
    '%2E%2E'
    """
    if name in ('.', '..'):
        return name.replace('.', '%2E')
    return quote(name, safe='')


@dataclass(frozen=True)
class Address:
    """An absolute or relative address. Value object, never mutated."""

    scheme: Optional[str] = None
    authority: Optional[str] = None
    path: str = ''

    @classmethod
    def parse(cls, text: AddressLike) -> 'Address':
        """Parse an address string (an Address is returned unchanged)."""
        if isinstance(text, Address):
            return text
        if not isinstance(text, str):
            raise TypeError(f'Expected an address string, got {type(text).__name__}')
        match = _ADDRESS_PATTERN.match(text)
        scheme, authority, path, query = match.groups()
        if query is not None:
            raise InvalidPath(f"Addresses cannot have a query; percent-encode '?' in {text!r}")
        return cls(
            scheme=scheme.lower() if scheme is not None else None,
            authority=authority,
            path=path,
        )

    @classmethod
    def for_coordinate(
        cls,
        root: Root,
        access_mode: AccessMode = AccessMode.DEFAULT,
        base_path: str = '/',
    ) -> 'Address':
        """The address of ``base_path`` under a root, seen through an access mode.

        >>> str(Address.for_coordinate(Root.CURRENT_USER, base_path='Software/Acme/'))
        'registry://HKEY_CURRENT_USER/Software/Acme/'
        """
        return cls.parse(address_prefix(root, access_mode)).join(base_path)

    def __str__(self) -> str:
        text = ''
        if self.scheme is not None:
            text += f'{self.scheme}:'
        if self.authority is not None:
            text += f'//{self.authority}'
        return text + self.path

    @property
    def is_absolute(self) -> bool:
        return self.scheme is not None

    @property
    def is_container(self) -> bool:
        """True when the address denotes a container rather than a leaf."""
        return self.path == '' or self.path.endswith('/')

    @property
    def leaf_name(self) -> str:
        """The decoded leaf name ('' for container addresses)."""
        return unquote(self.path.rsplit('/', 1)[-1])

    @property
    def container(self) -> 'Address':
        """The address of the container holding this address's leaf.

        A container address is its own container.
        """
        return Address(self.scheme, self.authority, self.path[: self.path.rfind('/') + 1])

    @property
    def segments(self) -> tuple[str, ...]:
        """Decoded names of the containers leading to (and including) the container."""
        return tuple(unquote(s) for s in self.container.path.split('/') if s)

    @property
    def coordinate(self) -> StoreCoordinate:
        """The store root and access mode this absolute address selects."""
        if not self.is_absolute:
            raise InvalidPath(f'Relative address {str(self)!r} does not select a store')
        return coordinate_from_tokens(self.scheme, self.authority or '')

    def join(self, reference: AddressLike) -> 'Address':
        """Resolve ``reference`` against this address (RFC 3986, section 5.2.2)."""
        ref = Address.parse(reference)
        if ref.scheme is not None:
            resolved = Address(ref.scheme, ref.authority, _remove_dot_segments(ref.path))
        elif ref.authority is not None:
            resolved = Address(self.scheme, ref.authority, _remove_dot_segments(ref.path))
        elif not ref.path:
            resolved = self
        elif ref.path.startswith('/'):
            resolved = Address(self.scheme, self.authority, _remove_dot_segments(ref.path))
        else:
            resolved = Address(
                self.scheme, self.authority, _remove_dot_segments(self._merge(ref.path))
            )
        logger.debug('Resolved %r against %r to %r', str(ref), str(self), str(resolved))
        return resolved

    def child(self, name: str, *, container: bool = False) -> 'Address':
        """The address of a named leaf (or sub-container) of this container."""
        return self.join(quote_name(name) + ('/' if container else ''))

    def relative_to(self, base: AddressLike) -> str:
        """Express this address relative to the container ``base``.

        Addresses outside ``base`` are returned in full.

        >>> base = Address.parse('registry://HKEY_USERS/a/')
        >>> Address.parse('registry://HKEY_USERS/a/b/c').relative_to(base)
        'b/c'
        """
        base = Address.parse(base).container
        if (
            self.scheme == base.scheme
            and self.authority == base.authority
            and self.path.startswith(base.path)
        ):
            return self.path[len(base.path) :]
        return str(self)

    def _merge(self, ref_path: str) -> str:
        if self.authority is not None and not self.path:
            return '/' + ref_path
        return self.path[: self.path.rfind('/') + 1] + ref_path
