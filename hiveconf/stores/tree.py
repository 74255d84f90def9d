"""
Tree stores: hierarchical stores kept as nested dicts.

The whole store is one document::

    {<access-mode token>: {<root token>: <node>}}

where a node is ``{'keys': {name: node}, 'values': {name: {'kind': ..., 'data': ...}}}``.
A value entry may also be ``null``: the leaf exists but holds no data.

MemoryStore keeps the document in memory. YamlFileStore re-reads it from a
YAML file on every ``open_root`` and writes it back after every mutation.
Enumeration follows insertion order in both.
"""

import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from hiveconf.base import Root, AccessMode, StoredValue, ValueKind, register_store
from hiveconf.errors import UnknownRoot, StoreFormatError
from hiveconf.selectors import root_to_token, access_mode_to_token
from hiveconf.util import load_yaml, dump_yaml, schema_errors

logger = logging.getLogger(__name__)


STORE_DOCUMENT_SCHEMA = {
    '$schema': 'http://json-schema.org/draft-07/schema#',
    'definitions': {
        'value': {
            'type': 'object',
            'required': ['kind', 'data'],
            # data is checked against the kind by StoredValue, when the leaf is read
            'properties': {'kind': {'enum': [k.value for k in ValueKind]}, 'data': {}},
            'additionalProperties': False,
        },
        'node': {
            'type': 'object',
            'properties': {
                'keys': {
                    'type': 'object',
                    'additionalProperties': {'$ref': '#/definitions/node'},
                },
                'values': {
                    'type': 'object',
                    'additionalProperties': {
                        'anyOf': [{'type': 'null'}, {'$ref': '#/definitions/value'}]
                    },
                },
            },
            'additionalProperties': False,
        },
    },
    'type': 'object',
    'additionalProperties': {
        'type': 'object',
        'additionalProperties': {'$ref': '#/definitions/node'},
    },
}


def _new_node() -> dict:
    return {'keys': {}, 'values': {}}


def _sub_nodes(node: dict) -> dict:
    return node.setdefault('keys', {})


def _leaves(node: dict) -> dict:
    return node.setdefault('values', {})


class TreeContainer:
    """An open container of a tree store."""

    def __init__(self, root: 'TreeRoot', node: dict):
        self._root = root
        self._node = node

    def list_containers(self) -> list[str]:
        return list(_sub_nodes(self._node))

    def list_leaves(self) -> list[str]:
        return list(_leaves(self._node))

    def get_leaf(self, name: str) -> Optional[StoredValue]:
        raw = _leaves(self._node).get(name)
        if raw is None:
            return None
        try:
            return StoredValue.model_validate(raw)
        except ValidationError as e:
            raise StoreFormatError(f'Malformed value {name!r}: {e}') from e

    def set_leaf(self, name: str, value: StoredValue) -> None:
        _leaves(self._node)[name] = {'kind': value.kind.value, 'data': value.native}
        self._root.commit()

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class TreeRoot:
    """An open root of a tree store."""

    def __init__(self, store: 'TreeStore', document: dict, node: dict):
        self._store = store
        self._document = document
        self._node = node

    def commit(self) -> None:
        self._store._save(self._document)

    def open_container(
        self, segments: Sequence[str], *, create: bool = False
    ) -> Optional[TreeContainer]:
        node = self._node
        created = False
        for name in segments:
            children = _sub_nodes(node)
            if name not in children:
                if not create:
                    return None
                children[name] = _new_node()
                created = True
            node = children[name]
        if created:
            logger.debug('Created container %r', '/'.join(segments))
            self.commit()
        return TreeContainer(self, node)

    def delete_container_tree(self, segments: Sequence[str]) -> None:
        """Delete a container and everything under it. Missing containers are ignored."""
        if not segments:
            self._node.clear()
            self._node.update(_new_node())
            self.commit()
            return
        *parents, name = segments
        node = self._node
        for parent in parents:
            node = _sub_nodes(node).get(parent)
            if node is None:
                return
        if _sub_nodes(node).pop(name, None) is not None:
            self.commit()

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()


class TreeStore:
    """Base for stores kept as a nested-dict document.

    Subclasses say where the document comes from (``_load``) and where it goes
    after a mutation (``_save``).

    Args:
        roots: The roots this store can open (all of them by default).
    """

    def __init__(self, roots: Optional[Iterable[Root]] = None):
        self._roots = frozenset(Root) if roots is None else frozenset(roots)

    def _load(self) -> dict:
        raise NotImplementedError

    def _save(self, document: dict) -> None:
        raise NotImplementedError

    def open_root(self, root: Root, access_mode: AccessMode) -> TreeRoot:
        if root not in self._roots:
            raise UnknownRoot(f'{type(self).__name__} cannot open root {root!r}')
        document = self._load()
        mode_tree = document.setdefault(access_mode_to_token(access_mode), {})
        node = mode_tree.setdefault(root_to_token(root), _new_node())
        return TreeRoot(self, document, node)


@register_store('memory')
class MemoryStore(TreeStore):
    """A store living in this process only."""

    def __init__(self, roots: Optional[Iterable[Root]] = None):
        super().__init__(roots)
        self._document: dict = {}

    def _load(self) -> dict:
        return self._document

    def _save(self, document: dict) -> None:
        pass


@register_store('yaml')
class YamlFileStore(TreeStore):
    """A store persisted as a YAML file.

    The file is created on the first write. Binary values use YAML's
    ``!!binary`` tag.
    """

    def __init__(self, path, roots: Optional[Iterable[Root]] = None):
        super().__init__(roots)
        self.path = Path(os.path.expanduser(str(path)))

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        document = load_yaml(str(self.path)) or {}
        errors = schema_errors(document, STORE_DOCUMENT_SCHEMA)
        if errors:
            raise StoreFormatError(
                f'{self.path} is not a valid store document:\n' + '\n'.join(errors)
            )
        return document

    def _save(self, document: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        dump_yaml(document, str(self.path))
        logger.debug('Saved store document to %s', self.path)
