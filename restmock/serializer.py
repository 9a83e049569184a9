"""
Serialization of record graphs into acyclic documents.

Records may reference each other in cycles (an author with books, each book
pointing back at its author). The serializer walks the graph depth-first per
root, keeping the (type, id) keys of the records on the active path. An
attribute that would re-enter a record already on the path is a back-edge and
is omitted; everything reachable on first visit is kept.

Output is plain Python data (dicts, lists, scalars) in a stable order:
``id`` first, then declared schema order, then insertion order. Textual
encodings live in ``restmock.renderers``.
"""

import logging
from typing import Any, Dict, Hashable, List, Optional, Set

from .definitions import DefinitionRegistry
from .inflection import pluralize
from .store import Record

logger = logging.getLogger(__name__)


class _Omit:
    """Marker for a value that must not be emitted."""

    def __repr__(self) -> str:
        return "<omit>"


OMIT = _Omit()


def _path_key(record: Record) -> Hashable:
    if record.id is None:
        # Unsaved records are still graph nodes; identify them by object
        return (record.type_name, "unsaved", id(record))
    return record._key


class GraphSerializer:
    """
    Converts records, lists of records or raw documents into acyclic documents.

    Example:
        >>> serializer = GraphSerializer(registry)
        >>> serializer.serialize(book)
        {'book': {'id': 1, 'name': 'Dune', 'author': {'id': 1, 'name': 'Frank'}}}
        >>> serializer.serialize([book], root_name="books")
        {'books': [{'id': 1, 'name': 'Dune', 'author': {...}}]}
    """

    def __init__(self, registry: Optional[DefinitionRegistry] = None):
        self.registry = registry

    def serialize(self, value: Any, root_name: Optional[str] = None) -> Any:
        """Serialize a handler result.

        Args:
            value: A record, a list of records or a raw document
            root_name: Collection name for lists; defaults to the plural of the
                       first record's type

        Returns:
            ``{type: {...}}`` for a record, ``{plural: [...]}`` for a list of
            records, or the raw document with any nested records expanded
        """
        if isinstance(value, Record):
            return {value.type_name: self.expand(value)}

        if isinstance(value, (list, tuple)) and all(isinstance(item, Record) for item in value):
            if root_name is None:
                root_name = pluralize(value[0].type_name) if value else "records"
            return {root_name: [self.expand(item) for item in value]}

        return self._value(value, set())

    def expand(self, record: Record, path: Optional[Set[Hashable]] = None) -> Dict[str, Any]:
        """Expand one record into a dict, pruning back-edges to records on ``path``."""
        if path is None:
            path = set()

        key = _path_key(record)
        path.add(key)
        try:
            body: Dict[str, Any] = {"id": record.id}
            for name in self.attribute_order(record):
                emitted = self._value(record._get(name), path)
                if emitted is OMIT:
                    logger.debug(f"Pruned back-edge {record.type_name}.{name}")
                    continue
                body[name] = emitted
            return body
        finally:
            path.discard(key)

    def attribute_order(self, record: Record) -> List[str]:
        """Declared schema order for known attributes, then insertion order."""
        present = [name for name, _ in record._items()]
        if self.registry is None:
            return present
        declared = [
            name for name in self.registry.schema_for(record.type_name).names
            if name in record._attributes
        ]
        return declared + [name for name in present if name not in declared]

    def _value(self, value: Any, path: Set[Hashable]) -> Any:
        if isinstance(value, Record):
            if _path_key(value) in path:
                return OMIT
            return self.expand(value, path)

        if isinstance(value, (list, tuple)):
            items = []
            back_edges = 0
            for item in value:
                emitted = self._value(item, path)
                if emitted is OMIT:
                    back_edges += 1
                    continue
                items.append(emitted)
            if back_edges and not items:
                return OMIT
            return items

        if isinstance(value, (set, frozenset)):
            return self._value(sorted(value, key=repr), path)

        if isinstance(value, dict):
            document = {}
            for name, item in value.items():
                emitted = self._value(item, path)
                if emitted is not OMIT:
                    document[name] = emitted
            return document

        return value
