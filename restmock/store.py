"""
Record storage for the mock service.

Simple dict-based storage: records are kept per type in creation order, with
a flat (type, id) index and a per-type id sequence. The store is cleared
wholesale at the start of every scenario.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, NamedTuple, Optional, Tuple

from .inflection import resolve_type_name

logger = logging.getLogger(__name__)

_RESERVED = ("id", "type_name")


class RecordKey(NamedTuple):
    """Identity of a record within the store."""

    type_name: str
    id: int

    def __str__(self) -> str:
        return f"{self.type_name}:{self.id}"


class Record:
    """A single mock resource: a type tag, an id and ordered attributes.

    Attributes are available as Python attributes and by item access. Values
    may be scalars, other records or lists of records; references are plain
    associations, so records may point at each other in cycles.

    Example:
        >>> book = Record("book", {"name": "Dune"})
        >>> book.name
        'Dune'
        >>> book.pages = 412
        >>> book["pages"]
        412

    A stored attribute always wins over a helper of the same name, so a record
    with an ``items`` or ``key`` attribute reads back its own value.
    """

    def __init__(self, type_name: str, attributes: Optional[Dict[str, Any]] = None,
                 record_id: Optional[int] = None):
        object.__setattr__(self, "type_name", type_name)
        object.__setattr__(self, "id", record_id)
        object.__setattr__(self, "_attributes", dict(attributes or {}))

    def __getattribute__(self, name: str) -> Any:
        # Stored attributes shadow the public helpers (key, attributes, get)
        if not name.startswith("_") and name not in _RESERVED:
            attributes = object.__getattribute__(self, "_attributes")
            if name in attributes:
                return attributes[name]
        return object.__getattribute__(self, name)

    @property
    def _key(self) -> RecordKey:
        if self.id is None:
            raise ValueError(f"Unsaved {self.type_name} has no key")
        return RecordKey(self.type_name, self.id)

    @property
    def key(self) -> RecordKey:
        """(type, id) pair identifying this record, unless ``key`` is itself an attribute."""
        return self._key

    @property
    def attributes(self) -> Dict[str, Any]:
        """A copy of the attribute mapping, in insertion order."""
        return dict(self._attributes)

    def get(self, name: str, default: Any = None) -> Any:
        return self._get(name, default)

    def _get(self, name: str, default: Any = None) -> Any:
        if name == "id":
            return self.id
        return self._attributes.get(name, default)

    def _items(self) -> List[Tuple[str, Any]]:
        return list(self._attributes.items())

    def _assign_id(self, record_id: int) -> None:
        object.__setattr__(self, "id", record_id)

    def _reorder(self, leading: List[str]) -> None:
        """Move ``leading`` names to the front, keeping the rest in insertion order."""
        ordered = {name: self._attributes[name] for name in leading if name in self._attributes}
        for name, value in self._attributes.items():
            ordered.setdefault(name, value)
        object.__setattr__(self, "_attributes", ordered)

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are neither stored nor defined on the class
        raise AttributeError(f"{self.type_name} has no attribute '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _RESERVED:
            raise AttributeError(f"'{name}' is assigned by the store")
        self._attributes[name] = value

    def __delattr__(self, name: str) -> None:
        try:
            del self._attributes[name]
        except KeyError:
            raise AttributeError(f"{self.type_name} has no attribute '{name}'") from None

    def __getitem__(self, name: str) -> Any:
        if name == "id":
            return self.id
        return self._attributes[name]

    def __setitem__(self, name: str, value: Any) -> None:
        setattr(self, name, value)

    def __contains__(self, name: object) -> bool:
        return name == "id" or name in self._attributes

    def __repr__(self) -> str:
        shown = [f"id={self.id}"]
        for name, value in self._attributes.items():
            if isinstance(value, Record):
                shown.append(f"{name}=<{value.type_name}:{value.id}>")
            elif isinstance(value, list) and any(isinstance(v, Record) for v in value):
                shown.append(f"{name}=[{len(value)} records]")
            else:
                shown.append(f"{name}={value!r}")
        return f"<{self.type_name} {' '.join(shown)}>"


class ResourceStore:
    """
    In-memory record storage indexed by type.

    Ids are issued per type starting at 1, strictly increase and are never
    reused, even after a record is removed.
    """

    def __init__(self):
        # Storage: {type_name: [record, ...]} in creation order
        self._records: Dict[str, List[Record]] = {}
        self._index: Dict[RecordKey, Record] = {}
        self._last_ids: Dict[str, int] = {}

    def type_name_for(self, name: str, defined: Iterable[str] = ()) -> str:
        """Canonical type name for a singular or plural ``name``.

        Types with stored records and the ``defined`` types are matched first.
        """
        return resolve_type_name(name, [*defined, *self._records])

    def next_id(self, type_name: str) -> int:
        """The id the next record of this type will receive."""
        return self._last_ids.get(self.type_name_for(type_name), 0) + 1

    def add(self, record: Record, record_id: Optional[int] = None) -> Record:
        """Assign an id to ``record`` and append it.

        Args:
            record: Unsaved record
            record_id: Explicit id, which must exceed every id already issued

        Raises:
            ValueError: If the record is already stored or the id would go backwards
        """
        if record.id is not None:
            raise ValueError(f"{record.type_name} {record.id} is already stored")

        type_name = record.type_name
        last_id = self._last_ids.get(type_name, 0)
        if record_id is None:
            record_id = last_id + 1
        elif record_id <= last_id:
            raise ValueError(
                f"id {record_id} for {type_name} must be greater than {last_id}; ids are never reused"
            )

        record._assign_id(record_id)
        self._last_ids[type_name] = record_id
        self._records.setdefault(type_name, []).append(record)
        self._index[record._key] = record
        logger.debug(f"Stored {type_name} {record_id}")
        return record

    def all(self, type_name: str) -> List[Record]:
        """All records of a type in creation order."""
        return list(self._records.get(self.type_name_for(type_name), []))

    def get(self, type_name: str, record_id: int) -> Optional[Record]:
        return self._index.get(RecordKey(self.type_name_for(type_name), record_id))

    def values_of(self, type_name: str, attribute: str) -> List[Any]:
        """Every stored value of ``attribute`` across records of a type."""
        return [
            record._get(attribute)
            for record in self._records.get(self.type_name_for(type_name), [])
            if attribute in record
        ]

    def remove(self, record: Record) -> bool:
        """Remove a record without touching records that reference it.

        Returns:
            True if removed, False if it was not stored
        """
        if record.id is None or record._key not in self._index:
            return False
        del self._index[record._key]
        self._records[record.type_name].remove(record)
        return True

    def types(self) -> List[str]:
        """Type names with at least one record ever stored, in first-use order."""
        return list(self._records)

    def clear(self) -> None:
        """Drop every record and restart every id sequence."""
        self._records.clear()
        self._index.clear()
        self._last_ids.clear()

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[Record]:
        for records in self._records.values():
            yield from records
