"""
Lookups over the record store.

Lookups are linear scans; stores hold tens to low hundreds of records per
scenario.
"""

import logging
from typing import Any, Callable, List, Optional, Union, cast

from .config import MockConfig
from .definitions import DefinitionRegistry
from .exceptions import NotFound, UnknownType
from .store import Record, ResourceStore

logger = logging.getLogger(__name__)

Predicate = Callable[[Record], Any]


def _coerce_id(record_id: Any) -> Any:
    """Route captures arrive as strings; "12" and 12 name the same record."""
    if isinstance(record_id, str) and record_id.strip().isdigit():
        return int(record_id)
    return record_id


class QueryEngine:
    """
    Finds records by type, predicate, id or attribute values.

    Example:
        >>> query.find("books")
        >>> query.find("books", lambda book: "Dune" in book.name)
        >>> query.find("book", 3)
        >>> query.find("books", author=frank)
    """

    def __init__(self, store: ResourceStore, registry: Optional[DefinitionRegistry] = None,
                 config: Optional[MockConfig] = None):
        self.store = store
        self.registry = registry
        self.config = config or MockConfig()

    def find(
        self,
        type_name: str,
        criteria: Union[Predicate, int, str, None] = None,
        **attrs: Any,
    ) -> Union[Record, List[Record]]:
        """Find records.

        Args:
            type_name: Singular or plural type name
            criteria: A predicate (returns a filtered list) or an id (returns one record)
            **attrs: Attribute equality filters

        Returns:
            A list of records in creation order, or a single record for id lookups

        Raises:
            NotFound: If an id lookup misses
        """
        type_name = self._check_type(type_name)

        if criteria is not None and not callable(criteria):
            return self.get(type_name, criteria)

        records = self.store.all(type_name)
        if callable(criteria):
            records = [record for record in records if criteria(record)]
        if attrs:
            records = [
                record for record in records
                if all(record._get(name) == value for name, value in attrs.items())
            ]
        return records

    def get(self, type_name: str, record_id: Any) -> Record:
        """Single record by id.

        Raises:
            NotFound: If no record of the type has this id
        """
        type_name = self._type_name_for(type_name)
        wanted = _coerce_id(record_id)
        for record in self.store.all(type_name):
            if record.id == wanted:
                return record
        logger.debug(f"No {type_name} with id={record_id}")
        raise NotFound(type_name, record_id)

    def first(self, type_name: str, criteria: Optional[Predicate] = None, **attrs: Any) -> Optional[Record]:
        """First matching record, or None."""
        records = cast(List[Record], self.find(type_name, criteria, **attrs))
        return records[0] if records else None

    def _check_type(self, type_name: str) -> str:
        type_name = self._type_name_for(type_name)
        if (self.config.strict_types and self.registry is not None
                and not self.registry.is_defined(type_name)):
            raise UnknownType(type_name)
        return type_name

    def _type_name_for(self, type_name: str) -> str:
        defined = self.registry.types() if self.registry is not None else ()
        return self.store.type_name_for(type_name, defined)
