"""
Factory for mock records.

Resolves schema defaults against caller overrides and writes the result into
the store. Overrides always win, including an explicit None that suppresses a
default.
"""

import itertools
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .config import MockConfig
from .definitions import AttributeDefinition, DefinitionRegistry, ResourceSchema
from .exceptions import UniquenessExhausted, UnknownType
from .store import Record, ResourceStore

logger = logging.getLogger(__name__)

Attributes = Mapping[str, Any]


def _next_free(value: Any, taken: List[Any]) -> Any:
    """First unused variant of a colliding value, None when it cannot vary."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        numbers = [v for v in taken if isinstance(v, int) and not isinstance(v, bool)]
        return max(numbers + [value]) + 1
    if isinstance(value, str):
        used = {v for v in taken if isinstance(v, str)}
        for suffix in itertools.count(2):
            candidate = f"{value} {suffix}"
            if candidate not in used:
                return candidate
    return None


def _collides(value: Any, taken: List[Any]) -> bool:
    # None means "no value" and never collides
    return value is not None and value in taken


class Factory:
    """
    Creates single records, batches and stubs.

    Example:
        >>> factory = Factory(registry, store)
        >>> book = factory.create("book", {"name": "Dune"})
        >>> books = factory.create("books", [{"name": "A"}, {"name": "B"}])
        >>> stubs = factory.stub(3, "books", like={"pages": 10})
    """

    def __init__(self, registry: DefinitionRegistry, store: ResourceStore,
                 config: Optional[MockConfig] = None):
        self.registry = registry
        self.store = store
        self.config = config or MockConfig()
        # Unique values held by records still being built, keyed by (type, attribute)
        self._reserved: Dict[Tuple[str, str], List[Any]] = {}

    def type_name_for(self, name: str) -> str:
        """Canonical type name, matching defined and stored types first."""
        return self.store.type_name_for(name, self.registry.types())

    def schema(self, type_name: str) -> ResourceSchema:
        """Schema for a type, honoring strict typing.

        Raises:
            UnknownType: If strict typing is on and the type was never defined
        """
        if not self.registry.is_defined(type_name):
            if self.config.strict_types:
                raise UnknownType(type_name)
            logger.debug(f"No definition for {type_name}, using an empty schema")
        return self.registry.schema_for(type_name)

    def create(
        self,
        type_name: str,
        attrs: Union[Attributes, Sequence[Attributes], None] = None,
    ) -> Union[Record, List[Record]]:
        """Create one record from a mapping, or one per mapping from a list."""
        if isinstance(attrs, (list, tuple)):
            return self.create_many(type_name, attrs)
        return self.create_one(type_name, attrs)

    def create_one(self, type_name: str, overrides: Optional[Attributes] = None) -> Record:
        """Create and store a single record.

        Args:
            type_name: Singular or plural type name
            overrides: Attribute values that take precedence over defaults

        Returns:
            The stored record

        Raises:
            UniquenessExhausted: If a uniquified attribute cannot be satisfied
            ValueError: If an explicit id is not greater than every issued id
        """
        type_name = self.type_name_for(type_name)
        schema = self.schema(type_name)
        values: Dict[str, Any] = dict(overrides or {})
        explicit_id = values.pop("id", None)

        # Overrides are in place before any default runs so dependent generators see them
        record = Record(type_name, values)
        held: List[Tuple[Tuple[str, str], Any]] = []
        try:
            for attribute in schema:
                if attribute.unique and attribute.name in values:
                    self._check_unique(type_name, attribute, values[attribute.name])
                    self._reserve(type_name, attribute.name, values[attribute.name], held)

            for attribute in schema:
                if attribute.name in values:
                    continue
                value = self._resolve(type_name, attribute, record)
                record[attribute.name] = value
                if attribute.unique:
                    self._reserve(type_name, attribute.name, value, held)

            record._reorder(schema.names)
            self.store.add(record, explicit_id)
        finally:
            self._release(held)

        logger.debug(f"Created {record!r}")
        return record

    def create_many(self, type_name: str, attr_maps: Sequence[Attributes]) -> List[Record]:
        """Create one record per mapping, preserving input order."""
        return [self.create_one(type_name, attrs) for attrs in attr_maps]

    def stub(
        self,
        count: int,
        type_name: str,
        like: Optional[Attributes] = None,
        overrides: Optional[Sequence[Attributes]] = None,
    ) -> List[Record]:
        """Create ``count`` records from a shared template.

        Args:
            count: Number of records
            type_name: Singular or plural type name
            like: Template merged beneath each record's own overrides
            overrides: Optional per-record overrides, by position

        Returns:
            Records in creation order
        """
        if count < 0:
            raise ValueError(f"Cannot stub a negative number of records: {count}")

        records = []
        for position in range(count):
            attrs = dict(like or {})
            if overrides and position < len(overrides):
                attrs.update(overrides[position])
            records.append(self.create_one(type_name, attrs))
        logger.debug(f"Stubbed {count} {type_name} records")
        return records

    def _taken(self, type_name: str, attribute: str) -> List[Any]:
        """Stored values plus values held by records under construction."""
        return self.store.values_of(type_name, attribute) + self._reserved.get((type_name, attribute), [])

    def _reserve(self, type_name: str, attribute: str, value: Any,
                 held: List[Tuple[Tuple[str, str], Any]]) -> None:
        if value is None:
            return
        slot = (type_name, attribute)
        self._reserved.setdefault(slot, []).append(value)
        held.append((slot, value))

    def _release(self, held: List[Tuple[Tuple[str, str], Any]]) -> None:
        for slot, value in held:
            self._reserved[slot].remove(value)
            if not self._reserved[slot]:
                del self._reserved[slot]

    def _resolve(self, type_name: str, attribute: AttributeDefinition, record: Record) -> Any:
        if attribute.unique:
            return self._unique_value(type_name, attribute, record)
        if attribute.default is None:
            return None
        return attribute.default.resolve(record)

    def _check_unique(self, type_name: str, attribute: AttributeDefinition, value: Any) -> None:
        if _collides(value, self._taken(type_name, attribute.name)):
            raise UniquenessExhausted(type_name, attribute.name)

    def _unique_value(self, type_name: str, attribute: AttributeDefinition, record: Record) -> Any:
        if attribute.default is None:
            taken = self._taken(type_name, attribute.name)
            for sequence in itertools.count(len(self.store.all(type_name)) + 1):
                candidate = f"{type_name} {attribute.name} {sequence}"
                if not _collides(candidate, taken):
                    return candidate

        attempts = self.config.unique_attempts
        base = attribute.default.resolve(record)  # type: ignore[union-attr]
        for attempt in range(1, attempts + 1):
            # Generators may run nested creates, so read the taken values afterwards
            taken = self._taken(type_name, attribute.name)
            if not _collides(base, taken):
                if attempt > 1:
                    logger.debug(
                        f"Uniquified {type_name}.{attribute.name} to {base!r} "
                        f"after {attempt} attempts"
                    )
                return base
            if not attribute.default.regenerates or attempt == attempts:  # type: ignore[union-attr]
                break
            base = attribute.default.resolve(record)  # type: ignore[union-attr]

        candidate = _next_free(base, taken)
        if candidate is None:
            raise UniquenessExhausted(type_name, attribute.name, attempts)
        logger.debug(f"Uniquified {type_name}.{attribute.name} to {candidate!r}")
        return candidate
