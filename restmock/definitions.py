"""
Resource type definitions.

A definition is an ordered set of attribute declarations for a resource type,
each with an optional default provider and a uniqueness flag. Definitions are
additive: defining a type again extends what was already declared.

Example:
    registry = DefinitionRegistry()

    def book(t):
        t.uniquify("name")
        t.plain("pages", 100)
        t.plain("slug", lambda record: record.name.lower().replace(" ", "-"))

    registry.define("book", book)
"""

import copy
import inspect
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, TYPE_CHECKING

from .exceptions import DefinitionConflict
from .inflection import resolve_type_name

if TYPE_CHECKING:
    from .store import Record

logger = logging.getLogger(__name__)

_MISSING = object()


class DefaultProvider(ABC):
    """How an attribute obtains its value when the caller does not supply one."""

    @abstractmethod
    def resolve(self, record: "Record") -> Any:
        """Produce a value for the partially-built ``record``."""

    @property
    def regenerates(self) -> bool:
        """Whether resolving again can produce a different value."""
        return True


@dataclass(frozen=True)
class Literal(DefaultProvider):
    """A fixed value. Mutable containers are copied per record."""

    value: Any

    def resolve(self, record: "Record") -> Any:
        if isinstance(self.value, (list, dict, set)):
            return copy.copy(self.value)
        return self.value

    @property
    def regenerates(self) -> bool:
        return False


@dataclass(frozen=True)
class Generator(DefaultProvider):
    """A zero-argument callable evaluated once per record."""

    fn: Callable[[], Any]

    def resolve(self, record: "Record") -> Any:
        return self.fn()


@dataclass(frozen=True)
class DependentGenerator(DefaultProvider):
    """A callable receiving the partially-built record, for cross-attribute defaults."""

    fn: Callable[["Record"], Any]

    def resolve(self, record: "Record") -> Any:
        return self.fn(record)


def _required_positional_count(fn: Callable) -> int:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        # Builtins without introspectable signatures (e.g. list, dict)
        return 0
    return sum(
        1 for param in signature.parameters.values()
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD)
        and param.default is param.empty
    )


def as_provider(default: Any) -> Optional[DefaultProvider]:
    """Classify a default into the provider variant it represents.

    Providers pass through, callables taking no required argument become
    Generators, callables taking one become DependentGenerators, anything else
    is a Literal. ``None`` means "no default" only when omitted entirely, so
    the sentinel is handled by the caller.

    Raises:
        TypeError: If a callable requires more than one argument
    """
    if isinstance(default, DefaultProvider):
        return default
    if callable(default):
        required = _required_positional_count(default)
        if required == 0:
            return Generator(default)
        if required == 1:
            return DependentGenerator(default)
        raise TypeError(
            f"Default generator {default!r} must accept zero arguments or the record, "
            f"it requires {required}"
        )
    return Literal(default)


def _same_provider(left: Optional[DefaultProvider], right: Optional[DefaultProvider]) -> bool:
    """Compare providers, treating equivalent callables as equal."""
    if left is None or right is None:
        return left is right
    if type(left) is not type(right):
        return False
    if isinstance(left, Literal):
        return bool(left.value == right.value)  # type: ignore[attr-defined]
    return _same_callable(left.fn, right.fn)  # type: ignore[attr-defined]


def _captured(fn: Callable) -> Tuple[Any, ...]:
    """Values a function closes over, plus its default arguments."""
    cells = tuple(cell.cell_contents for cell in fn.__closure__ or ())
    return cells, fn.__defaults__, fn.__kwdefaults__


def _same_callable(left: Callable, right: Callable) -> bool:
    """Functions compiled from the same source and capturing equal values are the same."""
    if left is right:
        return True
    left_code = getattr(left, "__code__", None)
    if left_code is None or left_code != getattr(right, "__code__", None):
        return False
    return _captured(left) == _captured(right)


@dataclass(frozen=True)
class AttributeDefinition:
    """A declared attribute: name, default provider and uniqueness flag."""

    name: str
    default: Optional[DefaultProvider] = None
    unique: bool = False

    def same_as(self, other: "AttributeDefinition") -> bool:
        return (
            self.name == other.name
            and self.unique == other.unique
            and _same_provider(self.default, other.default)
        )


class ResourceSchema:
    """The accumulated, ordered attribute declarations of one resource type."""

    def __init__(self, type_name: str, attributes: Optional[List[AttributeDefinition]] = None):
        self.type_name = type_name
        self._attributes: Dict[str, AttributeDefinition] = {}
        for attribute in attributes or []:
            self.add(attribute)

    def add(self, attribute: AttributeDefinition) -> None:
        """Append an attribute, or confirm an identical redeclaration.

        Raises:
            DefinitionConflict: If the attribute exists with a different definition
        """
        existing = self._attributes.get(attribute.name)
        if existing is None:
            self._attributes[attribute.name] = attribute
        elif not existing.same_as(attribute):
            raise DefinitionConflict(self.type_name, attribute.name)

    @property
    def names(self) -> List[str]:
        """Attribute names in declaration order."""
        return list(self._attributes)

    def get(self, name: str) -> Optional[AttributeDefinition]:
        return self._attributes.get(name)

    def __iter__(self) -> Iterator[AttributeDefinition]:
        return iter(list(self._attributes.values()))

    def __len__(self) -> int:
        return len(self._attributes)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __repr__(self) -> str:
        return f"ResourceSchema({self.type_name!r}, {self.names!r})"


class SchemaBuilder:
    """Collects attribute declarations for ``DefinitionRegistry.define``."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        self.attributes: List[AttributeDefinition] = []

    def plain(self, name: str, default: Any = _MISSING) -> "SchemaBuilder":
        """Declare an attribute, optionally with a literal or generated default."""
        provider = None if default is _MISSING else as_provider(default)
        self.attributes.append(AttributeDefinition(name, provider, unique=False))
        return self

    def uniquify(self, name: str, generator: Optional[Callable] = None) -> "SchemaBuilder":
        """Declare an attribute whose values must be distinct within the type."""
        provider = None if generator is None else as_provider(generator)
        self.attributes.append(AttributeDefinition(name, provider, unique=True))
        return self


class DefinitionRegistry:
    """Holds per-type schemas. Undefined types resolve to empty schemas."""

    def __init__(self):
        self._schemas: Dict[str, ResourceSchema] = {}

    def define(
        self,
        type_name: str,
        builder: Optional[Callable[[SchemaBuilder], Any]] = None,
    ) -> ResourceSchema:
        """Register a type or extend an existing one.

        Args:
            type_name: Singular or plural type name
            builder: Called with a SchemaBuilder to declare attributes

        Returns:
            The accumulated schema for the type

        Raises:
            DefinitionConflict: If an attribute is redeclared differently
        """
        type_name = self.type_name_for(type_name)
        schema_builder = SchemaBuilder(type_name)
        if builder is not None:
            builder(schema_builder)

        schema = self._schemas.get(type_name)
        if schema is None:
            schema = ResourceSchema(type_name)

        # Validate everything before mutating, so a conflict leaves no partial definition
        staged = ResourceSchema(type_name, list(schema))
        for attribute in schema_builder.attributes:
            staged.add(attribute)

        self._schemas[type_name] = staged
        logger.debug(f"Defined {type_name} with attributes {staged.names}")
        return staged

    def schema_for(self, type_name: str) -> ResourceSchema:
        """Return the accumulated schema, or an empty one for undefined types."""
        type_name = self.type_name_for(type_name)
        schema = self._schemas.get(type_name)
        if schema is None:
            return ResourceSchema(type_name)
        return schema

    def type_name_for(self, name: str) -> str:
        """Defined type name for a singular or plural ``name``."""
        return resolve_type_name(name, self._schemas)

    def is_defined(self, type_name: str) -> bool:
        return self.type_name_for(type_name) in self._schemas

    def types(self) -> List[str]:
        """Defined type names in definition order."""
        return list(self._schemas)

    def clear(self) -> None:
        """Forget every definition."""
        self._schemas.clear()
