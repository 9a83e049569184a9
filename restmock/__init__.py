"""
A service-virtualization engine for behavior-driven testing of
resource-oriented clients.

Test authors declare typed mock resources, generate populated records on
demand, and let a simulated client issue requests against an in-process mock
endpoint. The module-level functions operate on a process-wide default
MockService; harnesses that need isolation create their own.

Example:
    import restmock

    restmock.define("author", lambda t: t.uniquify("name"))
    restmock.define("book", lambda t: (
        t.uniquify("name"),
        t.plain("author", lambda: restmock.create("author")),
    ))

    book = restmock.create("book")
    restmock.request("GET", f"/books/{book.id}.xml")
"""

from typing import Any, Callable, List, Optional, Pattern, Sequence, Union

from . import diagnostics
from .client import Connection, MockConnection, ResourceClient
from .config import MockConfig
from .definitions import (
    AttributeDefinition,
    DefinitionRegistry,
    DependentGenerator,
    Generator,
    Literal,
    ResourceSchema,
    SchemaBuilder,
)
from .exceptions import (
    DefinitionConflict,
    NotFound,
    RequestNotFound,
    RestMockError,
    UniquenessExhausted,
    UnknownType,
)
from .generators import FakeValues, sequence
from .models import HTTPMethod, Request, Response, RouteKind
from .router import MockRouter, RouteRegistration
from .serializer import GraphSerializer
from .service import MockService
from .store import Record, RecordKey, ResourceStore

__version__ = "0.1.0"
__license__ = "MIT"

_default_service: Optional[MockService] = None


def get_service() -> MockService:
    """The process-wide default service, created on first use."""
    global _default_service
    if _default_service is None:
        _default_service = MockService()
    return _default_service


def set_service(service: Optional[MockService]) -> None:
    """Replace the process-wide default service (None recreates it lazily)."""
    global _default_service
    _default_service = service


def define(type_name: str, builder: Optional[Callable[[SchemaBuilder], Any]] = None) -> ResourceSchema:
    return get_service().define(type_name, builder)


def schema_for(type_name: str) -> ResourceSchema:
    return get_service().schema_for(type_name)


def create(type_name: str, attrs: Any = None) -> Any:
    return get_service().create(type_name, attrs)


def stub(count: int, type_name: str, like: Optional[dict] = None,
         overrides: Optional[Sequence[dict]] = None) -> List[Record]:
    return get_service().stub(count, type_name, like=like, overrides=overrides)


def find(type_name: str, criteria: Any = None, **attrs: Any) -> Any:
    return get_service().find(type_name, criteria, **attrs)


def register(verb: Union[str, HTTPMethod], path_pattern: Union[str, Pattern[str]],
             handler: Callable[..., Any]) -> RouteRegistration:
    return get_service().register(verb, path_pattern, handler)


def request(verb: Union[str, HTTPMethod], path: str) -> Any:
    return get_service().request(verb, path)


def reset(definitions: bool = False) -> None:
    get_service().reset(definitions=definitions)


def fake(provider: str, *args: Any, **kwargs: Any) -> Callable[[], Any]:
    """Faker-backed generator from the default service's seeded Faker."""
    return get_service().generators.fake(provider, *args, **kwargs)


__all__ = [
    "MockService",
    "MockConfig",
    "MockRouter",
    "RouteRegistration",
    "GraphSerializer",
    "DefinitionRegistry",
    "ResourceSchema",
    "SchemaBuilder",
    "AttributeDefinition",
    "Literal",
    "Generator",
    "DependentGenerator",
    "Record",
    "RecordKey",
    "ResourceStore",
    "HTTPMethod",
    "Request",
    "Response",
    "RouteKind",
    "Connection",
    "MockConnection",
    "ResourceClient",
    "FakeValues",
    "sequence",
    "RestMockError",
    "UnknownType",
    "NotFound",
    "RequestNotFound",
    "UniquenessExhausted",
    "DefinitionConflict",
    "diagnostics",
    "get_service",
    "set_service",
    "define",
    "schema_for",
    "create",
    "stub",
    "find",
    "register",
    "request",
    "reset",
    "fake",
]
