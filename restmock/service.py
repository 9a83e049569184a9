"""
The mock service: all scenario state behind one object.

A MockService bundles the definition registry, record store, factory, query
engine, serializer and router. Test harnesses call ``reset()`` at the start of
every scenario; definitions survive resets unless explicitly cleared.

One service serves one scenario at a time. Harnesses running scenarios in
parallel give each scenario its own service.
"""

import logging
from typing import Any, Callable, List, Optional, Pattern, Sequence, Union

from .config import MockConfig
from .definitions import DefinitionRegistry, ResourceSchema, SchemaBuilder
from .diagnostics import DiagnosticsLog
from .factory import Attributes, Factory
from .generators import FakeValues
from .models import HTTPMethod, Response
from .query import Predicate, QueryEngine
from .router import Handler, MockRouter, RouteRegistration
from .serializer import GraphSerializer
from .store import Record, ResourceStore

logger = logging.getLogger(__name__)


class MockService:
    """
    Process-wide or per-scenario mock state.

    Example:
        service = MockService()

        service.define("author", lambda t: t.uniquify("name"))
        service.define("book", lambda t: (
            t.uniquify("name"),
            t.plain("author", lambda: service.create("author")),
        ))

        book = service.create("book")
        service.request("GET", f"/books/{book.id}.xml")
    """

    def __init__(self, config: Optional[MockConfig] = None, seed: Optional[int] = None):
        self.config = config or MockConfig.from_env()
        self.config.validate()

        self.registry = DefinitionRegistry()
        self.store = ResourceStore()
        self.factory = Factory(self.registry, self.store, self.config)
        self.query = QueryEngine(self.store, self.registry, self.config)
        self.serializer = GraphSerializer(self.registry)
        self.diagnostics = DiagnosticsLog(always=self.config.diagnostics)
        self.router = MockRouter(self.query, self.serializer, self.registry, self.store, self.diagnostics)
        self.generators = FakeValues(seed=seed)

    # Definitions

    def define(self, type_name: str, builder: Optional[Callable[[SchemaBuilder], Any]] = None) -> ResourceSchema:
        """Register or extend a resource type."""
        return self.registry.define(type_name, builder)

    def schema_for(self, type_name: str) -> ResourceSchema:
        return self.registry.schema_for(type_name)

    # Records

    def create(
        self,
        type_name: str,
        attrs: Union[Attributes, Sequence[Attributes], None] = None,
    ) -> Any:
        """Create one record, or one per mapping when given a list."""
        return self.factory.create(type_name, attrs)

    def stub(
        self,
        count: int,
        type_name: str,
        like: Optional[Attributes] = None,
        overrides: Optional[Sequence[Attributes]] = None,
    ) -> List[Record]:
        """Create ``count`` records from a shared template."""
        return self.factory.stub(count, type_name, like=like, overrides=overrides)

    def find(self, type_name: str, criteria: Union[Predicate, int, str, None] = None, **attrs: Any) -> Any:
        """All records, a filtered list, or a single record by id."""
        return self.query.find(type_name, criteria, **attrs)

    # Interception

    def register(
        self,
        verb: Union[str, HTTPMethod],
        path_pattern: Union[str, Pattern[str]],
        handler: Handler,
    ) -> RouteRegistration:
        """Register a custom route that takes precedence over default routes."""
        return self.router.register(verb, path_pattern, handler)

    def dispatch(self, verb: Union[str, HTTPMethod], path: str) -> Response:
        """Dispatch a simulated request, returning the full response."""
        return self.router.dispatch(verb, path)

    def request(self, verb: Union[str, HTTPMethod], path: str) -> Any:
        """Dispatch a simulated request, returning the serialized document.

        Raises:
            RequestNotFound: If no route matches the path
        """
        return self.dispatch(verb, path).document

    # Lifecycle

    def reset(self, definitions: bool = False) -> None:
        """Clear scenario state: records, custom routes and the diagnostics log.

        Args:
            definitions: Also forget every type definition
        """
        self.store.clear()
        self.router.reset()
        self.diagnostics.clear()
        self.generators.reseed()
        if definitions:
            self.registry.clear()
        logger.debug("Mock service reset")
