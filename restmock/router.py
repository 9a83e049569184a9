"""Request routing for the in-process mock endpoint.

Routes map a verb and a regular expression over the full request path
(including the query string) to a handler. Captured groups are passed to the
handler positionally, and the handler's result is serialized into the
response document.

Two precedence classes exist. Custom routes are registered by the test author
and always win over default routes, which are derived per resource type:

    GET /<plural>        -> find(type)
    GET /<plural>/<id>   -> find(type, id)

Both default patterns accept an optional ``.xml``/``.json`` extension and an
optional query string. Within a class the first registration that matches wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Pattern, Tuple, Union

from .definitions import DefinitionRegistry
from .diagnostics import DiagnosticsLog
from .exceptions import RequestNotFound
from .inflection import pluralize
from .models import HTTPMethod, Request, Response, RouteKind
from .query import QueryEngine
from .serializer import GraphSerializer
from .store import ResourceStore

logger = logging.getLogger(__name__)

_DEFAULT_SUFFIX = r"(?:\.(?:xml|json))?(?:\?.*)?"

Handler = Callable[..., Any]


@dataclass
class RouteRegistration:
    """A verb + path pattern mapped to a handler.

    Attributes:
        verb: HTTP method the route answers
        pattern: Compiled pattern matched against the whole path and query string
        handler: Called with the pattern's captured groups
        kind: Precedence class
        type_name: Resource type served, for default routes
    """

    verb: HTTPMethod
    pattern: Pattern[str]
    handler: Handler
    kind: RouteKind = RouteKind.CUSTOM
    type_name: Optional[str] = None

    def match(self, verb: HTTPMethod, path: str) -> Optional[Tuple[Any, ...]]:
        """Captured groups if this route answers the request, None otherwise."""
        if verb != self.verb:
            return None
        match = self.pattern.fullmatch(path)
        return match.groups() if match else None

    def __repr__(self) -> str:
        return f"<{self.kind.value} route {self.verb.value} {self.pattern.pattern}>"


def _compile(path_pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    if isinstance(path_pattern, str):
        return re.compile(path_pattern)
    return path_pattern


class MockRouter:
    """Dispatches simulated requests to custom or default handlers.

    Example:
        router = MockRouter(query, serializer, registry, store)

        @router.get(r"/books\\.xml\\?author_id=(\\d+)")
        def books_by_author(author_id):
            return query.find("books", lambda book: book.author.id == int(author_id))

        router.dispatch("GET", "/books.xml?author_id=1").document
    """

    def __init__(
        self,
        query: QueryEngine,
        serializer: GraphSerializer,
        registry: DefinitionRegistry,
        store: ResourceStore,
        diagnostics: Optional[DiagnosticsLog] = None,
    ):
        self.query = query
        self.serializer = serializer
        self.registry = registry
        self.store = store
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()
        self._routes: List[RouteRegistration] = []
        self._default_routes: Dict[str, List[RouteRegistration]] = {}

    @property
    def routes(self) -> List[RouteRegistration]:
        """Custom registrations in registration order."""
        return list(self._routes)

    def register(
        self,
        verb: Union[str, HTTPMethod],
        path_pattern: Union[str, Pattern[str]],
        handler: Handler,
    ) -> RouteRegistration:
        """Register a custom route.

        Args:
            verb: HTTP method, any case
            path_pattern: Regular expression matched against the full path and query string
            handler: Called with captured groups; returns a record, a list of
                     records or a raw document

        Returns:
            The registration
        """
        route = RouteRegistration(HTTPMethod.coerce(verb), _compile(path_pattern), handler)
        self._routes.append(route)
        logger.debug(f"Registered {route!r}")
        return route

    def get(self, path_pattern: Union[str, Pattern[str]]):
        """Decorator to register a GET handler."""
        return self._route_decorator(HTTPMethod.GET, path_pattern)

    def post(self, path_pattern: Union[str, Pattern[str]]):
        """Decorator to register a POST handler."""
        return self._route_decorator(HTTPMethod.POST, path_pattern)

    def put(self, path_pattern: Union[str, Pattern[str]]):
        """Decorator to register a PUT handler."""
        return self._route_decorator(HTTPMethod.PUT, path_pattern)

    def delete(self, path_pattern: Union[str, Pattern[str]]):
        """Decorator to register a DELETE handler."""
        return self._route_decorator(HTTPMethod.DELETE, path_pattern)

    def patch(self, path_pattern: Union[str, Pattern[str]]):
        """Decorator to register a PATCH handler."""
        return self._route_decorator(HTTPMethod.PATCH, path_pattern)

    def _route_decorator(self, method: HTTPMethod, path_pattern: Union[str, Pattern[str]]):
        """Internal method to create route decorators."""
        def decorator(func: Handler):
            self.register(method, path_pattern, func)
            return func

        return decorator

    def default_routes(self) -> List[RouteRegistration]:
        """Collection and member routes for every known type.

        Defined types come first in definition order, followed by ad-hoc types
        that only exist in the store. Routes depend only on the type name, so
        each type's pair is compiled once and reused.
        """
        type_names = self.registry.types()
        type_names += [name for name in self.store.types() if name not in type_names]

        routes = []
        for type_name in type_names:
            if type_name not in self._default_routes:
                self._default_routes[type_name] = self._routes_for(type_name)
            routes.extend(self._default_routes[type_name])
        return routes

    def _routes_for(self, type_name: str) -> List[RouteRegistration]:
        plural = re.escape(pluralize(type_name))
        return [
            RouteRegistration(
                HTTPMethod.GET,
                re.compile(rf"/{plural}{_DEFAULT_SUFFIX}"),
                self._collection_handler(type_name),
                RouteKind.DEFAULT,
                type_name,
            ),
            RouteRegistration(
                HTTPMethod.GET,
                re.compile(rf"/{plural}/(\d+){_DEFAULT_SUFFIX}"),
                self._member_handler(type_name),
                RouteKind.DEFAULT,
                type_name,
            ),
        ]

    def _collection_handler(self, type_name: str) -> Handler:
        def find_all():
            return self.query.find(type_name)
        return find_all

    def _member_handler(self, type_name: str) -> Handler:
        def find_one(record_id: str):
            return self.query.get(type_name, record_id)
        return find_one

    def match_route(
        self, verb: Union[str, HTTPMethod], path: str
    ) -> Optional[Tuple[RouteRegistration, Tuple[Any, ...]]]:
        """Find the winning route: custom before default, first registered first.

        Returns:
            Tuple of (route, captured groups) if matched, None otherwise
        """
        method = HTTPMethod.coerce(verb)
        for route in self._routes + self.default_routes():
            groups = route.match(method, path)
            if groups is not None:
                return route, groups
        return None

    def dispatch(self, verb: Union[str, HTTPMethod], path: str) -> Response:
        """Resolve a simulated request and serialize the handler's result.

        Raises:
            RequestNotFound: If no route matches, carrying the literal path
            NotFound: If a default member route names a missing id
        """
        request = Request(HTTPMethod.coerce(verb), path)
        matched = self.match_route(request.method, path)
        if matched is None:
            logger.debug(f"No route for {request.method.value} {path}")
            raise RequestNotFound(path, request.method.value)

        route, groups = matched
        logger.debug(f"{request.method.value} {path} matched {route!r}")
        try:
            result = route.handler(*groups)
        except Exception as e:
            logger.debug(f"Handler for {request.method.value} {path} raised {e!r}")
            raise

        root_name = pluralize(route.type_name) if route.type_name else None
        document = self.serializer.serialize(result, root_name=root_name)
        self.diagnostics.record(request.method.value, path, route.kind.value, document)
        return Response(200, document=document, request=request, route_kind=route.kind)

    def reset(self) -> None:
        """Drop every custom registration."""
        self._routes.clear()
