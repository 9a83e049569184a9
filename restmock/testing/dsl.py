"""
DSL (Domain Specific Language) for mock service test actions.

This is the second layer in Dave Farley's 4-layer testing architecture:
1. Test Layer (actual test methods)
2. DSL Layer (this file) - describes what we want to do in business terms
3. Driver Layer - knows how to issue requests against the mock endpoint
4. System Under Test (restmock)
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from restmock.inflection import pluralize, singularize

if TYPE_CHECKING:
    from restmock.service import MockService
    from restmock.store import Record
    from restmock.testing.drivers import DriverInterface


@dataclass
class MockRequest:
    """Represents a simulated request in business terms."""
    method: str
    path: str
    query_params: Dict[str, Any] = field(default_factory=dict)

    def full_path(self) -> str:
        if not self.query_params:
            return self.path
        from urllib.parse import urlencode
        return f"{self.path}?{urlencode(self.query_params)}"


@dataclass
class MockReply:
    """Represents the outcome of a simulated request in business terms."""
    document: Any = None
    body: Optional[str] = None
    content_type: Optional[str] = None
    error: Optional[Exception] = None

    def is_successful(self) -> bool:
        return self.error is None

    def is_missing_mock(self) -> bool:
        """True when no route answered the request."""
        from restmock.exceptions import RequestNotFound
        return isinstance(self.error, RequestNotFound)

    def member(self, type_name: str) -> Dict[str, Any]:
        """Attributes of a single-record document."""
        return self.document[singularize(type_name)]

    def collection(self, type_name: str) -> List[Dict[str, Any]]:
        """Attribute dicts of a collection document."""
        return self.document[pluralize(singularize(type_name))]


class MockServiceDsl:
    """
    Domain-Specific Language for mock service testing.

    Set-up steps talk to the service directly; requests go through the
    driver, the way application code under test would issue them.
    """

    def __init__(self, service: "MockService", driver: "DriverInterface"):
        self.service = service
        self._driver = driver

    @property
    def driver(self):
        """Access the underlying driver for driver-specific operations."""
        return self._driver

    # Given

    def given_type(self, type_name: str, builder: Optional[Callable] = None):
        return self.service.define(type_name, builder)

    def given_record(self, type_name: str, **attrs: Any) -> "Record":
        return self.service.create(type_name, attrs)

    def given_records(self, type_name: str, *attr_maps: Dict[str, Any]) -> List["Record"]:
        return self.service.create(type_name, list(attr_maps))

    def given_stubs(self, count: int, type_name: str, **like: Any) -> List["Record"]:
        return self.service.stub(count, type_name, like=like)

    def given_mock(self, verb: str, path_pattern: str, handler: Callable[..., Any]):
        return self.service.register(verb, path_pattern, handler)

    # When

    def get(self, path: str, **query_params: Any) -> MockReply:
        return self._driver.execute(MockRequest("GET", path, query_params))

    def get_collection(self, type_name: str, format: str = "xml") -> MockReply:
        return self.get(f"/{pluralize(singularize(type_name))}.{format}")

    def get_member(self, type_name: str, record_id: Any, format: str = "xml") -> MockReply:
        return self.get(f"/{pluralize(singularize(type_name))}/{record_id}.{format}")

    # Then

    def expect_successful(self, reply: MockReply) -> MockReply:
        assert reply.is_successful(), f"Expected success, got {reply.error!r}"
        return reply

    def expect_missing_mock(self, reply: MockReply, path: str) -> MockReply:
        assert reply.is_missing_mock(), f"Expected RequestNotFound, got {reply!r}"
        assert reply.error.path == path  # type: ignore[union-attr]
        return reply

    def expect_names(self, reply: MockReply, type_name: str, names: List[str]) -> MockReply:
        actual = [item.get("name") for item in reply.collection(type_name)]
        assert actual == names, f"Expected {names}, got {actual}"
        return reply
