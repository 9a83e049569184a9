"""
Core data models for simulated requests and responses.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Union

# Set up logger for this module
logger = logging.getLogger(__name__)

_FORMAT_SUFFIX = re.compile(r"\.(?P<format>[A-Za-z0-9]+)$")


class HTTPMethod(Enum):
    """Enumeration of supported HTTP methods."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def coerce(cls, verb: Union[str, "HTTPMethod"]) -> "HTTPMethod":
        """Accept an HTTPMethod or a verb string in any case."""
        if isinstance(verb, HTTPMethod):
            return verb
        return cls(verb.upper())


class RouteKind(Enum):
    """Precedence class of a route registration.

    Custom routes are evaluated before default ones.
    """

    CUSTOM = "custom"
    DEFAULT = "default"


@dataclass
class Request:
    """Represents a simulated request.

    The path includes the query string, exactly as the client issued it.
    """

    method: HTTPMethod
    path: str

    @property
    def path_only(self) -> str:
        """Path without the query string."""
        return self.path.split("?", 1)[0]

    @property
    def format(self) -> Optional[str]:
        """Format extension of the last path segment ("xml" in /books/1.xml)."""
        last_segment = self.path_only.rsplit("/", 1)[-1]
        match = _FORMAT_SUFFIX.search(last_segment)
        return match.group("format").lower() if match else None


@dataclass
class Response:
    """Represents the in-process response to a simulated request.

    Attributes:
        status_code: Always 200 for dispatched requests; failures raise.
        document: The serialized, acyclic document.
        body: Textual encoding of the document, set by connections that encode.
        content_type: Media type of ``body``.
        route_kind: Whether a custom or default route answered.
    """

    status_code: int
    document: Any = None
    body: Optional[str] = None
    content_type: Optional[str] = None
    headers: Dict[str, str] = field(default_factory=dict)
    request: Optional[Request] = None
    route_kind: Optional[RouteKind] = None

    def __post_init__(self):
        if self.content_type:
            self.headers["Content-Type"] = self.content_type
