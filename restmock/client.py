"""
Simulated client library.

Application code under test talks to a ``Connection``. In tests the
connection is a ``MockConnection`` that dispatches in-process to a
MockService's router instead of a real network service.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlencode

from .config import FORMATS
from .inflection import pluralize, singularize
from .models import HTTPMethod, Response
from .renderers import renderer_for
from .service import MockService

logger = logging.getLogger(__name__)


class Connection(ABC):
    """Strategy through which a client issues requests."""

    @abstractmethod
    def request(self, verb: Union[str, HTTPMethod], path: str) -> Response:
        """Issue a request and return the response."""
        pass

    def get(self, path: str) -> Response:
        return self.request(HTTPMethod.GET, path)


class MockConnection(Connection):
    """
    Connection answering from a MockService.

    The document is encoded with the renderer named by the path's extension
    (``/books.xml``), else the connection's format, else the service's
    configured default format.
    """

    def __init__(self, service: MockService, format: Optional[str] = None):
        if format is not None and format not in FORMATS:
            raise ValueError(f"format must be one of {FORMATS}, got {format!r}")
        self.service = service
        self.format = format

    def request(self, verb: Union[str, HTTPMethod], path: str) -> Response:
        """Dispatch in-process and encode the document.

        Raises:
            RequestNotFound: If no mock answers the path
        """
        response = self.service.dispatch(verb, path)
        requested = response.request.format if response.request else None
        format = requested if requested in FORMATS else (self.format or self.service.config.default_format)

        renderer = renderer_for(format)
        response.body = renderer.render(response.document)
        response.content_type = renderer.media_type
        response.headers["Content-Type"] = renderer.media_type
        logger.debug(f"{verb} {path} answered with {len(response.body)} bytes of {format}")
        return response


class ResourceClient:
    """
    Minimal resource-oriented client: collection and member reads.

    Paths follow ``/<plural>[/<id>].<format>[?query]``.

    Example:
        books = ResourceClient("book", MockConnection(service))
        books.all()            # GET /books.json
        books.find(1)          # GET /books/1.json
        books.all(author_id=3) # GET /books.json?author_id=3
    """

    def __init__(self, type_name: str, connection: Connection, format: str = "json"):
        self.type_name = singularize(type_name)
        self.collection_name = pluralize(self.type_name)
        self.connection = connection
        self.format = format

    def collection_path(self, **params: Any) -> str:
        path = f"/{self.collection_name}.{self.format}"
        if params:
            path += "?" + urlencode(params)
        return path

    def element_path(self, record_id: Any) -> str:
        return f"/{self.collection_name}/{record_id}.{self.format}"

    def all(self, **params: Any) -> List[Dict[str, Any]]:
        """Fetch the collection as a list of attribute dicts."""
        document = self.connection.get(self.collection_path(**params)).document
        if isinstance(document, dict):
            return list(document.get(self.collection_name, []))
        return list(document or [])

    def find(self, record_id: Any) -> Dict[str, Any]:
        """Fetch one member as an attribute dict."""
        document = self.connection.get(self.element_path(record_id)).document
        if isinstance(document, dict) and self.type_name in document:
            return dict(document[self.type_name])
        return dict(document or {})
