"""
Textual encodings for serialized documents.
"""

import json
import xml.etree.ElementTree as ET
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from .inflection import singularize


class ContentRenderer:
    """Base class for document renderers."""

    def __init__(self, media_type: str, format: str):
        self.media_type = media_type
        self.format = format

    def can_render(self, accept_header: str) -> bool:
        """Check if this renderer can handle the given Accept header."""
        if accept_header == "*/*":
            return True
        accept_types = [t.strip().split(";")[0] for t in accept_header.split(",")]
        return self.media_type in accept_types or "*/*" in accept_types

    def render(self, document: Any) -> str:
        """Render the document as this content type."""
        raise NotImplementedError


def json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JSONRenderer(ContentRenderer):
    """JSON content renderer."""

    def __init__(self):
        super().__init__("application/json", "json")

    def render(self, document: Any) -> str:
        """Render a document as JSON."""
        if isinstance(document, str):
            # Already encoded by a custom handler
            return document
        return json.dumps(document, indent=2, default=json_default)


class XMLRenderer(ContentRenderer):
    """XML content renderer.

    Produces the conventional resource XML shape: a root element named after
    the resource, typed scalar elements, ``type="array"`` collections whose
    children take the singular name, and ``nil="true"`` for missing values.
    """

    def __init__(self, dasherize: bool = True):
        super().__init__("application/xml", "xml")
        self.dasherize = dasherize

    def render(self, document: Any) -> str:
        """Render a document as XML."""
        if isinstance(document, str):
            return document

        if isinstance(document, dict) and len(document) == 1:
            name, value = next(iter(document.items()))
        elif isinstance(document, list):
            name, value = "records", document
        else:
            name, value = "hash", document

        root = self._element(str(name), value)
        ET.indent(root, space="  ")
        body = ET.tostring(root, encoding="unicode")
        return f'<?xml version="1.0" encoding="UTF-8"?>\n{body}\n'

    def _tag(self, name: str) -> str:
        return name.replace("_", "-") if self.dasherize else name

    def _element(self, name: str, value: Any) -> ET.Element:
        element = ET.Element(self._tag(name))

        if value is None:
            element.set("nil", "true")
        elif isinstance(value, dict):
            for child_name, child_value in value.items():
                element.append(self._element(str(child_name), child_value))
        elif isinstance(value, list):
            element.set("type", "array")
            item_name = singularize(name)
            for item in value:
                element.append(self._element(item_name, item))
        else:
            type_name = self._scalar_type(value)
            if type_name:
                element.set("type", type_name)
            element.text = self._scalar_text(value)
        return element

    @staticmethod
    def _scalar_type(value: Any) -> Optional[str]:
        if isinstance(value, bool):
            return "boolean"
        if isinstance(value, int):
            return "integer"
        if isinstance(value, float):
            return "float"
        if isinstance(value, Decimal):
            return "decimal"
        if isinstance(value, datetime):
            return "dateTime"
        if isinstance(value, date):
            return "date"
        return None

    @staticmethod
    def _scalar_text(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        return str(value)


RENDERERS: Dict[str, ContentRenderer] = {
    "json": JSONRenderer(),
    "xml": XMLRenderer(),
}


def renderer_for(format: str) -> ContentRenderer:
    """Renderer for a format extension.

    Raises:
        ValueError: If no renderer handles the format
    """
    try:
        return RENDERERS[format.lower()]
    except KeyError:
        raise ValueError(f"No renderer for format '{format}', expected one of {sorted(RENDERERS)}") from None
