"""
Dispatch diagnostics.

A process-wide toggle that, when set, makes every MockService record each
dispatched path and its serialized document for end-of-scenario inspection.
Recording has no effect on dispatch behavior.

Example:
    from restmock import diagnostics

    diagnostics.enable()
    ...
    print(service.diagnostics.report())
"""

import copy
import json
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from jinja2 import Environment
from pydantic import BaseModel, Field

from .config import env_flag
from .renderers import json_default

logger = logging.getLogger(__name__)

_enabled: bool = env_flag('RESTMOCK_DIAGNOSTICS') or False

REPORT_TEMPLATE = """\
{% if not entries %}
No requests dispatched.
{% else %}
{{ entries | length }} request(s) dispatched:
{% for entry in entries %}

{{ loop.index }}. {{ entry.verb }} {{ entry.path }} [{{ entry.route_kind }}]
{{ entry.document_json() | indent(4, true) }}
{% endfor %}
{% endif %}
"""

_environment = Environment(autoescape=False, trim_blocks=True, lstrip_blocks=True)


def enable() -> None:
    """Start recording dispatches in every service."""
    global _enabled
    _enabled = True
    logger.debug("Dispatch diagnostics enabled")


def disable() -> None:
    """Stop recording dispatches."""
    global _enabled
    _enabled = False
    logger.debug("Dispatch diagnostics disabled")


def is_enabled() -> bool:
    return _enabled


class DispatchEntry(BaseModel):
    """One recorded dispatch."""

    verb: str = Field(..., description="Request verb, e.g. GET")
    path: str = Field(..., description="Request path including the query string")
    route_kind: str = Field(..., description="Whether a custom or default route answered")
    document: Any = Field(None, description="Serialized response document")
    recorded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def document_json(self) -> str:
        return json.dumps(self.document, indent=2, default=json_default)


class DiagnosticsLog:
    """Scenario-scoped log of dispatches, written only while diagnostics are on."""

    def __init__(self, always: bool = False):
        self.always = always
        self.entries: List[DispatchEntry] = []

    @property
    def active(self) -> bool:
        return self.always or is_enabled()

    def record(self, verb: str, path: str, route_kind: str, document: Any) -> Optional[DispatchEntry]:
        """Record a dispatch when active, returning the entry."""
        if not self.active:
            return None
        # Later changes to the response document must not rewrite history
        entry = DispatchEntry(verb=verb, path=path, route_kind=route_kind,
                              document=copy.deepcopy(document))
        self.entries.append(entry)
        logger.debug(f"Recorded {verb} {path}")
        return entry

    def paths(self) -> List[str]:
        return [entry.path for entry in self.entries]

    def clear(self) -> None:
        self.entries.clear()

    def report(self) -> str:
        """Human-readable summary of every recorded dispatch."""
        template = _environment.from_string(REPORT_TEMPLATE)
        return template.render(entries=self.entries)

    def __len__(self) -> int:
        return len(self.entries)
