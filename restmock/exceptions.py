"""
Custom exceptions for the mock service.

Every error propagates to the calling test step so the scenario fails with a
message naming the offending type or path.
"""
from typing import Any, Optional


class RestMockError(Exception):
    """Base exception for mock service errors."""

    pass


class UnknownType(RestMockError):
    """Raised for an undefined resource type when strict typing is enabled.

    By default undefined types are treated as empty schemas and this is never
    raised.
    """

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"No definition for resource type '{type_name}'")


class NotFound(RestMockError):
    """Raised when an id lookup does not match any record."""

    def __init__(self, type_name: str, record_id: Any):
        self.type_name = type_name
        self.record_id = record_id
        super().__init__(f"Couldn't find {type_name} with id={record_id}")


class RequestNotFound(RestMockError):
    """Raised when no registered route matches a simulated request.

    Carries the literal unmatched path so the author knows which mock to add.
    """

    def __init__(self, path: str, verb: Optional[str] = None):
        self.path = path
        self.verb = verb
        super().__init__(path)

    def __str__(self) -> str:
        if self.verb:
            return f"No mock registered for {self.verb} {self.path}"
        return f"No mock registered for {self.path}"


class UniquenessExhausted(RestMockError):
    """Raised when no unused value can be found for a uniquified attribute."""

    def __init__(self, type_name: str, attribute: str, attempts: Optional[int] = None):
        self.type_name = type_name
        self.attribute = attribute
        self.attempts = attempts
        message = f"Could not generate a unique '{attribute}' for {type_name}"
        if attempts is not None:
            message += f" after {attempts} attempts"
        super().__init__(message)


class DefinitionConflict(RestMockError):
    """Raised when a type is redefined with a conflicting attribute definition."""

    def __init__(self, type_name: str, attribute: str):
        self.type_name = type_name
        self.attribute = attribute
        super().__init__(
            f"Attribute '{attribute}' of {type_name} is already defined differently"
        )
