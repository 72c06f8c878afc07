"""Exception taxonomy for enumeration requests.

Every error carries the HTTP status the API boundary should answer with, so
the server can map exceptions to envelopes without inspecting their type.
"""

from __future__ import annotations


class EnumerationError(Exception):
    """Base class for all request-level enumeration failures."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidInput(EnumerationError, ValueError):
    """Malformed request: missing, empty, or syntactically invalid domain(s)."""

    status_code = 400


class EngineInitError(EnumerationError):
    """The enumeration engine could not be constructed from its configuration."""


class EngineInvocationError(EnumerationError):
    """The enumeration engine failed while enumerating a single domain."""
