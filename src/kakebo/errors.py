"""Exception hierarchy for collaborator failures.

These are raised inside collaborator implementations only. The gateway turns
every one of them into a fallback value, so callers of the budget engine never
see them.
"""

from __future__ import annotations


class KakeboError(Exception):
    """Base class for all Kakebo errors."""


class CollaboratorError(KakeboError):
    """An external text service failed to produce a usable answer."""

    def __init__(self, message: str, *, service: str | None = None) -> None:
        super().__init__(message)
        self.service = service


class CollaboratorUnavailable(CollaboratorError):
    """The service could not be reached or answered with an HTTP error."""


class MalformedResponse(CollaboratorError):
    """The service answered, but the body was empty or could not be parsed."""


__all__ = [
    "KakeboError",
    "CollaboratorError",
    "CollaboratorUnavailable",
    "MalformedResponse",
]
