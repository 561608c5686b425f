"""
Core exception types raised while declaring resources and dispatching calls.

Provides typed exceptions for every failure the dispatch layer can surface:
- SchemaError for resource/interface declaration invariants.
- BindingError (MissingArgument, TooManyArguments, InvalidArgument) for call-site
  mistakes found while binding positional values.
- ValidationFailure for input that does not satisfy field/argument types.
- NotFoundError / MultipleResultsError for get-style reads.
- AuthorizationDenied / AuthorizationCheckError for the authorization gate.
- ExecutionError for backend or handler failures.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - Each error also subclasses the closest builtin so callers that already catch
      ValueError / LookupError / PermissionError keep working.
    - Binding errors are programming errors at the call site; they are raised
      immediately by every entry-point form and are never wrapped in a result.

Examples:
    Catch a not-found lookup.

    >>> from resact.core.errors import NotFoundError
    >>> try:
    ...     raise NotFoundError("user", {"id": "missing"})
    ... except LookupError as e:
    ...     msg = str(e)
    >>> "user" in msg
    True
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ResactError",
    "SchemaError",
    "BindingError",
    "MissingArgument",
    "TooManyArguments",
    "InvalidArgument",
    "ValidationFailure",
    "NotFoundError",
    "MultipleResultsError",
    "AuthorizationDenied",
    "AuthorizationCheckError",
    "ExecutionError",
]


class ResactError(Exception):
    """Base class for every error raised by resact."""


class SchemaError(ResactError, ValueError):
    """Resource or interface declaration violates a schema invariant."""


class BindingError(ResactError, TypeError):
    """Positional call values could not be bound onto an interface's argument list."""


class MissingArgument(BindingError):
    """A required positional argument was not supplied."""

    def __init__(self, name: str) -> None:
        super().__init__(f"missing required argument {name!r}")
        self.name = name


class TooManyArguments(BindingError):
    """More positional values were supplied than the interface declares."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"expected at most {expected} positional argument(s), got {got}")
        self.expected = expected
        self.got = got


class InvalidArgument(BindingError):
    """A positional value has the wrong shape for its slot (e.g. a non-record for _record)."""


class ValidationFailure(ResactError, ValueError):
    """
    Input failed field- or argument-level validation.

    Attributes:
        details (list[dict[str, Any]]): One entry per problem with at least the keys
            ``field`` and ``message``.
    """

    def __init__(self, details: list[dict[str, Any]]) -> None:
        self.details = list(details)
        summary = "; ".join(f"{d.get('field')}: {d.get('message')}" for d in self.details)
        super().__init__(f"validation failed: {summary}" if summary else "validation failed")


class NotFoundError(ResactError, LookupError):
    """A get-style read matched no record."""

    def __init__(self, resource: str, filter: dict[str, Any] | None = None) -> None:
        self.resource = resource
        self.filter = dict(filter or {})
        super().__init__(f"{resource} not found (filter={self.filter!r})")


class MultipleResultsError(ResactError):
    """A get-style read matched more than one record; the get-by key is not unique."""

    def __init__(self, resource: str, count: int) -> None:
        self.resource = resource
        self.count = count
        super().__init__(f"expected at most one {resource}, got {count}")


class AuthorizationDenied(ResactError, PermissionError):
    """The authorizer denied the request."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(f"forbidden: {reason}" if reason else "forbidden")


class AuthorizationCheckError(ResactError):
    """The authorizer itself failed while evaluating a request."""


class ExecutionError(ResactError, RuntimeError):
    """Backend or action handler failure."""
