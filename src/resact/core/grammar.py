"""
Canonical resact grammar and helpers.

Defines action kinds, interface kinds, field/argument type names, call-level option
names, and the "whole record" argument sentinel. Includes zero-IO validators used by
the schema models.

Design principles
-----------------
1) One naming standard:
   - Enum classes: PascalCase
   - Enum member names: UPPER_SNAKE (Python constants)
   - Enum serialized values: lower_snake
   - Resource, field, action, argument and interface names: lower_snake

2) Types are names, not classes:
   - Schemas declare field/argument types by TypeName value ("uuid", "str", ...).
   - Python types live here (stdlib only); storage dtypes live in resact.data.

Examples
--------
>>> from resact.core.grammar import is_lower_snake, python_type
>>> is_lower_snake("first_name")
True
>>> python_type("i64")
<class 'int'>
"""

from __future__ import annotations

import re
import uuid
from enum import Enum
from typing import Any, Final

__all__ = [
    "ActionKind",
    "InterfaceKind",
    "TypeName",
    "CallOption",
    "RECORD_ARGUMENT",
    "PYTHON_TYPES",
    "is_lower_snake",
    "assert_lower_snake",
    "type_name_from_value",
    "python_type",
]

# Interface argument that consumes a whole record instead of a scalar.
RECORD_ARGUMENT: Final[str] = "_record"


class ActionKind(Enum):
    """
    Kinds of actions a resource can declare.

    Notes:
      - read: filtered or get-style query.
      - create / update: attribute mutation through a changeset.
      - generic: arbitrary handler invoked with bound arguments.
    """

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    GENERIC = "generic"


class InterfaceKind(Enum):
    """What an interface definition targets."""

    ACTION = "action"
    CALCULATION = "calculation"


class TypeName(Enum):
    """
    Scalar type names usable for fields, arguments and generic action returns.

    Notes:
      Storage mapping (resact.data.store):
        * uuid -> pl.String (canonical hyphenated text)
        * str  -> pl.String
        * i64  -> pl.Int64
        * f64  -> pl.Float64
        * bool -> pl.Boolean
      "any" is valid for arguments and returns only; it cannot back a field.
    """

    UUID = "uuid"
    STR = "str"
    I64 = "i64"
    F64 = "f64"
    BOOL = "bool"
    ANY = "any"


class CallOption(Enum):
    """
    Keyword options recognized at call level. Any other keyword is an action option.
    """

    ACTOR = "actor"
    NOT_FOUND_ERROR = "not_found_error"
    TENANT = "tenant"
    AUTHORIZE = "authorize"
    CONTEXT = "context"
    PARAMS = "params"


PYTHON_TYPES: Final[dict[TypeName, Any]] = {
    TypeName.UUID: uuid.UUID,
    TypeName.STR: str,
    TypeName.I64: int,
    TypeName.F64: float,
    TypeName.BOOL: bool,
    TypeName.ANY: Any,
}


_LOWER_SNAKE_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9]+(?:_[a-z0-9]+)*$")


def is_lower_snake(value: str) -> bool:
    """
    Check whether a string is lower_snake.

    Args:
      value (str): Candidate string to validate.

    Returns:
      bool: True if value matches lower_snake (e.g., "get_user"), False otherwise.
    """
    return bool(_LOWER_SNAKE_RE.match(value or ""))


def assert_lower_snake(value: str, what: str = "value") -> None:
    """
    Validate that a string is lower_snake.

    Raises:
      ValueError: If value is not lower_snake.
    """
    if not is_lower_snake(value):
        raise ValueError(f"{what} must be lower_snake (got: {value!r})")


def type_name_from_value(s: str | TypeName) -> TypeName:
    """Parse a type name string (or pass through a TypeName)."""
    if isinstance(s, TypeName):
        return s
    return TypeName(s)


def python_type(name: str | TypeName) -> Any:
    """
    Resolve the Python type used to validate values of a TypeName.

    Args:
      name (str | TypeName): Type name such as "str" or TypeName.I64.

    Returns:
      Any: A Python type (or typing.Any for "any").
    """
    return PYTHON_TYPES[type_name_from_value(name)]
