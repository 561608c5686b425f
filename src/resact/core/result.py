"""
Tagged results returned by the non-raising entry points.

`Ok(value)` wraps a successful value; `Err(error)` wraps the exception that the
raising form would have raised. `unwrap()` turns either back into the raising form.

Examples:
    >>> from resact.core.result import Ok, Err
    >>> Ok(3).unwrap()
    3
    >>> Err(ValueError("bad")).is_ok
    False
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

__all__ = ["Ok", "Err", "Result"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    """Failed result carrying the exception instance."""

    error: BaseException

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        raise self.error


Result = Ok[Any] | Err
