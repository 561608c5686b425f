"""
Polars expression helpers for calculations and read filters.

Fields are plain columns (``ref("first_name")``); calculation arguments live in
columns prefixed with ``arg:`` so they never collide with field names.

Examples:
    >>> import polars as pl
    >>> from resact.data.expr import ref, arg
    >>> full_name = pl.concat_str([ref("first_name"), arg("separator"), ref("last_name")])
"""

from __future__ import annotations

from collections.abc import Mapping
from functools import reduce
from typing import Any

import polars as pl

from .records import storage_value

__all__ = ["ARG_PREFIX", "ref", "arg", "arg_column", "equals_all"]

ARG_PREFIX = "arg:"


def ref(name: str) -> pl.Expr:
    """Reference a field of the record."""
    return pl.col(name)


def arg_column(name: str) -> str:
    return f"{ARG_PREFIX}{name}"


def arg(name: str) -> pl.Expr:
    """Reference a calculation argument."""
    return pl.col(arg_column(name))


def equals_all(mapping: Mapping[str, Any]) -> pl.Expr | None:
    """
    Conjunction of ``field == value`` for every entry, or None when empty.

    Values are converted to their stored form first (UUID -> str).
    """
    terms = [
        pl.col(name).is_null() if value is None else pl.col(name) == pl.lit(storage_value(value))
        for name, value in mapping.items()
    ]
    if not terms:
        return None
    return reduce(lambda left, right: left & right, terms)
