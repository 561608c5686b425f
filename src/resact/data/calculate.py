"""
Calculation evaluation for the in-memory backend.

A calculation expression is either a polars expression, evaluated over a one-row
frame holding the bound refs (as field columns) and arguments (as ``arg:`` columns),
or a plain callable ``(refs, arguments) -> value``.

Notes
- Column dtypes follow the declared field/argument types, so a ref bound to None
  still has the field's dtype.
- Missing refs/arguments are rejected upstream by the request builder; this module
  does not validate presence.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import polars as pl

from resact.core.errors import SchemaError
from resact.core.schema import CalculationSpec, ResourceSchema

from .expr import arg_column
from .records import polars_dtype, storage_value

__all__ = ["evaluate"]


def _frame(
    schema: ResourceSchema,
    calculation: CalculationSpec,
    refs: Mapping[str, Any],
    arguments: Mapping[str, Any],
) -> pl.DataFrame:
    series: list[pl.Series] = []
    for name, value in refs.items():
        spec = schema.field(name)
        dtype = polars_dtype(spec.type) if spec is not None else None
        series.append(pl.Series(name, [storage_value(value)], dtype=dtype))  # type: ignore[arg-type]
    for name, value in arguments.items():
        spec_arg = calculation.argument(name)
        dtype = polars_dtype(spec_arg.type) if spec_arg is not None else None
        series.append(pl.Series(arg_column(name), [storage_value(value)], dtype=dtype))  # type: ignore[arg-type]
    if not series:
        # A literal-only expression still needs one row to broadcast over.
        series.append(pl.Series("__row", [0]))
    return pl.DataFrame(series)


def evaluate(
    schema: ResourceSchema,
    calculation: CalculationSpec,
    refs: Mapping[str, Any],
    arguments: Mapping[str, Any],
) -> Any:
    """
    Evaluate a calculation against bound refs and arguments.

    Args:
        schema (ResourceSchema): Owning resource (for ref dtypes).
        calculation (CalculationSpec): Calculation to evaluate.
        refs (Mapping[str, Any]): Field values, by field name.
        arguments (Mapping[str, Any]): Calculation arguments with defaults applied.

    Returns:
        Any: The scalar result.

    Raises:
        SchemaError: If the expression is neither a polars expression nor callable.
    """
    expression = calculation.expression
    if isinstance(expression, pl.Expr):
        frame = _frame(schema, calculation, refs, arguments)
        return frame.select(expression.alias("value")).item()
    if callable(expression):
        return expression(dict(refs), dict(arguments))
    raise SchemaError(f"calculation {calculation.name!r} has an unsupported expression {expression!r}")
