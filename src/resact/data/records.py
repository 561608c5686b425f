"""
Record models and storage dtypes derived from a ResourceSchema.

Overview
- record_model(): builds a frozen pydantic model with one attribute per field.
- polars_schema(): maps field types onto polars dtypes for the in-memory table.
- storage_value(): canonical stored form of a Python value (UUID -> str).
- validation_details(): flattens a pydantic ValidationError into ValidationFailure details.

Source of truth
- Field names/types/defaults come from resact.core.schema.FieldSpec.
- Type names and Python types come from resact.core.grammar.
"""

from __future__ import annotations

import uuid
from typing import Any

import polars as pl
from pydantic import BaseModel, ConfigDict, Field, ValidationError, create_model

from resact.core.grammar import TypeName, python_type
from resact.core.schema import FieldSpec, ResourceSchema

__all__ = [
    "record_model",
    "polars_schema",
    "polars_dtype",
    "storage_value",
    "validation_details",
]

# Note: Polars exposes dtype singletons/classes (e.g., pl.Int64). Keep the mapping loosely typed.
_DTYPE_MAP: dict[TypeName, object] = {
    TypeName.UUID: pl.String,
    TypeName.STR: pl.String,
    TypeName.I64: pl.Int64,
    TypeName.F64: pl.Float64,
    TypeName.BOOL: pl.Boolean,
}


def polars_dtype(type_name: TypeName) -> object | None:
    """Polars dtype for a type name, or None for "any" (let polars infer)."""
    return _DTYPE_MAP.get(type_name)


def polars_schema(schema: ResourceSchema) -> dict[str, object]:
    """
    Ordered column -> dtype mapping for a resource's table.

    Returns:
        dict[str, object]: One entry per field, in declaration order.
    """
    return {f.name: _DTYPE_MAP[f.type] for f in schema.fields}


def _model_name(resource: str) -> str:
    return "".join(part.capitalize() for part in resource.split("_")) + "Record"


def _field_definition(spec: FieldSpec) -> tuple[Any, Any]:
    annotation = python_type(spec.type)
    if spec.allow_nil:
        annotation = annotation | None
    if spec.default_factory is not None:
        return annotation, Field(default_factory=spec.default_factory)
    if spec.has_default:
        return annotation, spec.default
    if spec.allow_nil:
        return annotation, None
    return annotation, ...


def record_model(schema: ResourceSchema) -> type[BaseModel]:
    """
    Build the frozen record model for a resource.

    Args:
        schema (ResourceSchema): Resource description.

    Returns:
        type[BaseModel]: Model named ``<Resource>Record`` with ``extra="forbid"``.

    Notes:
        - Field defaults and default factories are carried over, so validating a partial
          attribute map yields a complete record.
        - Fields with ``allow_nil=False`` and no default are required.
    """
    definitions = {spec.name: _field_definition(spec) for spec in schema.fields}
    return create_model(  # type: ignore[call-overload]
        _model_name(schema.name),
        __config__=ConfigDict(extra="forbid", frozen=True),
        **definitions,
    )


def storage_value(value: Any) -> Any:
    """Canonical stored representation of a Python value."""
    if isinstance(value, uuid.UUID):
        return str(value)
    return value


def validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    """Flatten pydantic errors into ``{"field", "message", "type"}`` entries."""
    details: list[dict[str, Any]] = []
    for err in exc.errors():
        loc = err.get("loc") or ()
        details.append(
            {
                "field": ".".join(str(p) for p in loc) if loc else None,
                "message": err.get("msg"),
                "type": err.get("type"),
            }
        )
    return details
