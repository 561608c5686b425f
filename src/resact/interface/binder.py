"""
Argument binding: positional call values + options -> BoundRequest.

Rules
- Values are consumed left to right against the interface's argument list
  (declared args, then get-by key fields not already declared).
- A required slot without a value raises MissingArgument; an optional slot without a
  value is left out of the mapping entirely (no None, no default here).
- A ``_record`` slot takes one record and yields the calculation's refs (or every
  field, when the calculation declares no refs) from its attributes.
- Update interfaces take the record to update as an extra leading value.
- Surplus positional values raise TooManyArguments.
- ``params`` supplies extra inputs by name; record fields override params and
  positional values override both.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from resact.core.errors import InvalidArgument, MissingArgument, TooManyArguments
from resact.core.grammar import RECORD_ARGUMENT, ActionKind
from resact.core.schema import ActionSpec, CalculationSpec, InterfaceDefinition, ResourceSchema

from .options import CallOptions

__all__ = ["BoundRequest", "bind"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BoundRequest:
    """
    Transient result of binding one call.

    Attributes:
        definition (InterfaceDefinition): Interface being called.
        target (ActionSpec | CalculationSpec): Resolved target.
        arguments (dict[str, Any]): Bound values by name (only what was supplied).
        options (CallOptions): Parsed call options.
        record (BaseModel | None): Record being updated (update interfaces only).
    """

    definition: InterfaceDefinition
    target: ActionSpec | CalculationSpec
    arguments: dict[str, Any]
    options: CallOptions
    record: BaseModel | None = None


def _expect_record(value: Any, model: type[BaseModel] | None, slot: str) -> BaseModel:
    if not isinstance(value, BaseModel) or (model is not None and not isinstance(value, model)):
        expected = model.__name__ if model is not None else "record"
        raise InvalidArgument(f"argument {slot!r} expects a {expected}, got {type(value).__name__}")
    return value


def _record_fields(target: ActionSpec | CalculationSpec, record: BaseModel) -> dict[str, Any]:
    names = target.refs if isinstance(target, CalculationSpec) and target.refs else list(type(record).model_fields)
    return {name: getattr(record, name) for name in names}


def bind(
    schema: ResourceSchema,
    definition: InterfaceDefinition,
    values: Sequence[Any],
    options: CallOptions,
    record_model: type[BaseModel] | None = None,
) -> BoundRequest:
    """
    Bind positional values onto an interface definition.

    Args:
        schema (ResourceSchema): Resource owning the target.
        definition (InterfaceDefinition): Interface being called.
        values (Sequence[Any]): Positional call values.
        options (CallOptions): Parsed call keywords.
        record_model (type[BaseModel] | None): Record class accepted for record slots.

    Returns:
        BoundRequest: Bound arguments plus options (and the record for updates).

    Raises:
        MissingArgument: A required slot (or an update's record) has no value.
        TooManyArguments: More values than slots.
        InvalidArgument: A record slot received something that is not a record.
    """
    target = schema.target(definition)
    remaining = list(values)

    record: BaseModel | None = None
    if isinstance(target, ActionSpec) and target.kind is ActionKind.UPDATE:
        if not remaining:
            raise MissingArgument("record")
        record = _expect_record(remaining.pop(0), record_model, "record")

    slots = schema.interface_args(definition)
    if len(remaining) > len(slots):
        offset = 1 if record is not None else 0
        raise TooManyArguments(len(slots) + offset, len(remaining) + offset)

    from_record: dict[str, Any] = {}
    positional: dict[str, Any] = {}
    for index, slot in enumerate(slots):
        if index >= len(remaining):
            if slot.optional:
                continue
            raise MissingArgument(slot.name)
        value = remaining[index]
        if slot.name == RECORD_ARGUMENT:
            from_record = _record_fields(target, _expect_record(value, record_model, slot.name))
        else:
            positional[slot.name] = value

    arguments = {**options.params, **from_record, **positional}
    logger.debug("bound %s: %s", definition.name, sorted(arguments))
    return BoundRequest(
        definition=definition,
        target=target,
        arguments=arguments,
        options=options,
        record=record,
    )
