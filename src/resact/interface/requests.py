"""
Request objects and the builder that turns a BoundRequest into one of them.

Request kinds
- Query: read actions. ``filter`` holds the implicit equality filter of get-style
  interfaces (get-by key, else primary key); the action's own filter callable is
  applied at execution time.
- Changeset: create/update actions. ``attributes`` holds accepted attributes (on
  create, static field defaults are filled in); ``arguments`` holds action arguments.
- ActionInput: generic actions, carrying the handler's named arguments.
- CalculationInput: calculations, carrying field ``refs`` and calculation ``arguments``.

Validation
- Argument/attribute problems are recorded on ``errors`` instead of being raised, so
  builder and authorization forms still return a request. The engine reports a request
  with errors as a ValidationFailure without touching the backend.
- Argument defaults are applied here; an argument without a value and without a
  default is left out of ``arguments``.

Deferred execution
- Every request keeps the ``authorize`` keyword it was built with. A Query also keeps
  the not_found_error flag of its call or interface definition, so executing a built
  request later behaves like calling the executing entry point.

All request classes are frozen dataclasses; the ``set_*`` / ``filter_by`` helpers return
modified copies for callers composing a request before execution.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from resact.core.grammar import ActionKind, TypeName, python_type
from resact.core.schema import ActionSpec, ArgumentSpec, CalculationSpec, FieldSpec
from resact.data.records import validation_details

from .binder import BoundRequest
from .options import CallOptions

if TYPE_CHECKING:
    from resact.resource import Resource

__all__ = [
    "Query",
    "Changeset",
    "ActionInput",
    "CalculationInput",
    "Request",
    "build_request",
    "build_calculation_input",
    "check_value",
]


# ============================================================================
# Request objects
# ============================================================================


@dataclass(frozen=True)
class Query:
    """Read request; at most one record when ``get`` is set."""

    resource: Resource
    action: str
    arguments: dict[str, Any] = field(default_factory=dict)
    filter: dict[str, Any] = field(default_factory=dict)
    get: bool = False
    not_found_error: bool | None = None
    errors: tuple[dict[str, Any], ...] = ()
    actor: Any = None
    tenant: Any = None
    context: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    authorize: bool | None = None

    @property
    def valid(self) -> bool:
        return not self.errors

    def filter_by(self, **equals: Any) -> Query:
        """Conjoin further equality terms onto the implicit filter."""
        return replace(self, filter={**self.filter, **equals})


@dataclass(frozen=True)
class Changeset:
    """Create/update request; ``data`` is the record being updated."""

    resource: Resource
    action: str
    kind: ActionKind
    attributes: dict[str, Any] = field(default_factory=dict)
    arguments: dict[str, Any] = field(default_factory=dict)
    data: BaseModel | None = None
    errors: tuple[dict[str, Any], ...] = ()
    actor: Any = None
    tenant: Any = None
    context: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    authorize: bool | None = None

    @property
    def valid(self) -> bool:
        return not self.errors

    def set_attribute(self, name: str, value: Any) -> Changeset:
        return replace(self, attributes={**self.attributes, name: value})


@dataclass(frozen=True)
class ActionInput:
    """Generic action request."""

    resource: Resource
    action: str
    arguments: dict[str, Any] = field(default_factory=dict)
    errors: tuple[dict[str, Any], ...] = ()
    actor: Any = None
    tenant: Any = None
    context: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    authorize: bool | None = None

    @property
    def valid(self) -> bool:
        return not self.errors

    def set_argument(self, name: str, value: Any) -> ActionInput:
        return replace(self, arguments={**self.arguments, name: value})


@dataclass(frozen=True)
class CalculationInput:
    """Calculation request."""

    resource: Resource
    calculation: str
    refs: dict[str, Any] = field(default_factory=dict)
    arguments: dict[str, Any] = field(default_factory=dict)
    errors: tuple[dict[str, Any], ...] = ()
    actor: Any = None
    tenant: Any = None
    context: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)
    authorize: bool | None = None

    @property
    def valid(self) -> bool:
        return not self.errors


Request = Query | Changeset | ActionInput | CalculationInput


# ============================================================================
# Validation helpers
# ============================================================================


@lru_cache(maxsize=None)
def _adapter(type_name: TypeName) -> TypeAdapter[Any]:
    return TypeAdapter(python_type(type_name))


def check_value(
    name: str, type_name: TypeName, value: Any, errors: list[dict[str, Any]]
) -> Any:
    """
    Validate (and coerce) one non-None value against a type name.

    Appends ``{"field", "message", "type"}`` entries to ``errors`` on failure and
    returns the value unchanged in that case.
    """
    try:
        return _adapter(type_name).validate_python(value)
    except ValidationError as exc:
        for detail in validation_details(exc):
            errors.append({**detail, "field": name})
        return value


def _missing(name: str) -> dict[str, Any]:
    return {"field": name, "message": "is required", "type": "missing"}


def _nil(name: str) -> dict[str, Any]:
    return {"field": name, "message": "must not be nil", "type": "nil"}


def _unknown(names: Iterable[str], target: str) -> list[dict[str, Any]]:
    return [
        {"field": name, "message": f"is not an input of {target!r}", "type": "unknown_input"}
        for name in sorted(names)
    ]


def _apply_arguments(
    specs: list[ArgumentSpec], supplied: Mapping[str, Any], errors: list[dict[str, Any]]
) -> dict[str, Any]:
    arguments: dict[str, Any] = {}
    for spec in specs:
        if spec.name in supplied:
            value = supplied[spec.name]
        elif spec.has_default:
            value = spec.default
        else:
            if spec.required:
                errors.append(_missing(spec.name))
            continue
        if value is None:
            if not spec.allow_nil:
                errors.append(_nil(spec.name))
            arguments[spec.name] = None
            continue
        arguments[spec.name] = check_value(spec.name, spec.type, value, errors)
    return arguments


def _check_attribute(spec: FieldSpec, value: Any, errors: list[dict[str, Any]]) -> Any:
    if value is None:
        if not spec.allow_nil:
            errors.append(_nil(spec.name))
        return None
    return check_value(spec.name, spec.type, value, errors)


# ============================================================================
# Builders
# ============================================================================


def _passthrough(opts: CallOptions) -> dict[str, Any]:
    return {
        "actor": opts.actor,
        "tenant": opts.tenant,
        "context": dict(opts.context),
        "options": dict(opts.action_options),
        "authorize": opts.authorize,
    }


def _build_query(resource: Resource, bound: BoundRequest, action: ActionSpec) -> Query:
    schema = resource.schema
    errors: list[dict[str, Any]] = []
    keys = schema.get_by(bound.definition)
    implicit = {k: bound.arguments[k] for k in keys if k in bound.arguments}
    argument_names = {a.name for a in action.arguments}
    supplied = {k: v for k, v in bound.arguments.items() if k not in keys or k in argument_names}
    errors.extend(_unknown(set(supplied) - argument_names, action.name))
    arguments = _apply_arguments(action.arguments, supplied, errors)
    return Query(
        resource=resource,
        action=action.name,
        arguments=arguments,
        filter=implicit,
        get=schema.is_get(bound.definition),
        not_found_error=(
            bound.options.not_found_error
            if bound.options.not_found_error is not None
            else bound.definition.not_found_error
        ),
        errors=tuple(errors),
        **_passthrough(bound.options),
    )


def _build_changeset(resource: Resource, bound: BoundRequest, action: ActionSpec) -> Changeset:
    schema = resource.schema
    errors: list[dict[str, Any]] = []
    accepted = set(schema.accepted(action))
    argument_names = {a.name for a in action.arguments}

    supplied_args = {k: v for k, v in bound.arguments.items() if k in argument_names}
    supplied_attrs = {
        k: v for k, v in bound.arguments.items() if k in accepted and k not in argument_names
    }
    errors.extend(_unknown(set(bound.arguments) - accepted - argument_names, action.name))

    attributes: dict[str, Any] = {}
    for spec in schema.fields:
        if spec.name in supplied_attrs:
            attributes[spec.name] = _check_attribute(spec, supplied_attrs[spec.name], errors)
        elif (
            action.kind is ActionKind.CREATE
            and spec.name in accepted
            and spec.has_default
            and spec.default_factory is None
        ):
            attributes[spec.name] = spec.default

    return Changeset(
        resource=resource,
        action=action.name,
        kind=action.kind,
        attributes=attributes,
        arguments=_apply_arguments(action.arguments, supplied_args, errors),
        data=bound.record,
        errors=tuple(errors),
        **_passthrough(bound.options),
    )


def _build_action_input(resource: Resource, bound: BoundRequest, action: ActionSpec) -> ActionInput:
    errors: list[dict[str, Any]] = []
    errors.extend(_unknown(set(bound.arguments) - {a.name for a in action.arguments}, action.name))
    arguments = _apply_arguments(action.arguments, bound.arguments, errors)
    return ActionInput(
        resource=resource,
        action=action.name,
        arguments=arguments,
        errors=tuple(errors),
        **_passthrough(bound.options),
    )


def build_calculation_input(
    resource: Resource,
    calculation: CalculationSpec,
    refs: Mapping[str, Any],
    arguments: Mapping[str, Any],
    options: CallOptions,
) -> CalculationInput:
    """
    Build a CalculationInput from field refs and calculation arguments given apart.

    Unknown refs, refs the calculation reads but were not given, and argument
    problems are recorded on ``errors``.
    """
    schema = resource.schema
    errors: list[dict[str, Any]] = []
    errors.extend(_unknown(set(refs) - set(schema.field_names()), calculation.name))
    errors.extend(_missing(name) for name in calculation.refs if name not in refs)
    argument_names = {a.name for a in calculation.arguments}
    errors.extend(_unknown(set(arguments) - argument_names, calculation.name))
    return CalculationInput(
        resource=resource,
        calculation=calculation.name,
        refs=dict(refs),
        arguments=_apply_arguments(calculation.arguments, arguments, errors),
        errors=tuple(errors),
        **_passthrough(options),
    )


def _build_calculation_input(
    resource: Resource, bound: BoundRequest, calculation: CalculationSpec
) -> CalculationInput:
    argument_names = {a.name for a in calculation.arguments}
    refs = {k: v for k, v in bound.arguments.items() if k not in argument_names}
    supplied = {k: v for k, v in bound.arguments.items() if k in argument_names}
    return build_calculation_input(resource, calculation, refs, supplied, bound.options)


def build_request(resource: Resource, bound: BoundRequest) -> Request:
    """
    Construct the request object matching the bound target's kind.

    Args:
        resource (Resource): Resource the call is dispatched against.
        bound (BoundRequest): Output of resact.interface.binder.bind.

    Returns:
        Request: Query, Changeset, ActionInput or CalculationInput.
    """
    target = bound.target
    if isinstance(target, CalculationSpec):
        return _build_calculation_input(resource, bound, target)
    if target.kind is ActionKind.READ:
        return _build_query(resource, bound, target)
    if target.kind in (ActionKind.CREATE, ActionKind.UPDATE):
        return _build_changeset(resource, bound, target)
    return _build_action_input(resource, bound, target)
