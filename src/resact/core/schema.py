"""
Pydantic v2 models describing a resource: fields, actions, calculations and the
interface definitions that expose them as callable entry points.

Responsibilities
- Define the canonical, frozen models built once at startup (ResourceSchema and parts).
- Normalize names to lower_snake via grammar helpers.
- Enforce declaration invariants (unique names, a single primary key, interface
  arguments that resolve against their target).
- Resolve the effective argument list and get-by key of an interface definition.

Style
- Zero-IO (stdlib + pydantic only). Calculation expressions and read filters are
  stored opaquely; resact.data knows how to evaluate them.
- Validators raise SchemaError; pydantic surfaces it as ValidationError at
  construction time.

Examples:
    >>> from resact.core.schema import ResourceSchema, FieldSpec, ActionSpec, define, optional
    >>> schema = ResourceSchema(
    ...     name="user",
    ...     fields=[FieldSpec(name="id", type="uuid", primary_key=True),
    ...             FieldSpec(name="first_name", default="fred")],
    ...     actions=[ActionSpec(name="read", kind="read", primary=True),
    ...              ActionSpec(name="create", kind="create")],
    ...     interfaces=[define("create", args=[optional("first_name")])],
    ... )
    >>> [a.name for a in schema.interface_args(schema.interface("create"))]
    ['first_name']
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import SchemaError
from .grammar import RECORD_ARGUMENT, ActionKind, InterfaceKind, TypeName, assert_lower_snake

__all__ = [
    "FieldSpec",
    "ArgumentSpec",
    "ActionSpec",
    "CalculationSpec",
    "InterfaceArg",
    "InterfaceDefinition",
    "ResourceSchema",
    "optional",
    "define",
    "define_calculation",
]


def _check_name(value: str, what: str) -> str:
    try:
        assert_lower_snake(value, what)
    except ValueError as exc:
        raise SchemaError(str(exc)) from None
    return value


def _ensure_unique(names: Iterable[str], what: str) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise SchemaError(f"duplicate {what} name {name!r}")
        seen.add(name)


# ============================================================================
# Fields & arguments
# ============================================================================


class FieldSpec(BaseModel):
    """
    A stored attribute of a resource.

    Attributes:
        name (str): lower_snake field name.
        type (TypeName): Scalar type; "any" is rejected.
        default (Any): Explicit default. Only counts when passed explicitly.
        default_factory (Callable[[], Any] | None): Callable producing a default per record.
        primary_key (bool): Exactly one field per resource sets this.
        public (bool): Whether the field is readable/writable through interfaces.
        allow_nil (bool): Whether None is an acceptable stored value.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: TypeName = TypeName.STR
    default: Any = None
    default_factory: Callable[[], Any] | None = None
    primary_key: bool = False
    public: bool = True
    allow_nil: bool = True

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        return _check_name(v, "field name")

    @field_validator("type")
    @classmethod
    def _v_type(cls, v: TypeName) -> TypeName:
        if v is TypeName.ANY:
            raise SchemaError("fields must declare a concrete type, not 'any'")
        return v

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set or self.default_factory is not None

    def default_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


class ArgumentSpec(BaseModel):
    """
    A named argument of an action or calculation.

    Attributes:
        name (str): lower_snake argument name.
        type (TypeName): Expected type (default "any").
        allow_nil (bool): False makes the argument required unless it has a default.
        default (Any): Explicit default. An argument without an explicit default is
            omitted from requests when no value is supplied, rather than set to None.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: TypeName = TypeName.ANY
    allow_nil: bool = True
    default: Any = None

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        return _check_name(v, "argument name")

    @property
    def has_default(self) -> bool:
        return "default" in self.model_fields_set

    @property
    def required(self) -> bool:
        return not self.allow_nil and not self.has_default


# ============================================================================
# Actions & calculations
# ============================================================================


class ActionSpec(BaseModel):
    """
    An action of a resource.

    Attributes:
        name (str): lower_snake action name.
        kind (ActionKind): read | create | update | generic.
        arguments (list[ArgumentSpec]): Declared arguments, in order.
        accept (list[str] | None): Attributes a create/update may write. None accepts
            every public, non-primary-key field.
        primary (bool): Marks the default action of its kind.
        filter (Callable | None): Read only. Called with the bound arguments and returns
            a filter expression understood by the backend.
        get (bool): Read only. Default "single record" behavior for interfaces.
        get_by (list[str]): Read only. Default uniqueness key for interfaces.
        not_found_error (bool | None): Read only. Default not-found behavior.
        returns (TypeName | None): Generic only. Declared return type.
        run (Callable | None): Generic only. Handler ``run(input, context) -> value``.

    Raises:
        pydantic.ValidationError: If kind-specific options are set on the wrong kind,
            a generic action lacks a handler, or argument names repeat.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    kind: ActionKind
    arguments: list[ArgumentSpec] = Field(default_factory=list)
    accept: list[str] | None = None
    primary: bool = False
    filter: Callable[[dict[str, Any]], Any] | None = None
    get: bool = False
    get_by: list[str] = Field(default_factory=list)
    not_found_error: bool | None = None
    returns: TypeName | None = None
    run: Callable[..., Any] | None = None

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        return _check_name(v, "action name")

    @model_validator(mode="after")
    def _v_kind_options(self) -> ActionSpec:
        _ensure_unique((a.name for a in self.arguments), f"argument (action {self.name!r})")
        if self.kind is not ActionKind.READ:
            if self.filter is not None or self.get or self.get_by or self.not_found_error is not None:
                raise SchemaError(
                    f"action {self.name!r}: filter/get/get_by/not_found_error apply to read actions only"
                )
        if self.kind is ActionKind.GENERIC:
            if self.run is None:
                raise SchemaError(f"generic action {self.name!r} requires a run handler")
        elif self.run is not None or self.returns is not None:
            raise SchemaError(f"action {self.name!r}: run/returns apply to generic actions only")
        if self.accept is not None and self.kind not in (ActionKind.CREATE, ActionKind.UPDATE):
            raise SchemaError(f"action {self.name!r}: accept applies to create/update actions only")
        return self

    def argument(self, name: str) -> ArgumentSpec | None:
        return next((a for a in self.arguments if a.name == name), None)


class CalculationSpec(BaseModel):
    """
    A derived value computed from record fields and calculation arguments.

    Attributes:
        name (str): lower_snake calculation name.
        type (TypeName): Result type.
        expression (Any): A backend expression (polars expression for the in-memory
            table) or a plain callable ``(refs, arguments) -> value``.
        arguments (list[ArgumentSpec]): Calculation arguments.
        refs (list[str]): Field names the expression reads. All of them must be bound
            before evaluation.
        public (bool): Whether interfaces may expose the calculation.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    type: TypeName = TypeName.ANY
    expression: Any
    arguments: list[ArgumentSpec] = Field(default_factory=list)
    refs: list[str] = Field(default_factory=list)
    public: bool = True

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        return _check_name(v, "calculation name")

    @model_validator(mode="after")
    def _v_arguments(self) -> CalculationSpec:
        _ensure_unique((a.name for a in self.arguments), f"argument (calculation {self.name!r})")
        return self

    def argument(self, name: str) -> ArgumentSpec | None:
        return next((a for a in self.arguments if a.name == name), None)


# ============================================================================
# Interface definitions
# ============================================================================


class InterfaceArg(BaseModel):
    """One positional slot of an interface: a target name, required or optional."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    optional: bool = False

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        if v == RECORD_ARGUMENT:
            return v
        return _check_name(v, "interface argument")


def optional(name: str) -> InterfaceArg:
    """
    Mark an interface argument as optional.

    Examples:
        >>> optional("first_name")
        InterfaceArg(name='first_name', optional=True)
    """
    return InterfaceArg(name=name, optional=True)


class InterfaceDefinition(BaseModel):
    """
    Declaration of one family of generated entry points.

    Attributes:
        name (str): Entry point base name (``N``).
        kind (InterfaceKind): Whether ``target`` names an action or a calculation.
        target (str | None): Target name; defaults to ``name``.
        args (list[InterfaceArg]): Positional arguments, in order. Plain strings are
            coerced to required InterfaceArg instances.
        get (bool): Read only. Expect a single record.
        get_by (list[str]): Read only. Fields forming the implicit equality filter.
        not_found_error (bool | None): Read only. Definition-level not-found default.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    kind: InterfaceKind = InterfaceKind.ACTION
    target: str | None = None
    args: list[InterfaceArg] = Field(default_factory=list)
    get: bool = False
    get_by: list[str] = Field(default_factory=list)
    not_found_error: bool | None = None

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        return _check_name(v, "interface name")

    @field_validator("args", mode="before")
    @classmethod
    def _v_args(cls, v: Any) -> Any:
        if isinstance(v, (list, tuple)):
            return [InterfaceArg(name=a) if isinstance(a, str) else a for a in v]
        return v

    @model_validator(mode="after")
    def _v_shape(self) -> InterfaceDefinition:
        _ensure_unique((a.name for a in self.args), f"interface argument ({self.name!r})")
        if self.kind is InterfaceKind.CALCULATION and (
            self.get or self.get_by or self.not_found_error is not None
        ):
            raise SchemaError(f"calculation interface {self.name!r} cannot set get/get_by/not_found_error")
        if self.kind is InterfaceKind.ACTION and any(a.name == RECORD_ARGUMENT for a in self.args):
            raise SchemaError(f"{RECORD_ARGUMENT!r} is only valid on calculation interfaces ({self.name!r})")
        return self

    @property
    def target_name(self) -> str:
        return self.target or self.name


def define(
    name: str,
    *,
    action: str | None = None,
    args: Iterable[str | InterfaceArg] = (),
    get: bool = False,
    get_by: Iterable[str] = (),
    not_found_error: bool | None = None,
) -> InterfaceDefinition:
    """
    Declare an action interface.

    Args:
        name (str): Entry point base name.
        action (str | None): Target action; defaults to ``name``.
        args (Iterable[str | InterfaceArg]): Positional arguments (see ``optional``).
        get (bool): Return a single record instead of a list.
        get_by (Iterable[str]): Fields used as an implicit equality filter (implies get).
        not_found_error (bool | None): Raise (True) or return None (False) when nothing matches.

    Returns:
        InterfaceDefinition: Frozen definition to list in ``ResourceSchema.interfaces``.
    """
    return InterfaceDefinition(
        name=name,
        kind=InterfaceKind.ACTION,
        target=action,
        args=list(args),
        get=get,
        get_by=list(get_by),
        not_found_error=not_found_error,
    )


def define_calculation(
    name: str,
    *,
    calculation: str | None = None,
    args: Iterable[str | InterfaceArg] = (),
) -> InterfaceDefinition:
    """Declare a calculation interface; ``calculation`` defaults to ``name``."""
    return InterfaceDefinition(
        name=name,
        kind=InterfaceKind.CALCULATION,
        target=calculation,
        args=list(args),
    )


# ============================================================================
# Resource
# ============================================================================


class ResourceSchema(BaseModel):
    """
    Immutable description of a resource, built once at startup.

    Attributes:
        name (str): lower_snake resource name.
        fields (list[FieldSpec]): Ordered fields; exactly one is the primary key.
        actions (list[ActionSpec]): Actions, unique by name.
        calculations (list[CalculationSpec]): Calculations, unique by name.
        interfaces (list[InterfaceDefinition]): Entry point declarations, unique by name.

    Raises:
        pydantic.ValidationError: If any invariant listed above fails, or an interface
            does not resolve against its target.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    fields: list[FieldSpec]
    actions: list[ActionSpec] = Field(default_factory=list)
    calculations: list[CalculationSpec] = Field(default_factory=list)
    interfaces: list[InterfaceDefinition] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _v_name(cls, v: str) -> str:
        return _check_name(v, "resource name")

    @model_validator(mode="after")
    def _v_resource(self) -> ResourceSchema:
        _ensure_unique((f.name for f in self.fields), "field")
        _ensure_unique((a.name for a in self.actions), "action")
        _ensure_unique((c.name for c in self.calculations), "calculation")
        _ensure_unique((i.name for i in self.interfaces), "interface")

        keys = [f.name for f in self.fields if f.primary_key]
        if len(keys) != 1:
            raise SchemaError(f"resource {self.name!r} needs exactly one primary key field, got {keys}")

        field_names = set(self.field_names())
        for action in self.actions:
            unknown = set(action.accept or ()) - field_names
            unknown |= set(action.get_by) - field_names
            if unknown:
                raise SchemaError(f"action {action.name!r} references unknown fields {sorted(unknown)}")
        for calc in self.calculations:
            unknown = set(calc.refs) - field_names
            if unknown:
                raise SchemaError(f"calculation {calc.name!r} references unknown fields {sorted(unknown)}")

        for definition in self.interfaces:
            self.validate_interface(definition)
        return self

    # -- lookups ------------------------------------------------------------

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def field(self, name: str) -> FieldSpec | None:
        return next((f for f in self.fields if f.name == name), None)

    def action(self, name: str) -> ActionSpec | None:
        return next((a for a in self.actions if a.name == name), None)

    def calculation(self, name: str) -> CalculationSpec | None:
        return next((c for c in self.calculations if c.name == name), None)

    def interface(self, name: str) -> InterfaceDefinition | None:
        return next((i for i in self.interfaces if i.name == name), None)

    @property
    def primary_key(self) -> FieldSpec:
        return next(f for f in self.fields if f.primary_key)

    def accepted(self, action: ActionSpec) -> list[str]:
        """Attribute names a create/update action may write."""
        if action.accept is not None:
            return list(action.accept)
        return [f.name for f in self.fields if f.public and not f.primary_key]

    # -- interface resolution -------------------------------------------------

    def target(self, definition: InterfaceDefinition) -> ActionSpec | CalculationSpec:
        """
        Resolve the action or calculation an interface points at.

        Raises:
            SchemaError: If the target does not exist.
        """
        name = definition.target_name
        found: ActionSpec | CalculationSpec | None
        if definition.kind is InterfaceKind.CALCULATION:
            found = self.calculation(name)
        else:
            found = self.action(name)
        if found is None:
            raise SchemaError(
                f"interface {definition.name!r} targets unknown {definition.kind.value} {name!r}"
            )
        return found

    def is_get(self, definition: InterfaceDefinition) -> bool:
        target = self.target(definition)
        if not isinstance(target, ActionSpec) or target.kind is not ActionKind.READ:
            return False
        return bool(definition.get or definition.get_by or target.get or target.get_by)

    def get_by(self, definition: InterfaceDefinition) -> list[str]:
        """
        Effective uniqueness key of a get-style read interface.

        Precedence: definition.get_by > action.get_by > primary key (when get is set).
        """
        target = self.target(definition)
        if not isinstance(target, ActionSpec) or not self.is_get(definition):
            return []
        if definition.get_by:
            return list(definition.get_by)
        if target.get_by:
            return list(target.get_by)
        return [self.primary_key.name]

    def interface_args(self, definition: InterfaceDefinition) -> list[InterfaceArg]:
        """Declared positional arguments followed by any get-by key fields not already listed."""
        args = list(definition.args)
        listed = {a.name for a in args}
        for key in self.get_by(definition):
            if key not in listed:
                args.append(InterfaceArg(name=key))
        return args

    def validate_interface(self, definition: InterfaceDefinition) -> None:
        """
        Check that an interface resolves against this resource.

        Raises:
            SchemaError: On an unknown target, an argument that is neither an action
                argument, an accepted attribute, a get-by key nor (for calculations) a
                calculation argument, ref, field or the record sentinel, on get
                options used with a non-read action, or on an optional get-by key.
        """
        target = self.target(definition)
        if isinstance(target, CalculationSpec):
            if not target.public:
                raise SchemaError(f"interface {definition.name!r} targets private calculation {target.name!r}")
            allowed = (
                {a.name for a in target.arguments}
                | set(target.refs)
                | set(self.field_names())
                | {RECORD_ARGUMENT}
            )
        else:
            if (definition.get or definition.get_by or definition.not_found_error is not None) and (
                target.kind is not ActionKind.READ
            ):
                raise SchemaError(
                    f"interface {definition.name!r}: get/get_by/not_found_error need a read action"
                )
            unknown_keys = set(definition.get_by) - set(self.field_names())
            if unknown_keys:
                raise SchemaError(
                    f"interface {definition.name!r} get_by references unknown fields {sorted(unknown_keys)}"
                )
            allowed = {a.name for a in target.arguments}
            if target.kind in (ActionKind.CREATE, ActionKind.UPDATE):
                allowed |= set(self.accepted(target))
            elif target.kind is ActionKind.READ:
                keys = set(self.get_by(definition))
                optional_keys = sorted(a.name for a in definition.args if a.optional and a.name in keys)
                if optional_keys:
                    raise SchemaError(
                        f"interface {definition.name!r}: get-by keys {optional_keys} cannot be optional"
                    )
                allowed |= keys
        unknown = [a.name for a in definition.args if a.name not in allowed]
        if unknown:
            raise SchemaError(
                f"interface {definition.name!r} has arguments {unknown} not accepted by "
                f"{definition.kind.value} {target.name!r}"
            )
