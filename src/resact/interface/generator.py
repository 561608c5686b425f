"""
Interface generator: turn interface definitions into named entry points.

Every definition ``N`` yields, in a CodeInterface registry:

    N            raising form, returns the value
    N_or_error   Ok(value) | Err(error)
    to_N         the built request, not executed (action interfaces only)
    can_N        Ok(bool) | Err(error) from the authorization gate; actor first
    can_N_bool   bool from the authorization gate; actor first

All forms share one pipeline (dispatch): parse options -> bind -> build request ->
stop (to_N), check (can_*), or check-then-run and shape (N, N_or_error). Binding
errors raise immediately in every form.

Notes
- Entry points are functools.partial objects over dispatch; nothing is generated
  with exec or closures per call.
- Name collisions between forms of different definitions are rejected when the
  registry is built.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any

from resact.core.errors import MissingArgument, SchemaError
from resact.core.grammar import InterfaceKind
from resact.core.schema import InterfaceDefinition

from .authorize import as_bool, as_result, check
from .binder import bind
from .engine import execute
from .options import CallOptions
from .requests import build_request
from .shaping import resolve_not_found_error, to_result

if TYPE_CHECKING:
    from resact.resource import Resource

__all__ = ["Form", "entry_point_name", "forms_for", "should_authorize", "dispatch", "CodeInterface"]

logger = logging.getLogger(__name__)


class Form(Enum):
    """Observable forms of a generated entry point."""

    RAISE = "raise"
    RESULT = "result"
    BUILD = "build"
    CAN = "can"
    CAN_BOOL = "can_bool"


_NAME_PATTERNS: dict[Form, str] = {
    Form.RAISE: "{name}",
    Form.RESULT: "{name}_or_error",
    Form.BUILD: "to_{name}",
    Form.CAN: "can_{name}",
    Form.CAN_BOOL: "can_{name}_bool",
}


def entry_point_name(name: str, form: Form) -> str:
    """
    Examples:
        >>> entry_point_name("get_user", Form.CAN_BOOL)
        'can_get_user_bool'
    """
    return _NAME_PATTERNS[form].format(name=name)


def forms_for(definition: InterfaceDefinition) -> list[Form]:
    if definition.kind is InterfaceKind.CALCULATION:
        return [f for f in Form if f is not Form.BUILD]
    return list(Form)


def should_authorize(mode: str, override: bool | None, actor: Any) -> bool:
    """
    Whether an executing form runs the gate.

    A per-call ``authorize`` keyword wins; otherwise the settings mode decides
    ("always", "when_actor" or "never").
    """
    if override is not None:
        return override
    if mode == "never":
        return False
    if mode == "when_actor":
        return actor is not None
    return True


def dispatch(
    resource: Resource,
    definition: InterfaceDefinition,
    form: Form,
    /,
    *values: Any,
    **kwargs: Any,
) -> Any:
    """
    Run one entry point call.

    Args:
        resource (Resource): Resource the definition belongs to.
        definition (InterfaceDefinition): Interface being called.
        form (Form): Which observable form to produce.
        *values: Positional values; for can_* forms the first one is the actor.
        **kwargs: Call options (see resact.interface.options.CallOptions).

    Raises:
        BindingError: On any binding problem, in every form.
    """
    options = CallOptions.from_kwargs(kwargs)
    if form in (Form.CAN, Form.CAN_BOOL):
        if not values:
            raise MissingArgument("actor")
        options = options.model_copy(update={"actor": values[0]})
        values = values[1:]

    settings = resource.settings
    level = logging.INFO if settings.log_calls else logging.DEBUG
    logger.log(level, "%s.%s (%s)", resource.name, definition.name, form.value)

    bound = bind(resource.schema, definition, values, options, resource.record_model)
    request = build_request(resource, bound)
    if form is Form.BUILD:
        return request

    if form in (Form.CAN, Form.CAN_BOOL):
        decision = check(request, options.actor, resource.authorizer)
        return as_bool(decision) if form is Form.CAN_BOOL else as_result(decision)

    outcome = execute(
        request,
        actor=options.actor,
        authorize=should_authorize(settings.authorize, options.authorize, options.actor),
    )
    target = bound.target
    not_found_error = resolve_not_found_error(
        options.not_found_error,
        definition.not_found_error,
        getattr(target, "not_found_error", None),
        default=settings.not_found_error,
    )
    result = to_result(outcome, not_found_error=not_found_error)
    if form is Form.RESULT:
        return result
    return result.unwrap()


class CodeInterface:
    """
    Registry of generated entry points for one resource.

    Entry points are reachable as attributes and by name:

        >>> iface.get_user(user_id)             # doctest: +SKIP
        >>> iface["can_get_user_bool"](actor, user_id)  # doctest: +SKIP
    """

    def __init__(self, resource: Resource, definitions: Iterable[InterfaceDefinition]) -> None:
        entries: dict[str, Callable[..., Any]] = {}
        for definition in definitions:
            for form in forms_for(definition):
                name = entry_point_name(definition.name, form)
                if name in entries:
                    raise SchemaError(f"entry point {name!r} is generated twice")
                entries[name] = partial(dispatch, resource, definition, form)
        self._entries = entries

    def __getattr__(self, name: str) -> Callable[..., Any]:
        entries = self.__dict__.get("_entries", {})
        try:
            return entries[name]
        except KeyError:
            raise AttributeError(f"no entry point named {name!r}") from None

    def __getitem__(self, name: str) -> Callable[..., Any]:
        return self._entries[name]

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._entries))

    def names(self) -> list[str]:
        return list(self._entries)
