"""
Resource: a schema bound to a backend, an authorizer and settings, exposing its
interface definitions as entry point attributes.

Examples:
    >>> from resact import Resource, define
    >>> from resact.core.schema import ResourceSchema, FieldSpec, ActionSpec
    >>> users = Resource(ResourceSchema(
    ...     name="user",
    ...     fields=[FieldSpec(name="id", type="i64", primary_key=True), FieldSpec(name="name")],
    ...     actions=[ActionSpec(name="create", kind="create", accept=["id", "name"])],
    ...     interfaces=[define("create", args=["id", "name"])],
    ... ))
    >>> users.create(1, "ada").name
    'ada'
    >>> users.can_create_bool(None, 2, "bob")
    True
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from resact.core.errors import SchemaError
from resact.core.result import Result
from resact.core.schema import ResourceSchema
from resact.data.backend import Backend
from resact.data.records import record_model
from resact.data.store import MemoryTable
from resact.interface.authorize import AllowAll, Authorizer
from resact.interface.config import InterfaceSettings
from resact.interface.engine import Outcome
from resact.interface.engine import execute as execute_request
from resact.interface.generator import CodeInterface, should_authorize
from resact.interface.options import CallOptions
from resact.interface.requests import CalculationInput, Query, Request, build_calculation_input
from resact.interface.shaping import resolve_not_found_error, to_result

__all__ = ["Resource"]


class Resource:
    """
    A resource ready to be called.

    Args:
        schema (ResourceSchema): Frozen resource description.
        backend (Backend | None): Storage; defaults to a fresh MemoryTable.
        authorizer (Authorizer | None): Gate implementation; defaults to AllowAll.
        settings (InterfaceSettings | None): Dispatch defaults; defaults to
            InterfaceSettings() (use InterfaceSettings.load() to read env/TOML).

    Raises:
        SchemaError: If an entry point name collides with a Resource attribute.
    """

    def __init__(
        self,
        schema: ResourceSchema,
        *,
        backend: Backend | None = None,
        authorizer: Authorizer | None = None,
        settings: InterfaceSettings | None = None,
    ) -> None:
        self.schema = schema
        self.backend: Backend = backend if backend is not None else MemoryTable(schema)
        model = getattr(self.backend, "model", None)
        self.record_model: type[BaseModel] = model if model is not None else record_model(schema)
        self.authorizer: Authorizer = authorizer if authorizer is not None else AllowAll()
        self.settings = settings if settings is not None else InterfaceSettings()
        self.interface = self._build_interface(schema)

    def _build_interface(self, schema: ResourceSchema) -> CodeInterface:
        interface = CodeInterface(self, schema.interfaces)
        reserved = set(dir(type(self))) | set(vars(self)) | {"interface"}
        clashes = sorted(name for name in interface if name in reserved)
        if clashes:
            raise SchemaError(f"entry points {clashes} shadow attributes of Resource")
        return interface

    def __getattr__(self, name: str) -> Any:
        interface = self.__dict__.get("interface")
        if interface is None:
            raise AttributeError(name)
        return getattr(interface, name)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self.interface))

    def __repr__(self) -> str:
        return f"Resource({self.schema.name!r})"

    @property
    def name(self) -> str:
        return self.schema.name

    # ---------------------------------------------------------------------
    # Executing requests built elsewhere (e.g. with to_N)
    # ---------------------------------------------------------------------
    def run_request(self, request: Request, /, **kwargs: Any) -> Outcome:
        """
        Authorize and run a request.

        The gate runs per the ``authorize`` keyword, then the one the request was
        built with, then the settings mode.
        """
        options = CallOptions.from_kwargs(kwargs)
        actor = options.actor if options.actor is not None else request.actor
        override = options.authorize if options.authorize is not None else request.authorize
        return execute_request(
            request,
            actor=actor,
            authorize=should_authorize(self.settings.authorize, override, actor),
        )

    def execute_or_error(self, request: Request, /, **kwargs: Any) -> Result:
        """
        Execute a request and shape the outcome as Ok/Err.

        A get-style Query that matches nothing follows the ``not_found_error``
        keyword, then the flag the Query was built with, then the read action,
        then the settings.
        """
        outcome = self.run_request(request, **kwargs)
        request_flag = action_flag = None
        if isinstance(request, Query):
            request_flag = request.not_found_error
            action = self.schema.action(request.action)
            action_flag = action.not_found_error if action is not None else None
        flag = resolve_not_found_error(
            kwargs.get("not_found_error"),
            request_flag,
            action_flag,
            default=self.settings.not_found_error,
        )
        return to_result(outcome, not_found_error=flag)

    def execute(self, request: Request, /, **kwargs: Any) -> Any:
        """Raising form of execute_or_error."""
        return self.execute_or_error(request, **kwargs).unwrap()

    def calculate(
        self,
        name: str,
        /,
        *,
        refs: Mapping[str, Any] | None = None,
        arguments: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> Result:
        """
        Evaluate a public or private calculation without an interface definition.

        Args:
            name (str): Calculation name.
            refs (Mapping[str, Any] | None): Field values by name.
            arguments (Mapping[str, Any] | None): Calculation arguments by name.

        Returns:
            Result: Ok(value) or Err(error), like a ``N_or_error`` entry point.
        """
        calculation = self.schema.calculation(name)
        if calculation is None:
            raise SchemaError(f"{self.name} has no calculation {name!r}")
        options = CallOptions.from_kwargs(kwargs)
        request: CalculationInput = build_calculation_input(
            self, calculation, dict(refs or {}), dict(arguments or {}), options
        )
        return self.execute_or_error(request, **kwargs)
