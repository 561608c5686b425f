"""
resact.interface — Generated entry points for resources.

## Responsibilities
- Bind positional call values and keyword options onto interface definitions.
- Build requests (Query, Changeset, ActionInput, CalculationInput) without executing them.
- Run the authorization gate and the execution engine, then shape outcomes into the
  raising, Ok/Err, builder and authorization forms.

## Public API
- InterfaceSettings — Process-wide dispatch defaults (env > TOML > defaults).
- CallOptions — Parsed call keywords.
- bind / build_request — Binding and request construction.
- Authorizer, AllowAll, RuleAuthorizer, Allow, Deny, AuthError — Authorization gate.
- run / execute / Outcome / OutcomeKind — Execution engine.
- CodeInterface / dispatch / Form — Entry point registry.

## Import DAG discipline
- Depends on stdlib, pydantic, resact.core.* and resact.data.*.
- Refers to resact.resource only for type checking.
"""

from __future__ import annotations

from .authorize import Allow, AllowAll, AuthError, Authorizer, Deny, RuleAuthorizer
from .binder import BoundRequest, bind
from .config import InterfaceSettings
from .engine import Outcome, OutcomeKind, execute, run
from .generator import CodeInterface, Form, dispatch
from .options import CallOptions
from .requests import ActionInput, CalculationInput, Changeset, Query, build_request

__all__ = [
    "InterfaceSettings",
    "CallOptions",
    "BoundRequest",
    "bind",
    "Query",
    "Changeset",
    "ActionInput",
    "CalculationInput",
    "build_request",
    "Allow",
    "Deny",
    "AuthError",
    "Authorizer",
    "AllowAll",
    "RuleAuthorizer",
    "Outcome",
    "OutcomeKind",
    "run",
    "execute",
    "CodeInterface",
    "Form",
    "dispatch",
]
