"""
Execution engine: run a built request against its resource's backend.

Overview
- run(): request -> Outcome. Never raises for domain failures; every failure is an
  Outcome tagged with an OutcomeKind and carrying the exception instance.
- execute(): the check-then-act composition (authorization gate, then run) used by
  every executing entry point and by callers holding a request from ``to_N``.

Outcomes per request kind
- get-style Query: zero matches -> NOT_FOUND, one -> SUCCESS(record),
  several -> RUNTIME_ERROR(MultipleResultsError).
- list Query: SUCCESS(list), possibly empty.
- Changeset: request errors or backend validation -> VALIDATION_FAILURE, nothing stored.
- ActionInput: the handler's value (bare, Ok or Err), checked against ``returns``.
- CalculationInput: request errors -> VALIDATION_FAILURE before evaluation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Any

from resact.core.errors import (
    AuthorizationCheckError,
    AuthorizationDenied,
    ExecutionError,
    NotFoundError,
    ResactError,
    ValidationFailure,
)
from resact.core.grammar import ActionKind, TypeName
from resact.core.result import Err, Ok
from resact.data.expr import equals_all
from resact.data.records import storage_value

from .authorize import AuthError, Deny, check, request_name
from .requests import ActionInput, CalculationInput, Changeset, Query, Request, check_value

__all__ = ["OutcomeKind", "Outcome", "run", "execute"]

logger = logging.getLogger(__name__)


class OutcomeKind(Enum):
    """Tags of an execution outcome."""

    SUCCESS = "success"
    NOT_FOUND = "not_found"
    VALIDATION_FAILURE = "validation_failure"
    AUTHORIZATION_DENIED = "authorization_denied"
    RUNTIME_ERROR = "runtime_error"


@dataclass(frozen=True, slots=True)
class Outcome:
    """
    Typed result of running one request.

    Attributes:
        kind (OutcomeKind): Outcome tag.
        value (Any): Result value (SUCCESS only).
        error (ResactError | None): Failure (every other kind).
    """

    kind: OutcomeKind
    value: Any = None
    error: ResactError | None = None

    @property
    def ok(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @classmethod
    def success(cls, value: Any) -> Outcome:
        return cls(OutcomeKind.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: ResactError) -> Outcome:
        if isinstance(error, NotFoundError):
            kind = OutcomeKind.NOT_FOUND
        elif isinstance(error, ValidationFailure):
            kind = OutcomeKind.VALIDATION_FAILURE
        elif isinstance(error, AuthorizationDenied):
            kind = OutcomeKind.AUTHORIZATION_DENIED
        else:
            kind = OutcomeKind.RUNTIME_ERROR
        return cls(kind, error=error)


def _wrap(exc: Exception, what: str) -> ExecutionError:
    error = ExecutionError(f"{what} failed: {exc}")
    error.__cause__ = exc
    return error


def _check_returned(name: str, type_name: TypeName | None, value: Any) -> Any:
    if type_name is None or type_name is TypeName.ANY or value is None:
        return value
    errors: list[dict[str, Any]] = []
    checked = check_value(name, type_name, value, errors)
    if errors:
        raise ValidationFailure(errors)
    return checked


# ---------------------------------------------------------------------------
# Per-kind runners
# ---------------------------------------------------------------------------


def _run_query(query: Query) -> Outcome:
    schema = query.resource.schema
    action = schema.action(query.action)
    if action is None:
        raise ExecutionError(f"{schema.name} has no action {query.action!r}")
    terms = [equals_all(query.filter)]
    if action.filter is not None:
        terms.append(action.filter({k: storage_value(v) for k, v in query.arguments.items()}))
    present = [t for t in terms if t is not None]
    combined = reduce(lambda left, right: left & right, present) if present else None

    backend = query.resource.backend
    if not query.get:
        return Outcome.success(backend.query(combined))
    record = backend.query_one(combined)
    if record is None:
        return Outcome.failure(NotFoundError(schema.name, query.filter))
    return Outcome.success(record)


def _run_changeset(changeset: Changeset) -> Outcome:
    backend = changeset.resource.backend
    if changeset.kind is ActionKind.CREATE:
        return Outcome.success(backend.create(changeset.attributes))
    if changeset.data is None:
        raise ValidationFailure([{"field": "record", "message": "is required", "type": "missing"}])
    return Outcome.success(backend.update(changeset.data, changeset.attributes))


def _run_action_input(action_input: ActionInput) -> Outcome:
    schema = action_input.resource.schema
    action = schema.action(action_input.action)
    if action is None or action.run is None:
        raise ExecutionError(f"{schema.name} has no runnable action {action_input.action!r}")
    context = {"actor": action_input.actor, "tenant": action_input.tenant, **action_input.context}
    try:
        result = action.run(action_input, context)
    except ResactError:
        raise
    except Exception as exc:
        return Outcome.failure(_wrap(exc, f"action {action.name!r}"))
    if isinstance(result, Err):
        error = result.error
        if not isinstance(error, ResactError):
            error = _wrap(error, f"action {action.name!r}")  # type: ignore[arg-type]
        return Outcome.failure(error)
    if isinstance(result, Ok):
        result = result.value
    return Outcome.success(_check_returned("result", action.returns, result))


def _run_calculation(calc_input: CalculationInput) -> Outcome:
    schema = calc_input.resource.schema
    calculation = schema.calculation(calc_input.calculation)
    if calculation is None:
        raise ExecutionError(f"{schema.name} has no calculation {calc_input.calculation!r}")
    value = calc_input.resource.backend.evaluate_calculation(
        calculation, calc_input.refs, calc_input.arguments
    )
    return Outcome.success(_check_returned(calculation.name, calculation.type, value))


def run(request: Request) -> Outcome:
    """
    Execute a request without authorization.

    Args:
        request (Request): Query, Changeset, ActionInput or CalculationInput.

    Returns:
        Outcome: Tagged outcome; failures carry the exception in ``error``.
    """
    name = request_name(request)
    if request.errors:
        outcome = Outcome.failure(ValidationFailure(list(request.errors)))
    else:
        try:
            if isinstance(request, Query):
                outcome = _run_query(request)
            elif isinstance(request, Changeset):
                outcome = _run_changeset(request)
            elif isinstance(request, ActionInput):
                outcome = _run_action_input(request)
            else:
                outcome = _run_calculation(request)
        except ResactError as exc:
            outcome = Outcome.failure(exc)
        except Exception as exc:
            logger.exception("backend failure while running %s", name)
            outcome = Outcome.failure(_wrap(exc, name))
    logger.debug("ran %s: %s", name, outcome.kind.value)
    return outcome


def execute(request: Request, *, actor: Any = None, authorize: bool = True) -> Outcome:
    """
    Authorize, then run. A Deny or authorizer error stops before the backend is touched.

    Args:
        request (Request): Built request.
        actor (Any): Principal handed to the authorizer.
        authorize (bool): Skip the gate when False.
    """
    if authorize:
        decision = check(request, actor, request.resource.authorizer)
        if isinstance(decision, Deny):
            return Outcome.failure(AuthorizationDenied(decision.reason))
        if isinstance(decision, AuthError):
            error = AuthorizationCheckError(f"authorization check failed: {decision.detail}")
            if isinstance(decision.detail, BaseException):
                error.__cause__ = decision.detail
            return Outcome.failure(error)
    return run(request)
