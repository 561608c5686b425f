"""
Authorization gate: decide whether an actor may run a built request.

The gate never executes the request. It asks a pluggable Authorizer and returns one of
Allow, Deny(reason) or AuthError(detail). An exception raised by the authorizer becomes
AuthError; the gate itself does not raise.

Observable forms
- as_result(): Allow -> Ok(True), Deny -> Ok(False), AuthError -> Err(AuthorizationCheckError).
- as_bool(): True only for Allow.

Examples:
    >>> from resact.interface.authorize import AllowAll, as_bool
    >>> as_bool(AllowAll().authorize(None, None))
    True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

from resact.core.errors import AuthorizationCheckError
from resact.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from .requests import Request

__all__ = [
    "Allow",
    "Deny",
    "AuthError",
    "Decision",
    "Authorizer",
    "AllowAll",
    "RuleAuthorizer",
    "request_name",
    "check",
    "as_result",
    "as_bool",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Allow:
    """The actor may run the request."""


@dataclass(frozen=True, slots=True)
class Deny:
    """The actor may not run the request."""

    reason: str | None = None


@dataclass(frozen=True, slots=True)
class AuthError:
    """The authorizer could not reach a decision."""

    detail: Any = None


Decision = Allow | Deny | AuthError


@runtime_checkable
class Authorizer(Protocol):
    def authorize(self, request: Request, actor: Any) -> Decision: ...


class AllowAll:
    """Authorizer that allows every request."""

    def authorize(self, request: Request, actor: Any) -> Decision:
        return Allow()


def request_name(request: Request) -> str:
    """Action or calculation name a request targets."""
    name = getattr(request, "action", None) or getattr(request, "calculation", None)
    return str(name)


class RuleAuthorizer:
    """
    Authorizer driven by one predicate per action/calculation name.

    Args:
        rules (Mapping[str, Callable[[Request, Any], bool]]): Predicate per target name.
        default (Literal["allow","deny"]): Decision for names without a rule.

    Examples:
        >>> auth = RuleAuthorizer({"create": lambda request, actor: actor == "admin"})
        >>> auth.authorize(type("R", (), {"action": "create"})(), "guest")
        Deny(reason="actor may not run 'create'")
    """

    def __init__(
        self,
        rules: Mapping[str, Callable[[Request, Any], bool]],
        *,
        default: Literal["allow", "deny"] = "deny",
    ) -> None:
        self.rules = dict(rules)
        self.default = default

    def authorize(self, request: Request, actor: Any) -> Decision:
        name = request_name(request)
        rule = self.rules.get(name)
        if rule is None:
            return Allow() if self.default == "allow" else Deny(f"no rule for {name!r}")
        if rule(request, actor):
            return Allow()
        return Deny(f"actor may not run {name!r}")


def check(request: Request, actor: Any, authorizer: Authorizer) -> Decision:
    """
    Run the authorizer for a request without executing it.

    Returns:
        Decision: Allow, Deny or AuthError. Authorizer exceptions and unexpected return
        values are reported as AuthError.
    """
    try:
        decision = authorizer.authorize(request, actor)
    except Exception as exc:
        logger.warning("authorizer failed for %s: %s", request_name(request), exc)
        return AuthError(exc)
    if not isinstance(decision, (Allow, Deny, AuthError)):
        return AuthError(f"authorizer returned {decision!r}")
    logger.debug("authorization for %s: %s", request_name(request), decision)
    return decision


def as_result(decision: Decision) -> Result:
    if isinstance(decision, Allow):
        return Ok(True)
    if isinstance(decision, Deny):
        return Ok(False)
    error = AuthorizationCheckError(f"authorization check failed: {decision.detail}")
    if isinstance(decision.detail, BaseException):
        error.__cause__ = decision.detail
    return Err(error)


def as_bool(decision: Decision) -> bool:
    return isinstance(decision, Allow)
