"""
Result shaping: map engine outcomes and authorization decisions onto the observable
forms of the generated entry points.

Forms
- result form (``N_or_error``): Ok(value) / Err(error).
- raising form (``N``): the result unwrapped, so the error is raised.
- authorization forms: see resact.interface.authorize.as_result / as_bool.

Not-found handling
- A NOT_FOUND outcome becomes Ok(None) unless the effective not_found_error flag is
  set, in which case it becomes Err(NotFoundError). The flag is resolved by
  resolve_not_found_error().
"""

from __future__ import annotations

from resact.core.errors import ExecutionError
from resact.core.result import Err, Ok, Result

from .engine import Outcome, OutcomeKind

__all__ = ["resolve_not_found_error", "to_result"]


def resolve_not_found_error(*layers: bool | None, default: bool) -> bool:
    """
    First explicit flag among ``layers`` (highest precedence first), else ``default``.

    Examples:
        >>> resolve_not_found_error(None, False, True, default=True)
        False
        >>> resolve_not_found_error(None, None, default=True)
        True
    """
    for flag in layers:
        if flag is not None:
            return flag
    return default


def to_result(outcome: Outcome, *, not_found_error: bool) -> Result:
    if outcome.kind is OutcomeKind.SUCCESS:
        return Ok(outcome.value)
    if outcome.kind is OutcomeKind.NOT_FOUND and not not_found_error:
        return Ok(None)
    if outcome.error is None:
        raise ExecutionError(f"{outcome.kind.value} outcome carries no error")
    return Err(outcome.error)
