"""
Typed call-level options parsed from entry point keywords.

Recognized keywords (resact.core.grammar.CallOption): actor, not_found_error, tenant,
authorize, context, params. Every other keyword is an action option: it is kept
verbatim in ``action_options`` and copied onto the built request.

Examples:
    >>> from resact.interface.options import CallOptions
    >>> opts = CallOptions.from_kwargs({"not_found_error": False, "load": ["posts"]})
    >>> opts.not_found_error, opts.action_options
    (False, {'load': ['posts']})
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from resact.core.grammar import CallOption

__all__ = ["CallOptions"]

_RECOGNIZED: frozenset[str] = frozenset(o.value for o in CallOption)


class CallOptions(BaseModel):
    """
    Options controlling one call.

    Attributes:
        actor (Any): Principal passed to the authorizer and handlers.
        not_found_error (bool | None): Per-call override of not-found behavior.
        tenant (Any): Opaque tenant passthrough, copied onto the request.
        authorize (bool | None): Force the gate on (True) or off (False) for this call.
        context (dict[str, Any]): Opaque context passthrough for handlers.
        params (dict[str, Any]): Extra inputs by name; positional values win over these.
        action_options (dict[str, Any]): Unrecognized keywords, passed through verbatim.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    actor: Any = None
    not_found_error: bool | None = None
    tenant: Any = None
    authorize: bool | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    params: dict[str, Any] = Field(default_factory=dict)
    action_options: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_kwargs(cls, kwargs: Mapping[str, Any]) -> CallOptions:
        known = {k: v for k, v in kwargs.items() if k in _RECOGNIZED}
        extra = {k: v for k, v in kwargs.items() if k not in _RECOGNIZED}
        return cls(**known, action_options=extra)
