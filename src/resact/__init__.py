"""
resact — declarative resources with generated, typed entry points.

## Public API
- Resource — Schema + backend + authorizer + settings; exposes entry points as attributes.
- Domain — Named group of resources with domain-level entry points.
- define / define_calculation / optional — Interface declarations.
- execute / execute_or_error — Run a request built with a ``to_N`` entry point.
- calculate — Evaluate a calculation without an interface definition.
- Ok / Err — Tagged results of the non-raising forms.

## Examples
```python
import polars as pl
from resact import Resource, define, define_calculation, optional
from resact.core.schema import ResourceSchema, FieldSpec, ActionSpec, CalculationSpec
from resact.data import ref

schema = ResourceSchema(
    name="user",
    fields=[FieldSpec(name="id", type="i64", primary_key=True), FieldSpec(name="name")],
    actions=[ActionSpec(name="read", kind="read"), ActionSpec(name="create", kind="create", accept=["id", "name"])],
    calculations=[CalculationSpec(name="shout", type="str", expression=ref("name").str.to_uppercase(), refs=["name"])],
    interfaces=[
        define("create", args=["id", optional("name")]),
        define("get_user", action="read", get=True),
        define_calculation("shout", args=["name"]),
    ],
)
users = Resource(schema)
users.create(1, "ada")
users.get_user(1).name          # 'ada'
users.shout("ada")              # 'ADA'
users.can_create_bool(None, 2)  # True
```
"""

from __future__ import annotations

from typing import Any

from .core import errors
from .core.result import Err, Ok, Result
from .core.schema import define, define_calculation, optional
from .domain import Domain
from .interface.requests import Request
from .resource import Resource

__all__ = [
    "Resource",
    "Domain",
    "define",
    "define_calculation",
    "optional",
    "execute",
    "execute_or_error",
    "calculate",
    "Ok",
    "Err",
    "Result",
    "errors",
]


def execute_or_error(request: Request, /, **options: Any) -> Result:
    """Authorize and run a request built by a ``to_N`` entry point; Ok/Err form."""
    return request.resource.execute_or_error(request, **options)


def execute(request: Request, /, **options: Any) -> Any:
    """Raising form of execute_or_error."""
    return request.resource.execute(request, **options)


def calculate(
    resource: Resource,
    name: str,
    /,
    *,
    refs: dict[str, Any] | None = None,
    arguments: dict[str, Any] | None = None,
    **options: Any,
) -> Result:
    """
    Evaluate a calculation of ``resource`` dynamically.

    Returns:
        Result: Ok(value) or Err(error). Missing refs or invalid arguments come back
        as Err(ValidationFailure).
    """
    return resource.calculate(name, refs=refs, arguments=arguments, **options)
