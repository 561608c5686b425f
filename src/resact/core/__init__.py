"""
Core package aggregator for resact contracts (grammar, schema, errors, results).

## Contracts (single source of truth)
- Grammar — action/interface kinds, type names, call option names, record sentinel.
- Schema — frozen pydantic models for fields, actions, calculations, interfaces, resources.
- Errors — the exception taxonomy shared by every layer.
- Result — Ok/Err tagged results for the non-raising entry points.

## Notes
- Zero-IO policy: stdlib + pydantic only; no polars, no storage.
- Naming policy: enum `.value` and all declared names are lower_snake.

## Downstream usage
- resact.data — derives record models and polars dtypes from `schema.FieldSpec`.
- resact.interface — binds calls against `schema.InterfaceDefinition` and raises `errors`.

## Examples
```python
from resact.core.schema import ResourceSchema, FieldSpec, ActionSpec, define
schema = ResourceSchema(
    name="user",
    fields=[FieldSpec(name="id", type="uuid", primary_key=True)],
    actions=[ActionSpec(name="read", kind="read")],
    interfaces=[define("get_user", action="read", get=True)],
)
[a.name for a in schema.interface_args(schema.interface("get_user"))]  # ['id']
```
"""
