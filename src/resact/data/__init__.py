"""
resact.data — Polars-first reference backend for resources.

## Responsibilities
- Implement the Backend contract (query, query_one, create, update, evaluate_calculation)
  over an in-memory pl.DataFrame per resource.
- Derive record models (pydantic) and column dtypes (polars) from resact.core.schema.
- Provide expression helpers (`ref`, `arg`) for calculations and read filters.

## Public API
- Backend — Protocol every backend implements.
- MemoryTable — In-memory table bound to one ResourceSchema.
- ref / arg — Polars expression helpers.

## Import DAG discipline
- Depends only on stdlib, polars, pydantic, and resact.core.*.
- MUST NOT import resact.interface or the resource/domain facades.

## Examples
```python
import polars as pl
from resact.data import MemoryTable, ref, arg

table = MemoryTable(schema)  # doctest: +SKIP
table.create({"first_name": "Zach", "last_name": "Daniel"})  # doctest: +SKIP
table.query(ref("first_name") == "Zach")  # doctest: +SKIP
```
"""

from __future__ import annotations

from .backend import Backend
from .expr import arg, ref
from .store import MemoryTable

__all__ = [
    "Backend",
    "MemoryTable",
    "ref",
    "arg",
]
