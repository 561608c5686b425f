"""
Backend contract consumed by the execution engine.

Any persistence/computation engine can back a resource as long as it implements
this protocol. MemoryTable (resact.data.store) is the reference implementation.

Contract
- query(filter) -> list of records (possibly empty).
- query_one(filter) -> record or None; raises MultipleResultsError on more than one match.
- create(attributes) -> record; raises ValidationFailure without storing anything.
- update(record, attributes) -> record; raises ValidationFailure without changing anything.
- evaluate_calculation(calculation, refs, arguments) -> scalar.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from resact.core.schema import CalculationSpec
from resact.core.typing import Record

__all__ = ["Backend"]


@runtime_checkable
class Backend(Protocol):
    def query(self, filter: Any | None = None) -> list[Record]: ...

    def query_one(self, filter: Any | None = None) -> Record | None: ...

    def create(self, attributes: Mapping[str, Any]) -> Record: ...

    def update(self, record: Record, attributes: Mapping[str, Any]) -> Record: ...

    def evaluate_calculation(
        self,
        calculation: CalculationSpec,
        refs: Mapping[str, Any],
        arguments: Mapping[str, Any],
    ) -> Any: ...
