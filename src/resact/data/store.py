"""
Polars-backed in-memory table implementing the Backend contract.

Overview
- Rows live in a pl.DataFrame whose schema is derived from the resource fields.
- Records go in and come out as the resource's frozen pydantic record model.
- Filters are polars expressions (see resact.data.expr).

Source of truth
- Field names/dtypes: resact.core.schema.FieldSpec via resact.data.records.
- Contract errors: ValidationFailure / MultipleResultsError from resact.core.errors.
- Table errors: resact.data.errors.

Notes
- Mutations are serialized by a per-table lock; reads see the frame as of the call.
- Validation happens before the lock is taken, so a failing create/update never
  touches the stored frame.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

import polars as pl
from pydantic import BaseModel, ValidationError

from resact.core.errors import MultipleResultsError, ValidationFailure
from resact.core.schema import CalculationSpec, ResourceSchema

from .calculate import evaluate
from .errors import DuplicateKeyError, StaleRecordError
from .records import polars_schema, record_model, storage_value, validation_details

__all__ = ["MemoryTable"]

logger = logging.getLogger(__name__)


class MemoryTable:
    """
    In-memory table for one resource.

    Examples:
        >>> from resact.core.schema import ResourceSchema, FieldSpec
        >>> schema = ResourceSchema(
        ...     name="user", fields=[FieldSpec(name="id", type="i64", primary_key=True)]
        ... )
        >>> table = MemoryTable(schema)
        >>> table.create({"id": 1}).id
        1
        >>> len(table)
        1
    """

    def __init__(self, schema: ResourceSchema) -> None:
        self.schema = schema
        self.model: type[BaseModel] = record_model(schema)
        self._dtypes = polars_schema(schema)
        self._frame = pl.DataFrame(schema=self._dtypes)  # type: ignore[arg-type]
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return self._frame.height

    @property
    def frame(self) -> pl.DataFrame:
        """Current stored rows (polars frames are immutable; safe to hand out)."""
        return self._frame

    # ---------------------------------------------------------------------
    # Read
    # ---------------------------------------------------------------------
    def _select(self, filter: Any | None) -> pl.DataFrame:
        frame = self._frame
        if filter is not None:
            frame = frame.filter(filter)
        return frame

    def _records(self, frame: pl.DataFrame) -> list[BaseModel]:
        return [self.model.model_validate(row) for row in frame.iter_rows(named=True)]

    def query(self, filter: Any | None = None) -> list[BaseModel]:
        return self._records(self._select(filter))

    def query_one(self, filter: Any | None = None) -> BaseModel | None:
        frame = self._select(filter)
        if frame.height > 1:
            raise MultipleResultsError(self.schema.name, frame.height)
        if frame.is_empty():
            return None
        return self._records(frame)[0]

    # ---------------------------------------------------------------------
    # Write
    # ---------------------------------------------------------------------
    def _validate(self, attributes: Mapping[str, Any]) -> BaseModel:
        try:
            return self.model.model_validate(dict(attributes))
        except ValidationError as exc:
            raise ValidationFailure(validation_details(exc)) from exc

    def _row(self, record: BaseModel) -> pl.DataFrame:
        return pl.DataFrame([record.model_dump(mode="json")], schema=self._dtypes)  # type: ignore[arg-type]

    def create(self, attributes: Mapping[str, Any]) -> BaseModel:
        record = self._validate(attributes)
        key = self.schema.primary_key.name
        key_value = storage_value(getattr(record, key))
        row = self._row(record)
        with self._lock:
            if not self._frame.filter(pl.col(key) == key_value).is_empty():
                raise DuplicateKeyError(f"{self.schema.name} with {key}={key_value!r} already exists")
            self._frame = pl.concat([self._frame, row], how="vertical")
        logger.debug("created %s %s=%s", self.schema.name, key, key_value)
        return record

    def update(self, record: BaseModel, attributes: Mapping[str, Any]) -> BaseModel:
        key = self.schema.primary_key.name
        key_value = storage_value(getattr(record, key))
        updated = self._validate(record.model_dump() | dict(attributes))
        stored = updated.model_dump(mode="json")
        changed = [name for name in self._dtypes if name in attributes]
        mask = pl.col(key) == key_value
        with self._lock:
            if self._frame.filter(mask).is_empty():
                raise StaleRecordError(f"{self.schema.name} with {key}={key_value!r} is not stored")
            if changed:
                self._frame = self._frame.with_columns(
                    [
                        pl.when(mask)
                        .then(pl.lit(stored[name], dtype=self._dtypes[name]))  # type: ignore[arg-type]
                        .otherwise(pl.col(name))
                        .alias(name)
                        for name in changed
                    ]
                )
        logger.debug("updated %s %s=%s fields=%s", self.schema.name, key, key_value, changed)
        return updated

    def clear(self) -> None:
        with self._lock:
            self._frame = self._frame.clear()

    # ---------------------------------------------------------------------
    # Compute
    # ---------------------------------------------------------------------
    def evaluate_calculation(
        self,
        calculation: CalculationSpec,
        refs: Mapping[str, Any],
        arguments: Mapping[str, Any],
    ) -> Any:
        return evaluate(self.schema, calculation, refs, arguments)
