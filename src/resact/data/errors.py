"""
Custom exceptions for the resact.data module.

Purpose
- Provide storage-layer error types distinct from the validation and lookup errors
  that the backend contract reports through resact.core.errors.

Source of truth and boundaries
- ValidationFailure and MultipleResultsError (resact.core.errors) are part of the
  backend contract and raised as-is by MemoryTable.
- resact.data raises Store* errors for problems of the table itself; they subclass
  ExecutionError so the engine reports them as runtime failures.
"""

from __future__ import annotations

from resact.core.errors import ExecutionError


class StoreError(ExecutionError):
    """
    Base class for storage failures in resact.data.

    Notes:
        Use this as a catch-all for table-level failures, distinct from input validation.
    """


class StaleRecordError(StoreError):
    """
    Raised when an update targets a record whose primary key is no longer stored.

    Examples:
        - Updating a record fetched before the table was cleared.
    """


class DuplicateKeyError(StoreError):
    """
    Raised when a create would store a second row with an existing primary key.
    """
