"""
Lightweight typing aliases used by the backend contract.

Notes:
    - Intended for annotations only; no runtime logic.
    - A Record is a pydantic model instance produced from a resource's fields
      (see resact.data.records.record_model).
"""

from __future__ import annotations

from pydantic import BaseModel

__all__ = ["Record"]

Record = BaseModel
