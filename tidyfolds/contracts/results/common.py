from __future__ import annotations

"""Result contracts.

These models represent *outputs* of a resampling run and are intended to be
stable for reporting layers built on top of the harness.

Design goals:
- JSON-friendly field types (lists, scalars) at the contract boundary.
- Strict validation (extra fields forbidden) to prevent silent drift.
- Tabular views (``to_frame``) are conveniences; the fields are the contract.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict


class ResultModel(BaseModel):
    """Base class for result contracts (strict by default)."""

    model_config = ConfigDict(extra="forbid")


JSONDict = Dict[str, Any]
JSONList = List[Any]
