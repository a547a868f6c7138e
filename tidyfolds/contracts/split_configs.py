from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


class VFoldConfig(BaseModel):
    """V-fold (optionally repeated, optionally stratified) cross-validation.

    ``v <= n`` can only be checked when folds are made, since it depends on
    the dataset size.
    """
    mode: Literal["vfold"] = "vfold"
    v: int = Field(default=10, ge=2)
    repeats: int = Field(default=1, ge=1)
    # column name of the stratification variable
    strata: Optional[str] = None
    breaks: int = 4
    pool: float = 0.1
    seed: Optional[int] = None

    @field_validator("strata", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v is None or v == "":
            return None
        return str(v)


class HoldoutConfig(BaseModel):
    mode: Literal["holdout"] = "holdout"
    prop: float = 0.75
    strata: Optional[str] = None
    breaks: int = 4
    pool: float = 0.1
    seed: Optional[int] = None

    @field_validator("strata", mode="before")
    @classmethod
    def _empty_to_none(cls, v):
        if v is None or v == "":
            return None
        return str(v)
