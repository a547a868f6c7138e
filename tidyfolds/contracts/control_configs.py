from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, Field, field_validator


def default_n_jobs() -> int:
    # Env var lets batch jobs bound worker count without code changes.
    raw = os.getenv("TIDYFOLDS_N_JOBS", "1")
    try:
        return int(raw)
    except ValueError:
        return 1


class ControlResamples(BaseModel):
    """Execution options for a resampling run.

    Peak memory grows roughly with the worker count, since every worker holds
    one fold's analysis set (the dataset minus 1/k of it).
    """
    save_pred: bool = False
    n_jobs: int = Field(default_factory=default_n_jobs)
    backend: Literal["loky", "threading", "multiprocessing"] = "loky"
    pre_dispatch: str = "2*n_jobs"
    memory_warning_mb: float = 1024.0
    verbose: bool = False

    @field_validator("n_jobs")
    @classmethod
    def _nonzero_jobs(cls, v: int) -> int:
        if int(v) == 0:
            raise ValueError("n_jobs must be a non-zero integer (use -1 for all cores).")
        return int(v)
