from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional, Tuple

import pandas as pd

FailureStage = Literal["fit", "predict", "metric"]

# bookkeeping columns of saved out-of-fold predictions; the outcome is stored beside them
PREDICTION_KEYS = (".row", "repeat", "fold", ".pred")


class RunState(str, Enum):
    CONFIGURED = "configured"
    RUNNING = "running"
    COMPLETE = "complete"
    ALL_FAILED = "all_failed"
    CANCELLED = "cancelled"

    @property
    def terminal(self) -> bool:
        return self in (RunState.COMPLETE, RunState.ALL_FAILED, RunState.CANCELLED)


@dataclass(frozen=True)
class MetricResult:
    repeat_id: int
    fold_id: int
    metric: str
    value: float


@dataclass(frozen=True)
class FoldFailure:
    """A fit, predict or metric error captured for one fold.

    ``metric`` is set only for ``stage="metric"``; a fit or predict failure
    means no metric of that fold was computed.
    """

    repeat_id: int
    fold_id: int
    stage: FailureStage
    error: str
    message: str
    metric: Optional[str] = None
    traceback: str = field(default="", repr=False, compare=False)


@dataclass
class FoldOutcome:
    """Everything one (repeat, fold) iteration produced."""

    repeat_id: int
    fold_id: int
    metrics: List[MetricResult] = field(default_factory=list)
    failures: List[FoldFailure] = field(default_factory=list)
    predictions: Optional[pd.DataFrame] = None
    n_analysis: int = 0
    n_assessment: int = 0

    @property
    def failed(self) -> bool:
        """True when the fit or predict step failed."""
        return any(f.stage in ("fit", "predict") for f in self.failures)


@dataclass(frozen=True)
class ResampleResult:
    """Frozen output of a resampling run.

    ``metrics`` holds one row per (repeat, fold, metric) that was computed;
    ``failures`` is the side channel of per-fold errors.
    """

    state: RunState
    metric_names: Tuple[str, ...]
    metrics: Tuple[MetricResult, ...]
    failures: Tuple[FoldFailure, ...]
    n_splits: int
    n_attempted: int
    outcome: str
    predictions: Optional[pd.DataFrame] = field(default=None, repr=False, compare=False)

    @property
    def failed_folds(self) -> List[Tuple[int, int]]:
        seen = []
        for f in self.failures:
            key = (f.repeat_id, f.fold_id)
            if f.stage in ("fit", "predict") and key not in seen:
                seen.append(key)
        return seen

    @property
    def completed(self) -> bool:
        return self.state == RunState.COMPLETE

    def metrics_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(m.repeat_id, m.fold_id, m.metric, m.value) for m in self.metrics],
            columns=["repeat", "fold", "metric", "value"],
        )

    def failures_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [(f.repeat_id, f.fold_id, f.stage, f.metric, f.error, f.message) for f in self.failures],
            columns=["repeat", "fold", "stage", "metric", "error", "message"],
        )

    def summarize(self, group_by_repeat: bool = False):
        from .aggregate import summarize

        return summarize(self, group_by_repeat=group_by_repeat)
