from __future__ import annotations

import math
from typing import List, Literal, Optional

import pandas as pd
from pydantic import Field

from .common import ResultModel

SummaryStatus = Literal["ok", "undefined"]


class MetricSummary(ResultModel):
    """Aggregate of one metric across all contributing folds."""

    metric: str
    mean: float
    std_err: float
    n: int
    status: SummaryStatus = "ok"

    @property
    def undefined(self) -> bool:
        return self.status == "undefined"

    @property
    def has_std_err(self) -> bool:
        return not math.isnan(self.std_err)


class RepeatSummary(ResultModel):
    repeat_id: int
    metric: str
    mean: float
    n: int


class ResampleSummary(ResultModel):
    """Summary table: metric -> {mean, std_err, n}, plus optional per-repeat means."""

    metrics: List[MetricSummary] = Field(default_factory=list)
    by_repeat: Optional[List[RepeatSummary]] = None

    @property
    def metric_names(self) -> List[str]:
        return [m.metric for m in self.metrics]

    def __getitem__(self, metric: str) -> MetricSummary:
        for row in self.metrics:
            if row.metric == metric:
                return row
        raise KeyError(f"No summary for metric {metric!r}; have {self.metric_names}")

    def __contains__(self, metric: str) -> bool:
        return metric in self.metric_names

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [m.model_dump() for m in self.metrics],
            columns=["metric", "mean", "n", "std_err", "status"],
        )

    def repeats_frame(self) -> pd.DataFrame:
        rows = [r.model_dump() for r in (self.by_repeat or [])]
        return pd.DataFrame(rows, columns=["repeat_id", "metric", "mean", "n"])
