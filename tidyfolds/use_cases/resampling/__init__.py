from __future__ import annotations

"""Resampling use-case.

- folds: fit/evaluate one split, capturing per-fold failures
- run: the single-use run state machine, sequential or joblib fan-out
- aggregate: summaries, raw metric tables and pooled out-of-fold predictions
"""

from .aggregate import collect_metrics, collect_predictions, failures_frame, summarize
from .run import ResamplingRun, run_resampling
from .types import FoldFailure, FoldOutcome, MetricResult, ResampleResult, RunState

__all__ = [
    "ResamplingRun",
    "run_resampling",
    "summarize",
    "collect_metrics",
    "collect_predictions",
    "failures_frame",
    "FoldFailure",
    "FoldOutcome",
    "MetricResult",
    "ResampleResult",
    "RunState",
]
