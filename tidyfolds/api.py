"""Public tidyfolds API.

This module is the **stable public surface**. Prefer importing from here
instead of reaching into internal subpackages:

    from tidyfolds.api import make_folds, run_resampling, summarize

The underlying implementations live under :mod:`tidyfolds.components` and
:mod:`tidyfolds.use_cases`.
"""

from __future__ import annotations

from tidyfolds.components.models.procedures import FunctionModelProcedure, SklearnModelProcedure
from tidyfolds.components.interfaces import ModelProcedure
from tidyfolds.components.splitters import (
    FoldAssignment,
    HoldoutSplit,
    Split,
    initial_split,
    make_folds,
    make_strata,
    vfold_cv,
)
from tidyfolds.contracts import (
    ControlResamples,
    HoldoutConfig,
    MetricSummary,
    ResampleSummary,
    VFoldConfig,
)
from tidyfolds.core.cancellation import CancellationToken
from tidyfolds.core.errors import (
    AllFoldsFailed,
    InsufficientStrataSize,
    InvalidParameter,
    ResamplingError,
    RunStateError,
    UndefinedMetric,
)
from tidyfolds.core.progress import ProgressCallback
from tidyfolds.registries.metrics import get_metric, list_metrics, metric_set, register_metric
from tidyfolds.use_cases.resampling import (
    FoldFailure,
    MetricResult,
    ResampleResult,
    ResamplingRun,
    RunState,
    collect_metrics,
    collect_predictions,
    failures_frame,
    run_resampling,
    summarize,
)

__all__ = [
    # partitioning
    "make_folds",
    "vfold_cv",
    "make_strata",
    "initial_split",
    "FoldAssignment",
    "HoldoutSplit",
    "Split",
    # fit/evaluate
    "run_resampling",
    "ResamplingRun",
    "RunState",
    "ModelProcedure",
    "FunctionModelProcedure",
    "SklearnModelProcedure",
    "CancellationToken",
    "ProgressCallback",
    "MetricResult",
    "FoldFailure",
    "ResampleResult",
    # aggregation
    "summarize",
    "collect_metrics",
    "collect_predictions",
    "failures_frame",
    "MetricSummary",
    "ResampleSummary",
    # metrics
    "metric_set",
    "get_metric",
    "list_metrics",
    "register_metric",
    # config
    "VFoldConfig",
    "HoldoutConfig",
    "ControlResamples",
    # errors
    "ResamplingError",
    "InvalidParameter",
    "InsufficientStrataSize",
    "AllFoldsFailed",
    "RunStateError",
    "UndefinedMetric",
]
