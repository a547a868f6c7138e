from __future__ import annotations

import traceback
from typing import Any, Dict

import numpy as np
import pandas as pd

from tidyfolds.components.interfaces import MetricFn, ModelProcedure
from tidyfolds.components.splitters.types import Split
from tidyfolds.core.shapes import coerce_1d

from .types import FailureStage, FoldFailure, FoldOutcome, MetricResult


def _failure(split: Split, stage: FailureStage, exc: BaseException, metric: str | None = None) -> FoldFailure:
    return FoldFailure(
        repeat_id=split.repeat_id,
        fold_id=split.fold_id,
        stage=stage,
        error=type(exc).__name__,
        message=str(exc),
        metric=metric,
        traceback="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
    )


def evaluate_split(
    dataset: pd.DataFrame,
    split: Split,
    procedure: ModelProcedure,
    metric_fns: Dict[str, MetricFn],
    *,
    outcome: str,
    save_pred: bool = False,
) -> FoldOutcome:
    """Fit on the analysis rows, predict the assessment rows, score each metric.

    The assessment rows are only materialized after ``fit`` has returned, and
    ``fit`` only ever receives the analysis rows. Errors are captured on the
    returned outcome instead of propagating.
    """

    out = FoldOutcome(
        repeat_id=split.repeat_id,
        fold_id=split.fold_id,
        n_analysis=int(split.analysis.shape[0]),
        n_assessment=int(split.assessment.shape[0]),
    )

    # --- fit ----------------------------------------------------------------
    analysis = split.analysis_data(dataset)
    try:
        handle: Any = procedure.fit(analysis)
    except Exception as e:
        out.failures.append(_failure(split, "fit", e))
        return out
    del analysis

    # --- predict ------------------------------------------------------------
    assessment = split.assessment_data(dataset)
    try:
        y_pred = coerce_1d(procedure.predict(handle, assessment), name="predictions")
        if y_pred.shape[0] != out.n_assessment:
            raise ValueError(
                f"predict returned {y_pred.shape[0]} values for {out.n_assessment} assessment rows"
            )
    except Exception as e:
        out.failures.append(_failure(split, "predict", e))
        return out

    y_true = assessment[outcome].to_numpy()

    # --- metrics ------------------------------------------------------------
    for name, fn in metric_fns.items():
        try:
            value = float(fn(y_true, y_pred))
        except Exception as e:
            out.failures.append(_failure(split, "metric", e, metric=name))
            continue
        out.metrics.append(
            MetricResult(repeat_id=split.repeat_id, fold_id=split.fold_id, metric=name, value=value)
        )

    if save_pred:
        out.predictions = pd.DataFrame(
            {
                ".row": np.asarray(split.assessment, dtype=int),
                "repeat": split.repeat_id,
                "fold": split.fold_id,
                ".pred": y_pred,
                outcome: y_true,
            }
        )

    return out
