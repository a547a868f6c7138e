from __future__ import annotations

"""Resampling orchestration.

A :class:`ResamplingRun` drives one pass of the fit/evaluate loop over every
(repeat, fold) pair of a :class:`FoldAssignment`:

- folds: fit/predict/score one split, capturing errors per fold
- aggregate: per-metric mean and standard error, pooled predictions
- run (this module): validation, the run state machine, sequential or joblib
  fan-out, cancellation and progress

Correctness requirement
-----------------------
No analysis-set computation may read assessment-set rows. Each fold's
procedure only ever sees that fold's analysis rows when fitting.
"""

import logging
import warnings
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Union
from uuid import uuid4

import pandas as pd
from joblib import Parallel, delayed, effective_n_jobs

from tidyfolds.components.interfaces import FitFn, MetricFn, ModelProcedure, PredictFn
from tidyfolds.components.models.procedures import FunctionModelProcedure
from tidyfolds.components.splitters.types import FoldAssignment, Split
from tidyfolds.contracts.control_configs import ControlResamples
from tidyfolds.core.cancellation import CancellationToken
from tidyfolds.core.errors import AllFoldsFailed, InvalidParameter, RunStateError
from tidyfolds.core.progress import ProgressCallback
from tidyfolds.core.shapes import as_dataset, check_outcome
from tidyfolds.registries.metrics import resolve_metrics

from .folds import evaluate_split
from .types import PREDICTION_KEYS, FoldOutcome, ResampleResult, RunState

logger = logging.getLogger(__name__)

MetricsArg = Union[Mapping[str, MetricFn], Sequence[str], str]


def _resolve_procedure(
    model: Optional[ModelProcedure],
    fit_fn: Optional[FitFn],
    predict_fn: Optional[PredictFn],
) -> ModelProcedure:
    if model is not None:
        if fit_fn is not None or predict_fn is not None:
            raise InvalidParameter("Pass either model= or fit_fn/predict_fn, not both.")
        if not isinstance(model, ModelProcedure):
            raise InvalidParameter(
                f"{type(model).__name__} does not implement fit(analysis) / predict(handle, assessment)."
            )
        return model
    if fit_fn is None or predict_fn is None:
        raise InvalidParameter("Both fit_fn and predict_fn are required when no model= is given.")
    if not callable(fit_fn) or not callable(predict_fn):
        raise InvalidParameter("fit_fn and predict_fn must be callable.")
    return FunctionModelProcedure(fit_fn=fit_fn, predict_fn=predict_fn)


class ResamplingRun:
    """Single-use resampling run.

    States: CONFIGURED -> RUNNING -> COMPLETE | ALL_FAILED | CANCELLED.
    Creating a run claims its fold assignment; running again requires a new
    run built on a new assignment.
    """

    def __init__(
        self,
        dataset: Any,
        fold_assignment: FoldAssignment,
        metrics: MetricsArg,
        *,
        outcome: str,
        model: Optional[ModelProcedure] = None,
        fit_fn: Optional[FitFn] = None,
        predict_fn: Optional[PredictFn] = None,
        control: Optional[ControlResamples] = None,
    ):
        self.dataset = as_dataset(dataset)
        if not isinstance(fold_assignment, FoldAssignment):
            raise InvalidParameter(
                f"fold_assignment must be a FoldAssignment; got {type(fold_assignment).__name__}"
            )
        if fold_assignment.n_records != self.dataset.shape[0]:
            raise InvalidParameter(
                f"Fold assignment covers {fold_assignment.n_records} records "
                f"but the dataset has {self.dataset.shape[0]}"
            )
        check_outcome(self.dataset, outcome)

        self.outcome = outcome
        self.procedure = _resolve_procedure(model, fit_fn, predict_fn)
        self.metric_fns: Dict[str, MetricFn] = resolve_metrics(metrics)
        self.control = control if control is not None else ControlResamples()
        if self.control.save_pred and outcome in PREDICTION_KEYS:
            raise InvalidParameter(
                f"Outcome column {outcome!r} clashes with a saved-prediction column "
                f"{list(PREDICTION_KEYS)}; rename it or run without save_pred."
            )
        self.run_id = uuid4().hex[:12]

        fold_assignment.claim(self.run_id)
        self.assignment = fold_assignment

        self.state = RunState.CONFIGURED
        self.result: Optional[ResampleResult] = None
        self._outcomes: List[FoldOutcome] = []

    # --- helpers ---------------------------------------------------------------

    def _log_fold(self, outcome: FoldOutcome) -> None:
        level = logging.INFO if self.control.verbose else logging.DEBUG
        logger.log(
            level,
            "run %s: repeat %d fold %d done (analysis=%d, assessment=%d, metrics=%d)",
            self.run_id, outcome.repeat_id, outcome.fold_id,
            outcome.n_analysis, outcome.n_assessment, len(outcome.metrics),
        )
        for failure in outcome.failures:
            logger.warning(
                "run %s: repeat %d fold %d failed at %s%s: %s: %s",
                self.run_id, failure.repeat_id, failure.fold_id, failure.stage,
                f" ({failure.metric})" if failure.metric else "",
                failure.error, failure.message,
            )

    def _record(self, outcome: FoldOutcome, progress: Optional[ProgressCallback]) -> None:
        self._outcomes.append(outcome)
        self._log_fold(outcome)
        if progress is not None:
            progress.update(
                current=len(self._outcomes),
                label=f"Repeat{outcome.repeat_id + 1}/Fold{outcome.fold_id + 1:02d}",
            )

    def _warn_memory(self, n_workers: int) -> None:
        nbytes = float(self.dataset.memory_usage(deep=True).sum())
        budget = float(self.control.memory_warning_mb) * 1024 ** 2
        if n_workers > 1 and nbytes * n_workers > budget:
            warnings.warn(
                f"{n_workers} workers each holding an analysis set of a "
                f"{nbytes / 1024 ** 2:.1f} MB dataset may need about "
                f"{nbytes * n_workers / 1024 ** 2:.0f} MB; consider lowering n_jobs.",
                RuntimeWarning,
            )

    def _run_sequential(
        self,
        splits: List[Split],
        cancel: Optional[CancellationToken],
        progress: Optional[ProgressCallback],
    ) -> None:
        for split in splits:
            if cancel is not None and cancel.cancelled:
                break
            outcome = evaluate_split(
                self.dataset,
                split,
                self.procedure,
                self.metric_fns,
                outcome=self.outcome,
                save_pred=self.control.save_pred,
            )
            self._record(outcome, progress)

    def _run_parallel(
        self,
        splits: List[Split],
        cancel: Optional[CancellationToken],
        progress: Optional[ProgressCallback],
    ) -> None:
        n_workers = effective_n_jobs(self.control.n_jobs)
        self._warn_memory(n_workers)
        logger.debug("run %s: dispatching %d splits to %d workers", self.run_id, len(splits), n_workers)

        def tasks() -> Iterator[Any]:
            # consumed lazily by joblib, so cancellation stops further dispatch
            for split in splits:
                if cancel is not None and cancel.cancelled:
                    return
                yield delayed(evaluate_split)(
                    self.dataset,
                    split,
                    self.procedure,
                    self.metric_fns,
                    outcome=self.outcome,
                    save_pred=self.control.save_pred,
                )

        parallel = Parallel(
            n_jobs=self.control.n_jobs,
            backend=self.control.backend,
            pre_dispatch=self.control.pre_dispatch,
            return_as="generator",
        )
        for outcome in parallel(tasks()):
            self._record(outcome, progress)

    # --- public ----------------------------------------------------------------

    def execute(
        self,
        *,
        cancel: Optional[CancellationToken] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> ResampleResult:
        """Run every (repeat, fold) pair once and freeze the results.

        Raises
        ------
        AllFoldsFailed
            If every attempted fold failed at its fit or predict step.
        RunStateError
            If the run was already executed.
        """
        if self.state is not RunState.CONFIGURED:
            raise RunStateError(f"Run {self.run_id} is {self.state.value}; runs are single-use.")
        self.state = RunState.RUNNING

        splits = list(self.assignment.iter_splits())
        if progress is not None:
            progress.init(total=len(splits), label="Resampling")

        try:
            if self.control.n_jobs == 1:
                self._run_sequential(splits, cancel, progress)
            else:
                self._run_parallel(splits, cancel, progress)
        finally:
            if progress is not None:
                progress.finalize(label="Done")

        self._outcomes.sort(key=lambda o: (o.repeat_id, o.fold_id))
        cancelled = cancel is not None and cancel.cancelled and len(self._outcomes) < len(splits)

        if cancelled:
            state = RunState.CANCELLED
        elif self._outcomes and all(o.failed for o in self._outcomes):
            state = RunState.ALL_FAILED
        else:
            state = RunState.COMPLETE

        self.result = self._freeze(state, n_splits=len(splits))
        self.state = state
        logger.info(
            "run %s: %s after %d/%d splits (%d metric values, %d failures)",
            self.run_id, state.value, self.result.n_attempted, len(splits),
            len(self.result.metrics), len(self.result.failures),
        )

        if state is RunState.ALL_FAILED:
            raise AllFoldsFailed(self.result.failures)
        return self.result

    def _freeze(self, state: RunState, *, n_splits: int) -> ResampleResult:
        metrics = tuple(m for o in self._outcomes for m in o.metrics)
        failures = tuple(f for o in self._outcomes for f in o.failures)

        predictions = None
        if self.control.save_pred:
            parts = [o.predictions for o in self._outcomes if o.predictions is not None]
            if parts:
                predictions = pd.concat(parts, ignore_index=True)
            else:
                predictions = pd.DataFrame(columns=[*PREDICTION_KEYS, self.outcome])

        return ResampleResult(
            state=state,
            metric_names=tuple(self.metric_fns),
            metrics=metrics,
            failures=failures,
            n_splits=n_splits,
            n_attempted=len(self._outcomes),
            outcome=self.outcome,
            predictions=predictions,
        )


def run_resampling(
    dataset: Any,
    fold_assignment: FoldAssignment,
    fit_fn: Optional[FitFn] = None,
    predict_fn: Optional[PredictFn] = None,
    metric_fns: Optional[MetricsArg] = None,
    *,
    outcome: str,
    model: Optional[ModelProcedure] = None,
    control: Optional[ControlResamples] = None,
    cancel: Optional[CancellationToken] = None,
    progress: Optional[ProgressCallback] = None,
) -> ResampleResult:
    """Fit and score a model procedure on every split of ``fold_assignment``.

    Per-fold fit/predict/metric errors are recorded on the result's
    ``failures`` and do not stop the run; :class:`AllFoldsFailed` is raised
    only when every attempted fold failed to fit or predict.
    """
    if metric_fns is None:
        raise InvalidParameter("metric_fns is required.")
    run = ResamplingRun(
        dataset,
        fold_assignment,
        metric_fns,
        outcome=outcome,
        model=model,
        fit_fn=fit_fn,
        predict_fn=predict_fn,
        control=control,
    )
    return run.execute(cancel=cancel, progress=progress)
