from __future__ import annotations

import math
import warnings
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from tidyfolds.contracts.results.resampling import MetricSummary, RepeatSummary, ResampleSummary
from tidyfolds.core.errors import InvalidParameter, UndefinedMetric

from .types import MetricResult, ResampleResult

NAN = float("nan")


def _finite_values(rows: Iterable[MetricResult]) -> np.ndarray:
    vals = np.asarray([r.value for r in rows], dtype=float)
    return vals[np.isfinite(vals)]


def _mean_se(values: np.ndarray) -> tuple[float, float]:
    n = int(values.shape[0])
    if n == 0:
        return NAN, NAN
    mean = float(np.mean(values))
    if n < 2:
        return mean, NAN
    return mean, float(np.std(values, ddof=1) / math.sqrt(n))


def summarize(
    metric_results: Union[ResampleResult, Iterable[MetricResult]],
    group_by_repeat: bool = False,
    *,
    metric_names: Optional[Sequence[str]] = None,
) -> ResampleSummary:
    """Per-metric mean and standard error across folds (and repeats).

    ``n`` counts the finite values that contributed. A metric with ``n == 0``
    (every fold failed for it) is reported with NaN mean/std_err and
    ``status="undefined"``, and an :class:`UndefinedMetric` warning is issued;
    the other metrics are unaffected.

    With ``group_by_repeat=True`` the summary also carries the mean of each
    metric within each repeat.
    """
    if isinstance(metric_results, ResampleResult):
        rows: List[MetricResult] = list(metric_results.metrics)
        names = list(metric_names) if metric_names is not None else list(metric_results.metric_names)
        # repeats whose every fold failed still get by-repeat rows
        repeat_ids = {f.repeat_id for f in metric_results.failures}
    else:
        rows = list(metric_results)
        names = list(metric_names) if metric_names is not None else []
        repeat_ids = set()
    repeat_ids.update(r.repeat_id for r in rows)

    by_metric: Dict[str, List[MetricResult]] = {name: [] for name in names}
    for row in rows:
        by_metric.setdefault(row.metric, []).append(row)

    summaries: List[MetricSummary] = []
    undefined: List[str] = []
    for name, group in by_metric.items():
        values = _finite_values(group)
        mean, se = _mean_se(values)
        n = int(values.shape[0])
        status = "ok" if n > 0 else "undefined"
        if n == 0:
            undefined.append(name)
        summaries.append(MetricSummary(metric=name, mean=mean, std_err=se, n=n, status=status))

    if undefined:
        warnings.warn(
            f"No fold produced a usable value for metric(s) {undefined}; "
            "their mean and standard error are undefined.",
            UndefinedMetric,
            stacklevel=2,
        )

    by_repeat = None
    if group_by_repeat:
        by_repeat = []
        for repeat_id in sorted(repeat_ids):
            for name, group in by_metric.items():
                values = _finite_values(r for r in group if r.repeat_id == repeat_id)
                by_repeat.append(
                    RepeatSummary(
                        repeat_id=repeat_id,
                        metric=name,
                        mean=float(np.mean(values)) if values.size else NAN,
                        n=int(values.shape[0]),
                    )
                )

    return ResampleSummary(metrics=summaries, by_repeat=by_repeat)


# collect_* take a `summarize` flag that shadows the function
_summarize = summarize


def collect_metrics(result: ResampleResult, summarize: bool = True) -> pd.DataFrame:
    """Summary table, or the raw per-fold table when ``summarize=False``."""
    if summarize:
        return _summarize(result).to_frame()
    return result.metrics_frame()


def collect_predictions(result: ResampleResult, summarize: bool = False) -> pd.DataFrame:
    """Out-of-fold predictions ordered by original row position.

    With ``summarize=True`` numeric predictions are averaged per row across
    repeats (each row is held out exactly once per repeat).
    """
    if result.predictions is None:
        raise InvalidParameter(
            "No predictions were kept; run with ControlResamples(save_pred=True)."
        )

    pooled = result.predictions.sort_values([".row", "repeat"], kind="stable").reset_index(drop=True)
    if not summarize:
        return pooled

    if not pd.api.types.is_numeric_dtype(pooled[".pred"]):
        raise InvalidParameter("Only numeric predictions can be averaged across repeats.")
    return (
        pooled.groupby(".row", sort=True)
        .agg(**{".pred": (".pred", "mean"), result.outcome: (result.outcome, "first")})
        .reset_index()
    )


def failures_frame(result: ResampleResult) -> pd.DataFrame:
    return result.failures_frame()
