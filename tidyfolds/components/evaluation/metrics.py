from __future__ import annotations

"""Metric implementations.

Every metric has the signature ``fn(y_true, y_pred) -> float``. For
``roc_auc`` and ``mn_log_loss`` the ``y_pred`` argument carries the
positive-class score/probability rather than hard labels.
"""

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    cohen_kappa_score,
    log_loss,
    mean_absolute_error,
    mean_absolute_percentage_error,
    mean_squared_error,
    r2_score,
    roc_auc_score,
)

from tidyfolds.core.shapes import check_lengths_match, coerce_1d


def _pair(y_true, y_pred) -> tuple[np.ndarray, np.ndarray]:
    y_true = coerce_1d(y_true, name="y_true")
    y_pred = coerce_1d(y_pred, name="y_pred")
    check_lengths_match(y_true, y_pred, "y_pred")
    return y_true, y_pred


# --- regression ---------------------------------------------------------------

def rmse(y_true, y_pred) -> float:
    y_true, y_pred = _pair(y_true, y_pred)
    return float(np.sqrt(mean_squared_error(y_true, y_pred)))


def mae(y_true, y_pred) -> float:
    y_true, y_pred = _pair(y_true, y_pred)
    return float(mean_absolute_error(y_true, y_pred))


def mape(y_true, y_pred) -> float:
    """Mean absolute percentage error, in percent."""
    y_true, y_pred = _pair(y_true, y_pred)
    return float(100.0 * mean_absolute_percentage_error(y_true, y_pred))


def rsq(y_true, y_pred) -> float:
    """Squared Pearson correlation between truth and prediction.

    Undefined (NaN) when either side is constant, e.g. an intercept-only
    model predicting the same value for every assessment row.
    """
    y_true, y_pred = _pair(y_true, y_pred)
    yt = y_true.astype(float)
    yp = y_pred.astype(float)
    if yt.size < 2 or np.std(yt) == 0 or np.std(yp) == 0:
        return float("nan")
    r = np.corrcoef(yt, yp)[0, 1]
    return float(r * r)


def rsq_trad(y_true, y_pred) -> float:
    """Traditional coefficient of determination, 1 - SSE/SST."""
    y_true, y_pred = _pair(y_true, y_pred)
    return float(r2_score(y_true, y_pred))


# --- classification -----------------------------------------------------------

def accuracy(y_true, y_pred) -> float:
    y_true, y_pred = _pair(y_true, y_pred)
    return float(accuracy_score(y_true, y_pred))


def kap(y_true, y_pred) -> float:
    y_true, y_pred = _pair(y_true, y_pred)
    return float(cohen_kappa_score(y_true, y_pred))


def roc_auc(y_true, y_pred) -> float:
    y_true, y_score = _pair(y_true, y_pred)
    if np.unique(y_true).size < 2:
        # only one class in this fold's assessment set
        return float("nan")
    return float(roc_auc_score(y_true, y_score))


def mn_log_loss(y_true, y_pred) -> float:
    """Binary log loss; ``y_pred`` is the probability of the second class.

    Classes are taken in sorted order, as for ``roc_auc`` and the last
    ``predict_proba`` column, so factor-like labels ("PS"/"WS") work as well
    as 0/1 codes. A fold holding a single non-0/1 label is undefined (NaN).
    """
    y_true, y_proba = _pair(y_true, y_pred)
    classes = np.unique(y_true)
    if classes.size > 2:
        raise ValueError(f"mn_log_loss expects a binary outcome; got classes {classes.tolist()}")
    if classes.size == 2:
        y_bin = (y_true == classes[1]).astype(int)
    elif y_true.dtype.kind in "biu" and classes[0] in (0, 1):
        y_bin = y_true.astype(int)
    else:
        return float("nan")
    return float(log_loss(y_bin, y_proba.astype(float), labels=[0, 1]))
