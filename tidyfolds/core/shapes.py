from __future__ import annotations

"""Public dataset and shape utilities.

Conventions
-----------
- A dataset is a :class:`pandas.DataFrame`; rows are records.
- Outcomes, predictions and strata are 1D: (n_records,)

Subsets handed to model procedures are produced by positional indexing, which
returns copies; the caller's dataset is never written to.
"""

from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd

from .errors import InvalidParameter


def coerce_1d(a: Any, *, name: str = "array") -> np.ndarray:
    """Return ``a`` as a 1D numpy array.

    Column vectors of shape (n, 1) are flattened; anything else that is not
    1D is rejected.
    """

    arr = np.asarray(a)
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]
    if arr.ndim == 0:
        arr = arr.reshape(1)
    if arr.ndim != 1:
        raise InvalidParameter(f"{name} must be 1D; got shape {arr.shape}")
    return arr


def as_dataset(data: Any) -> pd.DataFrame:
    """Normalize supported dataset inputs into a DataFrame.

    Accepts a DataFrame (returned as-is), a sequence of record mappings, or a
    mapping of column name to values.
    """

    if isinstance(data, pd.DataFrame):
        frame = data
    elif isinstance(data, Mapping):
        frame = pd.DataFrame(dict(data))
    elif isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        if len(data) and not all(isinstance(r, Mapping) for r in data):
            raise InvalidParameter("Record sequences must contain mappings of column -> value.")
        frame = pd.DataFrame.from_records(list(data))
    else:
        raise InvalidParameter(
            f"Unsupported dataset type {type(data).__name__}; "
            "expected a DataFrame, a sequence of records or a column mapping."
        )

    if frame.shape[0] < 1:
        raise InvalidParameter("Dataset must contain at least one record.")
    return frame


def take_rows(dataset: pd.DataFrame, idx: np.ndarray) -> pd.DataFrame:
    """Positional row subset (a copy). Row labels are preserved."""

    return dataset.iloc[np.asarray(idx, dtype=int)].copy()


def check_outcome(dataset: pd.DataFrame, outcome: str) -> None:
    if outcome not in dataset.columns:
        raise InvalidParameter(
            f"Outcome column {outcome!r} not found; available columns: {list(dataset.columns)}"
        )


def check_lengths_match(y_true: np.ndarray, y_pred_like: Sequence, name: str) -> None:
    n_pred = len(y_pred_like)
    if y_true.shape[0] != n_pred:
        raise ValueError(
            f"Length mismatch: y_true({y_true.shape[0]}) vs {name}({n_pred})."
        )
