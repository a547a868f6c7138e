from __future__ import annotations

import warnings
from typing import Any

import numpy as np
import pandas as pd


def is_numeric_strata(x: Any, nunique: int = 5) -> bool:
    """True when ``x`` should be binned rather than used as group labels."""
    s = pd.Series(np.asarray(x)) if not isinstance(x, pd.Series) else x
    if not pd.api.types.is_numeric_dtype(s) or pd.api.types.is_bool_dtype(s):
        return False
    return int(s.nunique(dropna=True)) > int(nunique)


def _single_stratum(n: int, reason: str) -> np.ndarray:
    warnings.warn(f"{reason} A single stratum will be used.", UserWarning, stacklevel=3)
    return np.full(n, "strata1", dtype=object)


def _bin_numeric(s: pd.Series, breaks: int, depth: int) -> np.ndarray:
    n = int(s.shape[0])
    if n / breaks < depth:
        breaks = min(breaks, n // depth)
    if breaks < 2:
        return _single_stratum(n, "The number of observations in each quantile is below the recommended threshold.")

    probs = np.linspace(0.0, 1.0, breaks + 1)
    edges = np.unique(np.nanquantile(s.to_numpy(dtype=float), probs))
    if edges.size < 3:
        return _single_stratum(n, "The stratification variable has too few distinct quantiles.")

    binned = pd.cut(s, bins=edges, include_lowest=True)
    labels = np.array(binned.astype(str), dtype=object)
    labels[s.isna().to_numpy()] = "missing"
    return labels


def _pool_categorical(s: pd.Series, pool: float) -> np.ndarray:
    n = int(s.shape[0])
    labels = np.array(s.astype(object).where(s.notna(), "missing"), dtype=object)
    counts = pd.Series(labels).value_counts(sort=True, ascending=True)
    pcts = counts / n

    rare = list(pcts.index[pcts < pool])
    if not rare:
        return labels
    if len(rare) == len(pcts):
        return _single_stratum(n, "Too little data to stratify.")

    warnings.warn(
        f"Stratifying groups that make up less than {round(100 * pool)}% of the data "
        f"may be statistically risky; pooling {rare!r}.",
        UserWarning,
        stacklevel=3,
    )
    is_rare = pd.Series(labels).isin(rare).to_numpy()
    if is_rare.sum() / n >= pool:
        labels = labels.copy()
        labels[is_rare] = "pooled"
        return labels

    # pool is still too small: fold it into the smallest sufficient level
    target = next(lvl for lvl in pcts.index if lvl not in rare)
    labels = labels.copy()
    labels[is_rare] = target
    return labels


def make_strata(
    x: Any,
    breaks: int = 4,
    nunique: int = 5,
    pool: float = 0.1,
    depth: int = 20,
) -> np.ndarray:
    """
    Turn a stratification variable into group labels.

    Parameters
    ----------
    x : array-like of shape (n,)
        Numeric or categorical values, one per record.
    breaks : int
        Number of quantile bins for numeric ``x``.
    nunique : int
        Numeric ``x`` with at most this many distinct values is treated as
        categorical.
    pool : float
        Categorical levels whose share of the data is below ``pool`` are
        pooled with other small levels.
    depth : int
        Minimum desired number of records per quantile bin; ``breaks`` is
        reduced when the data are too small.

    Returns
    -------
    np.ndarray of shape (n,), dtype object
        One group label per record.
    """
    s = x if isinstance(x, pd.Series) else pd.Series(np.asarray(x))
    s = s.reset_index(drop=True)
    if s.shape[0] == 0:
        return np.asarray([], dtype=object)

    if is_numeric_strata(s, nunique=nunique):
        return _bin_numeric(s, int(breaks), int(depth))
    return _pool_categorical(s, float(pool))
