from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Union

import numpy as np
import pandas as pd
from sklearn.model_selection import KFold, StratifiedKFold

from tidyfolds.contracts.split_configs import VFoldConfig
from tidyfolds.core.errors import InsufficientStrataSize, InvalidParameter
from tidyfolds.core.shapes import as_dataset
from tidyfolds.runtime.random.rng import RngManager, resolve_seed

from .strata import make_strata
from .types import FoldAssignment

logger = logging.getLogger(__name__)


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidParameter(f"{name} must be an integer; got {value!r}")
    return int(value)


def _validate(n_records: int, k: int, repeats: int) -> None:
    if n_records < 1:
        raise InvalidParameter(f"n_records must be positive; got {n_records}")
    if k < 2:
        raise InvalidParameter(f"k must be at least 2; got {k}")
    if k > n_records:
        raise InvalidParameter(f"k={k} exceeds the number of records ({n_records})")
    if repeats < 1:
        raise InvalidParameter(f"repeats must be at least 1; got {repeats}")


def resolve_strata(
    strata: Sequence[Any],
    n_records: int,
    *,
    breaks: int = 4,
    pool: float = 0.1,
) -> np.ndarray:
    """Validate strata length, then bin numeric values or pool rare levels.

    Rare categorical levels (share below ``pool``) are merged before the
    stratum sizes are checked, so ``pool=0`` keeps the caller's labels as-is.
    """
    if isinstance(strata, pd.Series):
        s = strata.reset_index(drop=True)
    elif isinstance(strata, np.ndarray):
        if strata.ndim != 1:
            raise InvalidParameter(f"strata must be 1D; got shape {strata.shape}")
        s = pd.Series(strata)
    else:
        s = pd.Series(list(strata))
    if s.shape[0] != n_records:
        raise InvalidParameter(
            f"strata has {s.shape[0]} labels but the dataset has {n_records} records"
        )
    return make_strata(s, breaks=breaks, pool=pool)


def check_strata_sizes(labels: np.ndarray, k: int) -> None:
    counts = pd.Series(labels).value_counts(sort=False)
    for stratum, size in counts.items():
        if int(size) < k:
            raise InsufficientStrataSize(stratum, int(size), k)


def make_folds(
    n_records: int,
    k: int = 10,
    repeats: int = 1,
    seed: Optional[int] = None,
    strata: Optional[Sequence[Any]] = None,
    *,
    breaks: int = 4,
    pool: float = 0.1,
) -> FoldAssignment:
    """Assign every record to one fold per repeat.

    Each repeat draws an independent permutation from a child seed of
    ``seed``; the permutation is cut into ``k`` consecutive blocks whose sizes
    differ by at most one. With ``strata``, the permutation and assignment
    happen within each stratum so every fold receives a proportional share
    of it. Numeric strata are binned into quantile groups first and categorical
    levels rarer than ``pool`` are pooled.

    Raises
    ------
    InvalidParameter
        If ``k < 2``, ``k > n_records``, ``repeats < 1`` or the strata length
        does not match ``n_records``.
    InsufficientStrataSize
        If a stratum has fewer than ``k`` members.
    """
    n_records = _as_int(n_records, "n_records")
    k = _as_int(k, "k")
    repeats = _as_int(repeats, "repeats")
    _validate(n_records, k, repeats)

    labels: Optional[np.ndarray] = None
    codes: Optional[np.ndarray] = None
    if strata is not None:
        labels = resolve_strata(strata, n_records, breaks=breaks, pool=pool)
        check_strata_sizes(labels, k)
        codes, _ = pd.factorize(pd.Series(labels))

    root = resolve_seed(seed)
    rngm = RngManager(root)

    folds = np.empty((repeats, n_records), dtype=int)
    placeholder = np.zeros((n_records, 1))

    for repeat_id, repeat_seed in enumerate(rngm.repeat_seeds(repeats)):
        if codes is not None:
            splitter = StratifiedKFold(n_splits=k, shuffle=True, random_state=repeat_seed)
        else:
            splitter = KFold(n_splits=k, shuffle=True, random_state=repeat_seed)
        for fold_id, (_, test_idx) in enumerate(splitter.split(placeholder, codes)):
            folds[repeat_id, test_idx] = fold_id

    folds.setflags(write=False)
    logger.debug(
        "made %d-fold assignment for %d records (%d repeat(s), seed=%d, stratified=%s)",
        k, n_records, repeats, root, labels is not None,
    )
    return FoldAssignment(folds=folds, k=k, repeats=repeats, seed=root, strata=labels)


def vfold_cv(
    dataset: Any,
    v: Union[int, VFoldConfig] = 10,
    repeats: int = 1,
    strata: Optional[str] = None,
    seed: Optional[int] = None,
    *,
    breaks: int = 4,
    pool: float = 0.1,
) -> FoldAssignment:
    """V-fold assignment for a dataset, optionally stratified by a column.

    ``v`` may also be a :class:`VFoldConfig`, in which case the remaining
    keyword arguments are taken from it.
    """
    if isinstance(v, VFoldConfig):
        cfg = v
        v, repeats, strata, seed = cfg.v, cfg.repeats, cfg.strata, cfg.seed
        breaks, pool = cfg.breaks, cfg.pool

    data = as_dataset(dataset)
    strata_values = None
    if strata is not None:
        if strata not in data.columns:
            raise InvalidParameter(f"Strata column {strata!r} not found in dataset")
        strata_values = data[strata].reset_index(drop=True)

    return make_folds(
        int(data.shape[0]),
        k=v,
        repeats=repeats,
        seed=seed,
        strata=strata_values,
        breaks=breaks,
        pool=pool,
    )
