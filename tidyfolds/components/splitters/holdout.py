from __future__ import annotations

from typing import Any, Optional, Union

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from tidyfolds.contracts.split_configs import HoldoutConfig
from tidyfolds.core.errors import InvalidParameter
from tidyfolds.core.shapes import as_dataset
from tidyfolds.runtime.random.rng import RngManager, resolve_seed

from .types import HoldoutSplit
from .vfold import check_strata_sizes, resolve_strata


def initial_split(
    dataset: Any,
    prop: Union[float, HoldoutConfig] = 0.75,
    strata: Optional[str] = None,
    seed: Optional[int] = None,
    *,
    breaks: int = 4,
    pool: float = 0.1,
) -> HoldoutSplit:
    """Single training/testing split.

    ``prop`` is the share of records assigned to training. With ``strata``
    (a column name), the split is made within each stratum; numeric columns
    are binned into quantile groups first.
    """
    if isinstance(prop, HoldoutConfig):
        cfg = prop
        prop, strata, seed, breaks, pool = cfg.prop, cfg.strata, cfg.seed, cfg.breaks, cfg.pool

    if not (0.0 < float(prop) < 1.0):
        raise InvalidParameter(f"prop must be in (0, 1); got {prop}")

    data = as_dataset(dataset)
    n = int(data.shape[0])
    if n < 2:
        raise InvalidParameter("initial_split needs at least two records.")

    labels = None
    if strata is not None:
        if strata not in data.columns:
            raise InvalidParameter(f"Strata column {strata!r} not found in dataset")
        groups = resolve_strata(data[strata], n, breaks=breaks, pool=pool)
        check_strata_sizes(groups, 2)
        labels = pd.factorize(pd.Series(groups))[0]
        n_groups = int(labels.max()) + 1
        n_train = int(np.floor(float(prop) * n))
        if min(n_train, n - n_train) < n_groups:
            raise InvalidParameter(
                f"prop={prop} leaves {n_train} training and {n - n_train} testing records, "
                f"fewer than the {n_groups} strata that each side must hold."
            )

    random_state = RngManager(resolve_seed(seed)).child_seed("holdout")
    train_idx, test_idx = train_test_split(
        np.arange(n),
        train_size=float(prop),
        stratify=labels,
        random_state=random_state,
    )
    return HoldoutSplit(
        data=data,
        training_idx=np.sort(np.asarray(train_idx, dtype=int)),
        testing_idx=np.sort(np.asarray(test_idx, dtype=int)),
    )
